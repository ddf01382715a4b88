"""
Configuration for the Holiday Calendar API.

Every setting can be overridden through an environment variable of the same
name. Loaded into Flask with app.config.from_object(Config).
"""

import os


def _split_list(value):
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    PORT = int(os.environ.get('PORT', 3000))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # CORS
    ALLOWED_ORIGINS = _split_list(os.environ.get('ALLOWED_ORIGINS', '*'))

    # Holiday sources, tried in this order before the static fallback table
    HOLIDAY_SOURCES = _split_list(
        os.environ.get('HOLIDAY_SOURCES', 'nager,holidayapi,calendarific')
    )
    SOURCE_TIMEOUT = float(os.environ.get('SOURCE_TIMEOUT', 3.0))
    HOLIDAYAPI_KEY = os.environ.get('HOLIDAYAPI_KEY')
    CALENDARIFIC_KEY = os.environ.get('CALENDARIFIC_KEY')

    # Flask-Limiter
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_HEADERS_ENABLED = True
