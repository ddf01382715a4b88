"""
Holiday Calendar API v1.0

Generates iCalendar (ICS) files with the public holidays of a country and
year. Holiday data comes from live public holiday APIs, with a built-in table
as the last resort.

Core features:
- RFC 5545 calendar generation (see ics_encoder)
- Ordered live sources with static fallback (see holiday_resolver)
- ISO 3166-1 alpha-2 country validation, years 2000-2030
- Rate limiting by subscription tier (basic / pro / enterprise)
- JSON error responses with stable error codes
"""

import logging
import re
import time
from datetime import datetime, timezone

import pycountry
from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from config import Config
from holiday_data import VALID_COUNTRIES
from holiday_resolver import HolidayResolver
from holiday_sources import build_sources
from ics_encoder import render_calendar
from models import CalendarRequest


API_VERSION = '1.0.0'
SERVICE_NAME = 'Holiday Calendar API'
DOCUMENTATION_URL = 'https://rapidapi.com/holiday-calendar-api/docs'
SUPPORT_URL = 'https://rapidapi.com/holiday-calendar-api/support'

MIN_YEAR = 2000
MAX_YEAR = 2030

SUBSCRIPTION_HEADER = 'X-RapidAPI-Subscription'
DEFAULT_TIER = 'basic'
RATE_LIMIT_WINDOW_SECONDS = 60
SUBSCRIPTION_LIMITS = {
    'basic': 10,
    'pro': 100,
    'enterprise': 1000,
}

START_TIME = time.monotonic()


# ============================================================================
# Flask Application Setup
# ============================================================================

app = Flask(__name__)
app.config.from_object(Config)

CORS(
    app,
    origins=app.config['ALLOWED_ORIGINS'],
    methods=['GET', 'OPTIONS'],
    allow_headers=['Content-Type', 'Authorization', SUBSCRIPTION_HEADER],
    expose_headers=['Content-Disposition', 'X-Holidays-Count', 'X-Country', 'X-Year', 'X-Region'],
)

limiter = Limiter(get_remote_address, app=app)

resolver = HolidayResolver(build_sources(
    app.config['HOLIDAY_SOURCES'],
    timeout=app.config['SOURCE_TIMEOUT'],
    api_keys={
        'holidayapi': app.config['HOLIDAYAPI_KEY'],
        'calendarific': app.config['CALENDARIFIC_KEY'],
    },
))


# ============================================================================
# Helper Functions - Errors
# ============================================================================

class HolidayRequestError(ValueError):
    """A client error with a stable error code, rendered as a JSON response."""

    def __init__(self, code, message, error='Invalid request', status=400, **extra):
        super().__init__(message)
        self.code = code
        self.message = message
        self.error = error
        self.status = status
        self.extra = extra


def error_response(error, message, code, status, **extra):
    """
    Build the JSON error body shared by every endpoint.

    Returns:
        tuple: (Response, status) for Flask
    """
    body = {
        'error': error,
        'message': message,
        'code': code,
        'documentation': DOCUMENTATION_URL,
    }
    body.update(extra)
    return jsonify(body), status


def _header_safe(value):
    # Printable ASCII only; quotes would break the Content-Disposition filename
    return re.sub(r'[^\x20-\x7e]', '', value).replace('"', '')


# ============================================================================
# Helper Functions - Validation & Rate Limiting
# ============================================================================

def validate_holiday_request(args):
    """
    Validate the query parameters of GET /holidays.

    Country is checked before year, so a request missing both reports the
    country.

    Args:
        args: Mapping of query parameters (country, year, region)

    Returns:
        CalendarRequest: Normalized, upper-cased request

    Raises:
        HolidayRequestError: For a missing or invalid country or year
    """
    country = (args.get('country') or '').strip()
    year = (args.get('year') or '').strip()
    region = (args.get('region') or '').strip()

    if not country:
        raise HolidayRequestError(
            'MISSING_COUNTRY',
            'Parameter "country" is required',
            error='Missing required parameter',
        )

    if country.upper() not in VALID_COUNTRIES:
        raise HolidayRequestError(
            'INVALID_COUNTRY',
            f'Country code "{country}" is not a valid ISO 3166-1 alpha-2 code',
            error='Invalid country code',
            validCountries=sorted(VALID_COUNTRIES)[:10],
        )

    if not year:
        raise HolidayRequestError(
            'MISSING_YEAR',
            'Parameter "year" is required',
            error='Missing required parameter',
        )

    try:
        year_int = int(year)
    except ValueError:
        year_int = None

    if year_int is None or not MIN_YEAR <= year_int <= MAX_YEAR:
        raise HolidayRequestError(
            'INVALID_YEAR',
            f'Year must be a valid integer between {MIN_YEAR} and {MAX_YEAR}',
            error='Invalid year',
        )

    return CalendarRequest(
        country=country.upper(),
        year=year_int,
        region=region.upper() or None,
    )


def subscription_tier():
    """Subscription tier of the current request; unknown tiers count as basic."""
    tier = (request.headers.get(SUBSCRIPTION_HEADER) or DEFAULT_TIER).strip().lower()
    return tier if tier in SUBSCRIPTION_LIMITS else DEFAULT_TIER


def subscription_rate_limit():
    """Flask-Limiter limit string for the current request's tier."""
    return f"{SUBSCRIPTION_LIMITS[subscription_tier()]} per minute"


# ============================================================================
# API Endpoints
# ============================================================================

@app.route('/health', methods=['GET'])
def health():
    """
    GET /health

    Liveness probe.
    """
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'version': API_VERSION,
        'uptime': round(time.monotonic() - START_TIME, 3),
    }), 200


@app.route('/docs', methods=['GET'])
def docs():
    """
    GET /docs

    Machine-readable description of the API.
    """
    return jsonify({
        'name': SERVICE_NAME,
        'version': API_VERSION,
        'description': 'REST API for generating iCalendar (ICS) files with public holidays worldwide',
        'rateLimits': {
            tier: f'{limit} requests/minute' for tier, limit in SUBSCRIPTION_LIMITS.items()
        },
        'endpoints': {
            'GET /holidays': {
                'description': 'Generate ICS calendar file for public holidays',
                'parameters': {
                    'country': {
                        'type': 'string',
                        'required': True,
                        'description': 'ISO 3166-1 alpha-2 country code (e.g., "US", "GB", "CA")',
                    },
                    'year': {
                        'type': 'integer',
                        'required': True,
                        'description': f'Year for holidays ({MIN_YEAR}-{MAX_YEAR})',
                    },
                    'region': {
                        'type': 'string',
                        'required': False,
                        'description': 'Optional region code, used to label the calendar',
                    },
                },
                'responses': {
                    '200': 'ICS calendar file (text/calendar)',
                    '400': 'Invalid parameters',
                    '404': 'No holiday data for the country and year',
                    '429': 'Rate limit exceeded',
                    '500': 'Internal server error',
                },
                'examples': {
                    'US holidays for 2025': '/holidays?country=US&year=2025',
                    'UK holidays for 2025': '/holidays?country=GB&year=2025',
                    'Canadian holidays for 2025': '/holidays?country=CA&year=2025',
                },
            },
            'GET /countries': {'description': 'List accepted country codes'},
            'GET /health': {'description': 'Service health check'},
        },
    }), 200


@app.route('/countries', methods=['GET'])
def list_countries():
    """
    GET /countries

    Returns every accepted country code with its English name.

    Response:
        200: {"countries": [{"code": "AD", "name": "Andorra"}, ...], "count": 249, ...}
    """
    countries = []
    for code in sorted(VALID_COUNTRIES):
        country_obj = pycountry.countries.get(alpha_2=code)
        countries.append({
            'code': code,
            'name': country_obj.name if country_obj else code,
        })

    return jsonify({
        'countries': countries,
        'count': len(countries),
        'note': 'ISO 3166-1 alpha-2 country codes. Holiday data availability may vary by country.',
    }), 200


@app.route('/holidays', methods=['GET'])
@limiter.limit(subscription_rate_limit)
def get_holidays():
    """
    GET /holidays?country=<CC>&year=<YYYY>&region=<optional>

    Returns the public holidays of a country and year as an ICS file.

    Response:
        200: text/calendar attachment
        400: {"code": "MISSING_COUNTRY" | "INVALID_COUNTRY" | "MISSING_YEAR" | "INVALID_YEAR", ...}
        404: {"code": "NO_HOLIDAYS_FOUND", ...}
        429: {"code": "RATE_LIMIT_EXCEEDED", ...}
        500: {"code": "INTERNAL_ERROR", ...}
    """
    try:
        calendar_request = validate_holiday_request(request.args)
    except HolidayRequestError as e:
        return error_response(e.error, e.message, e.code, e.status, **e.extra)

    country, year, region = calendar_request.country, calendar_request.year, calendar_request.region

    try:
        app.logger.info(
            f"Generating holidays for {country}-{year}{f'-{region}' if region else ''} "
            f"(tier={subscription_tier()}, ip={request.remote_addr})"
        )

        holidays = resolver.fetch(country, year, region)

        if not holidays:
            return error_response(
                'No holidays found',
                f'No holiday data available for {country} in {year}',
                'NO_HOLIDAYS_FOUND',
                404,
            )

        ics_content = render_calendar(holidays, calendar_request)

        response = Response(ics_content, status=200, content_type='text/calendar; charset=utf-8')
        response.headers['Content-Disposition'] = f'attachment; filename="{_header_safe(calendar_request.filename)}"'
        response.headers['Cache-Control'] = 'public, max-age=86400'
        response.headers['X-Holidays-Count'] = str(len(holidays))
        response.headers['X-Country'] = country
        response.headers['X-Year'] = str(year)
        response.headers['X-API-Version'] = API_VERSION
        if region:
            response.headers['X-Region'] = _header_safe(region)

        app.logger.info(f"Generated {len(holidays)} holidays for {country}-{year}")
        return response

    except Exception:
        app.logger.exception(f"Error generating holidays for {country}-{year}")
        return error_response(
            'Internal server error',
            'An error occurred while generating the holiday calendar',
            'INTERNAL_ERROR',
            500,
            support=SUPPORT_URL,
        )


# ============================================================================
# Error Handlers
# ============================================================================

@app.errorhandler(404)
def endpoint_not_found(error):
    return error_response(
        'Not found',
        f'Endpoint {request.method} {request.path} not found',
        'ENDPOINT_NOT_FOUND',
        404,
        availableEndpoints=['/health', '/docs', '/holidays', '/countries'],
    )


@app.errorhandler(429)
def rate_limit_exceeded(error):
    tier = subscription_tier()
    app.logger.warning(f"Rate limit exceeded for {request.remote_addr} (tier={tier})")
    return error_response(
        'Rate limit exceeded',
        f'{tier.capitalize()} plan: {SUBSCRIPTION_LIMITS[tier]} requests per minute',
        'RATE_LIMIT_EXCEEDED',
        429,
        retryAfter=RATE_LIMIT_WINDOW_SECONDS,
    )


@app.errorhandler(Exception)
def unexpected_error(error):
    # Other HTTP errors (405, ...) keep their own status
    if isinstance(error, HTTPException):
        return error

    app.logger.exception('Unhandled error')
    return error_response(
        'Internal server error',
        'An unexpected error occurred',
        'INTERNAL_ERROR',
        500,
        support=SUPPORT_URL,
    )


# ============================================================================
# Application Initialization
# ============================================================================

if __name__ == '__main__':
    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    print("=" * 60)
    print(f"{SERVICE_NAME} v{API_VERSION}")
    print("=" * 60)
    print(f"Holiday sources: {', '.join(app.config['HOLIDAY_SOURCES'])} -> built-in table")
    print(f"Countries accepted: {len(VALID_COUNTRIES)}")
    print()
    print("API Endpoints:")
    print("  GET  /holidays?country=<CC>&year=<YYYY>[&region=<R>]")
    print("  GET  /countries")
    print("  GET  /docs")
    print("  GET  /health")
    print()
    print(f"Server running on http://0.0.0.0:{app.config['PORT']}")
    print("Press CTRL+C to quit")
    print("=" * 60)
    print()

    app.run(host='0.0.0.0', port=app.config['PORT'])
