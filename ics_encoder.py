"""
iCalendar (RFC 5545) rendering of holiday records.

render_calendar() is deterministic for a given list of records and request,
with one exception: every event carries a DTSTAMP taken from the wall clock
at render time (pass `now` to pin it).

Every line, the last one included, ends with CRLF. Content lines longer than
75 octets are folded onto continuation lines starting with a single space.
"""

import hashlib
import re
from datetime import datetime, timezone


PRODUCT_NAME = 'Holiday Calendar API'
CALENDAR_DESCRIPTION = f'Public holidays calendar generated by {PRODUCT_NAME}'
ORIGIN_URL = 'https://rapidapi.com/holiday-calendar-api'
UID_DOMAIN = 'holiday-calendar-api.com'
SECONDARY_CATEGORY = 'HOLIDAY'

CRLF = '\r\n'
MAX_LINE_OCTETS = 75

_NON_ALPHANUMERIC = re.compile(r'[^a-zA-Z0-9]')


# ============================================================================
# Formatting Helpers
# ============================================================================

def escape_text(text):
    """
    Escape a TEXT value per RFC 5545 section 3.3.11.

    Backslashes are escaped first so the escapes added afterwards are not
    doubled. Carriage returns are dropped.

    Args:
        text: Raw text

    Returns:
        str: Escaped text, safe for a single content line
    """
    return (
        text.replace('\\', '\\\\')
        .replace(';', '\\;')
        .replace(',', '\\,')
        .replace('\n', '\\n')
        .replace('\r', '')
    )


def format_date(value):
    """date -> YYYYMMDD"""
    return value.strftime('%Y%m%d')


def format_timestamp(value):
    """datetime -> YYYYMMDDTHHMMSSZ in UTC, no fractional seconds."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime('%Y%m%dT%H%M%SZ')


def name_slug(name):
    # Names with no ASCII letters or digits would all collapse to "", so hash them
    slug = _NON_ALPHANUMERIC.sub('', name).lower()
    return slug or hashlib.sha1(name.encode('utf-8')).hexdigest()[:12]


def generate_uid(holiday, country, year):
    """
    Stable identifier of a holiday event.

    Built from the holiday date, a slug of its name, the country and the
    requested year, so repeated renders of the same input agree.
    """
    return f"{format_date(holiday.date)}-{name_slug(holiday.name)}-{country}-{year}@{UID_DOMAIN}"


def fold_line(line):
    """
    Fold a content line longer than 75 octets.

    Continuation lines start with a single space and multi-byte UTF-8
    characters are never split.
    """
    if len(line.encode('utf-8')) <= MAX_LINE_OCTETS:
        return line

    parts = []
    current = ''
    current_size = 0
    for char in line:
        size = len(char.encode('utf-8'))
        if current_size + size > MAX_LINE_OCTETS:
            parts.append(current)
            current = ' '
            current_size = 1
        current += char
        current_size += size
    parts.append(current)

    return CRLF.join(parts)


# ============================================================================
# Document Rendering
# ============================================================================

def _calendar_header(request):
    return [
        'BEGIN:VCALENDAR',
        'VERSION:2.0',
        f'PRODID:-//{PRODUCT_NAME}//Holiday Calendar {request.year}//EN',
        'CALSCALE:GREGORIAN',
        'METHOD:PUBLISH',
        f'X-WR-CALNAME:{escape_text(request.calendar_name)}',
        f'X-WR-CALDESC:{CALENDAR_DESCRIPTION}',
        'X-WR-TIMEZONE:UTC',
        'X-PUBLISHED-TTL:PT1H',
        f'X-ORIGINAL-URL:{ORIGIN_URL}',
    ]


def _event_lines(holiday, request, timestamp):
    lines = [
        'BEGIN:VEVENT',
        f'UID:{generate_uid(holiday, request.country, request.year)}',
        f'DTSTAMP:{timestamp}',
        f'DTSTART;VALUE=DATE:{format_date(holiday.date)}',
        f'SUMMARY:{escape_text(holiday.name)}',
        'STATUS:CONFIRMED',
        'TRANSP:TRANSPARENT',
        'CLASS:PUBLIC',
        'PRIORITY:5',
    ]

    if holiday.description:
        lines.append(f'DESCRIPTION:{escape_text(holiday.description)}')

    lines.append(f'CATEGORIES:{escape_text(holiday.type.upper())},{SECONDARY_CATEGORY}')

    if holiday.observed and holiday.observed != holiday.date:
        lines.append(f'X-OBSERVED-DATE:{format_date(holiday.observed)}')

    lines.append('END:VEVENT')
    return lines


def render_calendar(holidays, request, now=None):
    """
    Serialize holidays into an iCalendar document.

    Events appear in the order of `holidays`; nothing is re-sorted. An empty
    list still yields a valid calendar with no events.

    Args:
        holidays: Sequence of HolidayRecord
        request: CalendarRequest supplying country, year and region
        now: datetime used for DTSTAMP, defaults to the current UTC time

    Returns:
        bytes: UTF-8 encoded document
    """
    timestamp = format_timestamp(now or datetime.now(timezone.utc))

    lines = _calendar_header(request)
    for holiday in holidays:
        lines.extend(_event_lines(holiday, request, timestamp))
    lines.append('END:VCALENDAR')

    return ''.join(fold_line(line) + CRLF for line in lines).encode('utf-8')
