"""
Test suite for the Holiday Calendar API endpoints.

Covers request validation, the /holidays flow end to end (with live sources
simulated as down unless a test says otherwise), error responses, rate
limiting by subscription tier and the informational endpoints.

Run with: pytest
"""

import json
from unittest.mock import patch

import pytest
import requests
from icalendar import Calendar


@pytest.fixture
def client():
    """Flask test client with every live holiday source unreachable."""
    from app import app, limiter

    app.config['TESTING'] = True
    limiter.reset()

    with patch.object(requests.Session, 'get', side_effect=requests.ConnectionError('offline')):
        with app.test_client() as client:
            yield client


def live_response(payload):
    response = requests.Response()
    response.status_code = 200
    response._content = json.dumps(payload).encode('utf-8')
    return response


# ============================================================================
# Test Suite 1: Validation - Pure Functions
# ============================================================================

@pytest.mark.parametrize('year', ['2000', '2030', '2025'])
def test_validate_accepts_year_bounds(year):
    from app import validate_holiday_request

    calendar_request = validate_holiday_request({'country': 'us', 'year': year})

    assert calendar_request.country == 'US'
    assert calendar_request.year == int(year)
    assert calendar_request.region is None


@pytest.mark.parametrize('year', ['1999', '2031', 'abc', '2025.5', '20x5'])
def test_validate_rejects_invalid_year(year):
    from app import HolidayRequestError, validate_holiday_request

    with pytest.raises(HolidayRequestError) as excinfo:
        validate_holiday_request({'country': 'US', 'year': year})

    assert excinfo.value.code == 'INVALID_YEAR'


def test_validate_upper_cases_region():
    from app import validate_holiday_request

    calendar_request = validate_holiday_request({'country': 'gb', 'year': '2025', 'region': ' sct '})

    assert calendar_request.country == 'GB'
    assert calendar_request.region == 'SCT'


def test_validate_blank_region_is_none():
    from app import validate_holiday_request

    assert validate_holiday_request({'country': 'US', 'year': '2025', 'region': '  '}).region is None


@pytest.mark.parametrize('args, code', [
    ({'year': '2025'}, 'MISSING_COUNTRY'),
    ({'country': '', 'year': '2025'}, 'MISSING_COUNTRY'),
    ({'country': 'ZZ', 'year': '2025'}, 'INVALID_COUNTRY'),
    ({'country': 'USA', 'year': '2025'}, 'INVALID_COUNTRY'),
    ({'country': 'US'}, 'MISSING_YEAR'),
    ({}, 'MISSING_COUNTRY'),
    ({'country': 'ZZ'}, 'INVALID_COUNTRY'),
])
def test_validate_error_codes(args, code):
    from app import HolidayRequestError, validate_holiday_request

    with pytest.raises(HolidayRequestError) as excinfo:
        validate_holiday_request(args)

    assert excinfo.value.code == code
    assert excinfo.value.status == 400


# ============================================================================
# Test Suite 2: GET /holidays
# ============================================================================

def test_us_2025_from_fallback_table(client):
    """All live sources down: the built-in US-2025 table is served."""
    response = client.get('/holidays?country=US&year=2025')

    assert response.status_code == 200
    assert response.headers['Content-Type'] == 'text/calendar; charset=utf-8'
    assert response.headers['Content-Disposition'] == 'attachment; filename="holidays-US-2025.ics"'
    assert response.headers['Cache-Control'] == 'public, max-age=86400'
    assert response.headers['X-Holidays-Count'] == '10'
    assert response.headers['X-Country'] == 'US'
    assert response.headers['X-Year'] == '2025'
    assert 'X-Region' not in response.headers

    body = response.get_data()
    lines = body.decode('utf-8').split('\r\n')
    assert lines.count('BEGIN:VEVENT') == 10
    assert 'X-WR-CALNAME:US Public Holidays 2025' in lines

    summaries = [line for line in lines if line.startswith('SUMMARY:')]
    assert summaries[0] == "SUMMARY:New Year's Day"

    calendar = Calendar.from_ical(body)
    names = [str(event['SUMMARY']) for event in calendar.walk('VEVENT')]
    assert names[0] == "New Year's Day"
    assert names[-1] == 'Christmas Day'


def test_region_labels_calendar(client):
    response = client.get('/holidays?country=us&year=2025&region=ca')

    assert response.status_code == 200
    assert response.headers['Content-Disposition'] == 'attachment; filename="holidays-US-CA-2025.ics"'
    assert response.headers['X-Region'] == 'CA'
    assert b'X-WR-CALNAME:US-CA Public Holidays 2025\r\n' in response.get_data()


def test_live_source_preferred_over_fallback(client):
    payload = [
        {"date": "2025-01-01", "localName": "New Year's Day", "name": "New Year's Day", "types": ["Public"]},
        {"date": "2025-07-04", "localName": "Independence Day", "name": "Independence Day", "types": ["Public"]},
    ]

    with patch.object(requests.Session, 'get', return_value=live_response(payload)):
        response = client.get('/holidays?country=US&year=2025')

    assert response.status_code == 200
    assert response.headers['X-Holidays-Count'] == '2'
    assert response.get_data().count(b'BEGIN:VEVENT') == 2


def test_invalid_country_never_reaches_resolver(client):
    with patch('app.resolver') as mock_resolver:
        response = client.get('/holidays?country=ZZ&year=2025')

    assert response.status_code == 400
    data = response.get_json()
    assert data['code'] == 'INVALID_COUNTRY'
    assert data['error'] == 'Invalid country code'
    assert len(data['validCountries']) == 10
    mock_resolver.fetch.assert_not_called()


@pytest.mark.parametrize('query, code', [
    ('year=2025', 'MISSING_COUNTRY'),
    ('country=US', 'MISSING_YEAR'),
    ('country=US&year=1999', 'INVALID_YEAR'),
    ('country=US&year=2031', 'INVALID_YEAR'),
    ('country=US&year=next', 'INVALID_YEAR'),
])
def test_invalid_parameters(client, query, code):
    response = client.get(f'/holidays?{query}')

    assert response.status_code == 400
    data = response.get_json()
    assert data['code'] == code
    assert set(data) >= {'error', 'message', 'code', 'documentation'}


def test_no_holidays_found_skips_encoder(client):
    with patch('app.render_calendar') as mock_render:
        response = client.get('/holidays?country=JP&year=2025')

    assert response.status_code == 404
    data = response.get_json()
    assert data['code'] == 'NO_HOLIDAYS_FOUND'
    assert data['message'] == 'No holiday data available for JP in 2025'
    mock_render.assert_not_called()


def test_internal_error_hides_details(client):
    with patch('app.render_calendar', side_effect=RuntimeError('database password is hunter2')):
        response = client.get('/holidays?country=US&year=2025')

    assert response.status_code == 500
    data = response.get_json()
    assert data['code'] == 'INTERNAL_ERROR'
    assert 'hunter2' not in response.get_data(as_text=True)


# ============================================================================
# Test Suite 3: Rate Limiting
# ============================================================================

def test_basic_tier_limit(client):
    for _ in range(10):
        assert client.get('/holidays?country=ZZ&year=2025').status_code == 400

    response = client.get('/holidays?country=ZZ&year=2025')

    assert response.status_code == 429
    data = response.get_json()
    assert data['code'] == 'RATE_LIMIT_EXCEEDED'
    assert data['retryAfter'] == 60


def test_pro_tier_has_higher_limit(client):
    headers = {'X-RapidAPI-Subscription': 'PRO'}

    for _ in range(11):
        assert client.get('/holidays?country=ZZ&year=2025', headers=headers).status_code == 400


@pytest.mark.parametrize('header, tier', [
    (None, 'basic'),
    ('enterprise', 'enterprise'),
    ('Pro', 'pro'),
    ('platinum', 'basic'),
])
def test_subscription_tier(header, tier):
    from app import app, subscription_rate_limit, subscription_tier, SUBSCRIPTION_LIMITS

    headers = {'X-RapidAPI-Subscription': header} if header else {}
    with app.test_request_context('/holidays', headers=headers):
        assert subscription_tier() == tier
        assert subscription_rate_limit() == f'{SUBSCRIPTION_LIMITS[tier]} per minute'


# ============================================================================
# Test Suite 4: Informational Endpoints & Error Handlers
# ============================================================================

def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    data = response.get_json()
    assert data['status'] == 'healthy'
    assert data['version'] == '1.0.0'


def test_docs(client):
    response = client.get('/docs')

    assert response.status_code == 200
    data = response.get_json()
    assert 'GET /holidays' in data['endpoints']
    assert data['rateLimits']['pro'] == '100 requests/minute'


def test_countries(client):
    response = client.get('/countries')

    assert response.status_code == 200
    data = response.get_json()
    codes = {country['code'] for country in data['countries']}
    assert data['count'] == len(data['countries'])
    assert {'US', 'GB', 'DE'} <= codes
    assert 'ZZ' not in codes
    assert {'code': 'FR', 'name': 'France'} in data['countries']


def test_unknown_endpoint(client):
    response = client.get('/calendars')

    assert response.status_code == 404
    data = response.get_json()
    assert data['code'] == 'ENDPOINT_NOT_FOUND'
    assert '/holidays' in data['availableEndpoints']


def test_method_not_allowed_keeps_status(client):
    response = client.post('/holidays?country=US&year=2025')

    assert response.status_code == 405
