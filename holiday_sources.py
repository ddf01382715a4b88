"""
Holiday data sources consulted by the resolver.

Every source exposes the same capability, attempt(country, year), which
returns a non-empty list of HolidayRecord or None when the source has nothing
usable. Network failures, timeouts, error statuses and malformed payloads are
logged here and reported as None; they never propagate to the resolver.
"""

import logging

import holidays
import requests

from models import HolidayRecord


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.0


# ============================================================================
# Source Base Classes
# ============================================================================

class HolidaySource:
    """A single provider of holiday data."""

    name = None

    def attempt(self, country, year):
        """
        Look up the holidays of one country and year.

        Args:
            country: ISO 3166-1 alpha-2 code, upper case
            year: Calendar year

        Returns:
            list | None: HolidayRecords in source order, or None if the
            source failed or had no data
        """
        raise NotImplementedError


class HttpHolidaySource(HolidaySource):
    """
    A holiday source reached over HTTP and answering with JSON.

    Subclasses set url_template and implement parse(); sources that need a
    key set requires_key and build their query with request_params().
    """

    url_template = None
    requires_key = False

    def __init__(self, session=None, timeout=DEFAULT_TIMEOUT, api_key=None):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.api_key = api_key

    def request_params(self, country, year):
        return None

    def parse(self, payload):
        raise NotImplementedError

    def attempt(self, country, year):
        if self.requires_key and not self.api_key:
            logger.debug(f"Skipping {self.name}: no API key configured")
            return None

        url = self.url_template.format(country=country, year=year)

        try:
            response = self.session.get(
                url,
                params=self.request_params(country, year),
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.status_code == 204 or not response.content:
                logger.debug(f"{self.name} has no data for {country}-{year}")
                return None
            records = self.parse(response.json())
        except requests.RequestException as e:
            logger.debug(f"{self.name} request failed for {country}-{year}: {e}")
            return None
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"{self.name} returned a malformed payload for {country}-{year}: {e}")
            return None

        return records or None


# ============================================================================
# Live Sources
# ============================================================================

class NagerDateSource(HttpHolidaySource):
    """date.nager.at: free, keyless, JSON array of holidays."""

    name = 'nager'
    url_template = 'https://date.nager.at/api/v3/PublicHolidays/{year}/{country}'

    def parse(self, payload):
        if not isinstance(payload, list):
            raise ValueError(f"expected a list, got {type(payload).__name__}")

        records = []
        for item in payload:
            local_name = item.get('localName')
            records.append(HolidayRecord.from_dict({
                'date': item['date'],
                'name': item['name'],
                'description': local_name if local_name != item['name'] else None,
                'type': 'public' if 'Public' in (item.get('types') or []) else 'bank',
            }))
        return records


class HolidayApiSource(HttpHolidaySource):
    """holidayapi.com: keyed, reports both actual and observed dates."""

    name = 'holidayapi'
    url_template = 'https://holidayapi.com/v1/holidays'
    requires_key = True

    def request_params(self, country, year):
        return {'key': self.api_key, 'country': country, 'year': year}

    def parse(self, payload):
        records = []
        for item in payload['holidays']:
            observed = item.get('observed')
            records.append(HolidayRecord.from_dict({
                'date': item['date'],
                'name': item['name'],
                'observed': observed if observed != item['date'] else None,
                'type': 'public' if item.get('public') else 'observance',
            }))
        return records


class CalendarificSource(HttpHolidaySource):
    """calendarific.com: keyed, tags each holiday with a list of types."""

    name = 'calendarific'
    url_template = 'https://calendarific.com/api/v2/holidays'
    requires_key = True

    def request_params(self, country, year):
        return {'api_key': self.api_key, 'country': country, 'year': year}

    def parse(self, payload):
        records = []
        for item in payload['response']['holidays']:
            description = item.get('description')
            records.append(HolidayRecord.from_dict({
                'date': item['date']['iso'][:10],
                'name': item['name'],
                'description': description if description != item['name'] else None,
                'type': self.classify(item.get('type') or []),
            }))
        return records

    @staticmethod
    def classify(tags):
        if any('National' in tag for tag in tags):
            return 'public'
        if any('Bank' in tag for tag in tags):
            return 'bank'
        return 'observance'


# ============================================================================
# Offline Source
# ============================================================================

class LibraryHolidaySource(HolidaySource):
    """
    Holidays computed locally by the `holidays` package.

    Dates carrying more than one holiday yield one record per name.
    """

    name = 'holidays'

    def attempt(self, country, year):
        try:
            calendar = holidays.country_holidays(country, years=year)
        except NotImplementedError:
            logger.debug(f"holidays library does not support {country}")
            return None

        records = []
        for day in sorted(calendar):
            for holiday_name in calendar.get_list(day):
                records.append(HolidayRecord(date=day, name=holiday_name, type='public'))
        return records or None


# ============================================================================
# Source Factory
# ============================================================================

SOURCE_TYPES = {
    source.name: source
    for source in (NagerDateSource, HolidayApiSource, CalendarificSource, LibraryHolidaySource)
}


def build_sources(names, session=None, timeout=DEFAULT_TIMEOUT, api_keys=None):
    """
    Build the ordered list of holiday sources.

    Args:
        names: Source names in priority order (see SOURCE_TYPES)
        session: requests.Session shared by the HTTP sources
        timeout: Per-request timeout in seconds
        api_keys: Dict of source name -> API key

    Returns:
        list: HolidaySource instances, in the order given

    Raises:
        ValueError: If a name is not a known source
    """
    api_keys = api_keys or {}
    session = session or requests.Session()

    sources = []
    for name in names:
        if name not in SOURCE_TYPES:
            raise ValueError(f"Unknown holiday source '{name}', expected one of {sorted(SOURCE_TYPES)}")

        source_type = SOURCE_TYPES[name]
        if issubclass(source_type, HttpHolidaySource):
            sources.append(source_type(session=session, timeout=timeout, api_key=api_keys.get(name)))
        else:
            sources.append(source_type())

    return sources
