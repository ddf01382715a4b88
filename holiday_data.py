"""
Built-in holiday data for the Holiday Calendar API.

FALLBACK_HOLIDAYS is the static table consulted when every live source fails.
It is keyed by "{COUNTRY}-{YEAR}" and built once at import time; the mapping
and its record tuples are read-only for the life of the process.

VALID_COUNTRIES is the set of ISO 3166-1 alpha-2 codes accepted by /holidays.
"""

from types import MappingProxyType

import pycountry

from models import HolidayRecord


VALID_COUNTRIES = frozenset(country.alpha_2 for country in pycountry.countries)


_FALLBACK_ROWS = {
    "US-2025": [
        {"date": "2025-01-01", "name": "New Year's Day", "description": "The first day of the Gregorian calendar year", "type": "public"},
        {"date": "2025-01-20", "name": "Martin Luther King Jr. Day", "description": "Federal holiday honoring civil rights leader Martin Luther King Jr.", "type": "public"},
        {"date": "2025-02-17", "name": "Presidents' Day", "description": "Federal holiday honoring all U.S. presidents", "type": "public"},
        {"date": "2025-05-26", "name": "Memorial Day", "description": "Federal holiday honoring military personnel who died in service", "type": "public"},
        {"date": "2025-07-04", "name": "Independence Day", "description": "Celebration of American independence from Great Britain", "type": "public"},
        {"date": "2025-09-01", "name": "Labor Day", "description": "Federal holiday celebrating the contributions of workers", "type": "public"},
        {"date": "2025-10-13", "name": "Columbus Day", "description": "Federal holiday commemorating Christopher Columbus", "type": "public"},
        {"date": "2025-11-11", "name": "Veterans Day", "description": "Federal holiday honoring military veterans", "type": "public"},
        {"date": "2025-11-27", "name": "Thanksgiving Day", "description": "Federal holiday for giving thanks and sharing meals with family", "type": "public"},
        {"date": "2025-12-25", "name": "Christmas Day", "description": "Christian holiday celebrating the birth of Jesus Christ", "type": "public"},
    ],
    "GB-2025": [
        {"date": "2025-01-01", "name": "New Year's Day", "description": "The first day of the Gregorian calendar year", "type": "public"},
        {"date": "2025-04-18", "name": "Good Friday", "description": "Christian holiday commemorating the crucifixion of Jesus", "type": "public"},
        {"date": "2025-04-21", "name": "Easter Monday", "description": "Christian holiday celebrating the resurrection of Jesus", "type": "public"},
        {"date": "2025-05-05", "name": "Early May Bank Holiday", "description": "Spring bank holiday in the UK", "type": "bank"},
        {"date": "2025-05-26", "name": "Spring Bank Holiday", "description": "Late spring bank holiday in the UK", "type": "bank"},
        {"date": "2025-08-25", "name": "Summer Bank Holiday", "description": "Summer bank holiday in England, Wales, and Northern Ireland", "type": "bank"},
        {"date": "2025-12-25", "name": "Christmas Day", "description": "Christian holiday celebrating the birth of Jesus Christ", "type": "public"},
        {"date": "2025-12-26", "name": "Boxing Day", "description": "Traditional holiday following Christmas Day", "type": "public"},
    ],
    "CA-2025": [
        {"date": "2025-01-01", "name": "New Year's Day", "description": "The first day of the Gregorian calendar year", "type": "public"},
        {"date": "2025-04-18", "name": "Good Friday", "description": "Christian holiday commemorating the crucifixion of Jesus", "type": "public"},
        {"date": "2025-04-21", "name": "Easter Monday", "description": "Christian holiday celebrating the resurrection of Jesus", "type": "public"},
        {"date": "2025-05-19", "name": "Victoria Day", "description": "Canadian federal holiday honoring Queen Victoria", "type": "public"},
        {"date": "2025-07-01", "name": "Canada Day", "description": "National holiday celebrating Canadian Confederation", "type": "public"},
        {"date": "2025-09-01", "name": "Labour Day", "description": "Federal holiday celebrating the contributions of workers", "type": "public"},
        {"date": "2025-10-13", "name": "Thanksgiving", "description": "Canadian holiday for giving thanks", "type": "public"},
        {"date": "2025-11-11", "name": "Remembrance Day", "description": "Memorial day for military personnel who died in service", "type": "public"},
        {"date": "2025-12-25", "name": "Christmas Day", "description": "Christian holiday celebrating the birth of Jesus Christ", "type": "public"},
        {"date": "2025-12-26", "name": "Boxing Day", "description": "Traditional holiday following Christmas Day", "type": "public"},
    ],
    "DE-2025": [
        {"date": "2025-01-01", "name": "New Year's Day", "description": "The first day of the Gregorian calendar year", "type": "public"},
        {"date": "2025-05-01", "name": "Labour Day", "description": "German holiday celebrating workers", "type": "public"},
        {"date": "2025-10-03", "name": "German Unity Day", "description": "National holiday commemorating German reunification", "type": "public"},
        {"date": "2025-12-25", "name": "Christmas Day", "description": "Christian holiday celebrating the birth of Jesus Christ", "type": "public"},
        {"date": "2025-12-26", "name": "Boxing Day", "description": "Second day of Christmas", "type": "public"},
    ],
    "FR-2025": [
        {"date": "2025-01-01", "name": "New Year's Day", "description": "The first day of the Gregorian calendar year", "type": "public"},
        {"date": "2025-05-01", "name": "Labour Day", "description": "French holiday celebrating workers", "type": "public"},
        {"date": "2025-05-08", "name": "Victory in Europe Day", "description": "Commemorates the end of World War II in Europe", "type": "public"},
        {"date": "2025-07-14", "name": "Bastille Day", "description": "French National Day", "type": "public"},
        {"date": "2025-08-15", "name": "Assumption Day", "description": "Christian holiday", "type": "public"},
        {"date": "2025-11-01", "name": "All Saints Day", "description": "Christian holiday honoring all saints", "type": "public"},
        {"date": "2025-11-11", "name": "Armistice Day", "description": "Commemorates the end of World War I", "type": "public"},
        {"date": "2025-12-25", "name": "Christmas Day", "description": "Christian holiday celebrating the birth of Jesus Christ", "type": "public"},
    ],
}


FALLBACK_HOLIDAYS = MappingProxyType({
    key: tuple(HolidayRecord.from_dict(row) for row in rows)
    for key, rows in _FALLBACK_ROWS.items()
})


def fallback_key(country, year):
    """Key of the static fallback table for a country/year pair."""
    return f"{country}-{year}"
