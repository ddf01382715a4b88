"""
Data model for the Holiday Calendar API.

Two small immutable records flow through the service:
- HolidayRecord: one holiday occurrence, normalized from whichever source
  produced it (live API, offline library or the static fallback table)
- CalendarRequest: the validated (country, year, region) tuple of one request
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class HolidayRecord:
    """Normalized representation of one holiday occurrence."""

    date: date
    name: str
    type: str = "public"
    description: Optional[str] = None
    observed: Optional[date] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError(f"Holiday on {self.date} has an empty name")

    @classmethod
    def from_dict(cls, data):
        """
        Build a HolidayRecord from a mapping with ISO 8601 date strings.

        Args:
            data: Mapping with "date" and "name", optionally "type",
                  "description" and "observed"

        Returns:
            HolidayRecord: The parsed record

        Raises:
            KeyError: If "date" or "name" is missing
            ValueError: If a date is malformed or the name is empty
        """
        observed = data.get("observed")
        return cls(
            date=date.fromisoformat(data["date"]),
            name=data["name"],
            type=data.get("type") or "public",
            description=data.get("description") or None,
            observed=date.fromisoformat(observed) if observed else None,
        )


@dataclass(frozen=True)
class CalendarRequest:
    """Validated parameters of a single /holidays call."""

    country: str
    year: int
    region: Optional[str] = None

    @property
    def calendar_name(self):
        if self.region:
            return f"{self.country}-{self.region} Public Holidays {self.year}"
        return f"{self.country} Public Holidays {self.year}"

    @property
    def filename(self):
        if self.region:
            return f"holidays-{self.country}-{self.region}-{self.year}.ics"
        return f"holidays-{self.country}-{self.year}.ics"
