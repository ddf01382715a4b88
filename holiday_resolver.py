"""
Holiday resolution: live sources first, static table last.

The resolver walks its sources one at a time in priority order and returns
the first non-empty answer. When every source fails it falls back to the
built-in table keyed by "{COUNTRY}-{YEAR}". Region is accepted for the
caller's convenience but is not part of any lookup key; it only labels the
generated calendar.
"""

import logging

from holiday_data import FALLBACK_HOLIDAYS, fallback_key


logger = logging.getLogger(__name__)


class HolidayResolver:
    """Produce HolidayRecords for a country and year."""

    def __init__(self, sources, fallback_table=FALLBACK_HOLIDAYS):
        self.sources = list(sources)
        self.fallback_table = fallback_table

    def fetch(self, country, year, region=None):
        """
        Resolve the holidays of a country and year.

        Args:
            country: Validated ISO 3166-1 alpha-2 code
            year: Validated calendar year
            region: Optional region label, not used for lookup

        Returns:
            list: HolidayRecords in source order; empty when no source and
            no fallback entry has data
        """
        label = f"{country}-{year}" + (f" (region {region})" if region else "")

        for source in self.sources:
            try:
                records = source.attempt(country, year)
            except Exception:
                logger.exception(f"Holiday source {source.name} crashed for {label}")
                continue

            if records:
                logger.info(f"Resolved {len(records)} holidays for {label} from {source.name}")
                return list(records)

        records = self.fallback_table.get(fallback_key(country, year), ())
        if records:
            logger.info(f"All sources failed for {label}, using {len(records)} built-in holidays")
        else:
            logger.warning(f"No holiday data available for {label}")

        return list(records)
