"""Calendar session: the single owner of year, country and holiday state."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable

from bankcal.errors import BankCalError
from bankcal.grid import MonthGrid, build_year_grid, overlay_holidays
from bankcal.holidays import HolidayIndex, build_holiday_index
from bankcal.source import Country, HolidaySource

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "BG"


class CalendarSession:
    """Holds the current year, country and holiday index for one calendar.

    Loads are serialized: a trigger that arrives while a load is still in
    progress is ignored and returns ``None``. A failed load keeps the
    previous holiday index.
    """

    def __init__(
        self,
        source: HolidaySource,
        country_code: str = DEFAULT_COUNTRY,
        year: int | None = None,
        *,
        clock: Callable[[], datetime.date] = datetime.date.today,
    ):
        self.source = source
        self.clock = clock
        self.country_code = country_code.upper()
        self.year = year if year is not None else clock().year

        self.countries: list[Country] = []
        self.holiday_index: HolidayIndex = {}
        self.grids: list[MonthGrid] = build_year_grid(self.year, clock())
        self.status = ""
        self.error: BankCalError | None = None
        self._fetching = False

    @property
    def is_fetching(self) -> bool:
        return self._fetching

    def country_label(self) -> str:
        for c in self.countries:
            if c.code == self.country_code:
                return c.label
        return self.country_code

    def load_countries(self) -> list[Country]:
        """Fetch the country list. Errors propagate; the old list is kept."""
        self.countries = self.source.fetch_countries()
        return self.countries

    def load(self) -> HolidayIndex | None:
        """Fetch holidays for the current year and country and rebuild state.

        Returns the new index, or ``None`` if a load was already running.
        Raises ``TransportError`` or ``FormatError`` after recording it on
        ``self.error``; the previous index is kept.
        """
        if self._fetching:
            logger.debug("Load already in progress; ignoring trigger")
            return None

        self._fetching = True
        self.error = None
        year, code = self.year, self.country_code
        try:
            records = self.source.fetch_holidays(year, code)
            index = build_holiday_index(records, code)
        except BankCalError as exc:
            self.error = exc
            self.status = "Error loading holidays"
            # Keep the last good index but lay it out on the current year.
            self.grids = overlay_holidays(build_year_grid(year, self.clock()), self.holiday_index)
            raise
        finally:
            self._fetching = False

        grids = overlay_holidays(build_year_grid(year, self.clock()), index)
        self.holiday_index, self.grids = index, grids
        self.status = f"{len(records)} holidays for {self.country_label()} in {year}"
        logger.info("Loaded %d holidays (%d dates) for %s %d", len(records), len(index), code, year)
        return index

    # -- triggers ---------------------------------------------------------

    def select_country(self, country_code: str) -> HolidayIndex | None:
        if self._fetching:
            return None
        self.country_code = country_code.upper()
        return self.load()

    def next_year(self) -> HolidayIndex | None:
        if self._fetching:
            return None
        self.year += 1
        return self.load()

    def previous_year(self) -> HolidayIndex | None:
        if self._fetching:
            return None
        self.year -= 1
        return self.load()
