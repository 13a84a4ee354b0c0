"""Bank Holiday Calendar.

Render an annual calendar and overlay public holidays fetched from the
Nager.Date API, including substitute days for countries that grant them.
"""

from bankcal.errors import BankCalError, FormatError, TransportError
from bankcal.grid import (
    DayCell,
    MonthGrid,
    build_month_grid,
    build_year_grid,
    overlay_holidays,
    place_tooltip,
)
from bankcal.holidays import (
    CARRY_OVER_RULES,
    HolidayEntry,
    HolidayIndex,
    HolidayRecord,
    build_holiday_index,
    decode,
    encode,
)
from bankcal.session import CalendarSession
from bankcal.source import Country, HolidaySource, NagerDateSource

__all__ = [
    "CARRY_OVER_RULES",
    "BankCalError",
    "CalendarSession",
    "Country",
    "DayCell",
    "FormatError",
    "HolidayEntry",
    "HolidayIndex",
    "HolidayRecord",
    "HolidaySource",
    "MonthGrid",
    "NagerDateSource",
    "TransportError",
    "build_holiday_index",
    "build_month_grid",
    "build_year_grid",
    "decode",
    "encode",
    "overlay_holidays",
    "place_tooltip",
]
