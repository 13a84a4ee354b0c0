"""Holiday records, date keys and the per-date holiday index.

Raw records from a data source flow through three pure steps:
``normalize`` keeps the *Public* subset and turns each record into a display
entry, a country carry-over rule may append substitute entries, and
``index_entries`` groups everything by date key.

Carry-over rule (Bulgaria): if a holiday falls on Sunday the following
Monday becomes a substitute bank holiday, unless Monday already is one.
"""

from __future__ import annotations

import datetime
import re
from collections.abc import Callable, Iterable, Sequence
from typing import NamedTuple

from bankcal.errors import FormatError

HOLIDAY_COLOR = "#e05555"
PUBLIC_TYPE = "Public"
SUBSTITUTE_TYPE = "Bank"

_KEY_RE = re.compile(r"([0-9]+)-([0-9]+)-([0-9]+)")

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class HolidayRecord(NamedTuple):
    """One holiday occurrence as reported by a data source."""

    date: datetime.date
    local_name: str
    name: str
    types: tuple[str, ...] = ()


class HolidayEntry(NamedTuple):
    """A holiday as displayed on a calendar cell."""

    title: str
    global_name: str
    color: str
    types: tuple[str, ...]


class DatedEntry(NamedTuple):
    date_key: str
    entry: HolidayEntry


HolidayIndex = dict[str, list[HolidayEntry]]

CarryOverRule = Callable[[list[DatedEntry]], list[DatedEntry]]

# ---------------------------------------------------------------------------
# Date keys
# ---------------------------------------------------------------------------


def encode(year: int, month_index: int, day: int) -> str:
    """Return the ``YYYY-MM-DD`` key for a zero-based *month_index*."""
    return f"{year}-{month_index + 1:02d}-{day:02d}"


def decode(key: str) -> tuple[int, int, int]:
    """Split a date key into ``(year, month_index, day)``.

    *month_index* is zero-based, mirroring :func:`encode`.
    Raises ``FormatError`` unless *key* is three dash-separated numbers.
    """
    match = _KEY_RE.fullmatch(key) if isinstance(key, str) else None
    if match is None:
        msg = f"Malformed date key {key!r}. Expected YYYY-MM-DD."
        raise FormatError(msg)
    year, month, day = (int(g) for g in match.groups())
    return year, month - 1, day


def key_for(d: datetime.date) -> str:
    return encode(d.year, d.month - 1, d.day)


def parse_key(key: str) -> datetime.date:
    """Return the calendar date for *key*, raising ``FormatError`` if invalid."""
    year, month_index, day = decode(key)
    try:
        return datetime.date(year, month_index + 1, day)
    except ValueError as exc:
        raise FormatError(f"Invalid calendar date {key!r}: {exc}") from None


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _holiday_color(types: Sequence[str]) -> str:
    # Single highlight colour regardless of category.
    return HOLIDAY_COLOR


def normalize(records: Iterable[HolidayRecord]) -> list[DatedEntry]:
    """Keep public holidays and convert them to display entries, in order."""
    entries: list[DatedEntry] = []
    for record in records:
        if PUBLIC_TYPE not in record.types:
            continue
        entry = HolidayEntry(
            title=record.local_name or record.name,
            global_name=record.name,
            color=_holiday_color(record.types),
            types=tuple(record.types),
        )
        entries.append(DatedEntry(key_for(record.date), entry))
    return entries


# ---------------------------------------------------------------------------
# Carry-over rules
# ---------------------------------------------------------------------------


def bulgarian_carry_over(entries: list[DatedEntry]) -> list[DatedEntry]:
    """Append a Monday substitute for every holiday that falls on Sunday.

    A substitute is only added when no *original* entry already occupies the
    Monday, and never in the following year. Originals keep their order and
    substitutes follow them.
    """
    occupied = {e.date_key for e in entries}
    extras: list[DatedEntry] = []
    for dated in entries:
        d = parse_key(dated.date_key)
        if d.weekday() != 6:  # Sunday
            continue
        monday = d + datetime.timedelta(days=1)
        monday_key = key_for(monday)
        if monday.year != d.year or monday_key in occupied:
            continue
        original = dated.entry
        extras.append(
            DatedEntry(
                monday_key,
                HolidayEntry(
                    title=f"{original.title} (преместен)",
                    global_name=f"{original.global_name} (carry-over)",
                    color=original.color,
                    types=(SUBSTITUTE_TYPE,),
                ),
            )
        )
    return [*entries, *extras]


def _no_carry_over(entries: list[DatedEntry]) -> list[DatedEntry]:
    return list(entries)


CARRY_OVER_RULES: dict[str, CarryOverRule] = {
    "BG": bulgarian_carry_over,
}


def get_carry_over_rule(country_code: str) -> CarryOverRule:
    """Return the carry-over rule for *country_code* (identity if none)."""
    return CARRY_OVER_RULES.get(country_code.upper(), _no_carry_over)


def apply_carry_over(entries: list[DatedEntry], country_code: str) -> list[DatedEntry]:
    return get_carry_over_rule(country_code)(entries)


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


def index_entries(entries: Iterable[DatedEntry]) -> HolidayIndex:
    """Group entries by date key, keeping processing order within a date."""
    index: HolidayIndex = {}
    for date_key, entry in entries:
        index.setdefault(date_key, []).append(entry)
    return index


def build_holiday_index(records: Iterable[HolidayRecord], country_code: str) -> HolidayIndex:
    """Normalize *records*, apply the country's carry-over rule and index them."""
    entries = normalize(records)
    entries = apply_carry_over(entries, country_code)
    return index_entries(entries)
