"""Month grid layout, holiday overlay and text rendering.

Every month is laid out as a fixed 6 x 7 grid (42 cells) with Monday as the
first column, so all months share the same height regardless of how many
weeks they span.
"""

from __future__ import annotations

import calendar
import datetime
from collections.abc import Sequence
from typing import NamedTuple

from bankcal.holidays import HolidayEntry, HolidayIndex, decode, encode

GRID_CELLS = 42
WEEKEND_COLUMNS = frozenset({5, 6})  # Sat, Sun
TOOLTIP_OFFSET = 12

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
DOW_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class DayCell(NamedTuple):
    """A single grid cell. Padding cells have ``day_number`` of ``None``."""

    day_number: int | None = None
    is_today: bool = False
    is_weekend: bool = False
    date_key: str | None = None
    holiday_entries: list[HolidayEntry] | None = None

    @property
    def is_empty(self) -> bool:
        return self.day_number is None


class MonthGrid(NamedTuple):
    month_index: int
    cells: tuple[DayCell, ...]

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month_index]

    def days(self) -> list[DayCell]:
        """Return the non-padding cells in calendar order."""
        return [c for c in self.cells if not c.is_empty]


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def build_month_grid(
    year: int, month_index: int, today: datetime.date | None = None
) -> MonthGrid:
    """Lay out one month of *year* as 42 cells.

    *today* marks the matching cell with ``is_today``; without it no cell is
    marked. Holiday data is not consulted, see :func:`overlay_holidays`.
    """
    # monthrange counts weekdays from Monday = 0.
    first_day, days_in_month = calendar.monthrange(year, month_index + 1)
    today_key = encode(today.year, today.month - 1, today.day) if today else None

    cells: list[DayCell] = [DayCell() for _ in range(first_day)]
    for day in range(1, days_in_month + 1):
        key = encode(year, month_index, day)
        column = (first_day + day - 1) % 7
        cells.append(
            DayCell(
                day_number=day,
                is_today=key == today_key,
                is_weekend=column in WEEKEND_COLUMNS,
                date_key=key,
            )
        )

    trailing = GRID_CELLS - len(cells)
    cells.extend(DayCell() for _ in range(trailing))
    return MonthGrid(month_index=month_index, cells=tuple(cells))


def build_year_grid(year: int, today: datetime.date | None = None) -> list[MonthGrid]:
    """Return the 12 month grids of *year*."""
    return [build_month_grid(year, m, today) for m in range(12)]


def overlay_holidays(grids: Sequence[MonthGrid], index: HolidayIndex) -> list[MonthGrid]:
    """Return copies of *grids* whose day cells reference entries in *index*."""
    merged: list[MonthGrid] = []
    for grid in grids:
        cells = tuple(
            cell._replace(holiday_entries=index.get(cell.date_key))
            if cell.date_key is not None
            else cell
            for cell in grid.cells
        )
        merged.append(grid._replace(cells=cells))
    return merged


# ---------------------------------------------------------------------------
# Tooltip
# ---------------------------------------------------------------------------


def place_tooltip(
    anchor: tuple[float, float],
    panel: tuple[float, float],
    viewport: tuple[float, float],
    offset: float = TOOLTIP_OFFSET,
) -> tuple[float, float]:
    """Position a floating panel next to *anchor* without leaving the viewport.

    The panel sits below-right of the anchor by default. On each axis where
    that would overflow it flips to the other side of the anchor.
    """
    ax, ay = anchor
    width, height = panel
    view_w, view_h = viewport

    x = ax + offset
    y = ay + offset
    if x + width > view_w:
        x = ax - width - offset
    if y + height > view_h:
        y = ay - height - offset
    return max(x, 0), max(y, 0)


def format_tooltip(date_key: str, entries: Sequence[HolidayEntry]) -> str:
    """Return the tooltip text for a holiday cell."""
    year, month_index, day = decode(date_key)
    lines = [f"{MONTH_NAMES[month_index]} {day}, {year}"]
    for e in entries:
        lines.append(f"  - {e.title}  ({', '.join(e.types)})")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------

_MONTH_WIDTH = 28


def _cell_text(cell: DayCell) -> str:
    if cell.is_empty:
        return "    "
    if cell.holiday_entries:
        return f" {cell.day_number:>2}H"
    if cell.is_today:
        return f" {cell.day_number:>2}*"
    return f"  {cell.day_number:>2}"


def _month_lines(grid: MonthGrid, year: int) -> list[str]:
    lines = [
        f"{grid.name} {year}",
        "".join(f"  {label[:2]}" for label in DOW_LABELS),
    ]
    for start in range(0, GRID_CELLS, 7):
        row = "".join(_cell_text(c) for c in grid.cells[start : start + 7])
        lines.append(row.rstrip())
    return lines


def format_month(grid: MonthGrid, year: int) -> str:
    """Return a single month as text. H marks holidays, * marks today."""
    return "\n".join(f"  {line}".rstrip() for line in _month_lines(grid, year))


def format_year(grids: Sequence[MonthGrid], year: int, columns: int = 3) -> str:
    """Return all months of *year* side by side, *columns* months per row."""
    lines: list[str] = [
        "",
        f"  Calendar {year}",
        "  Legend: H=Holiday  *=Today",
        "",
    ]
    for start in range(0, len(grids), columns):
        blocks = [_month_lines(g, year) for g in grids[start : start + columns]]
        for parts in zip(*blocks):
            row = "   ".join(p.ljust(_MONTH_WIDTH) for p in parts)
            lines.append(f"  {row}".rstrip())
        lines.append("")
    return "\n".join(lines)
