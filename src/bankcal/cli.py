"""Typer CLI for the Bank Holiday Calendar."""

from __future__ import annotations

import datetime
import json
import logging
import sys

import typer

from bankcal.errors import BankCalError
from bankcal.grid import MonthGrid, format_tooltip, format_year
from bankcal.holidays import HolidayIndex, parse_key
from bankcal.session import DEFAULT_COUNTRY, CalendarSession
from bankcal.source import API_BASE, DEFAULT_TIMEOUT, HolidaySource, NagerDateSource

app = typer.Typer(
    name="bankcal",
    help="Bank Holiday Calendar: an annual calendar with public holidays "
    "for any country, including substitute days where a country grants them.",
    add_completion=False,
)


def _make_source(api_url: str, timeout: float) -> HolidaySource:
    return NagerDateSource(base_url=api_url, timeout=timeout)


def _current_year() -> int:
    return datetime.date.today().year


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


@app.callback()
def _configure(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log requests and state changes to stderr.",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


_API_URL_OPTION = typer.Option(
    API_BASE,
    "--api-url",
    envvar="BANKCAL_API_URL",
    help="Base URL of the Nager.Date v3 API.",
)
_TIMEOUT_OPTION = typer.Option(
    DEFAULT_TIMEOUT,
    "--timeout",
    envvar="BANKCAL_TIMEOUT",
    help="HTTP timeout in seconds.",
    min=0.1,
)
_COUNTRY_OPTION = typer.Option(
    DEFAULT_COUNTRY,
    "--country",
    "-c",
    envvar="BANKCAL_COUNTRY",
    help="ISO 3166-1 alpha-2 country code.",
)
_YEAR_OPTION = typer.Option(
    None,
    "--year",
    "-y",
    help="Calendar year. Defaults to the current year.",
)


def _load_session(country: str, year: int | None, api_url: str, timeout: float) -> CalendarSession:
    resolved_year = year if year is not None else _current_year()
    session = CalendarSession(_make_source(api_url, timeout), country, resolved_year)
    try:
        session.load_countries()
    except BankCalError as exc:
        # The country list only provides labels; holidays can still load.
        typer.echo(f"Warning: Could not load countries: {exc}", err=True)
    try:
        session.load()
    except BankCalError as exc:
        raise _fail(str(exc)) from None
    return session


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def show(
    country: str = _COUNTRY_OPTION,
    year: int = _YEAR_OPTION,
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Output the month grids and holiday index as JSON.",
    ),
    api_url: str = _API_URL_OPTION,
    timeout: float = _TIMEOUT_OPTION,
) -> None:
    """Show the annual calendar with public holidays highlighted."""
    session = _load_session(country, year, api_url, timeout)

    if output_json:
        _print_json(session)
        return

    w = 64
    typer.echo("=" * w)
    typer.echo("  BANK HOLIDAY CALENDAR")
    typer.echo("=" * w)
    typer.echo(f"  {session.status}")
    typer.echo(format_year(session.grids, session.year))
    _print_holiday_list(session.holiday_index)


@app.command()
def holidays(
    country: str = _COUNTRY_OPTION,
    year: int = _YEAR_OPTION,
    api_url: str = _API_URL_OPTION,
    timeout: float = _TIMEOUT_OPTION,
) -> None:
    """List the holidays of a country, including substitute days."""
    session = _load_session(country, year, api_url, timeout)
    typer.echo(f"  {session.status}")
    typer.echo()
    _print_holiday_list(session.holiday_index)


@app.command()
def countries(
    api_url: str = _API_URL_OPTION,
    timeout: float = _TIMEOUT_OPTION,
) -> None:
    """List the countries the holiday API knows about."""
    source = _make_source(api_url, timeout)
    try:
        available = source.fetch_countries()
    except BankCalError as exc:
        raise _fail(f"Could not load countries: {exc}") from None
    for c in available:
        typer.echo(f"  {c.label}")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_holiday_list(index: HolidayIndex) -> None:
    if not index:
        typer.echo("  No public holidays.")
        return
    for key in sorted(index):
        d = parse_key(key)
        for entry in index[key]:
            typer.echo(f"    {d.strftime('%a, %b %d'):>12}  {entry.title}  ({entry.global_name})")


def _serialize_grid(grid: MonthGrid) -> dict[str, object]:
    return {
        "month_index": grid.month_index,
        "name": grid.name,
        "cells": [
            {
                "day_number": c.day_number,
                "date_key": c.date_key,
                "is_today": c.is_today,
                "is_weekend": c.is_weekend,
                "holiday": c.holiday_entries is not None,
            }
            for c in grid.cells
        ],
    }


def _print_json(session: CalendarSession) -> None:
    output = {
        "year": session.year,
        "country": session.country_code,
        "status": session.status,
        "holidays": {
            key: {
                "tooltip": format_tooltip(key, entries),
                "entries": [
                    {
                        "title": e.title,
                        "global_name": e.global_name,
                        "color": e.color,
                        "types": list(e.types),
                    }
                    for e in entries
                ],
            }
            for key, entries in session.holiday_index.items()
        },
        "months": [_serialize_grid(g) for g in session.grids],
    }
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    typer.echo()


def main() -> None:
    """Entry point for the CLI."""
    app()
