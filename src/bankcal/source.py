"""Holiday data sources.

``NagerDateSource`` talks to the public Nager.Date v3 API:

- ``GET {base}/AvailableCountries``               -> ``[{countryCode, name}]``
- ``GET {base}/PublicHolidays/{year}/{code}``      -> ``[{date, localName, name, types}]``
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple, Protocol

import requests

from bankcal.errors import FormatError, TransportError
from bankcal.holidays import HolidayRecord, parse_key

logger = logging.getLogger(__name__)

API_BASE = "https://date.nager.at/api/v3"
DEFAULT_TIMEOUT = 10.0


class Country(NamedTuple):
    code: str
    name: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.code})"


class HolidaySource(Protocol):
    """Anything that can list countries and their holidays for a year."""

    def fetch_countries(self) -> list[Country]: ...

    def fetch_holidays(self, year: int, country_code: str) -> list[HolidayRecord]: ...


def parse_holiday(raw: dict[str, Any]) -> HolidayRecord:
    """Build a ``HolidayRecord`` from one API payload item."""
    try:
        date_str = raw["date"]
        name = raw.get("name") or ""
        local_name = raw.get("localName") or ""
        types = tuple(raw.get("types") or ())
    except (KeyError, AttributeError, TypeError) as exc:
        raise FormatError(f"Malformed holiday record {raw!r}") from exc
    return HolidayRecord(date=parse_key(date_str), local_name=local_name, name=name, types=types)


def parse_country(raw: dict[str, Any]) -> Country:
    try:
        return Country(code=raw["countryCode"], name=raw["name"])
    except (KeyError, TypeError) as exc:
        raise FormatError(f"Malformed country record {raw!r}") from exc


class NagerDateSource:
    """HTTP client for the Nager.Date public holiday API."""

    def __init__(
        self,
        base_url: str = API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def _get(self, path: str, what: str) -> Any:
        url = f"{self.base_url}/{path}"
        logger.debug("GET %s", url)
        try:
            res = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("%s request failed: %s", what, exc)
            raise TransportError(f"{what} API unreachable: {exc}") from exc

        if not res.ok:
            logger.warning("%s request returned HTTP %s", what, res.status_code)
            raise TransportError(f"{what} API error: {res.status_code}", status=res.status_code)

        try:
            data = res.json()
        except ValueError as exc:
            raise FormatError(f"{what} API returned invalid JSON") from exc
        if not isinstance(data, list):
            raise FormatError(f"{what} API returned {type(data).__name__}, expected a list")
        return data

    def fetch_countries(self) -> list[Country]:
        return [parse_country(c) for c in self._get("AvailableCountries", "Countries")]

    def fetch_holidays(self, year: int, country_code: str) -> list[HolidayRecord]:
        data = self._get(f"PublicHolidays/{year}/{country_code}", "Holidays")
        logger.debug("Received %d holidays for %s in %d", len(data), country_code, year)
        return [parse_holiday(h) for h in data]
