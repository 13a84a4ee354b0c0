"""Exception types raised by bankcal."""

from __future__ import annotations


class BankCalError(Exception):
    """Base class for bankcal errors."""


class TransportError(BankCalError):
    """The holiday data source was unreachable or answered with an error.

    ``status`` is the HTTP status code, or ``None`` when no response arrived.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class FormatError(BankCalError, ValueError):
    """A date key or source payload does not have the expected shape."""
