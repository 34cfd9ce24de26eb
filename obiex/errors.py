"""Exceptions raised by the Obiex client.

Transport failures from aiohttp (connection errors, timeouts, non-2xx
responses without a JSON body) are not wrapped and reach the caller as-is.
"""
from __future__ import annotations

from typing import Any


class ObiexError(Exception):
    """Base class for errors raised by this package."""


class ServerError(ObiexError):
    """Non-2xx response carrying a structured error body."""

    def __init__(self, message: str, data: Any, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.data = data
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status_code={self.status_code}, message={self.message!r})"


class CurrencyNotFoundError(ObiexError, LookupError):
    """A currency code did not match any entry in the currency list."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Unknown currency code: {code}")
        self.code = code


class ConfigurationError(ObiexError):
    """Required settings are missing from the environment."""
