"""Async client for the Obiex exchange REST API."""

from .cache import TTLCache
from .client import ObiexClient
from .errors import ConfigurationError, CurrencyNotFoundError, ObiexError, ServerError
from .models import (
    BankAccountPayout,
    CryptoAccountPayout,
    TradeSide,
    TransactionCategory,
)
from .signing import Credentials, RequestSigner, SignedRequest, sign

__all__ = [
    "ObiexClient",
    "TTLCache",
    "RequestSigner",
    "SignedRequest",
    "Credentials",
    "sign",
    "ObiexError",
    "ServerError",
    "CurrencyNotFoundError",
    "ConfigurationError",
    "BankAccountPayout",
    "CryptoAccountPayout",
    "TradeSide",
    "TransactionCategory",
]
