"""HMAC-SHA256 request signing.

The signed content is ``METHOD + PATH + TIMESTAMP`` with no separators, where
PATH is the request path relative to the base URL including its query string
and TIMESTAMP is epoch milliseconds. The same timestamp must be sent in the
``x-api-timestamp`` header, since the server recomputes the HMAC from it.
"""
from __future__ import annotations

import hashlib
import hmac
import time
from dataclasses import dataclass, field
from typing import NamedTuple

API_KEY_HEADER = "x-api-key"
TIMESTAMP_HEADER = "x-api-timestamp"
SIGNATURE_HEADER = "x-api-signature"


@dataclass(frozen=True)
class Credentials:
    api_key: str
    api_secret: str = field(repr=False)


class SignedRequest(NamedTuple):
    timestamp: int
    signature: str


def current_timestamp() -> int:
    return int(time.time() * 1000)


def sign(method: str, canonical_path: str, secret: str, timestamp: int | None = None) -> SignedRequest:
    if timestamp is None:
        timestamp = current_timestamp()
    content = f"{method.upper()}{canonical_path}{timestamp}"
    signature = hmac.new(secret.encode("utf-8"), content.encode("utf-8"), hashlib.sha256).hexdigest()
    return SignedRequest(timestamp, signature)


class RequestSigner:
    """Signs outgoing requests with a fixed set of credentials."""

    def __init__(self, credentials: Credentials) -> None:
        self.credentials = credentials

    def sign(self, method: str, canonical_path: str) -> SignedRequest:
        return sign(method, canonical_path, self.credentials.api_secret)

    def headers(self, method: str, canonical_path: str, has_body: bool = False) -> dict[str, str]:
        """Build the authentication headers for one request."""
        timestamp, signature = self.sign(method, canonical_path)
        headers = {
            API_KEY_HEADER: self.credentials.api_key,
            TIMESTAMP_HEADER: str(timestamp),
            SIGNATURE_HEADER: signature,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers
