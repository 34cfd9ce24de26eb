"""Query parameter helpers shared by the signer and the transport."""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Mapping
from urllib.parse import quote

# Characters encodeURIComponent leaves untouched. The server recomputes the
# signature over the query string, so the encoding has to match byte for byte.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def is_empty_value(value: Any) -> bool:
    """Return True for values that must never reach the query string."""
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return not value
    return False


def strip_empty_values(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop empty values from ``params``, keeping the caller's key order."""
    if not isinstance(params, Mapping):
        return {}
    return {key: value for key, value in params.items() if not is_empty_value(value)}


def stringify_value(value: Any) -> str:
    """Render one value the way the JavaScript client puts it on the wire."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return '["' + '","'.join(stringify_value(item) for item in value) + '"]'
    if isinstance(value, (set, frozenset)):
        # Sets have no stable order; sort so the signed query is deterministic.
        return stringify_value(sorted(stringify_value(item) for item in value))
    return str(value)


def build_query_string(params: Mapping[str, Any] | None) -> str:
    """Serialize ``params`` as ``key=value`` pairs joined by ``&``.

    Keys are emitted in iteration order and are not sorted. Arrays are sent as
    a bracketed, double-quoted list (``["a","b"]``) rather than repeated keys.
    """
    if not params:
        return ""
    return "&".join(
        f"{key}={quote(stringify_value(value), safe=_URI_COMPONENT_SAFE)}"
        for key, value in params.items()
    )
