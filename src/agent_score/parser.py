"""
Response-body helpers, error-message formatting and URL construction.

No I/O occurs here beyond reading an already-received ``requests.Response``;
all functions are small pure transformations to support easy unit testing.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlencode

import requests

from .models import PaymentAccept

# Characters left unescaped besides letters, digits and "_.-~", as
# JavaScript's encodeURIComponent does.
URI_COMPONENT_SAFE = "!'()*"


# ---------------------------------------------------------------------------
# URL construction
# ---------------------------------------------------------------------------

def build_url(base_url: str, path: str) -> str:
    """
    Join a base URL and a request path with exactly one slash between them.

    Args:
        base_url: Service origin, with or without trailing slashes.
        path: Request path (``/v1/...``), query string included.

    Returns:
        Absolute URL string.
    """
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def encode_segment(value: str) -> str:
    """Percent-encode ``value`` for use as a path segment or query value."""
    return quote(str(value), safe=URI_COMPONENT_SAFE)


def with_query(path: str, params: dict[str, Any]) -> str:
    """
    Append a query string to ``path``, skipping ``None`` values.

    Args:
        path: Request path without a query string.
        params: Query parameters; values are stringified and percent-encoded.

    Returns:
        ``path`` alone if no parameter survives, else ``path?k=v&...``.
    """
    present = {k: v for k, v in params.items() if v is not None}
    if not present:
        return path
    return f"{path}?{urlencode(present, quote_via=quote, safe=URI_COMPONENT_SAFE)}"


# ---------------------------------------------------------------------------
# Body parsing
# ---------------------------------------------------------------------------

def parse_payment_required(response: requests.Response) -> tuple[list[PaymentAccept], Any]:
    """
    Extract x402 payment options from a 402 response.

    A body that is not valid JSON is treated as an empty object; an
    ``accepts`` field that is absent or not a list yields no options.

    Args:
        response: Received response with status 402.

    Returns:
        Tuple of ``(accepts, raw_body)``.
    """
    try:
        raw = response.json()
    except ValueError:
        raw = {}

    accepts = raw.get("accepts") if isinstance(raw, dict) else None
    if not isinstance(accepts, list):
        accepts = []
    return accepts, raw


def read_error_text(response: requests.Response) -> str:
    """
    Return the body of an error response for use in a message.

    Falls back to the HTTP reason phrase when the body is empty or
    cannot be decoded.
    """
    try:
        text = response.text
    except (ValueError, requests.RequestException):
        text = ""
    return text or response.reason or ""


# ---------------------------------------------------------------------------
# Error messages
# ---------------------------------------------------------------------------

def timeout_message(method: str, path: str, timeout_ms: int) -> str:
    return f"Request timed out after {timeout_ms}ms: {method} {path}"


def transport_message(error: Exception) -> str:
    detail = str(error) or type(error).__name__
    return f"Network error: {detail}"


def server_error_message(status_code: int, detail: str) -> str:
    return f"Server error {status_code}: {detail}"


def client_error_message(status_code: int, detail: str) -> str:
    return f"HTTP {status_code}: {detail}"
