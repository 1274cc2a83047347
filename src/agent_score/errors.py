"""
Exception hierarchy raised by the client.

Catch :class:`AgentScoreError` for any client-originated failure, or
:class:`PaymentRequiredError` to branch on an x402 payment request.
"""

from __future__ import annotations

from typing import Any

from .models import PaymentAccept


class AgentScoreError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(AgentScoreError):
    """
    A request failed in transport or with an unexpected HTTP status.

    ``status_code`` is ``None`` for timeouts, DNS failures and refused
    connections, and set for 4xx/5xx responses.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PaymentRequiredError(AgentScoreError):
    """
    The service answered HTTP 402; the resource needs an x402 payment.

    Carries the server's ``accepts`` payment options verbatim together with
    the full parsed body.  Never retried.
    """

    status_code = 402

    def __init__(self, accepts: list[PaymentAccept], raw_body: Any) -> None:
        first = accepts[0] if accepts and isinstance(accepts[0], dict) else {}
        amount = first.get("maxAmountRequired")
        asset = first.get("asset")
        if amount is None:
            amount = "unknown"
        if asset is None:
            asset = "unknown"
        super().__init__(f"Payment required: {amount} {asset}")
        self.accepts = accepts
        self.raw_body = raw_body
