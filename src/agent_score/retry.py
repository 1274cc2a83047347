"""
Outcome categorization and exponential backoff.

The retry schedule doubles from the initial backoff on every retry:
  retry 1 → 1 s, retry 2 → 2 s, retry 3 → 4 s, ...
"""

from __future__ import annotations

from .config import INITIAL_BACKOFF_SECONDS


# ---------------------------------------------------------------------------
# Outcome classification
# ---------------------------------------------------------------------------

class Outcome:
    """
    Category constants for the result of a single attempt.

    Categories drive retry decisions: transport and server failures are
    retried with backoff; everything else ends the request immediately.
    """

    SUCCESS = "success"
    PAYMENT_REQUIRED = "payment_required"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    TRANSPORT = "transport"

    # Transient failures that warrant another attempt
    RETRIABLE: frozenset[str] = frozenset({SERVER_ERROR, TRANSPORT})
    # Outcomes that end the retry loop at once
    TERMINAL: frozenset[str] = frozenset({SUCCESS, PAYMENT_REQUIRED, CLIENT_ERROR})

    @staticmethod
    def from_status(status_code: int) -> str:
        """
        Classify an HTTP status code.

        402 is checked before the generic 4xx range so that a payment
        request is never mistaken for a plain client error.

        Args:
            status_code: HTTP status of a received response.

        Returns:
            One of the category constants (never ``TRANSPORT``).
        """
        if status_code == 402:
            return Outcome.PAYMENT_REQUIRED
        if status_code >= 500:
            return Outcome.SERVER_ERROR
        if status_code >= 400:
            return Outcome.CLIENT_ERROR
        return Outcome.SUCCESS


# ---------------------------------------------------------------------------
# Backoff helpers
# ---------------------------------------------------------------------------

def exponential_backoff(
    retry_number: int,
    initial_backoff: float = INITIAL_BACKOFF_SECONDS,
) -> float:
    """
    Return the wait in seconds before a given retry.

    Args:
        retry_number: 1-based retry number (the first retry is 1).
        initial_backoff: Delay before the first retry.

    Returns:
        ``initial_backoff * 2 ** (retry_number - 1)``.

    Raises:
        ValueError: ``retry_number`` is below 1.
    """
    if retry_number < 1:
        raise ValueError(f"retry_number must be >= 1, got {retry_number}")
    return initial_backoff * 2 ** (retry_number - 1)


def should_retry(category: str, attempt: int, max_retries: int) -> bool:
    """
    Decide whether another attempt follows the one that just finished.

    Args:
        category: Outcome category from :class:`Outcome`.
        attempt: 0-based index of the attempt that just finished.
        max_retries: Retries allowed after the initial attempt.

    Returns:
        ``True`` if the outcome is retriable and retries remain.
    """
    if category not in Outcome.RETRIABLE:
        return False
    return attempt < max_retries
