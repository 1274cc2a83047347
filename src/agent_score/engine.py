"""
Request execution engine: one logical call → bounded, retried HTTP attempts.

Design notes:
- Every attempt is independent and stateless.  ``requests.request`` opens
  and closes its own session; the body is streamed under an
  :class:`AttemptTimer` that cuts the transfer off once the timeout
  elapses.  Response and timer are both released before the next attempt
  starts or the loop exits.
- Each attempt yields exactly one :class:`AttemptOutcome`.  The loop either
  returns a success payload or raises exactly one error; retry exhaustion
  raises the *last* retriable error, not an aggregate.
- A 2xx body that fails to decode as JSON propagates unchanged: it is a
  server contract violation, not a transient failure.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Literal

import requests
from urllib3.exceptions import ConnectTimeoutError, ReadTimeoutError

from .config import ClientConfig
from .errors import AgentScoreError, NetworkError, PaymentRequiredError
from .parser import (
    build_url,
    client_error_message,
    parse_payment_required,
    read_error_text,
    server_error_message,
    timeout_message,
    transport_message,
)
from .retry import Outcome, exponential_backoff, should_retry

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST"]


# ---------------------------------------------------------------------------
# Request and attempt records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RequestDescriptor:
    """What to call: built by the endpoint layer, consumed once by the engine."""
    method: HttpMethod
    path: str
    body: dict[str, Any] | None = None


@dataclass(frozen=True)
class AttemptOutcome:
    """
    Result of a single network exchange.

    ``payload`` is set for ``Outcome.SUCCESS``; every other category carries
    the ``error`` that would be raised if the loop ends on this outcome.
    """
    category: str
    payload: Any = None
    error: AgentScoreError | None = None

    @property
    def retriable(self) -> bool:
        return self.category in Outcome.RETRIABLE


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify_response(response: requests.Response, as_text: bool = False) -> AttemptOutcome:
    """
    Classify a received HTTP response.

    Priority: 402 → payment required (terminal); ≥500 → server error
    (retriable); 4xx → client error (terminal); anything else → success.

    Args:
        response: Response from a completed attempt.
        as_text: Return the success body verbatim instead of decoded JSON.

    Returns:
        The attempt's :class:`AttemptOutcome`.

    Raises:
        requests.exceptions.JSONDecodeError: A success body is not valid JSON.
    """
    category = Outcome.from_status(response.status_code)

    if category == Outcome.PAYMENT_REQUIRED:
        accepts, raw = parse_payment_required(response)
        return AttemptOutcome(category, error=PaymentRequiredError(accepts, raw))

    if category == Outcome.SERVER_ERROR:
        message = server_error_message(response.status_code, read_error_text(response))
        return AttemptOutcome(category, error=NetworkError(message, response.status_code))

    if category == Outcome.CLIENT_ERROR:
        message = client_error_message(response.status_code, read_error_text(response))
        return AttemptOutcome(category, error=NetworkError(message, response.status_code))

    payload = response.text if as_text else response.json()
    return AttemptOutcome(Outcome.SUCCESS, payload=payload)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class RequestEngine:
    """
    Executes request descriptors against one configured service origin.

    Holds only the immutable :class:`ClientConfig`, so a single engine may be
    shared by concurrent callers without locking.
    """

    def __init__(
        self,
        config: ClientConfig,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._config = config
        self._sleep = sleep

    @property
    def config(self) -> ClientConfig:
        return self._config

    def execute(self, descriptor: RequestDescriptor) -> Any:
        """
        Execute ``descriptor`` and return the decoded JSON payload.

        Raises:
            PaymentRequiredError: The service answered 402.
            NetworkError: A 4xx response, or transport/5xx failures on
                          every attempt.
        """
        return self._run(descriptor, as_text=False)

    def execute_text(self, descriptor: RequestDescriptor) -> str:
        """Like :meth:`execute` but return the success body as raw text."""
        return self._run(descriptor, as_text=True)

    # -- internals ----------------------------------------------------------

    def _run(self, descriptor: RequestDescriptor, as_text: bool) -> Any:
        max_retries = self._config.max_retries
        total = max_retries + 1
        last_error: AgentScoreError | None = None

        for attempt in range(total):
            if attempt > 0:
                delay = exponential_backoff(attempt, self._config.initial_backoff_s)
                logger.info("Retrying in %.1fs", delay)
                self._wait(delay)

            logger.debug(
                "%s %s (attempt %d/%d)",
                descriptor.method, descriptor.path, attempt + 1, total,
            )
            outcome = self._attempt(descriptor, as_text)

            if outcome.category == Outcome.SUCCESS:
                return outcome.payload

            if outcome.category == Outcome.PAYMENT_REQUIRED:
                logger.info("%s %s: %s", descriptor.method, descriptor.path, outcome.error)

            if outcome.category in Outcome.TERMINAL:
                raise outcome.error

            last_error = outcome.error
            logger.warning(
                "Attempt %d/%d failed [%s]: %s",
                attempt + 1, total, outcome.category, str(last_error)[:120],
            )
            if not should_retry(outcome.category, attempt, max_retries):
                break

        error = last_error or NetworkError("Request failed after retries")
        logger.error("Request failed after %d attempts: %s", total, error)
        raise error

    def _wait(self, seconds: float) -> None:
        (self._sleep or time.sleep)(seconds)

    def _attempt(self, descriptor: RequestDescriptor, as_text: bool) -> AttemptOutcome:
        headers = None
        if descriptor.body is not None:
            headers = {"Content-Type": "application/json"}

        with AttemptTimer(self._config.timeout_s) as timer:
            try:
                response = requests.request(
                    descriptor.method,
                    build_url(self._config.base_url, descriptor.path),
                    headers=headers,
                    json=descriptor.body,
                    timeout=self._config.timeout_s,
                    stream=True,
                )
            except requests.RequestException as exc:
                return self._transport_outcome(descriptor, exc, timer.expired)

            with response:
                timer.watch(response)
                try:
                    # body is downloaded here; the timer aborts a slow transfer
                    response.content
                except requests.RequestException as exc:
                    return self._transport_outcome(descriptor, exc, timer.expired)
                if timer.expired:
                    return self._transport_outcome(descriptor, None, True)
                return classify_response(response, as_text=as_text)

    def _transport_outcome(
        self,
        descriptor: RequestDescriptor,
        exc: Exception | None,
        expired: bool,
    ) -> AttemptOutcome:
        if expired or is_timeout(exc):
            message = timeout_message(descriptor.method, descriptor.path, self._config.timeout_ms)
        else:
            message = transport_message(exc)
        error = NetworkError(message)
        if exc is not None:
            error.__cause__ = exc
        return AttemptOutcome(Outcome.TRANSPORT, error=error)


# ---------------------------------------------------------------------------
# Per-attempt timeout
# ---------------------------------------------------------------------------

class AttemptTimer:
    """
    Abort timer owned by a single attempt.

    When it fires it shuts down the read side of the watched response's
    socket, so a body that trickles in past the deadline is cut off instead
    of read to the end.  Leaving the ``with`` block cancels and joins the
    timer thread on every exit path.
    """

    def __init__(self, seconds: float) -> None:
        self._fired = threading.Event()
        self._lock = threading.Lock()
        self._raw: Any = None
        self._timer = threading.Timer(seconds, self._fire)
        self._timer.daemon = True

    def __enter__(self) -> AttemptTimer:
        self._timer.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._timer.cancel()
        self._timer.join()
        with self._lock:
            self._raw = None

    @property
    def expired(self) -> bool:
        return self._fired.is_set()

    def watch(self, response: requests.Response) -> None:
        """Attach the in-flight response; abort at once if already expired."""
        with self._lock:
            self._raw = response.raw
            fired = self._fired.is_set()
        if fired:
            _shutdown(response.raw)

    def _fire(self) -> None:
        with self._lock:
            self._fired.set()
            raw = self._raw
        if raw is not None:
            _shutdown(raw)


def _shutdown(raw: Any) -> None:
    # urllib3 >= 2.3: unblocks a pending read on the response socket
    shutdown = getattr(raw, "shutdown", None)
    if shutdown is None:
        return
    try:
        shutdown()
    except (OSError, ValueError) as exc:
        # socket already closed or never attached
        logger.debug("Response shutdown skipped: %s", exc)


def is_timeout(exc: BaseException | None) -> bool:
    """
    Whether a ``requests`` failure was caused by a timeout.

    A read timeout during the body download surfaces as
    ``requests.ConnectionError`` wrapping urllib3's ``ReadTimeoutError``.
    """
    if exc is None:
        return False
    if isinstance(exc, requests.Timeout):
        return True
    return any(isinstance(arg, (ReadTimeoutError, ConnectTimeoutError)) for arg in exc.args)
