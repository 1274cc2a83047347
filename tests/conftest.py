"""
Shared pytest fixtures for the agent_score client tests.

HTTP is never touched: ``requests.request`` is patched inside
``agent_score.engine`` and fed real ``requests.Response`` objects built by
:func:`make_response`.  Backoff sleeps are recorded instead of waited.
"""

from __future__ import annotations

import json
import threading
from typing import Callable, Iterator
from unittest.mock import patch

import pytest
import requests

from agent_score import AgentScoreClient, ClientConfig
from agent_score.engine import RequestEngine


TEST_WALLET = "0xef4364fe4487353df46eb7c811d4fac78b856c7f"
TEST_BASE_URL = "https://score.test"


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------

def make_response(
    status_code: int = 200,
    body: object = None,
    text: str | None = None,
    reason: str = "",
) -> requests.Response:
    """
    Build a fully-read ``requests.Response``.

    ``body`` is JSON-encoded; ``text`` is used verbatim and wins over ``body``.
    """
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    if text is None:
        text = "" if body is None else json.dumps(body)
    response._content = text.encode("utf-8")
    response._content_consumed = True
    return response


class StreamingBody:
    """
    Stand-in for urllib3's ``HTTPResponse`` as seen by ``requests``.

    ``chunks`` receives this body and yields the payload; it should stop
    once ``shut_down`` is set, the way a socket read returns EOF after
    ``shutdown()``.
    """

    def __init__(self, chunks: Callable[["StreamingBody"], Iterator[bytes]]) -> None:
        self._chunks = chunks
        self.shut_down = threading.Event()
        self.closed = False

    def stream(self, amt: int = 2 ** 16, decode_content: bool = True) -> Iterator[bytes]:
        yield from self._chunks(self)

    def shutdown(self) -> None:
        self.shut_down.set()

    def close(self) -> None:
        self.closed = True

    def release_conn(self) -> None:
        pass


def make_streaming_response(body: StreamingBody, status_code: int = 200) -> requests.Response:
    """Build a ``requests.Response`` whose body has not been read yet."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    response.raw = body
    return response


def payment_option(**overrides) -> dict:
    """One x402 ``accepts`` entry as the service sends it."""
    option = {
        "scheme": "exact",
        "network": "base",
        "maxAmountRequired": "10000",
        "resource": f"{TEST_BASE_URL}/v1/score/full",
        "description": "Full score breakdown",
        "mimeType": "application/json",
        "payTo": "0x1111111111111111111111111111111111111111",
        "maxTimeoutSeconds": 60,
        "asset": "USDC",
    }
    option.update(overrides)
    return option


def basic_score(recommendation: str = "proceed", score: int = 59) -> dict:
    """Minimal ``BasicScoreResponse`` payload."""
    return {
        "wallet": TEST_WALLET,
        "score": score,
        "tier": "Established",
        "confidence": 0.8,
        "recommendation": recommendation,
        "modelVersion": "2.0.0",
        "lastUpdated": "2026-10-01T00:00:00Z",
        "computedAt": "2026-10-01T00:00:00Z",
        "scoreFreshness": 0.9,
        "freeTier": True,
        "freeQueriesRemainingToday": 9,
        "stale": False,
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_request():
    """Patch the engine's HTTP call; set ``side_effect`` per test."""
    with patch("agent_score.engine.requests.request") as mocked:
        yield mocked


@pytest.fixture
def sleeps():
    """List of backoff delays the engine asked to sleep for."""
    recorded: list[float] = []
    with patch("agent_score.engine.time.sleep", side_effect=recorded.append):
        yield recorded


@pytest.fixture
def config():
    return ClientConfig(base_url=TEST_BASE_URL, timeout_ms=2_000, max_retries=3)


@pytest.fixture
def engine(config, sleeps):
    return RequestEngine(config)


@pytest.fixture
def client(config, sleeps):
    return AgentScoreClient(config=config)
