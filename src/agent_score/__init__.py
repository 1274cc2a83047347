"""
agent_score — Python client for the DJD Agent Score reputation API.

Module layout
-------------
config.py    — default constants, ClientConfig (immutable per client)
errors.py    — AgentScoreError, NetworkError, PaymentRequiredError
retry.py     — outcome categories, exponential backoff, retry decision
parser.py    — URL building, 402 body parsing, error-text capture
engine.py    — request descriptors, response classification, retry loop
models.py    — response shapes, x402 payment option, gate result
gating.py    — recommendation → approve / gate-reason mapping
client.py    — AgentScoreClient endpoint methods and gating helpers

Public interface
----------------
Query a wallet:
    client = AgentScoreClient()
    client.get_basic_score(wallet)

Gate a transaction:
    client.should_transact(wallet)
    client.gate_transaction(wallet)

Handle a paid endpoint:
    try:
        client.get_full_score(wallet)
    except PaymentRequiredError as err:
        err.accepts
"""

from .client import AgentScoreClient
from .config import ClientConfig
from .errors import AgentScoreError, NetworkError, PaymentRequiredError
from .models import (
    BasicScoreResponse,
    BlacklistResponse,
    FraudReportResponse,
    FullScoreResponse,
    GateReason,
    GateResult,
    HealthResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    PaymentAccept,
    RefreshScoreResponse,
    RegisterAgentResponse,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "AgentScoreClient",
    "ClientConfig",
    # Errors
    "AgentScoreError",
    "NetworkError",
    "PaymentRequiredError",
    # Response shapes
    "BasicScoreResponse",
    "FullScoreResponse",
    "RefreshScoreResponse",
    "FraudReportResponse",
    "BlacklistResponse",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "RegisterAgentResponse",
    "HealthResponse",
    "PaymentAccept",
    "GateReason",
    "GateResult",
]
