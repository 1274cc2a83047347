"""
Response shapes returned by the score service, plus gating result types.

Payloads are decoded JSON dicts; the TypedDicts below document their keys
and keep the service's camelCase names so responses need no re-mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypedDict


# ---------------------------------------------------------------------------
# x402 payment option (one entry of a 402 body's ``accepts`` list)
# ---------------------------------------------------------------------------

class _PaymentAcceptRequired(TypedDict):
    scheme: str
    network: str
    maxAmountRequired: str
    resource: str
    description: str
    mimeType: str
    payTo: str
    maxTimeoutSeconds: int
    asset: str


class PaymentAccept(_PaymentAcceptRequired, total=False):
    extra: dict[str, Any]


# ---------------------------------------------------------------------------
# Score responses
# ---------------------------------------------------------------------------

class BasicScoreResponse(TypedDict):
    wallet: str
    score: int
    tier: str
    confidence: float
    recommendation: str
    modelVersion: str
    lastUpdated: str
    computedAt: str
    scoreFreshness: float
    freeTier: bool
    freeQueriesRemainingToday: int
    stale: bool


class FullScoreResponse(TypedDict):
    wallet: str
    score: int
    tier: str
    confidence: float
    recommendation: str
    modelVersion: str
    dimensions: dict[str, float]
    integrityFlags: dict[str, Any]
    dataQuality: dict[str, Any]
    computedAt: str


class RefreshScoreResponse(TypedDict):
    wallet: str
    score: int
    tier: str
    confidence: float
    recommendation: str
    modelVersion: str
    refreshedAt: str


# ---------------------------------------------------------------------------
# Fraud reports and blacklist
# ---------------------------------------------------------------------------

class FraudReportResponse(TypedDict):
    success: bool
    message: str
    reportId: str


class BlacklistReport(TypedDict):
    reportId: str
    reason: str
    createdAt: str


class BlacklistResponse(TypedDict):
    wallet: str
    reported: bool
    reportCount: int
    reports: list[BlacklistReport]


# ---------------------------------------------------------------------------
# Leaderboard, registration, health
# ---------------------------------------------------------------------------

class LeaderboardEntry(TypedDict):
    rank: int
    wallet: str
    score: int
    tier: str
    daysAlive: int
    isRegistered: bool
    githubVerified: bool


class LeaderboardResponse(TypedDict):
    leaderboard: list[LeaderboardEntry]
    totalAgentsScored: int
    totalAgentsRegistered: int
    lastUpdated: str


class RegisterAgentResponse(TypedDict):
    success: bool
    message: str
    wallet: str
    initialScore: int


class HealthResponse(TypedDict):
    status: str
    version: str
    modelVersion: str
    experimentalStatus: bool
    uptime: float
    database: dict[str, Any]
    indexer: dict[str, Any]
    jobs: dict[str, Any]


# ---------------------------------------------------------------------------
# Gating helpers
# ---------------------------------------------------------------------------

GateReason = Literal[
    "proceed",
    "proceed_with_caution",
    "blocked",
    "unknown_recommendation",
]


@dataclass(frozen=True)
class GateResult:
    """Outcome of :meth:`AgentScoreClient.gate_transaction`."""
    approved: bool
    reason: GateReason
    score: int
    recommendation: str
    wallet: str
