"""
Transaction gating decisions derived from a basic score payload.

Pure functions; the client wraps them around a single score fetch.
"""

from __future__ import annotations

from typing import Mapping

from .config import PROCEED_RECOMMENDATION
from .models import GateReason, GateResult

# Known recommendation strings → gate reason ("deny" and "block" both block)
KNOWN_REASONS: dict[str, GateReason] = {
    "proceed": "proceed",
    "proceed_with_caution": "proceed_with_caution",
    "deny": "blocked",
    "block": "blocked",
}

APPROVING_REASONS: frozenset[str] = frozenset({"proceed", "proceed_with_caution"})


def recommendation_approves(recommendation: str | None) -> bool:
    """Return ``True`` only for the exact ``"proceed"`` recommendation."""
    return recommendation == PROCEED_RECOMMENDATION


def gate_reason(recommendation: str | None) -> GateReason:
    """Map a recommendation string to its reason; unknown values never approve."""
    if not isinstance(recommendation, str):
        return "unknown_recommendation"
    return KNOWN_REASONS.get(recommendation, "unknown_recommendation")


def decide_gate(score: Mapping) -> GateResult:
    """
    Build a :class:`GateResult` from a basic score payload.

    Args:
        score: Decoded ``BasicScoreResponse`` dict.

    Returns:
        Gate decision carrying the score, recommendation and wallet.
    """
    recommendation = score.get("recommendation")
    reason = gate_reason(recommendation)
    return GateResult(
        approved=reason in APPROVING_REASONS,
        reason=reason,
        score=score.get("score"),
        recommendation=recommendation,
        wallet=score.get("wallet"),
    )
