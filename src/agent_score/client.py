"""
Typed client for the DJD Agent Score API.

Each public method maps its arguments to a request path (and a JSON body
for POST endpoints) and hands it to the :class:`RequestEngine`.  Paid
endpoints raise :class:`PaymentRequiredError` when the service asks for an
x402 payment.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import ClientConfig
from .engine import RequestDescriptor, RequestEngine
from .gating import decide_gate, recommendation_approves
from .models import (
    BasicScoreResponse,
    BlacklistResponse,
    FraudReportResponse,
    FullScoreResponse,
    GateResult,
    HealthResponse,
    LeaderboardResponse,
    RefreshScoreResponse,
    RegisterAgentResponse,
)
from .parser import encode_segment, with_query

logger = logging.getLogger(__name__)


class AgentScoreClient:
    """
    Client for wallet reputation scores, fraud reports and agent registry.

    Example:
        >>> client = AgentScoreClient(timeout_ms=5_000, max_retries=1)
        >>> client.should_transact("0xef43...")
        True
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        max_retries: int | None = None,
        *,
        config: ClientConfig | None = None,
    ) -> None:
        """
        Args:
            base_url: Service origin; defaults to the production API.
            timeout_ms: Per-attempt timeout in milliseconds (default 10,000).
            max_retries: Retries for transport and 5xx failures (default 3).
            config: Prepared configuration; mutually exclusive with the
                    keyword options above.

        Raises:
            ValueError: Both ``config`` and keyword options were given, or
                        an option fails validation.
        """
        overrides = {
            "base_url": base_url,
            "timeout_ms": timeout_ms,
            "max_retries": max_retries,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if config is not None and overrides:
            raise ValueError(
                f"Pass either config or keyword options, not both "
                f"(got config and {sorted(overrides)})."
            )
        self._config = config or ClientConfig(**overrides)
        self._engine = RequestEngine(self._config)

    @property
    def config(self) -> ClientConfig:
        return self._config

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self._config.base_url!r})"

    # -----------------------------------------------------------------------
    # Scores
    # -----------------------------------------------------------------------

    def get_basic_score(self, wallet: str) -> BasicScoreResponse:
        """
        Get a basic reputation score (free tier).

        Returns score, tier, confidence, recommendation and freshness
        metadata.
        """
        return self._get(with_query("/v1/score/basic", {"wallet": wallet}))

    def get_full_score(self, wallet: str) -> FullScoreResponse:
        """
        Get a full score with dimension breakdown.

        Paid endpoint: may raise :class:`PaymentRequiredError`.
        """
        return self._get(with_query("/v1/score/full", {"wallet": wallet}))

    def refresh_score(self, wallet: str) -> RefreshScoreResponse:
        """Force a re-score from the latest on-chain data (paid)."""
        return self._post(with_query("/v1/score/refresh", {"wallet": wallet}))

    # -----------------------------------------------------------------------
    # Fraud
    # -----------------------------------------------------------------------

    def report_fraud(
        self,
        wallet: str,
        reason: str,
        tx_hashes: list[str] | None = None,
    ) -> FraudReportResponse:
        """
        Submit a fraud report for a wallet.

        Args:
            wallet: Reported wallet address.
            reason: Free-text evidence for the report.
            tx_hashes: Optional transaction hashes backing the report.
        """
        body: dict[str, Any] = {"wallet": wallet, "evidence": reason}
        if tx_hashes is not None:
            body["txHashes"] = list(tx_hashes)
        return self._post("/v1/report", body)

    def check_blacklist(self, wallet: str) -> BlacklistResponse:
        """Check whether a wallet has fraud reports (paid)."""
        return self._get(with_query("/v1/data/fraud/blacklist", {"wallet": wallet}))

    # -----------------------------------------------------------------------
    # Badge, leaderboard, registry, health
    # -----------------------------------------------------------------------

    def get_badge(self, wallet: str) -> str:
        """Return the wallet's SVG trust badge as a raw string."""
        path = f"/v1/badge/{encode_segment(wallet)}.svg"
        return self._engine.execute_text(RequestDescriptor("GET", path))

    def get_leaderboard(self, limit: int | None = None) -> LeaderboardResponse:
        """Get the top-scored agents, optionally capped at ``limit`` entries."""
        return self._get(with_query("/v1/leaderboard", {"limit": limit}))

    def register_agent(
        self,
        wallet: str,
        name: str,
        description: str,
        github_url: str | None = None,
    ) -> RegisterAgentResponse:
        """Register a new agent wallet."""
        body: dict[str, Any] = {
            "wallet": wallet,
            "name": name,
            "description": description,
        }
        if github_url:
            body["githubUrl"] = github_url
        return self._post("/v1/agent/register", body)

    def health_check(self) -> HealthResponse:
        """Confirm the API and its backing services are up."""
        return self._get("/health")

    # -----------------------------------------------------------------------
    # Gating helpers
    # -----------------------------------------------------------------------

    def should_transact(self, wallet: str) -> bool:
        """Return ``True`` only when the recommendation is ``"proceed"``."""
        score = self.get_basic_score(wallet)
        return recommendation_approves(score.get("recommendation"))

    def gate_transaction(self, wallet: str) -> GateResult:
        """
        Full gating decision with a typed reason.

        Known recommendations map to a :data:`GateReason`; anything else
        maps to ``"unknown_recommendation"`` and is not approved.
        """
        result = decide_gate(self.get_basic_score(wallet))
        logger.debug("Gate for %s: %s", wallet, result.reason)
        return result

    # -----------------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------------

    def _get(self, path: str) -> Any:
        return self._engine.execute(RequestDescriptor("GET", path))

    def _post(self, path: str, body: dict[str, Any] | None = None) -> Any:
        return self._engine.execute(RequestDescriptor("POST", path, body))
