"""
Grassroots scoring API connector.

Four resources under one host:
  grades/{gradeId}/matches                    matches list for a grade
  matches/{matchId}?responseModifier=...      match detail with scorecard
  matches/{matchId}/balls                     ball feed (primary, with feature flag)
  matches/{matchId}/balls                     ball feed (fallback, bare)
"""
from __future__ import annotations

from typing import Any, Optional

from shared.models.enums import FeedShape, Step
from shared.utils.http_client import UpstreamClient
from shared.utils.logging import get_logger
from shared.utils.metrics import BALL_FEED_FALLBACKS, BALL_FEED_SHAPES

from ingest.normalization.ball_feed import Ball, classify_feed, last_ball, normalize_feed
from ingest.normalization.scorecard import unwrap_detail
from ingest.providers.base import StepResult, run_step

logger = get_logger(__name__)

FEATURE_FLAG_PARAM = "jsconfig"
SCORECARD_MODIFIER = "includeScorecard"


class GrassrootsProvider:
    """Builds upstream requests and unwraps their payloads for the pipeline."""

    def __init__(self, client: UpstreamClient, feature_flag: str = "eccn:true") -> None:
        self._client = client
        self._feature_flag = feature_flag

    async def start(self) -> None:
        await self._client.start()

    async def close(self) -> None:
        await self._client.close()

    def _flagged(self, **params: str) -> dict[str, str]:
        return {**params, FEATURE_FLAG_PARAM: self._feature_flag}

    # ── Matches list (fatal on failure) ─────────────────────────────────
    async def fetch_matches(self, grade_id: str) -> list[dict[str, Any]]:
        """
        Matches for a grade, as listed upstream.

        Raises:
            UpstreamError: The caller turns this into a 500.
        """
        payload = await self._client.fetch_json(
            f"grades/{grade_id}/matches", params=self._flagged(), resource="matches"
        )
        matches = payload.get("matches") if isinstance(payload, dict) else None
        return matches if isinstance(matches, list) else []

    # ── Scorecard ───────────────────────────────────────────────────────
    async def _get_detail(self, match_id: Any) -> Any:
        payload = await self._client.fetch_json(
            f"matches/{match_id}",
            params=self._flagged(responseModifier=SCORECARD_MODIFIER),
            resource="match_detail",
        )
        return unwrap_detail(payload)

    async def fetch_detail(self, match_id: Any) -> StepResult[Any]:
        """Detailed scorecard for a match; absent on any failure."""
        return await run_step(
            Step.MATCH_DETAIL, self._get_detail, match_id, context={"match_id": match_id}
        )

    # ── Ball feed ───────────────────────────────────────────────────────
    async def _get_last_ball(self, match_id: Any, flagged: bool) -> Optional[Ball]:
        payload = await self._client.fetch_json(
            f"matches/{match_id}/balls",
            params=self._flagged() if flagged else None,
            resource="balls" if flagged else "balls_fallback",
        )
        shape = classify_feed(payload)
        BALL_FEED_SHAPES.labels(shape=shape.value).inc()
        if shape == FeedShape.UNRECOGNISED:
            logger.info("ball_feed_unrecognised", match_id=match_id, payload_type=type(payload).__name__)
        return last_ball(normalize_feed(payload, shape))

    async def fetch_last_ball(self, match_id: Any) -> StepResult[Ball]:
        """
        Most recent delivery of a match.

        The primary feed is tried first; when it answers but yields no ball the
        bare endpoint is tried once more. A failed primary call is not retried.
        """
        primary = await run_step(
            Step.BALL_FEED, self._get_last_ball, match_id, True, context={"match_id": match_id}
        )
        if not primary.success or primary.present:
            return primary

        BALL_FEED_FALLBACKS.inc()
        logger.info("ball_feed_fallback", match_id=match_id)
        return await run_step(
            Step.BALL_FEED_FALLBACK, self._get_last_ball, match_id, False, context={"match_id": match_id}
        )
