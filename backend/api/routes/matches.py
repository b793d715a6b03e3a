"""
Match endpoints.

GET /api/matches?gradeId=...            Matches in a grade, as listed upstream.
GET /api/matches?gradeId=...&teamId=..  The team's current match with scorecard,
                                        last ball and current-player figures.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from shared.utils.logging import get_logger

from api.dependencies import get_provider
from builder.service import resolve_matches
from ingest.providers.grassroots import GrassrootsProvider

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["matches"])


class MissingParameter(Exception):
    """A required query parameter was not supplied."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing {name} parameter")
        self.name = name


@router.get("/matches")
async def get_matches(
    grade_id: Optional[str] = Query(default=None, alias="gradeId"),
    team_id: Optional[str] = Query(default=None, alias="teamId"),
    provider: GrassrootsProvider = Depends(get_provider),
) -> dict[str, Any]:
    """
    List a grade's matches, or resolve a team's current match.

    With ``teamId`` the response holds at most one match, carrying ``detail``,
    ``lastBall``, ``currentPlayers`` and per-team ``oversBowled``.
    """
    if not grade_id:
        raise MissingParameter("gradeId")

    logger.info("matches_requested", grade_id=grade_id, team_id=team_id)
    matches = await resolve_matches(provider, grade_id, team_id)
    return {"matches": matches}
