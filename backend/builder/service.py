"""
Current-match pipeline.

Resolves the single chosen match for a team in a grade and enriches it in
sequence: scorecard detail, last delivery, per-team overs, current-player
figures. Each stage takes a match record and returns a new one; the input is
never mutated. Only the matches-list fetch may fail the request; every later
stage degrades to null fields.
"""
from __future__ import annotations

from typing import Any, Optional

from shared.utils.logging import get_logger

from builder.players import build_current_players
from builder.selection import Match, select_candidate
from ingest.normalization.scorecard import team_overs
from ingest.providers.grassroots import GrassrootsProvider

logger = get_logger(__name__)


def with_detail(match: Match, detail: Any) -> Match:
    return {**match, "detail": detail}


def annotate_overs(match: Match) -> Match:
    """Copy each team's innings ``oversBowled`` from the scorecard onto its team entry."""
    detail = match.get("detail")
    teams = match.get("teams")
    if not isinstance(teams, list):
        return match
    annotated = [
        {**team, "oversBowled": team_overs(detail, team.get("id"))} if isinstance(team, dict) else team
        for team in teams
    ]
    return {**match, "teams": annotated}


def with_last_ball(match: Match, last_ball: Optional[dict[str, Any]]) -> Match:
    """Attach the last delivery and, when there is one, the current players."""
    if last_ball is None:
        return {**match, "lastBall": None, "currentPlayers": None}
    players = build_current_players(last_ball, match.get("detail"))
    return {**match, "lastBall": last_ball, "currentPlayers": players.to_wire()}


async def build_current_match(provider: GrassrootsProvider, match: Match) -> Match:
    match_id = match.get("id")

    detail = await provider.fetch_detail(match_id)
    record = with_detail(match, detail.value if detail.success else None)

    last_ball = await provider.fetch_last_ball(match_id)
    record = annotate_overs(record)
    record = with_last_ball(record, last_ball.value if last_ball.present else None)

    logger.info(
        "current_match_built",
        match_id=match_id,
        has_detail=record["detail"] is not None,
        has_last_ball=record["lastBall"] is not None,
        latency_ms=round(detail.latency_ms + last_ball.latency_ms, 2),
    )
    return record


async def resolve_matches(
    provider: GrassrootsProvider, grade_id: str, team_id: Optional[str] = None
) -> list[Match]:
    """
    Matches to return for a request.

    Without a team the grade's list is passed through untouched. With a team
    the result holds at most one match, enriched.
    """
    matches = await provider.fetch_matches(grade_id)
    if not team_id:
        return matches

    chosen = select_candidate(matches, team_id)
    if chosen is None:
        logger.info("no_matches_for_team", grade_id=grade_id, team_id=team_id)
        return []
    return [await build_current_match(provider, chosen)]
