"""
Current-player figures.

Joins the identities named on the last delivery with their batting and
bowling figures from the current (last listed) scorecard innings. Missing
entries stay ``None``; a recorded zero stays zero.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from pydantic import ValidationError

from shared.models.domain import (
    BallParticipants,
    BattingFigure,
    BowlingFigure,
    CurrentPlayers,
    ParticipantId,
)
from shared.models.enums import Step
from shared.utils.logging import get_logger

from ingest.normalization.scorecard import InningsFigures, current_innings
from ingest.providers.base import run_sync_step

logger = get_logger(__name__)

F = TypeVar("F")

# role -> (id field, display-name fields, primary first)
BALL_ROLES: dict[str, tuple[str, tuple[str, ...]]] = {
    "striker": ("strikerParticipantId", ("strikerShortName", "striker")),
    "non_striker": ("nonStrikerParticipantId", ("nonStrikerShortName", "nonStriker")),
    "bowler": ("bowlerParticipantId", ("bowlerShortName", "bowler")),
}


class EnrichmentFailure(Exception):
    """Raised when a scorecard entry cannot be turned into figures."""


def _participant_id(ball: dict[str, Any], field: str) -> Optional[ParticipantId]:
    value = ball.get(field)
    return value if isinstance(value, (str, int)) and value else None


def _display_name(ball: dict[str, Any], fields: tuple[str, ...]) -> Optional[str]:
    for field in fields:
        value = ball.get(field)
        if isinstance(value, str) and value:
            return value
    return None


def read_participants(ball: dict[str, Any]) -> BallParticipants:
    values: dict[str, Any] = {}
    for role, (id_field, name_fields) in BALL_ROLES.items():
        values[f"{role}_id"] = _participant_id(ball, id_field)
        values[f"{role}_name"] = _display_name(ball, name_fields)
    ball_time = ball.get("ballTime")
    values["ball_time"] = ball_time if isinstance(ball_time, str) and ball_time else None
    return BallParticipants(**values)


def _figure(
    lookup: Callable[[Optional[ParticipantId]], Optional[F]],
    participant_id: Optional[ParticipantId],
    kind: str,
) -> Optional[F]:
    try:
        return lookup(participant_id)
    except ValidationError as exc:
        raise EnrichmentFailure(
            f"unusable {kind} entry for participant {participant_id!r}"
        ) from exc


def _batting_values(
    figures: InningsFigures, role: str, participant_id: Optional[ParticipantId]
) -> dict[str, Any]:
    figure = _figure(figures.batting_for, participant_id, "batting") or BattingFigure()
    return {f"{role}_runs": figure.runs, f"{role}_balls": figure.balls_faced}


def _bowling_values(figures: InningsFigures, who: BallParticipants) -> dict[str, Any]:
    figure = _figure(figures.bowling_for, who.bowler_id, "bowling") or BowlingFigure()
    return {
        "bowler_overs": figure.overs,
        "bowler_maidens": figure.maidens,
        "bowler_runs_conceded": figure.runs_conceded,
        "bowler_wickets": figure.wickets,
        "bowler_no_balls": figure.no_balls,
        "bowler_wides": figure.wides,
        "bowler_economy": figure.economy,
        "is_bowling": figure.is_bowling,
    }


def build_current_players(last_ball: dict[str, Any], detail: Any) -> CurrentPlayers:
    """Identities from ``last_ball`` plus whatever figures the scorecard can supply."""
    who = read_participants(last_ball)
    values: dict[str, Any] = {
        "striker_id": who.striker_id,
        "striker_name": who.striker_name,
        "non_striker_id": who.non_striker_id,
        "non_striker_name": who.non_striker_name,
        "bowler_id": who.bowler_id,
        "bowler_name": who.bowler_name,
        "last_ball_time": who.ball_time,
    }

    innings = current_innings(detail)
    if innings is None:
        logger.debug("current_players_without_scorecard", bowler_id=who.bowler_id)
        return CurrentPlayers(**values)

    figures = InningsFigures(innings)
    # A bad entry nulls only that batter's figures
    for role in BALL_ROLES:
        participant_id = getattr(who, f"{role}_id")
        batting = run_sync_step(
            Step.BATTING_FIGURES,
            _batting_values,
            figures,
            role,
            participant_id,
            context={"role": role, "participant_id": participant_id},
        )
        values.update(batting.value_or({}))

    bowling = run_sync_step(
        Step.BOWLING_FIGURES, _bowling_values, figures, who, context={"bowler_id": who.bowler_id}
    )
    values.update(bowling.value_or({}))
    return CurrentPlayers(**values)
