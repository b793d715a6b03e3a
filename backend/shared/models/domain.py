"""
Pydantic v2 domain models for Club Live.

Upstream match records are passed through as plain dicts so the response
mirrors the upstream verbatim; these models cover the values this service
derives. Field names serialize in the upstream's camelCase.
"""
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ParticipantId = Union[str, int]
Stat = Union[int, float, str]


# ── Base ────────────────────────────────────────────────────────────────
class DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# ── Scorecard figures ───────────────────────────────────────────────────
class BattingFigure(DomainModel):
    participant_id: Optional[ParticipantId] = None
    runs: Optional[Stat] = None
    balls_faced: Optional[Stat] = None


class BowlingFigure(DomainModel):
    participant_id: Optional[ParticipantId] = None
    overs: Optional[Stat] = None
    maidens: Optional[Stat] = None
    runs_conceded: Optional[Stat] = None
    wickets: Optional[Stat] = None
    no_balls: Optional[Stat] = None
    wides: Optional[Stat] = None
    economy: Optional[Stat] = None
    is_bowling: Optional[bool] = None


# ── Ball ────────────────────────────────────────────────────────────────
class BallParticipants(DomainModel):
    """Who was involved in a delivery, as named by the ball feed."""
    striker_id: Optional[ParticipantId] = None
    striker_name: Optional[str] = None
    non_striker_id: Optional[ParticipantId] = None
    non_striker_name: Optional[str] = None
    bowler_id: Optional[ParticipantId] = None
    bowler_name: Optional[str] = None
    ball_time: Optional[str] = None


# ── Current players ─────────────────────────────────────────────────────
class CurrentPlayers(DomainModel):
    """Identities from the last ball joined with their current-innings figures."""
    striker_id: Optional[ParticipantId] = None
    striker_name: Optional[str] = None
    non_striker_id: Optional[ParticipantId] = None
    non_striker_name: Optional[str] = None
    bowler_id: Optional[ParticipantId] = None
    bowler_name: Optional[str] = None
    last_ball_time: Optional[str] = None

    striker_runs: Optional[Stat] = None
    striker_balls: Optional[Stat] = None
    non_striker_runs: Optional[Stat] = None
    non_striker_balls: Optional[Stat] = None
    bowler_runs: Optional[Stat] = None
    bowler_balls: Optional[Stat] = None

    bowler_overs: Optional[Stat] = None
    bowler_maidens: Optional[Stat] = None
    bowler_runs_conceded: Optional[Stat] = None
    bowler_wickets: Optional[Stat] = None
    bowler_no_balls: Optional[Stat] = None
    bowler_wides: Optional[Stat] = None
    bowler_economy: Optional[Stat] = None
    is_bowling: Optional[bool] = None
