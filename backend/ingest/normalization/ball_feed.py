"""
Ball-by-ball feed normalization.

The balls endpoint has been seen returning four encodings. Each is classified
once and mapped into the canonical form: an ordered list of innings, each an
ordered list of ball dicts. Upstream order is trusted as chronological; balls
are never re-sorted by timestamp.

    [{"balls": [...]}, ...]   -> INNINGS_LIST
    [{...ball...}, ...]       -> FLAT_BALL_LIST   (one implicit innings)
    {"innings": [...]}        -> WRAPPED_INNINGS
    {"balls": [...]}          -> WRAPPED_BALLS    (one implicit innings)
"""
from __future__ import annotations

from typing import Any, Optional

from shared.models.enums import FeedShape

Ball = dict[str, Any]
Innings = list[Ball]


def classify_feed(payload: Any) -> FeedShape:
    if isinstance(payload, list):
        first = payload[0] if payload else None
        if isinstance(first, dict) and isinstance(first.get("balls"), list):
            return FeedShape.INNINGS_LIST
        return FeedShape.FLAT_BALL_LIST
    if isinstance(payload, dict):
        if isinstance(payload.get("innings"), list):
            return FeedShape.WRAPPED_INNINGS
        if isinstance(payload.get("balls"), list):
            return FeedShape.WRAPPED_BALLS
    return FeedShape.UNRECOGNISED


def _innings_balls(innings: Any) -> Innings:
    if isinstance(innings, dict) and isinstance(innings.get("balls"), list):
        return list(innings["balls"])
    return []


def _ball_list(payload: Any) -> list[Any]:
    return payload if isinstance(payload, list) else payload["balls"]


def _innings_list(payload: Any) -> list[Any]:
    return payload if isinstance(payload, list) else payload["innings"]


def normalize_feed(payload: Any, shape: Optional[FeedShape] = None) -> list[Innings]:
    """Map any known feed encoding to an ordered list of innings of ordered balls."""
    shape = shape or classify_feed(payload)
    if shape == FeedShape.UNRECOGNISED:
        return []
    if shape.is_implicit_innings:
        return [list(_ball_list(payload))]
    return [_innings_balls(innings) for innings in _innings_list(payload)]


def last_ball(innings: list[Innings]) -> Optional[Ball]:
    """Final delivery of the final innings, or None when that innings has no balls."""
    if not innings or not innings[-1]:
        return None
    ball = innings[-1][-1]
    return ball if isinstance(ball, dict) else None
