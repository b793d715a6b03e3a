"""Domain enumerations for Club Live."""
from __future__ import annotations

from enum import Enum


class FeedShape(str, Enum):
    """Known encodings of the upstream ball-by-ball feed."""
    INNINGS_LIST = "innings_list"
    FLAT_BALL_LIST = "flat_ball_list"
    WRAPPED_INNINGS = "wrapped_innings"
    WRAPPED_BALLS = "wrapped_balls"
    UNRECOGNISED = "unrecognised"

    @property
    def is_implicit_innings(self) -> bool:
        """True when the payload carries balls without an innings wrapper."""
        return self in (FeedShape.FLAT_BALL_LIST, FeedShape.WRAPPED_BALLS)


class Step(str, Enum):
    """Best-effort enrichment steps of the current-match pipeline."""
    MATCH_DETAIL = "match_detail"
    BALL_FEED = "ball_feed"
    BALL_FEED_FALLBACK = "ball_feed_fallback"
    BATTING_FIGURES = "batting_figures"
    BOWLING_FIGURES = "bowling_figures"
