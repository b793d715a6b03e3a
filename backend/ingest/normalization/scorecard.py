"""
Scorecard (match detail) normalization.

The detail endpoint wraps the match differently depending on which caching
layer answered, and its batting/bowling entries come in two schema variants:
participant ids either flat (``participantId``) or nested
(``participant.id``), and figures under either the current or a legacy field
name. The adapters below absorb those differences so callers deal only in
``BattingFigure``/``BowlingFigure``.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from shared.models.domain import BattingFigure, BowlingFigure, ParticipantId

Entry = dict[str, Any]

DEFAULT_OVERS = "0.0"

# Preferred field name first, legacy alias after.
BATTING_FIELDS: dict[str, tuple[str, ...]] = {
    "runs": ("runsScored", "runs"),
    "balls_faced": ("ballsFaced", "balls"),
}

BOWLING_FIELDS: dict[str, tuple[str, ...]] = {
    "overs": ("oversBowled", "overs"),
    "maidens": ("maidensBowled", "maidens"),
    "runs_conceded": ("runsConceded", "runs"),
    "wickets": ("wicketsTaken", "wickets"),
    "no_balls": ("noBalls",),
    "wides": ("wideBalls", "wides"),
    "economy": ("economy",),
    "is_bowling": ("isBowling",),
}

# Missing extras on an existing bowling entry read as zero.
BOWLING_ZERO_DEFAULTS = frozenset({"no_balls", "wides"})


def unwrap_detail(payload: Any) -> Any:
    """Strip the ``{"matches": [...]}`` and ``{"match": {...}}`` envelopes, in that order."""
    if isinstance(payload, dict):
        matches = payload.get("matches")
        if isinstance(matches, list) and matches:
            payload = matches[0]
    if isinstance(payload, dict) and payload.get("match"):
        payload = payload["match"]
    return payload


def scorecard_innings(detail: Any) -> list[Entry]:
    """Every well-formed innings of the scorecard, in listed order."""
    if isinstance(detail, dict) and isinstance(detail.get("innings"), list):
        return [innings for innings in detail["innings"] if isinstance(innings, dict)]
    return []


def current_innings(detail: Any) -> Optional[Entry]:
    """
    The last innings listed in the scorecard is the one in progress.

    A malformed last entry yields None rather than an earlier innings.
    """
    innings = detail.get("innings") if isinstance(detail, dict) else None
    if not isinstance(innings, list) or not innings:
        return None
    last = innings[-1]
    return last if isinstance(last, dict) else None


def team_overs(detail: Any, team_id: Any) -> str:
    for innings in scorecard_innings(detail):
        if innings.get("battingTeamId") == team_id:
            return innings.get("oversBowled") or DEFAULT_OVERS
    return DEFAULT_OVERS


# ── Participant id adapters ─────────────────────────────────────────────

def flat_participant_id(entry: Entry) -> Any:
    return entry.get("participantId")


def nested_participant_id(entry: Entry) -> Any:
    participant = entry.get("participant")
    return participant.get("id") if isinstance(participant, dict) else None


def mixed_participant_id(entry: Entry) -> Any:
    pid = flat_participant_id(entry)
    return pid if pid is not None else nested_participant_id(entry)


IdAdapter = Callable[[Entry], Any]


def select_id_adapter(entries: list[Entry]) -> IdAdapter:
    """Pick the id adapter for one figures list from the shapes its entries use."""
    flat = any("participantId" in entry for entry in entries)
    nested = any(isinstance(entry.get("participant"), dict) for entry in entries)
    if flat and nested:
        return mixed_participant_id
    return nested_participant_id if nested else flat_participant_id


def _first_present(entry: Entry, names: tuple[str, ...]) -> Any:
    for name in names:
        value = entry.get(name)
        if value is not None:
            return value
    return None


class ParticipantIndex:
    """Figure entries of one innings list, keyed by participant id under either schema."""

    def __init__(self, entries: Any) -> None:
        self._by_id: dict[ParticipantId, Entry] = {}
        if not isinstance(entries, list):
            return
        usable = [entry for entry in entries if isinstance(entry, dict)]
        participant_id = select_id_adapter(usable)
        for entry in usable:
            pid = participant_id(entry)
            if isinstance(pid, (str, int)):
                self._by_id.setdefault(pid, entry)

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, participant_id: Optional[ParticipantId]) -> Optional[Entry]:
        if participant_id is None:
            return None
        return self._by_id.get(participant_id)


def batting_figure(entry: Entry, participant_id: Optional[ParticipantId] = None) -> BattingFigure:
    values = {field: _first_present(entry, names) for field, names in BATTING_FIELDS.items()}
    return BattingFigure(participant_id=participant_id, **values)


def bowling_figure(entry: Entry, participant_id: Optional[ParticipantId] = None) -> BowlingFigure:
    values = {field: _first_present(entry, names) for field, names in BOWLING_FIELDS.items()}
    for field in BOWLING_ZERO_DEFAULTS:
        if values[field] is None:
            values[field] = 0
    return BowlingFigure(participant_id=participant_id, **values)


class InningsFigures:
    """Batting and bowling lookups for a single scorecard innings."""

    def __init__(self, innings: Entry) -> None:
        self.batting = ParticipantIndex(innings.get("batting"))
        self.bowling = ParticipantIndex(innings.get("bowling"))

    def batting_for(self, participant_id: Optional[ParticipantId]) -> Optional[BattingFigure]:
        entry = self.batting.get(participant_id)
        return batting_figure(entry, participant_id) if entry is not None else None

    def bowling_for(self, participant_id: Optional[ParticipantId]) -> Optional[BowlingFigure]:
        entry = self.bowling.get(participant_id)
        return bowling_figure(entry, participant_id) if entry is not None else None
