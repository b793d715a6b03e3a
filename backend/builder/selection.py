"""
Chosen-match selection.

A team can have several matches in a grade. Matches that have started (or
finished) win over upcoming fixtures, and among those the most recently
scheduled one is picked.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Optional

UPCOMING = "UPCOMING"

Match = dict[str, Any]

_FRACTION = re.compile(r"\.(\d+)")
_BASIC_OFFSET = re.compile(r"([+-])(\d{2})(\d{2})$")


def _parse_timestamp(raw: str) -> Optional[float]:
    value = raw.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    # fromisoformat wants microseconds and an HH:MM offset
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    value = _BASIC_OFFSET.sub(r"\1\2:\3", value)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def schedule_start(match: Match) -> float:
    """Epoch seconds of the first scheduled start; -inf when unknown or unparseable."""
    schedule = match.get("matchSchedule")
    first = schedule[0] if isinstance(schedule, list) and schedule else None
    raw = first.get("startDateTime") if isinstance(first, dict) else None
    if not raw or not isinstance(raw, str):
        return float("-inf")
    parsed = _parse_timestamp(raw)
    return parsed if parsed is not None else float("-inf")


def involves_team(match: Match, team_id: str) -> bool:
    teams = match.get("teams")
    if not isinstance(teams, list):
        return False
    return any(isinstance(team, dict) and team.get("id") == team_id for team in teams)


def select_candidate(matches: list[Match], team_id: str) -> Optional[Match]:
    team_matches = [m for m in matches if isinstance(m, dict) and involves_team(m, team_id)]
    if not team_matches:
        return None

    started = [m for m in team_matches if m.get("status") != UPCOMING]
    candidates = started or team_matches

    # sorted() is stable under reverse=True, so equal starts keep list order
    return sorted(candidates, key=schedule_start, reverse=True)[0]
