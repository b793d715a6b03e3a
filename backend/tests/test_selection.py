"""Unit tests for chosen-match selection."""
from __future__ import annotations

import math
from typing import Any, Optional

import pytest

from builder.selection import involves_team, schedule_start, select_candidate


def _match(
    match_id: str,
    status: str = "COMPLETED",
    start: Optional[str] = None,
    teams: tuple[str, ...] = ("T1", "T2"),
) -> dict[str, Any]:
    match: dict[str, Any] = {
        "id": match_id,
        "status": status,
        "teams": [{"id": team, "name": team.lower()} for team in teams],
    }
    if start is not None:
        match["matchSchedule"] = [{"startDateTime": start}]
    return match


# ── schedule_start ──────────────────────────────────────────────────────

class TestScheduleStart:

    def test_utc_z_suffix(self) -> None:
        assert schedule_start(_match("A", start="1970-01-01T00:01:00Z")) == 60.0

    def test_offset(self) -> None:
        assert schedule_start(_match("A", start="1970-01-01T10:00:00+10:00")) == 0.0

    @pytest.mark.parametrize(
        "start, expected",
        [
            ("1970-01-01T00:01:00.5Z", 60.5),
            ("1970-01-01T00:01:00.25+00:00", 60.25),
            ("1970-01-01T00:01:00.0000000+00:00", 60.0),
            ("1970-01-01T00:01:00.1234567Z", 60.123456),
            ("1970-01-01T10:00:00+1000", 0.0),
            ("1970-01-01T00:00:00-0130", 5400.0),
        ],
    )
    def test_upstream_timestamp_variants(self, start: str, expected: float) -> None:
        assert schedule_start(_match("A", start=start)) == pytest.approx(expected)

    def test_missing_schedule_is_negative_infinity(self) -> None:
        assert schedule_start(_match("A")) == -math.inf

    def test_empty_schedule_is_negative_infinity(self) -> None:
        assert schedule_start({"id": "A", "matchSchedule": []}) == -math.inf

    def test_unparseable_is_negative_infinity(self) -> None:
        assert schedule_start(_match("A", start="next tuesday")) == -math.inf


# ── select_candidate ────────────────────────────────────────────────────

def test_no_matches_for_team_returns_none() -> None:
    assert select_candidate([_match("A", teams=("T3", "T4"))], "T1") is None


def test_empty_list_returns_none() -> None:
    assert select_candidate([], "T1") is None


def test_selected_match_always_contains_team() -> None:
    matches = [
        _match("A", start="2026-10-20T00:00:00Z", teams=("T3", "T4")),
        _match("B", start="2026-10-01T00:00:00Z", teams=("T1", "T4")),
        _match("C", status="UPCOMING", start="2026-12-01T00:00:00Z", teams=("T2", "T3")),
    ]
    for team in ("T1", "T2", "T3", "T4"):
        chosen = select_candidate(matches, team)
        assert chosen is not None
        assert involves_team(chosen, team)


def test_completed_beats_upcoming_regardless_of_schedule() -> None:
    matches = [
        _match("UP", status="UPCOMING", start="2026-12-01T00:00:00Z"),
        _match("DONE", status="COMPLETED", start="2020-01-01T00:00:00Z"),
    ]
    assert select_candidate(matches, "T1")["id"] == "DONE"


def test_non_upcoming_without_schedule_still_beats_upcoming() -> None:
    matches = [
        _match("UP", status="UPCOMING", start="2026-12-01T00:00:00Z"),
        _match("LIVE", status="IN_PROGRESS"),
    ]
    assert select_candidate(matches, "T1")["id"] == "LIVE"


def test_most_recent_non_upcoming_wins() -> None:
    matches = [
        _match("OLD", start="2026-09-01T00:00:00Z"),
        _match("NEW", start="2026-10-01T00:00:00Z"),
        _match("MID", start="2026-09-15T00:00:00Z"),
    ]
    assert select_candidate(matches, "T1")["id"] == "NEW"


def test_fractional_and_basic_offset_starts_are_ordered() -> None:
    matches = [
        _match("WHOLE", start="2026-10-10T01:00:00Z"),
        _match("FRACTION", start="2026-10-10T01:00:00.5Z"),
        # 11:30 at +10:00 is 01:30 UTC
        _match("OFFSET", start="2026-10-10T11:30:00+1000"),
    ]
    assert select_candidate(matches, "T1")["id"] == "OFFSET"
    assert select_candidate(matches[:2], "T1")["id"] == "FRACTION"


def test_all_upcoming_returns_latest_scheduled() -> None:
    matches = [
        _match("U1", status="UPCOMING", start="2026-11-01T00:00:00Z"),
        _match("U2", status="UPCOMING", start="2026-11-08T00:00:00Z"),
        _match("U0", status="UPCOMING"),
    ]
    assert select_candidate(matches, "T1")["id"] == "U2"


def test_scheduleless_never_outranks_scheduled() -> None:
    matches = [
        _match("NONE", status="UPCOMING"),
        _match("EARLY", status="UPCOMING", start="1999-01-01T00:00:00Z"),
    ]
    assert select_candidate(matches, "T1")["id"] == "EARLY"


@pytest.mark.parametrize("order", [("FIRST", "SECOND"), ("SECOND", "FIRST")])
def test_ties_keep_list_order(order: tuple[str, str]) -> None:
    matches = [_match(match_id, start="2026-10-01T00:00:00Z") for match_id in order]
    assert select_candidate(matches, "T1")["id"] == order[0]


def test_ties_without_schedule_keep_list_order() -> None:
    matches = [_match("A"), _match("B")]
    assert select_candidate(matches, "T1")["id"] == "A"


def test_match_without_teams_is_ignored() -> None:
    matches = [{"id": "X", "status": "COMPLETED"}, _match("Y")]
    assert select_candidate(matches, "T1")["id"] == "Y"


def test_selection_does_not_mutate_input() -> None:
    matches = [
        _match("A", start="2026-09-01T00:00:00Z"),
        _match("B", start="2026-10-01T00:00:00Z"),
    ]
    select_candidate(matches, "T1")
    assert [m["id"] for m in matches] == ["A", "B"]
