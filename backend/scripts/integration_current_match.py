#!/usr/bin/env python3
"""
Integration check for a running Club Live deployment.

Checks:
  1. /health returns 200 + status ok
  2. /config returns the four club keys
  3. /api/matches without gradeId returns 400 with the expected error
  4. /api/matches?gradeId=G returns a matches list
  5. /api/matches?gradeId=G&teamId=T returns at most one enriched match

Usage:
  python scripts/integration_current_match.py GRADE_ID [TEAM_ID] [BASE_URL]

  BASE_URL defaults to http://localhost:3000.
"""
from __future__ import annotations

import json
import sys
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
RESET = "\033[0m"

passed = 0
failed = 0
warnings = 0


def _get_json(url: str, timeout: int = 30) -> tuple[int, dict | list | None]:
    try:
        req = Request(url, headers={"Accept": "application/json"})
        with urlopen(req, timeout=timeout) as resp:
            return resp.status, json.loads(resp.read())
    except HTTPError as e:
        try:
            return e.code, json.loads(e.read())
        except ValueError:
            return e.code, None
    except (URLError, TimeoutError, OSError) as e:
        return 0, {"__network_error__": str(e), "__url__": url}


def ok(msg: str) -> None:
    global passed
    passed += 1
    print(f"  {GREEN}PASS{RESET}  {msg}")


def fail(msg: str) -> None:
    global failed
    failed += 1
    print(f"  {RED}FAIL{RESET}  {msg}")


def warn(msg: str) -> None:
    global warnings
    warnings += 1
    print(f"  {YELLOW}WARN{RESET}  {msg}")


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)

    grade_id = sys.argv[1]
    team_id = sys.argv[2] if len(sys.argv) > 2 else None
    base = sys.argv[3] if len(sys.argv) > 3 else "http://localhost:3000"

    print("\n=== Current Match Integration Test ===")
    print(f"Backend: {base}  grade={grade_id}  team={team_id or '-'}\n")

    print("[1] Health check")
    status, data = _get_json(f"{base}/health")
    if status == 200 and isinstance(data, dict) and data.get("status") == "ok":
        ok(f"/health returns status=ok (uptime={data.get('uptime')})")
    else:
        fail(f"/health unexpected: {status} {data}")

    print("[2] Club config")
    status, data = _get_json(f"{base}/config")
    keys = ("organisationId", "seasonId", "clubName", "logoPath")
    if status == 200 and isinstance(data, dict) and all(k in data for k in keys):
        ok(f"/config: clubName={data.get('clubName')!r}")
        missing = [k for k in keys if not data.get(k)]
        if missing:
            warn(f"/config has no value for {missing}")
    else:
        fail(f"/config unexpected: {status} {data}")

    print("[3] Missing gradeId")
    status, data = _get_json(f"{base}/api/matches")
    if status == 400 and isinstance(data, dict) and data.get("error") == "Missing gradeId parameter":
        ok("/api/matches without gradeId returns 400")
    else:
        fail(f"/api/matches without gradeId: {status} {data}")

    print("[4] Grade listing")
    status, data = _get_json(f"{base}/api/matches?{urlencode({'gradeId': grade_id})}")
    if status == 200 and isinstance(data, dict) and isinstance(data.get("matches"), list):
        ok(f"grade {grade_id}: {len(data['matches'])} matches")
        if not data["matches"]:
            warn("Grade has no matches, check the gradeId")
    else:
        fail(f"grade listing unexpected: {status} {data}")

    if team_id:
        print("[5] Current match for team")
        query = urlencode({"gradeId": grade_id, "teamId": team_id})
        status, data = _get_json(f"{base}/api/matches?{query}")
        matches = data.get("matches") if isinstance(data, dict) else None
        if status != 200 or not isinstance(matches, list) or len(matches) > 1:
            fail(f"team lookup unexpected: {status} {data}")
        elif not matches:
            warn(f"team {team_id} has no matches in grade {grade_id}")
        else:
            chosen = matches[0]
            ok(f"chosen match {chosen.get('id')} status={chosen.get('status')}")
            if chosen.get("detail") is None:
                warn("  no scorecard detail")
            overs = [t.get("oversBowled") for t in chosen.get("teams", [])]
            ok(f"  oversBowled per team: {overs}")
            players = chosen.get("currentPlayers")
            if players:
                ok(
                    f"  striker={players.get('strikerName')} ({players.get('strikerRuns')}), "
                    f"bowler={players.get('bowlerName')} ({players.get('bowlerWickets')}-{players.get('bowlerRunsConceded')})"
                )
            else:
                warn("  no last ball resolved (match may not have started)")

    print(f"\n=== Results: {GREEN}{passed} passed{RESET}, {RED}{failed} failed{RESET}, {YELLOW}{warnings} warnings{RESET} ===\n")
    sys.exit(1 if failed > 0 else 0)


if __name__ == "__main__":
    main()
