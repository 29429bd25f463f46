# club_stats/batting.py
"""Batting aggregation: fold one player's innings into a BattingSummary.

Thresholds:
  - century:      runs >= 100
  - half-century: 50 <= runs <= 99
Both are counted on runs alone, out or not out.
"""
from __future__ import annotations

from typing import Optional, Sequence, Set

from club_stats.errors import InvalidArgument
from club_stats.models import BattingRow, BattingSummary, HighestScore

CENTURY_RUNS = 100
HALF_CENTURY_RUNS = 50


def _check_row(row: BattingRow, member_id: int) -> None:
    if row.member_id != member_id:
        raise InvalidArgument(
            f"Batting row for member {row.member_id} passed to aggregate for member {member_id}"
        )
    for name in ("runs", "balls", "fours", "sixes"):
        value = getattr(row, name)
        try:
            ok = int(value) >= 0
        except (TypeError, ValueError):
            ok = False
        if not ok:
            raise InvalidArgument(
                f"Batting row (fixture={row.fixture_id}, member={row.member_id}): {name} must be an integer >= 0, got {value!r}"
            )


def _better_highest(current: Optional[HighestScore], runs: int, not_out: bool) -> bool:
    """
    A new innings replaces the stored highest score when:
    1) it has more runs, or
    2) it ties on runs and is not-out while the stored one was out (60* beats 60).
    """
    if current is None:
        return True
    if runs > current.runs:
        return True
    return runs == current.runs and not_out and not current.not_out


def aggregate_batting(rows: Sequence[BattingRow], member_id: int) -> BattingSummary:
    """
    Single pass over one player's batting rows.

    - average = runs / dismissals, None when the player was never dismissed
    - strike_rate = runs * 100 / balls, 0.0 when no balls were faced
    - rows must all belong to member_id; negative counts raise InvalidArgument
    """
    innings = 0
    not_outs = 0
    total_runs = 0
    total_balls = 0
    fours = 0
    sixes = 0
    centuries = 0
    half_centuries = 0
    highest: Optional[HighestScore] = None
    fixtures: Set[int] = set()

    for row in rows:
        _check_row(row, member_id)

        runs = int(row.runs)
        not_out = not row.is_out

        innings += 1
        if not_out:
            not_outs += 1
        total_runs += runs
        total_balls += int(row.balls)
        fours += int(row.fours)
        sixes += int(row.sixes)
        fixtures.add(row.fixture_id)

        if _better_highest(highest, runs, not_out):
            highest = HighestScore(runs=runs, not_out=not_out)

        if runs >= CENTURY_RUNS:
            centuries += 1
        elif runs >= HALF_CENTURY_RUNS:
            half_centuries += 1

    dismissals = innings - not_outs
    average = total_runs / dismissals if dismissals > 0 else None
    strike_rate = (total_runs * 100) / total_balls if total_balls > 0 else 0.0

    return BattingSummary(
        member_id=member_id,
        innings=innings,
        not_outs=not_outs,
        matches=len(fixtures),
        total_runs=total_runs,
        balls_faced=total_balls,
        total_fours=fours,
        total_sixes=sixes,
        highest_score=highest,
        average=average,
        strike_rate=strike_rate,
        centuries=centuries,
        half_centuries=half_centuries,
        unbeaten=innings > 0 and dismissals == 0,
    )
