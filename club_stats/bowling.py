# club_stats/bowling.py
"""Bowling aggregation: fold one player's spells into a BowlingSummary.

All overs are converted to BALLS first and summed as balls; overs notation
is only re-derived at the end for display (0.5 + 0.5 overs = "1.4").
"""
from __future__ import annotations

from typing import Optional, Sequence, Set

from club_stats.errors import InvalidArgument
from club_stats.models import BestFigures, BowlingRow, BowlingSummary
from club_stats.overs_math import balls_to_overs_display, economy_rate, overs_to_balls

MAX_WICKETS_PER_INNINGS = 10
FOUR_WICKET_HAUL = 4
FIVE_WICKET_HAUL = 5


def _check_row(row: BowlingRow, member_id: int) -> int:
    """Validates a row and returns its balls bowled."""
    if row.member_id != member_id:
        raise InvalidArgument(
            f"Bowling row for member {row.member_id} passed to aggregate for member {member_id}"
        )
    for name in ("maidens", "runs_conceded", "wickets", "no_balls", "wides"):
        value = getattr(row, name)
        try:
            ok = int(value) >= 0
        except (TypeError, ValueError):
            ok = False
        if not ok:
            raise InvalidArgument(
                f"Bowling row (fixture={row.fixture_id}, member={row.member_id}): {name} must be an integer >= 0, got {value!r}"
            )
    if int(row.wickets) > MAX_WICKETS_PER_INNINGS:
        raise InvalidArgument(
            f"Bowling row (fixture={row.fixture_id}, member={row.member_id}): wickets must be 0-10, got {row.wickets}"
        )
    return overs_to_balls(row.overs)


def _better_figures(current: Optional[BestFigures], wickets: int, runs: int) -> bool:
    # More wickets first, then fewer runs; an exact repeat keeps the earlier spell.
    if current is None:
        return True
    if wickets != current.wickets:
        return wickets > current.wickets
    return runs < current.runs


def aggregate_bowling(rows: Sequence[BowlingRow], member_id: int) -> BowlingSummary:
    """
    Single pass over one player's bowling rows.

    Undefined ratios are None, never 0 or NaN:
    - average     = runs_conceded / wickets         (None when wickets == 0)
    - economy     = runs_conceded / (balls / 6)     (None when balls == 0)
    - strike_rate = balls / wickets                 (None when wickets == 0)
    """
    innings = 0
    total_balls = 0
    maidens = 0
    runs_conceded = 0
    wickets = 0
    no_balls = 0
    wides = 0
    fours = 0
    fives = 0
    best: Optional[BestFigures] = None
    fixtures: Set[int] = set()

    for row in rows:
        balls = _check_row(row, member_id)
        spell_wickets = int(row.wickets)
        spell_runs = int(row.runs_conceded)

        innings += 1
        total_balls += balls
        maidens += int(row.maidens)
        runs_conceded += spell_runs
        wickets += spell_wickets
        no_balls += int(row.no_balls)
        wides += int(row.wides)
        fixtures.add(row.fixture_id)

        if spell_wickets >= FIVE_WICKET_HAUL:
            fives += 1
        elif spell_wickets == FOUR_WICKET_HAUL:
            fours += 1

        if _better_figures(best, spell_wickets, spell_runs):
            best = BestFigures(wickets=spell_wickets, runs=spell_runs)

    return BowlingSummary(
        member_id=member_id,
        innings=innings,
        matches=len(fixtures),
        total_balls=total_balls,
        overs_display=balls_to_overs_display(total_balls),
        maidens=maidens,
        runs_conceded=runs_conceded,
        wickets=wickets,
        no_balls=no_balls,
        wides=wides,
        average=runs_conceded / wickets if wickets > 0 else None,
        economy=economy_rate(runs_conceded, total_balls),
        strike_rate=total_balls / wickets if wickets > 0 else None,
        best_figures=best,
        four_wicket_hauls=fours,
        five_wicket_hauls=fives,
    )
