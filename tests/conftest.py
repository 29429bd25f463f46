from __future__ import annotations

import pytest

from club_stats.models import BattingRow, BowlingRow
from club_stats.providers import InMemoryScoreProvider

# fixture id -> season id
FIXTURE_SEASONS = {
    101: 1, 102: 1, 103: 1,
    201: 2, 202: 2,
}

MEMBERS = {
    1: "Asha Patel",
    2: "Ben Carter",
    3: "Chris Okafor",
    4: "Dev Raman",
}

SEASONS = {1: "2025 Summer", 2: "2026 Summer"}


def bat(fixture_id, member_id, runs, balls, is_out=True, fours=0, sixes=0, team_id=10):
    return BattingRow(
        fixture_id=fixture_id, team_id=team_id, member_id=member_id,
        runs=runs, balls=balls, fours=fours, sixes=sixes, is_out=is_out,
    )


def bowl(fixture_id, member_id, overs, runs, wickets, maidens=0, team_id=10, no_balls=0, wides=0):
    return BowlingRow(
        fixture_id=fixture_id, team_id=team_id, member_id=member_id, overs=overs,
        maidens=maidens, runs_conceded=runs, wickets=wickets, no_balls=no_balls, wides=wides,
    )


@pytest.fixture
def club_provider() -> InMemoryScoreProvider:
    """
    Season 1: members 1, 2, 3 bat; 2 and 3 bowl.
    Season 2: only members 1 and 2 appear. Member 4 never plays.
    """
    batting = [
        bat(101, 1, 45, 30, is_out=True, fours=5),
        bat(102, 1, 60, 40, is_out=False, fours=6, sixes=2),
        bat(101, 2, 30, 25, is_out=True),
        bat(103, 2, 12, 10, is_out=True),
        bat(103, 3, 8, 12, is_out=False),
        bat(201, 1, 101, 80, is_out=True, fours=12, sixes=3),
        bat(202, 2, 55, 50, is_out=True, team_id=11),
    ]
    bowling = [
        bowl(101, 2, "4.0", 28, 2),
        bowl(102, 2, "3.3", 20, 1),
        bowl(101, 3, "4.0", 35, 3, maidens=1),
        bowl(103, 3, "2.0", 10, 0, wides=2),
        bowl(201, 2, "4.0", 24, 5),
    ]
    return InMemoryScoreProvider(
        fixture_seasons=FIXTURE_SEASONS,
        batting_rows=batting,
        bowling_rows=bowling,
        members=MEMBERS,
        seasons=SEASONS,
    )
