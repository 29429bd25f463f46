# club_stats/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from club_stats.overs_math import OversLike


# -----------------------------
# Raw per-innings rows
# -----------------------------
@dataclass(frozen=True)
class BattingRow:
    fixture_id: int
    team_id: int
    member_id: int
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = True


@dataclass(frozen=True)
class BowlingRow:
    fixture_id: int
    team_id: int
    member_id: int
    overs: OversLike = "0.0"  # cricket notation, e.g. "3.4" = 3 overs and 4 balls
    maidens: int = 0
    runs_conceded: int = 0
    wickets: int = 0
    no_balls: int = 0
    wides: int = 0


# -----------------------------
# Per-player summaries
# -----------------------------
@dataclass(frozen=True)
class HighestScore:
    runs: int
    not_out: bool = False

    def display(self) -> str:
        return f"{self.runs}*" if self.not_out else str(self.runs)


@dataclass(frozen=True)
class BattingSummary:
    member_id: int
    innings: int = 0
    not_outs: int = 0
    matches: int = 0
    total_runs: int = 0
    balls_faced: int = 0
    total_fours: int = 0
    total_sixes: int = 0
    highest_score: Optional[HighestScore] = None
    average: Optional[float] = None
    strike_rate: float = 0.0
    centuries: int = 0
    half_centuries: int = 0
    # innings > 0 and never dismissed: average is undefined, runs are "unbeaten"
    unbeaten: bool = False

    @property
    def dismissals(self) -> int:
        return self.innings - self.not_outs


@dataclass(frozen=True)
class BestFigures:
    wickets: int
    runs: int

    def display(self) -> str:
        return f"{self.wickets}/{self.runs}"


@dataclass(frozen=True)
class BowlingSummary:
    member_id: int
    innings: int = 0
    matches: int = 0
    total_balls: int = 0
    overs_display: str = "0.0"
    maidens: int = 0
    runs_conceded: int = 0
    wickets: int = 0
    no_balls: int = 0
    wides: int = 0
    average: Optional[float] = None
    economy: Optional[float] = None
    strike_rate: Optional[float] = None
    best_figures: Optional[BestFigures] = None
    four_wicket_hauls: int = 0
    five_wicket_hauls: int = 0


# -----------------------------
# Leaderboards + scope
# -----------------------------
@dataclass(frozen=True)
class LeaderboardEntry:
    member_id: int
    member_name: str
    primary_value: Any
    secondary_keys: Tuple[Any, ...]
    rank: int
    summary: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class StatsScope:
    season_id: Optional[int] = None
    season_name: Optional[str] = None

    @property
    def is_career(self) -> bool:
        return self.season_id is None
