# club_stats/stats_service.py
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from club_stats.batting import aggregate_batting
from club_stats.bowling import aggregate_bowling
from club_stats.errors import InvalidArgument, MemberNotFoundError
from club_stats.leaderboard import rank_batting, rank_bowling
from club_stats.models import (
    BattingSummary,
    BowlingSummary,
    LeaderboardEntry,
    StatsScope,
)
from club_stats.providers import ScoreProvider

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")


@dataclass(frozen=True)
class PlayerBattingStats:
    member_id: int
    member_name: str
    scope: StatsScope
    summary: BattingSummary


@dataclass(frozen=True)
class PlayerBowlingStats:
    member_id: int
    member_name: str
    scope: StatsScope
    summary: BowlingSummary


@dataclass(frozen=True)
class Leaderboard:
    category: str  # "batting" | "bowling"
    scope: StatsScope
    top_n: int
    entries: List[LeaderboardEntry]


def group_by_member(rows: Sequence[RowT]) -> Dict[int, List[RowT]]:
    """Groups rows by member_id only; a player's team can change between fixtures."""
    grouped: Dict[int, List[RowT]] = defaultdict(list)
    for row in rows:
        grouped[row.member_id].append(row)
    return dict(grouped)


class StatsService:
    """
    Query surface over a ScoreProvider:
      - per-player batting/bowling summaries (career or one season)
      - batting/bowling leaderboards

    Season filtering is the provider's job; the aggregators never see seasons.
    Provider failures propagate unchanged (no retries here).
    """

    def __init__(self, provider: ScoreProvider) -> None:
        self.provider = provider

    # -----------------------
    # Helpers
    # -----------------------
    def _resolve_scope(self, season_id: Optional[int]) -> StatsScope:
        if season_id is None:
            return StatsScope()
        # a season without a directory entry still scopes rows; it just has no name
        name = self.provider.get_season_name(season_id)
        if name is None:
            logger.warning("Season %s has no name in the provider", season_id)
        return StatsScope(season_id=season_id, season_name=name)

    def _member_name(self, member_id: int) -> str:
        name = self.provider.get_member_names().get(member_id)
        if name is None:
            raise MemberNotFoundError(f"Member {member_id} was not found.")
        return name

    @staticmethod
    def _check_top_n(top_n: int) -> None:
        if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 1:
            raise InvalidArgument(f"top_n must be an integer >= 1, got {top_n!r}")

    # -----------------------
    # Per-player stats
    # -----------------------
    def get_batting_stats(self, member_id: int, season_id: Optional[int] = None) -> PlayerBattingStats:
        logger.info("Calculating batting stats for member_id=%s season_id=%s", member_id, season_id)

        member_name = self._member_name(member_id)
        scope = self._resolve_scope(season_id)

        rows = [r for r in self.provider.get_batting_rows(season_id) if r.member_id == member_id]
        summary = aggregate_batting(rows, member_id)
        return PlayerBattingStats(member_id=member_id, member_name=member_name, scope=scope, summary=summary)

    def get_bowling_stats(self, member_id: int, season_id: Optional[int] = None) -> PlayerBowlingStats:
        logger.info("Calculating bowling stats for member_id=%s season_id=%s", member_id, season_id)

        member_name = self._member_name(member_id)
        scope = self._resolve_scope(season_id)

        rows = [r for r in self.provider.get_bowling_rows(season_id) if r.member_id == member_id]
        summary = aggregate_bowling(rows, member_id)
        return PlayerBowlingStats(member_id=member_id, member_name=member_name, scope=scope, summary=summary)

    # -----------------------
    # Leaderboards
    # -----------------------
    def _leaderboard(
        self,
        category: str,
        rows: Sequence[RowT],
        aggregate: Callable[[Sequence[RowT], int], object],
        ranker: Callable[..., List[LeaderboardEntry]],
        scope: StatsScope,
        top_n: int,
    ) -> Leaderboard:
        # only members with rows in scope get a summary, so nobody ranks on empty stats
        summaries = [aggregate(member_rows, member_id) for member_id, member_rows in group_by_member(rows).items()]
        if not summaries:
            return Leaderboard(category=category, scope=scope, top_n=top_n, entries=[])

        entries = ranker(summaries, top_n, self.provider.get_member_names())
        logger.debug("%s leaderboard: %d players ranked, %d returned", category, len(summaries), len(entries))
        return Leaderboard(category=category, scope=scope, top_n=top_n, entries=entries)

    def get_batting_leaderboard(self, season_id: Optional[int] = None, top_n: int = 10) -> Leaderboard:
        logger.info("Calculating batting leaderboard for season_id=%s top_n=%s", season_id, top_n)
        self._check_top_n(top_n)
        scope = self._resolve_scope(season_id)
        rows = self.provider.get_batting_rows(season_id)
        return self._leaderboard("batting", rows, aggregate_batting, rank_batting, scope, top_n)

    def get_bowling_leaderboard(self, season_id: Optional[int] = None, top_n: int = 10) -> Leaderboard:
        logger.info("Calculating bowling leaderboard for season_id=%s top_n=%s", season_id, top_n)
        self._check_top_n(top_n)
        scope = self._resolve_scope(season_id)
        rows = self.provider.get_bowling_rows(season_id)
        return self._leaderboard("bowling", rows, aggregate_bowling, rank_bowling, scope, top_n)
