# club_stats/leaderboard.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from club_stats.errors import InvalidArgument
from club_stats.models import BattingSummary, BowlingSummary, LeaderboardEntry


@dataclass(frozen=True)
class RankKey:
    """
    One ranking key.
    select(summary) returns a number, or None when the metric is undefined.
    None always sorts after every defined value, whatever the direction.
    """
    name: str
    select: Callable[[Any], Optional[float]]
    descending: bool = True


def _key_part(value: Optional[float], descending: bool) -> Tuple[int, float]:
    if value is None:
        return (1, 0.0)
    return (0, -value if descending else value)


def _values(summary: Any, keys: Sequence[RankKey]) -> Tuple[Any, ...]:
    return tuple(k.select(summary) for k in keys)


def rank(
    summaries: Iterable[Any],
    primary_key: RankKey,
    secondary_keys: Sequence[RankKey] = (),
    top_n: int = 10,
    member_names: Optional[Mapping[int, str]] = None,
) -> List[LeaderboardEntry]:
    """
    Returns leaderboard entries sorted by:
    1) primary_key
    2) secondary_keys, in declared order
    3) member_id ascending (only to make the order total)

    Ranks use competition ranking over the primary + secondary values
    (1, 1, 3, ...). Every entry with rank <= top_n is returned, so a tie on
    the last rank can return more than top_n entries.
    """
    if isinstance(top_n, bool) or int(top_n) < 1:
        raise InvalidArgument(f"top_n must be >= 1, got {top_n!r}")

    keys = [primary_key, *secondary_keys]
    names = member_names or {}

    def key_fn(s: Any):
        parts = tuple(_key_part(v, k.descending) for v, k in zip(_values(s, keys), keys))
        return parts + (s.member_id,)

    ordered = sorted(summaries, key=key_fn)

    out: List[LeaderboardEntry] = []
    prev_values: Optional[Tuple[Any, ...]] = None
    current_rank = 0
    for pos, s in enumerate(ordered, start=1):
        values = _values(s, keys)
        if values != prev_values:
            current_rank = pos
            prev_values = values
        if current_rank > top_n:
            break
        out.append(LeaderboardEntry(
            member_id=s.member_id,
            member_name=names.get(s.member_id) or f"Player {s.member_id}",
            primary_value=values[0],
            secondary_keys=values[1:],
            rank=current_rank,
            summary=s,
        ))
    return out


# -----------------------------
# Standard leaderboards
# -----------------------------
BATTING_PRIMARY = RankKey("total_runs", lambda s: s.total_runs)
BATTING_TIE_BREAKS = (
    RankKey("average", lambda s: s.average),
    RankKey("strike_rate", lambda s: s.strike_rate),
)

BOWLING_PRIMARY = RankKey("wickets", lambda s: s.wickets)
BOWLING_TIE_BREAKS = (
    RankKey("average", lambda s: s.average, descending=False),
    RankKey("economy", lambda s: s.economy, descending=False),
)


def rank_batting(
    summaries: Iterable[BattingSummary],
    top_n: int,
    member_names: Optional[Mapping[int, str]] = None,
) -> List[LeaderboardEntry]:
    """Total runs desc, then average desc, then strike rate desc."""
    return rank(summaries, BATTING_PRIMARY, BATTING_TIE_BREAKS, top_n, member_names)


def rank_bowling(
    summaries: Iterable[BowlingSummary],
    top_n: int,
    member_names: Optional[Mapping[int, str]] = None,
) -> List[LeaderboardEntry]:
    """Wickets desc, then average asc, then economy asc."""
    return rank(summaries, BOWLING_PRIMARY, BOWLING_TIE_BREAKS, top_n, member_names)
