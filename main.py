# main.py
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar, Union

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from club_stats.config import DEFAULT_TOP_N, LOG_LEVEL, MAX_TOP_N, validate_config
from club_stats.errors import (
    InvalidArgument,
    MemberNotFoundError,
    ScoreProviderError,
)
from club_stats.models import BattingSummary, BowlingSummary, LeaderboardEntry, StatsScope
from club_stats.providers import build_provider_from_config
from club_stats.stats_service import Leaderboard, StatsService

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("club_stats.api")

T = TypeVar("T")

# -----------------------
# App
# -----------------------
app = FastAPI(
    title="Cricket Club Player Stats API",
    version="0.1.0",
    description="Season and career batting/bowling summaries and leaderboards for club members",
)


@app.on_event("startup")
def on_startup():
    validate_config()
    try:
        get_stats_service()
    except HTTPException as e:
        # requests retry the build and answer 502 until the source is readable
        logger.warning("Score provider unavailable at startup: %s", e.detail)


@app.get("/health")
def health_check():
    return {"status": "ok", "time": datetime.utcnow().isoformat() + "Z"}


# -----------------------
# Service wiring
# -----------------------
_service: Optional[StatsService] = None
_service_lock = threading.Lock()


def get_stats_service() -> StatsService:
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                try:
                    _service = StatsService(build_provider_from_config())
                except ScoreProviderError as e:
                    _raise_http(e)
    return _service


# -----------------------
# Response models
# (undefined ratios are null, never 0)
# -----------------------
class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    errors: Optional[List[str]] = None


class ScopeOut(BaseModel):
    season_id: Optional[int] = Field(None, serialization_alias="seasonId")
    season_name: Optional[str] = Field(None, serialization_alias="seasonName")


class BattingSummaryOut(BaseModel):
    matches: int
    innings: int
    not_outs: int = Field(serialization_alias="notOuts")
    runs: int
    balls_faced: int = Field(serialization_alias="ballsFaced")
    high_score: Optional[int] = Field(None, serialization_alias="highScore")
    high_score_not_out: bool = Field(False, serialization_alias="highScoreNotOut")
    high_score_display: Optional[str] = Field(None, serialization_alias="highScoreDisplay")
    average: Optional[float] = None
    unbeaten: bool = False
    strike_rate: float = Field(serialization_alias="strikeRate")
    fours: int
    sixes: int
    fifties: int
    hundreds: int


class BowlingSummaryOut(BaseModel):
    matches: int
    innings: int
    overs: str
    balls: int
    maidens: int
    runs_conceded: int = Field(serialization_alias="runsConceded")
    wickets: int
    no_balls: int = Field(serialization_alias="noBalls")
    wides: int
    average: Optional[float] = None
    economy: Optional[float] = None
    strike_rate: Optional[float] = Field(None, serialization_alias="strikeRate")
    best_figures: Optional[str] = Field(None, serialization_alias="bestFigures")
    four_wicket_hauls: int = Field(serialization_alias="fourWicketHauls")
    five_wicket_hauls: int = Field(serialization_alias="fiveWicketHauls")


class PlayerStatsOut(BaseModel):
    member_id: int = Field(serialization_alias="memberId")
    member_name: str = Field(serialization_alias="memberName")
    scope: ScopeOut
    stats: Any


class LeaderboardEntryOut(BaseModel):
    rank: int
    member_id: int = Field(serialization_alias="memberId")
    member_name: str = Field(serialization_alias="memberName")
    primary_value: Union[int, float, None] = Field(None, serialization_alias="primaryValue")
    tie_breaks: List[Optional[float]] = Field(default_factory=list, serialization_alias="tieBreaks")
    stats: Any


class LeaderboardOut(BaseModel):
    category: str
    scope: ScopeOut
    top_n: int = Field(serialization_alias="topN")
    entries: List[LeaderboardEntryOut] = Field(default_factory=list)


# -----------------------
# Helpers
# -----------------------
def _r2(x: Optional[float]) -> Optional[float]:
    return None if x is None else round(x, 2)


def _scope_out(scope: StatsScope) -> ScopeOut:
    return ScopeOut(season_id=scope.season_id, season_name=scope.season_name)


def _batting_out(s: BattingSummary) -> BattingSummaryOut:
    hs = s.highest_score
    return BattingSummaryOut(
        matches=s.matches,
        innings=s.innings,
        not_outs=s.not_outs,
        runs=s.total_runs,
        balls_faced=s.balls_faced,
        high_score=hs.runs if hs else None,
        high_score_not_out=hs.not_out if hs else False,
        high_score_display=hs.display() if hs else None,
        average=_r2(s.average),
        unbeaten=s.unbeaten,
        strike_rate=round(s.strike_rate, 2),
        fours=s.total_fours,
        sixes=s.total_sixes,
        fifties=s.half_centuries,
        hundreds=s.centuries,
    )


def _bowling_out(s: BowlingSummary) -> BowlingSummaryOut:
    return BowlingSummaryOut(
        matches=s.matches,
        innings=s.innings,
        overs=s.overs_display,
        balls=s.total_balls,
        maidens=s.maidens,
        runs_conceded=s.runs_conceded,
        wickets=s.wickets,
        no_balls=s.no_balls,
        wides=s.wides,
        average=_r2(s.average),
        economy=_r2(s.economy),
        strike_rate=_r2(s.strike_rate),
        best_figures=s.best_figures.display() if s.best_figures else None,
        four_wicket_hauls=s.four_wicket_hauls,
        five_wicket_hauls=s.five_wicket_hauls,
    )


def _entry_out(e: LeaderboardEntry, to_stats) -> LeaderboardEntryOut:
    return LeaderboardEntryOut(
        rank=e.rank,
        member_id=e.member_id,
        member_name=e.member_name,
        primary_value=e.primary_value,
        tie_breaks=[_r2(v) for v in e.secondary_keys],
        stats=to_stats(e.summary).model_dump(by_alias=True),
    )


def _leaderboard_out(board: Leaderboard, to_stats) -> LeaderboardOut:
    return LeaderboardOut(
        category=board.category,
        scope=_scope_out(board.scope),
        top_n=board.top_n,
        entries=[_entry_out(e, to_stats) for e in board.entries],
    )


def _ok(data: BaseModel, message: str) -> dict:
    return ApiResponse[dict](success=True, message=message, data=data.model_dump(by_alias=True)).model_dump()


def _raise_http(e: Exception) -> None:
    if isinstance(e, InvalidArgument):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, MemberNotFoundError):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ScoreProviderError):
        logger.warning("Score provider failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Unable to load scores: {str(e)}")
    raise e


def _resolve_top_n(top_n: Optional[int]) -> int:
    value = DEFAULT_TOP_N if top_n is None else top_n
    if value > MAX_TOP_N:
        raise HTTPException(status_code=400, detail=f"topN must be <= {MAX_TOP_N}")
    return value


# -----------------------
# Player stats endpoints
# -----------------------
@app.get("/api/stats/player/{member_id}/batting")
def get_player_batting_stats(
    member_id: int,
    season_id: Optional[int] = Query(None, alias="seasonId"),
    service: StatsService = Depends(get_stats_service),
):
    try:
        result = service.get_batting_stats(member_id, season_id)
    except (InvalidArgument, MemberNotFoundError, ScoreProviderError) as e:
        _raise_http(e)

    out = PlayerStatsOut(
        member_id=result.member_id,
        member_name=result.member_name,
        scope=_scope_out(result.scope),
        stats=_batting_out(result.summary).model_dump(by_alias=True),
    )
    return _ok(out, "Player batting stats retrieved successfully.")


@app.get("/api/stats/player/{member_id}/bowling")
def get_player_bowling_stats(
    member_id: int,
    season_id: Optional[int] = Query(None, alias="seasonId"),
    service: StatsService = Depends(get_stats_service),
):
    try:
        result = service.get_bowling_stats(member_id, season_id)
    except (InvalidArgument, MemberNotFoundError, ScoreProviderError) as e:
        _raise_http(e)

    out = PlayerStatsOut(
        member_id=result.member_id,
        member_name=result.member_name,
        scope=_scope_out(result.scope),
        stats=_bowling_out(result.summary).model_dump(by_alias=True),
    )
    return _ok(out, "Player bowling stats retrieved successfully.")


# -----------------------
# Leaderboard endpoints
# -----------------------
@app.get("/api/stats/leaderboard/batting")
def get_batting_leaderboard(
    season_id: Optional[int] = Query(None, alias="seasonId"),
    top_n: Optional[int] = Query(None, alias="topN"),
    service: StatsService = Depends(get_stats_service),
):
    n = _resolve_top_n(top_n)
    try:
        board = service.get_batting_leaderboard(season_id, n)
    except (InvalidArgument, ScoreProviderError) as e:
        _raise_http(e)

    return _ok(_leaderboard_out(board, _batting_out), "Batting leaderboard retrieved successfully.")


@app.get("/api/stats/leaderboard/bowling")
def get_bowling_leaderboard(
    season_id: Optional[int] = Query(None, alias="seasonId"),
    top_n: Optional[int] = Query(None, alias="topN"),
    service: StatsService = Depends(get_stats_service),
):
    n = _resolve_top_n(top_n)
    try:
        board = service.get_bowling_leaderboard(season_id, n)
    except (InvalidArgument, ScoreProviderError) as e:
        _raise_http(e)

    return _ok(_leaderboard_out(board, _bowling_out), "Bowling leaderboard retrieved successfully.")
