# club_stats/providers.py
"""Raw score providers.

A provider hands the stats service fully materialized lists of rows,
optionally restricted to the fixtures of one season, plus the display
names it needs. How the rows are stored is the provider's business:

  - InMemoryScoreProvider: rows + fixture->season map held in memory
  - load_csv_provider():   exported club tables read with pandas
  - RemoteScoreProvider:   the club records HTTP API
  - CachedScoreProvider:   TTL cache in front of any of the above
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

import pandas as pd

from club_stats import config
from club_stats.cache import TTLCache, make_key
from club_stats.errors import ScoreProviderError
from club_stats.models import BattingRow, BowlingRow
from club_stats.records_client import get_json

logger = logging.getLogger(__name__)


class ScoreProvider(Protocol):
    def get_batting_rows(self, season_id: Optional[int] = None) -> List[BattingRow]: ...

    def get_bowling_rows(self, season_id: Optional[int] = None) -> List[BowlingRow]: ...

    def get_member_names(self) -> Dict[int, str]: ...

    def get_season_name(self, season_id: int) -> Optional[str]: ...


# -----------------------------
# Record -> row parsing
# -----------------------------
def _field(record: Mapping[str, Any], *names: str, default: Any = ...) -> Any:
    for n in names:
        if n in record:
            v = record[n]
            # pandas hands back NaN for empty cells
            if isinstance(v, float) and v != v:
                continue
            return v
    if default is ...:
        raise ScoreProviderError(f"Record is missing field {names[0]!r}: {dict(record)}")
    return default


def _int(record: Mapping[str, Any], *names: str, default: Any = ...) -> int:
    v = _field(record, *names, default=default)
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise ScoreProviderError(f"Field {names[0]!r} is not an integer: {v!r}") from e


def _bool(v: Any) -> bool:
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "y", "out"):
            return True
        if s in ("0", "false", "no", "n", "not_out", "not out", ""):
            return False
        raise ScoreProviderError(f"Invalid boolean value: {v!r}")
    return bool(v)


def batting_row_from_record(record: Mapping[str, Any]) -> BattingRow:
    return BattingRow(
        fixture_id=_int(record, "fixture_id", "fixtureId"),
        team_id=_int(record, "team_id", "teamId", default=0),
        member_id=_int(record, "member_id", "memberId"),
        runs=_int(record, "runs", default=0),
        balls=_int(record, "balls", default=0),
        fours=_int(record, "fours", default=0),
        sixes=_int(record, "sixes", default=0),
        is_out=_bool(_field(record, "is_out", "isOut", default=True)),
    )


def bowling_row_from_record(record: Mapping[str, Any]) -> BowlingRow:
    overs = _field(record, "overs", default="0")
    return BowlingRow(
        fixture_id=_int(record, "fixture_id", "fixtureId"),
        team_id=_int(record, "team_id", "teamId", default=0),
        member_id=_int(record, "member_id", "memberId"),
        # keep the notation as text, overs_to_balls() parses it exactly
        overs=str(overs).strip(),
        maidens=_int(record, "maidens", default=0),
        runs_conceded=_int(record, "runs_conceded", "runsConceded", default=0),
        wickets=_int(record, "wickets", default=0),
        no_balls=_int(record, "no_balls", "noBalls", default=0),
        wides=_int(record, "wides", default=0),
    )


# -----------------------------
# In-memory
# -----------------------------
class InMemoryScoreProvider:
    def __init__(
        self,
        *,
        fixture_seasons: Optional[Mapping[int, Optional[int]]] = None,
        batting_rows: Iterable[BattingRow] = (),
        bowling_rows: Iterable[BowlingRow] = (),
        members: Optional[Mapping[int, str]] = None,
        seasons: Optional[Mapping[int, str]] = None,
    ) -> None:
        self._fixture_seasons = dict(fixture_seasons or {})
        self._batting = list(batting_rows)
        self._bowling = list(bowling_rows)
        self._members = dict(members or {})
        self._seasons = dict(seasons or {})

    def _in_season(self, fixture_id: int, season_id: Optional[int]) -> bool:
        if season_id is None:
            return True
        return self._fixture_seasons.get(fixture_id) == season_id

    def get_batting_rows(self, season_id: Optional[int] = None) -> List[BattingRow]:
        return [r for r in self._batting if self._in_season(r.fixture_id, season_id)]

    def get_bowling_rows(self, season_id: Optional[int] = None) -> List[BowlingRow]:
        return [r for r in self._bowling if self._in_season(r.fixture_id, season_id)]

    def get_member_names(self) -> Dict[int, str]:
        return dict(self._members)

    def get_season_name(self, season_id: int) -> Optional[str]:
        return self._seasons.get(season_id)


# -----------------------------
# CSV exports (pandas)
# -----------------------------
CSV_FILES = {
    "members": "members.csv",
    "seasons": "seasons.csv",
    "fixtures": "fixtures.csv",
    "batting": "batting_scores.csv",
    "bowling": "bowling_figures.csv",
}

_REQUIRED_COLUMNS = {
    "members": {"id", "full_name"},
    "seasons": {"id", "name"},
    "fixtures": {"id", "season_id"},
    "batting": {"fixture_id", "member_id", "runs", "balls", "is_out"},
    "bowling": {"fixture_id", "member_id", "overs", "runs_conceded", "wickets"},
}


def _read_table(data_dir: str, name: str) -> pd.DataFrame:
    path = os.path.join(data_dir, CSV_FILES[name])
    try:
        # overs as text: 4.3 must not go through a float column
        df = pd.read_csv(path, dtype={"overs": str, "is_out": str})
    except FileNotFoundError as e:
        raise ScoreProviderError(f"Missing CSV file: {path}") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ScoreProviderError(f"Unreadable CSV file {path}: {e}") from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = _REQUIRED_COLUMNS[name] - set(df.columns)
    if missing:
        raise ScoreProviderError(f"{CSV_FILES[name]} is missing columns: {sorted(missing)}")
    return df


def load_csv_provider(data_dir: str) -> InMemoryScoreProvider:
    """
    Reads the club's exported tables:
      members.csv          id, full_name
      seasons.csv          id, name
      fixtures.csv         id, season_id
      batting_scores.csv   fixture_id, team_id, member_id, runs, balls, fours, sixes, is_out
      bowling_figures.csv  fixture_id, team_id, member_id, overs, maidens, runs_conceded,
                           wickets, no_balls, wides
    """
    members = _read_table(data_dir, "members")
    seasons = _read_table(data_dir, "seasons")
    fixtures = _read_table(data_dir, "fixtures")
    batting = _read_table(data_dir, "batting")
    bowling = _read_table(data_dir, "bowling")

    fixture_seasons: Dict[int, Optional[int]] = {}
    for rec in fixtures.to_dict("records"):
        season = _field(rec, "season_id", default=None)
        fixture_seasons[_int(rec, "id")] = None if season is None else int(season)

    provider = InMemoryScoreProvider(
        fixture_seasons=fixture_seasons,
        batting_rows=[batting_row_from_record(r) for r in batting.to_dict("records")],
        bowling_rows=[bowling_row_from_record(r) for r in bowling.to_dict("records")],
        members={_int(r, "id"): str(_field(r, "full_name", default="")).strip() for r in members.to_dict("records")},
        seasons={_int(r, "id"): str(_field(r, "name", default="")).strip() for r in seasons.to_dict("records")},
    )
    logger.debug(
        "Loaded CSV provider from %s: fixtures=%d batting=%d bowling=%d",
        data_dir, len(fixture_seasons), len(batting), len(bowling),
    )
    return provider


# -----------------------------
# Club records API (requests)
# -----------------------------
class RemoteScoreProvider:
    """
    Endpoints (relative to CLUB_RECORDS_BASE_URL):
      GET /batting-scores?seasonId=   -> list of batting records
      GET /bowling-figures?seasonId=  -> list of bowling records
      GET /members                    -> list of {id, fullName}
      GET /seasons/{id}               -> {id, name}, 404 when unknown
    """

    def __init__(
        self,
        base_url: str = config.CLUB_RECORDS_BASE_URL,
        api_key: str = config.CLUB_RECORDS_API_KEY,
        timeout: int = config.CLUB_RECORDS_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout

    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None, allow_404: bool = False) -> Any:
        return get_json(
            endpoint,
            params,
            base_url=self.base_url,
            api_key=self.api_key,
            timeout=self.timeout,
            allow_404=allow_404,
        )

    def _get_list(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Mapping[str, Any]]:
        data = self._get(endpoint, params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ScoreProviderError(f"Expected a JSON list from {endpoint}, got {type(data).__name__}")
        return data

    def get_batting_rows(self, season_id: Optional[int] = None) -> List[BattingRow]:
        records = self._get_list("batting-scores", {"seasonId": season_id})
        logger.debug("Fetched %d batting records (season=%s)", len(records), season_id)
        return [batting_row_from_record(r) for r in records]

    def get_bowling_rows(self, season_id: Optional[int] = None) -> List[BowlingRow]:
        records = self._get_list("bowling-figures", {"seasonId": season_id})
        logger.debug("Fetched %d bowling records (season=%s)", len(records), season_id)
        return [bowling_row_from_record(r) for r in records]

    def get_member_names(self) -> Dict[int, str]:
        out: Dict[int, str] = {}
        for r in self._get_list("members"):
            out[_int(r, "id")] = str(_field(r, "fullName", "full_name", "name", default="")).strip()
        return out

    def get_season_name(self, season_id: int) -> Optional[str]:
        data = self._get(f"seasons/{int(season_id)}", allow_404=True)
        if not data:
            return None
        return str(_field(data, "name", default="")).strip() or None


# -----------------------------
# TTL cache wrapper
# -----------------------------
class CachedScoreProvider:
    def __init__(self, inner: ScoreProvider, ttl_seconds: int = 60, cache: Optional[TTLCache] = None) -> None:
        self.inner = inner
        self.ttl_seconds = ttl_seconds
        self.cache = cache if cache is not None else TTLCache()

    def _cached(self, key: str, load):
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Row cache hit: %s", key)
            return cached
        value = load()
        self.cache.set(key, value, ttl_seconds=self.ttl_seconds)
        return value

    def get_batting_rows(self, season_id: Optional[int] = None) -> List[BattingRow]:
        key = make_key("batting-rows", season_id)
        return list(self._cached(key, lambda: self.inner.get_batting_rows(season_id)))

    def get_bowling_rows(self, season_id: Optional[int] = None) -> List[BowlingRow]:
        key = make_key("bowling-rows", season_id)
        return list(self._cached(key, lambda: self.inner.get_bowling_rows(season_id)))

    def get_member_names(self) -> Dict[int, str]:
        return dict(self._cached(make_key("member-names", "all"), self.inner.get_member_names))

    def get_season_name(self, season_id: int) -> Optional[str]:
        # unknown seasons are not cached (None means "miss")
        return self._cached(make_key("season-name", season_id), lambda: self.inner.get_season_name(season_id))


def build_provider_from_config() -> ScoreProvider:
    if config.CLUB_STATS_SOURCE == "remote":
        provider: ScoreProvider = RemoteScoreProvider()
    else:
        provider = load_csv_provider(config.CLUB_STATS_DATA_DIR)

    if config.ROWS_CACHE_TTL_SECONDS > 0:
        provider = CachedScoreProvider(provider, ttl_seconds=config.ROWS_CACHE_TTL_SECONDS)
    return provider
