"""
Raw score providers
===================
CSV exports (pandas), club records API (requests, mocked), TTL cache wrapper.
"""
from unittest.mock import MagicMock

import pytest
import requests

from club_stats.cache import TTLCache, make_key
from club_stats.errors import ScoreProviderError
from club_stats.models import BattingRow
from club_stats.providers import (
    CachedScoreProvider,
    InMemoryScoreProvider,
    RemoteScoreProvider,
    batting_row_from_record,
    bowling_row_from_record,
    load_csv_provider,
)


def _write(path, text):
    path.write_text(text.strip() + "\n", encoding="utf-8")


@pytest.fixture
def csv_dir(tmp_path):
    _write(tmp_path / "members.csv", "id,full_name\n1,Asha Patel\n2,Ben Carter")
    _write(tmp_path / "seasons.csv", "id,name\n1,2025 Summer\n2,2026 Summer")
    _write(tmp_path / "fixtures.csv", "id,season_id\n101,1\n201,2\n300,")
    _write(
        tmp_path / "batting_scores.csv",
        """
fixture_id,team_id,member_id,runs,balls,fours,sixes,is_out
101,10,1,45,30,5,0,true
201,10,1,60,40,6,2,false
300,10,2,12,10,,,1
""",
    )
    _write(
        tmp_path / "bowling_figures.csv",
        """
fixture_id,team_id,member_id,overs,maidens,runs_conceded,wickets,no_balls,wides
101,10,2,0.5,0,4,0,0,0
201,10,2,0.5,0,6,1,0,1
""",
    )
    return tmp_path


# ─── CSV ─────────────────────────────────────────────────────────────────────

def test_csv_provider_reads_rows_and_names(csv_dir):
    p = load_csv_provider(str(csv_dir))
    assert p.get_member_names() == {1: "Asha Patel", 2: "Ben Carter"}
    assert p.get_season_name(2) == "2026 Summer"
    assert p.get_season_name(9) is None

    rows = p.get_batting_rows()
    assert len(rows) == 3
    assert rows[0] == BattingRow(fixture_id=101, team_id=10, member_id=1, runs=45, balls=30, fours=5, sixes=0, is_out=True)
    assert rows[1].is_out is False
    # empty cells fall back to zero
    assert rows[2].fours == 0 and rows[2].is_out is True


def test_csv_provider_filters_by_season(csv_dir):
    p = load_csv_provider(str(csv_dir))
    assert [r.fixture_id for r in p.get_batting_rows(1)] == [101]
    assert [r.fixture_id for r in p.get_batting_rows(2)] == [201]
    # fixture 300 has no season: career only
    assert 300 in {r.fixture_id for r in p.get_batting_rows()}


def test_csv_overs_stay_in_notation(csv_dir):
    rows = load_csv_provider(str(csv_dir)).get_bowling_rows()
    assert [r.overs for r in rows] == ["0.5", "0.5"]


def test_csv_missing_file(tmp_path):
    with pytest.raises(ScoreProviderError, match="members.csv"):
        load_csv_provider(str(tmp_path))


def test_csv_missing_column(csv_dir):
    _write(csv_dir / "bowling_figures.csv", "fixture_id,member_id,runs_conceded,wickets\n101,2,4,0")
    with pytest.raises(ScoreProviderError, match="overs"):
        load_csv_provider(str(csv_dir))


# ─── Record parsing ──────────────────────────────────────────────────────────

def test_camel_case_records():
    row = bowling_row_from_record(
        {"fixtureId": 5, "teamId": 1, "memberId": 3, "overs": 4.3, "runsConceded": 30, "wickets": 2, "noBalls": 1}
    )
    assert row.overs == "4.3"
    assert row.runs_conceded == 30
    assert row.no_balls == 1

    row = batting_row_from_record({"fixtureId": 5, "memberId": 3, "runs": 12, "balls": 9, "isOut": False})
    assert row.is_out is False
    assert row.team_id == 0


def test_record_without_member_is_rejected():
    with pytest.raises(ScoreProviderError):
        batting_row_from_record({"fixtureId": 5, "runs": 12})


# ─── Remote ──────────────────────────────────────────────────────────────────

def _response(status=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    resp.json.return_value = payload
    return resp


def test_remote_provider_unwraps_envelope(monkeypatch):
    calls = []

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append((url, params, headers, timeout))
        return _response(payload={
            "success": True,
            "message": "ok",
            "data": [{"fixtureId": 1, "teamId": 2, "memberId": 3, "runs": 40, "balls": 35, "isOut": True}],
        })

    monkeypatch.setattr(requests, "get", fake_get)
    p = RemoteScoreProvider(base_url="https://club.example/api/", api_key="secret", timeout=5)
    rows = p.get_batting_rows(season_id=4)

    assert rows[0].runs == 40
    url, params, headers, timeout = calls[0]
    assert url == "https://club.example/api/batting-scores"
    assert params == {"seasonId": 4}
    assert headers["X-Api-Key"] == "secret"
    assert timeout == 5


def test_remote_provider_career_omits_season_param(monkeypatch):
    seen = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        seen["params"] = params
        return _response(payload=[])

    monkeypatch.setattr(requests, "get", fake_get)
    assert RemoteScoreProvider(base_url="https://club.example/api").get_bowling_rows() == []
    assert seen["params"] == {}


def test_remote_provider_members_and_unknown_season(monkeypatch):
    def fake_get(url, params=None, headers=None, timeout=None):
        if url.endswith("/members"):
            return _response(payload=[{"id": 1, "fullName": "Asha Patel"}])
        return _response(status=404, text="not found")

    monkeypatch.setattr(requests, "get", fake_get)
    p = RemoteScoreProvider(base_url="https://club.example/api")
    assert p.get_member_names() == {1: "Asha Patel"}
    assert p.get_season_name(42) is None


def test_remote_provider_missing_list_route_is_an_error(monkeypatch):
    # a wrong base URL must not look like a club with no scores
    monkeypatch.setattr(requests, "get", lambda *a, **kw: _response(status=404, text="not found"))
    p = RemoteScoreProvider(base_url="https://club.example/wrong")
    with pytest.raises(ScoreProviderError):
        p.get_batting_rows(None)
    with pytest.raises(ScoreProviderError):
        p.get_bowling_rows(season_id=1)
    with pytest.raises(ScoreProviderError):
        p.get_member_names()


@pytest.mark.parametrize(
    "response",
    [
        _response(status=500, text="boom"),
        _response(payload={"success": False, "message": "denied"}),
        _response(payload={"unexpected": "object"}),
    ],
)
def test_remote_provider_failures(monkeypatch, response):
    monkeypatch.setattr(requests, "get", lambda *a, **kw: response)
    with pytest.raises(ScoreProviderError):
        RemoteScoreProvider(base_url="https://club.example/api").get_batting_rows()


def test_remote_provider_network_error(monkeypatch):
    def fake_get(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(requests, "get", fake_get)
    with pytest.raises(ScoreProviderError, match="Network error"):
        RemoteScoreProvider(base_url="https://club.example/api").get_member_names()


# ─── Cache ───────────────────────────────────────────────────────────────────

def test_make_key():
    assert make_key("batting-rows", 3) == "batting-rows:3"
    assert make_key("batting-rows", None) == "batting-rows:all"
    with pytest.raises(ValueError):
        make_key(" ")


def test_ttl_cache_expiry():
    now = [1000.0]
    cache = TTLCache(clock=lambda: now[0])
    cache.set("k", [1], ttl_seconds=10)
    assert cache.get("k") == [1]
    now[0] += 11
    assert cache.get("k") is None

    cache.set("k", [1], ttl_seconds=0)
    assert cache.get("k") is None


def test_cached_provider_reuses_rows_per_season():
    inner = MagicMock(wraps=InMemoryScoreProvider(
        fixture_seasons={1: 1},
        batting_rows=[BattingRow(fixture_id=1, team_id=1, member_id=1, runs=5, balls=5)],
    ))
    p = CachedScoreProvider(inner, ttl_seconds=60)

    assert len(p.get_batting_rows(1)) == 1
    assert len(p.get_batting_rows(1)) == 1
    assert p.get_batting_rows(2) == []
    assert p.get_batting_rows(2) == []

    assert inner.get_batting_rows.call_count == 2
