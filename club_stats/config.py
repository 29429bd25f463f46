# club_stats/config.py
from __future__ import annotations

import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _get_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


# -------------------------
# Raw score source
# -------------------------
# "csv": read exported tables from CLUB_STATS_DATA_DIR
# "remote": fetch rows from the club records API
CLUB_STATS_SOURCE: str = _get_env("CLUB_STATS_SOURCE", "csv").lower()
CLUB_STATS_DATA_DIR: str = _get_env("CLUB_STATS_DATA_DIR", "./data")

CLUB_RECORDS_BASE_URL: str = _get_env("CLUB_RECORDS_BASE_URL", "http://localhost:5000/api")
CLUB_RECORDS_API_KEY: str = _get_env("CLUB_RECORDS_API_KEY")
CLUB_RECORDS_TIMEOUT_SECONDS: int = _get_env_int("CLUB_RECORDS_TIMEOUT_SECONDS", 12)

# 0 disables the row cache
ROWS_CACHE_TTL_SECONDS: int = _get_env_int("ROWS_CACHE_TTL_SECONDS", 120)


# -------------------------
# Leaderboards + logging
# -------------------------
DEFAULT_TOP_N: int = _get_env_int("DEFAULT_TOP_N", 10)
MAX_TOP_N: int = _get_env_int("MAX_TOP_N", 100)
LOG_LEVEL: str = _get_env("LOG_LEVEL", "INFO").upper()

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def validate_config() -> None:
    if CLUB_STATS_SOURCE not in {"csv", "remote"}:
        raise RuntimeError("CLUB_STATS_SOURCE must be 'csv' or 'remote'")

    if CLUB_STATS_SOURCE == "csv" and not CLUB_STATS_DATA_DIR:
        raise RuntimeError("CLUB_STATS_DATA_DIR is required when CLUB_STATS_SOURCE=csv")

    # Basic URL sanity
    if CLUB_STATS_SOURCE == "remote" and not CLUB_RECORDS_BASE_URL.startswith("http"):
        raise RuntimeError("CLUB_RECORDS_BASE_URL must start with http/https")

    if CLUB_RECORDS_TIMEOUT_SECONDS <= 0:
        raise RuntimeError("CLUB_RECORDS_TIMEOUT_SECONDS must be positive")

    if ROWS_CACHE_TTL_SECONDS < 0:
        raise RuntimeError("ROWS_CACHE_TTL_SECONDS cannot be negative")

    if DEFAULT_TOP_N < 1:
        raise RuntimeError("DEFAULT_TOP_N must be >= 1")

    if MAX_TOP_N < DEFAULT_TOP_N:
        raise RuntimeError("MAX_TOP_N must be >= DEFAULT_TOP_N")

    if LOG_LEVEL not in _LOG_LEVELS:
        raise RuntimeError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
