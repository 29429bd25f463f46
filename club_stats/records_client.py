# club_stats/records_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from club_stats.config import (
    CLUB_RECORDS_API_KEY,
    CLUB_RECORDS_BASE_URL,
    CLUB_RECORDS_TIMEOUT_SECONDS,
)
from club_stats.errors import ScoreProviderError

logger = logging.getLogger(__name__)


def get_json(
    endpoint: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    base_url: str = CLUB_RECORDS_BASE_URL,
    api_key: str = CLUB_RECORDS_API_KEY,
    timeout: int = CLUB_RECORDS_TIMEOUT_SECONDS,
    allow_404: bool = False,
) -> Any:
    """
    Generic helper to call the club records API.

    The records API wraps payloads as {"success": bool, "message": str, "data": ...};
    the unwrapped "data" is returned. A bare JSON list/object is returned as is.
    With allow_404, a 404 returns None (lookup of a single missing resource);
    otherwise it raises like any other non-200.
    """
    if not base_url.startswith("http"):
        raise ScoreProviderError("CLUB_RECORDS_BASE_URL must start with http/https")

    url = f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"
    query = {k: v for k, v in (params or {}).items() if v is not None}
    headers = {"Accept": "application/json"}
    if api_key:
        headers["X-Api-Key"] = api_key

    try:
        resp = requests.get(url, params=query, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("Club records request failed: url=%s error=%s", url, e)
        raise ScoreProviderError(f"Network error: {e}") from e

    if resp.status_code == 404 and allow_404:
        return None

    if resp.status_code != 200:
        logger.warning("Club records returned HTTP %s for %s", resp.status_code, url)
        raise ScoreProviderError(f"HTTP {resp.status_code}: {resp.text}")

    try:
        data = resp.json()
    except ValueError as e:
        raise ScoreProviderError(f"Invalid JSON response: {e}") from e

    if isinstance(data, dict) and "success" in data:
        if not data.get("success"):
            raise ScoreProviderError(data.get("message") or "Unknown API error")
        return data.get("data")

    return data
