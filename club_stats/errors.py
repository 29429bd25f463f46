# club_stats/errors.py
from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when a caller passes malformed rows or query parameters."""
    pass


class MemberNotFoundError(LookupError):
    """Raised when a per-player query names a member the provider does not know."""
    pass


class ScoreProviderError(Exception):
    """Raised when a raw score provider cannot load or fetch its rows."""
    pass
