# club_stats/overs_math.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from club_stats.errors import InvalidArgument

BALLS_PER_OVER = 6
OversLike = Union[str, int, float, Decimal]


def overs_to_balls(overs: OversLike) -> int:
    """
    Converts cricket overs notation to balls.

    Supported inputs:
    - "4.3", "20", "0.5" (string overs notation, preferred)
    - 4 (int overs)
    - 4.3 (float) -> read through its shortest repr, so 4.3 stays "4.3"
    - Decimal("4.3")

    Rule: ".x" means x balls (0-5). Example: 4.3 = 4*6 + 3 = 27 balls.
    The arithmetic is done on Decimal so 0.5 never turns into 0.49999.
    """
    if overs is None:
        raise InvalidArgument("Overs cannot be None")
    if isinstance(overs, bool):
        raise InvalidArgument(f"Invalid overs: {overs!r}")

    s = str(overs).strip()
    if not s:
        raise InvalidArgument("Overs cannot be empty")

    try:
        value = Decimal(s)
    except InvalidOperation as e:
        raise InvalidArgument(f"Invalid overs: {overs!r}") from e

    if not value.is_finite():
        raise InvalidArgument(f"Invalid overs: {overs!r}")
    if value < 0:
        raise InvalidArgument(f"Invalid overs: {overs!r} (cannot be negative)")

    whole = int(value)
    tenths = (value - whole) * 10
    if tenths != tenths.to_integral_value():
        # e.g. "4.35": only one digit is allowed after the point
        raise InvalidArgument(f"Invalid overs format: {overs!r} (balls-in-over must be 0-5)")

    balls_i = int(tenths)
    if balls_i > 5:
        raise InvalidArgument(f"Invalid overs format: {overs!r} (balls-in-over must be 0-5)")

    return whole * BALLS_PER_OVER + balls_i


def balls_to_overs_display(balls: int) -> str:
    """27 -> "4.3", 10 -> "1.4", 0 -> "0.0"."""
    if balls < 0:
        raise InvalidArgument("Balls cannot be negative")
    full, rest = divmod(int(balls), BALLS_PER_OVER)
    return f"{full}.{rest}"


def balls_to_overs_float(balls: int) -> float:
    if balls <= 0:
        return 0.0
    return balls / float(BALLS_PER_OVER)


def economy_rate(runs_conceded: int, balls: int) -> Optional[float]:
    """Runs per over; None when nothing was bowled."""
    overs = balls_to_overs_float(balls)
    if overs == 0.0:
        return None
    return runs_conceded / overs
