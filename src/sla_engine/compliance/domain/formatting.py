"""
Human-readable duration labels used by dashboards and CSV exports.
"""

import math
from typing import Optional

EMPTY_DURATION = "—"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(seconds: Optional[float]) -> str:
    """
    Format a duration as "45m", "4h", "4h 30m", "3d" or "3d 2h".

    Under an hour only minutes are shown; under a day hours plus minutes
    when nonzero; otherwise days plus hours when nonzero. The total is
    rounded to the smallest unit shown before it is split, so 4h 59.7m
    reads "5h", never "4h 60m".
    """
    if seconds is None:
        return EMPTY_DURATION

    seconds = max(0.0, seconds)

    total_minutes = _round_half_up(seconds / 60)
    if total_minutes < 60:
        return f"{total_minutes}m"

    if total_minutes < 24 * 60:
        hours, minutes = divmod(total_minutes, 60)
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"

    days, hours = divmod(_round_half_up(seconds / 3600), 24)
    return f"{days}d {hours}h" if hours > 0 else f"{days}d"


def format_countdown(seconds: float) -> str:
    """
    Format time left before a deadline as "HH:MM:SS" or "Nd HH:MM:SS".

    Expired deadlines read "00:00:00".
    """
    if seconds <= 0:
        return "00:00:00"

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours >= 24:
        days, hours = divmod(hours, 24)
        return f"{days}d {hours:02d}:{minutes:02d}:{secs:02d}"

    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
