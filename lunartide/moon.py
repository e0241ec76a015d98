"""
Moon phase calculations.

The phase is a normalized position in the synodic month: 0 is new moon,
0.5 is full moon. It is derived from elapsed time since a known new moon
and is an indication only, with no correction for the eccentric lunar orbit.
"""
from datetime import datetime, timezone, tzinfo
from enum import Enum

from lunartide.timeutils import DEFAULT_TIMEZONE, to_local

SYNODIC_MONTH_DAYS = 29.53058867
KNOWN_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=timezone.utc)

SECONDS_PER_DAY = 86400.0


class TideType(Enum):
    """Tidal range category derived from the moon phase."""
    SPRING = "spring"
    NEAP = "neap"
    NORMAL = "normal"


def phase_at(t: datetime, tz: tzinfo = DEFAULT_TIMEZONE) -> float:
    """
    Normalized lunar phase in [0, 1) at ``t``.

    Args:
        t: Timestamp; naive values are interpreted as local time in ``tz``
        tz: Timezone used for naive timestamps

    Returns:
        Phase where 0 is new moon and 0.5 is full moon
    """
    elapsed_days = (to_local(t, tz) - KNOWN_NEW_MOON).total_seconds() / SECONDS_PER_DAY
    # Python's % follows the divisor's sign, so dates before the reference wrap positively
    phase = (elapsed_days % SYNODIC_MONTH_DAYS) / SYNODIC_MONTH_DAYS
    # guards against phase == 1.0 from floating rounding of tiny negatives
    return phase if phase < 1.0 else 0.0


def is_spring_tide(phase: float) -> bool:
    """Near new or full moon."""
    return phase < 0.1 or phase > 0.9 or 0.4 <= phase <= 0.6


def tide_type(phase: float) -> TideType:
    if is_spring_tide(phase):
        return TideType.SPRING
    if 0.2 < phase < 0.3 or 0.7 < phase < 0.8:
        return TideType.NEAP
    return TideType.NORMAL


def phase_name(phase: float) -> str:
    """Human-readable name of the phase."""
    if phase < 0.03 or phase > 0.97:
        return "New Moon"
    if phase < 0.22:
        return "Waxing Crescent"
    if phase < 0.28:
        return "First Quarter"
    if phase < 0.47:
        return "Waxing Gibbous"
    if phase < 0.53:
        return "Full Moon"
    if phase < 0.72:
        return "Waning Gibbous"
    if phase < 0.78:
        return "Last Quarter"
    return "Waning Crescent"
