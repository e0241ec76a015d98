"""
Lunar fish activity estimate.

Activity is highest around the (approximate) lunar transit and its
opposite, lowest around moonrise and moonset, and boosted on spring-tide
days. Transit hours are a rough approximation, not real ephemeris values.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Tuple, Union

import pandas as pd

from lunartide.moon import is_spring_tide, phase_at
from lunartide.timeutils import DEFAULT_TIMEZONE, clamp, local_midnight, to_local

BASE_ACTIVITY = 0.3
SPRING_TIDE_BONUS = 0.3
BEST_HOUR_BONUS = 0.3
NEAR_BEST_HOUR_BONUS = 0.15
WORST_HOUR_PENALTY = 0.1
MIN_ACTIVITY = 0.1
MAX_ACTIVITY = 1.0


def hour_distance(a: int, b: int) -> int:
    """Distance between two clock hours, wrapping at 24."""
    diff = abs(a - b) % 24
    return min(diff, 24 - diff)


def moon_hours(moon_phase: float) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    Best and worst hours of the day for a moon phase.

    Returns:
        ((transit, lowest), (moonrise, moonset)) as clock hours
    """
    transit = math.floor((moon_phase * 24 + 12) % 24)
    rise = (transit + 6) % 24
    set_ = (transit + 18) % 24
    lowest = (transit + 12) % 24
    return (transit, lowest), (rise, set_)


def activity_for(moon_phase: float, hour: int) -> float:
    """Activity score in [0.1, 1.0] for a clock hour on a day with the given phase."""
    best_hours, worst_hours = moon_hours(moon_phase)

    activity = BASE_ACTIVITY
    if is_spring_tide(moon_phase):
        activity += SPRING_TIDE_BONUS

    for best in best_hours:
        distance = hour_distance(hour, best)
        if distance <= 1:
            activity += BEST_HOUR_BONUS
        elif distance <= 2:
            activity += NEAR_BEST_HOUR_BONUS

    for worst in worst_hours:
        if hour_distance(hour, worst) <= 1:
            activity -= WORST_HOUR_PENALTY

    return clamp(activity, MIN_ACTIVITY, MAX_ACTIVITY)


@dataclass(frozen=True)
class ActivityWindow:
    """Per-day lunar activity outlook."""

    date: date
    moon_phase: float
    best_hours: Tuple[int, int]
    worst_hours: Tuple[int, int]

    def activity(self, hour: int) -> float:
        return activity_for(self.moon_phase, hour)


@dataclass(frozen=True)
class LunarActivity:
    activity: float
    best_hours: Tuple[int, int]
    worst_hours: Tuple[int, int]


def activity_window(day: Union[date, datetime], tz: tzinfo = DEFAULT_TIMEZONE) -> ActivityWindow:
    """Build the activity outlook for the local calendar day of ``day``."""
    midnight = local_midnight(day, tz)
    moon_phase = phase_at(midnight, tz)
    best_hours, worst_hours = moon_hours(moon_phase)
    return ActivityWindow(midnight.date(), moon_phase, best_hours, worst_hours)


def activity_at(t: datetime, tz: tzinfo = DEFAULT_TIMEZONE) -> LunarActivity:
    """
    Lunar fish activity at a moment.

    The moon phase is taken at local midnight of ``t``'s date and the hour
    is ``t``'s local clock hour.

    Args:
        t: Timestamp; naive values are local time in ``tz``
        tz: Timezone defining the local day and hour

    Returns:
        LunarActivity with the score and the day's best and worst hours
    """
    local = to_local(t, tz)
    window = activity_window(local, tz)
    return LunarActivity(
        activity=window.activity(local.hour),
        best_hours=window.best_hours,
        worst_hours=window.worst_hours
    )


def daily_activity(day: Union[date, datetime], tz: tzinfo = DEFAULT_TIMEZONE) -> pd.DataFrame:
    """24-point hourly activity curve for a local day, as an 'hour'/'activity' DataFrame."""
    window = activity_window(day, tz)
    rows = [{"hour": hour, "activity": window.activity(hour)} for hour in range(24)]
    return pd.DataFrame(rows, columns=["hour", "activity"])
