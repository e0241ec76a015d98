"""Continuous water level estimates between predicted tide events."""
import logging
import math
from bisect import bisect_right
from datetime import datetime, timedelta, tzinfo
from typing import Sequence

import pandas as pd

from lunartide.models import TidalEvent
from lunartide.timeutils import DEFAULT_TIMEZONE, add_elapsed, clamp, to_local, to_utc

# Returned when there are too few events to interpolate between
DEFAULT_WATER_LEVEL = 1.0


def level_at(t: datetime, events: Sequence[TidalEvent], tz: tzinfo = DEFAULT_TIMEZONE) -> float:
    """
    Estimate the water level at ``t`` from a sorted list of tide events.

    Uses raised-cosine easing between the bracketing pair, so the curve is
    flat at high and low water and steepest at mid-tide. Times before the
    first or after the last event are clamped to the nearest pair.

    Args:
        t: Timestamp to estimate for
        events: Tide events sorted ascending by time
        tz: Timezone for naive timestamps

    Returns:
        Water level in metres, or DEFAULT_WATER_LEVEL for fewer than 2 events
    """
    if len(events) < 2:
        logging.warning(
            f"Cannot interpolate water level from {len(events)} tide event(s), "
            f"using default {DEFAULT_WATER_LEVEL}")
        return DEFAULT_WATER_LEVEL

    t = to_utc(to_local(t, tz))
    times = [to_utc(e.time) for e in events]
    # index of the first event strictly after t, kept inside [1, len - 1]
    idx = min(max(bisect_right(times, t), 1), len(events) - 1)
    prev_event, next_event = events[idx - 1], events[idx]

    total = (times[idx] - times[idx - 1]).total_seconds()
    elapsed = (t - times[idx - 1]).total_seconds()
    progress = clamp(elapsed / total, 0.0, 1.0) if total > 0 else 0.0
    eased = (1 - math.cos(progress * math.pi)) / 2

    return prev_event.height + (next_event.height - prev_event.height) * eased


def water_level_curve(
    events: Sequence[TidalEvent],
    start: datetime,
    end: datetime,
    step_minutes: int = 15,
    tz: tzinfo = DEFAULT_TIMEZONE
) -> pd.DataFrame:
    """
    Sample the water level at a fixed interval.

    Args:
        events: Tide events sorted ascending by time
        start: First sample time
        end: Last sample time (inclusive)
        step_minutes: Sampling interval in minutes
        tz: Timezone for naive timestamps

    Returns:
        DataFrame with 'time' and 'level' columns
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    start = to_local(start, tz)
    end = to_utc(to_local(end, tz))
    step = timedelta(minutes=step_minutes)

    rows = []
    current = start
    # stepped in elapsed time, so a DST change adds or drops a sample
    while to_utc(current) <= end:
        rows.append({"time": current, "level": level_at(current, events, tz)})
        current = add_elapsed(current, step)

    return pd.DataFrame(rows, columns=["time", "level"])
