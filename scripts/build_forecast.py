"""
Build a multi-day lunar-tidal fishing forecast for one station and write
structured JSON to data/data.json.

Per day the output holds the moon phase, the tide type, the predicted high
and low waters, an hourly water level curve and the hourly lunar activity
curve with its best and worst hours. Tides are approximations derived from
the moon phase and are for indication only.

Environment:
- LUNARTIDE_CONFIG: path to a YAML configuration file
- LUNARTIDE_STATION: station id (defaults to the configured default station)
- DAYS_AHEAD: number of days to include (default 7)
"""

from __future__ import annotations

import json
import logging
import os
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from dotenv import load_dotenv

from lunartide.activity import activity_window, daily_activity
from lunartide.config import load_config
from lunartide.models import Station, TidalEvent
from lunartide.moon import phase_name, tide_type
from lunartide.tides import TidesService
from lunartide.timeutils import daterange
from lunartide.water_level import water_level_curve

load_dotenv()

logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(levelname)s - %(message)s')


# ----------------------------
# Configuration
# ----------------------------
DAYS_AHEAD = int(os.getenv("DAYS_AHEAD", "7"))
CURVE_INTERVAL_MIN = 60


# ----------------------------
# Helpers
# ----------------------------


def to_utc_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def event_to_dict(event: TidalEvent) -> dict:
    return {
        "time": event.time.isoformat(),
        "height_m": round(event.height, 2),
        "type": event.kind.value,
    }


# ----------------------------
# Main
# ----------------------------


def build_days(tides: TidesService, station: Station, start_day: datetime, days: int) -> List[dict]:
    """Assemble the per-day forecast entries."""
    # one extra day on each side so the curve is bracketed at the edges
    events = tides.get_predictions(station, start_day - timedelta(days=1), days + 2)

    events_by_day: Dict[str, List[TidalEvent]] = defaultdict(list)
    for event in events:
        events_by_day[event.time.strftime("%Y-%m-%d")].append(event)

    days_out = []
    for day in daterange(start_day.date(), days):
        date_key = day.strftime("%Y-%m-%d")
        window = activity_window(day, tides.tz)
        day_start = datetime(day.year, day.month, day.day, tzinfo=tides.tz)
        day_end = day_start + timedelta(hours=23)

        curve = water_level_curve(events, day_start, day_end, CURVE_INTERVAL_MIN, tides.tz)
        activity = daily_activity(day, tides.tz)

        days_out.append({
            "date": date_key,
            "moon_phase": round(window.moon_phase, 3),
            "moon_phase_name": phase_name(window.moon_phase),
            "tide_type": tide_type(window.moon_phase).value,
            "best_hours": list(window.best_hours),
            "worst_hours": list(window.worst_hours),
            "tides": [event_to_dict(e) for e in events_by_day.get(date_key, [])],
            "water_levels": [
                {"time": row.time.isoformat(), "level_m": round(row.level, 2)}
                for row in curve.itertuples(index=False)
            ],
            "activity": [
                {"hour": int(row.hour), "activity": round(float(row.activity), 2)}
                for row in activity.itertuples(index=False)
            ],
        })
    return days_out


def build():
    config = load_config()
    tides = TidesService(config=config)

    station_id = os.getenv("LUNARTIDE_STATION")
    station = tides.get_station(station_id) if station_id else tides.default_station

    now_local = datetime.now(tides.tz)
    start_day = now_local.replace(hour=0, minute=0, second=0, microsecond=0)

    output = {
        "generated_at": to_utc_iso(now_local),
        "station": {
            "id": station.id,
            "name": station.name,
            "lat": station.latitude,
            "lon": station.longitude,
        },
        "disclaimer": "Tides are derived from the moon phase and are for indication only.",
        "days": build_days(tides, station, start_day, DAYS_AHEAD),
    }

    ensure_dir(os.path.join(os.getcwd(), "data"))
    out_path = os.path.join(os.getcwd(), "data", "data.json")
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2)
    logging.info(f"Wrote {out_path}")


if __name__ == "__main__":
    build()
