#!/usr/bin/env python3
"""
Lunar-tidal fishing outlook.
Prints the moon phase, upcoming tides, lunar activity and combined fishing
score for a tide station.
"""

import json
import logging
import os
import sys
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv

from lunartide.activity import activity_at
from lunartide.config import load_config
from lunartide.models import PressureSample, TideKind
from lunartide.moon import phase_at, phase_name, tide_type
from lunartide.pressure import PressureTrendTracker
from lunartide.scoring import combine
from lunartide.tides import TidesService
from lunartide.water_level import level_at
from lunartide.weather import NEUTRAL_WEATHER_SCORE

# Load environment variables
load_dotenv()

logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(levelname)s - %(message)s')


def load_pressure_history(path: Optional[str], config: dict, tz) -> Optional[PressureTrendTracker]:
    """Restore a pressure history saved as a JSON list of {time, pressure} records."""
    if not path:
        return None
    with open(path, 'r') as f:
        records = json.load(f)
    tracker = PressureTrendTracker.from_config(config, tz)
    tracker.extend(
        PressureSample(time=datetime.fromisoformat(r['time']), pressure=float(r['pressure']))
        for r in records
    )
    return tracker


def main():
    """Print the fishing outlook for the configured or requested station."""
    try:
        config = load_config()
        tides = TidesService(config=config)

        station_id = os.getenv("LUNARTIDE_STATION")
        station = tides.get_station(station_id) if station_id else tides.default_station
        weather_score = float(os.getenv("WEATHER_SCORE", NEUTRAL_WEATHER_SCORE))

        now = datetime.now(tides.tz)
        phase = phase_at(now, tides.tz)
        events = tides.tide_window(station, now)
        lunar = activity_at(now, tides.tz)
        score = combine(weather_score, lunar.activity)

        print(f"\nFishing outlook for {station.name} at {now.strftime('%Y-%m-%d %H:%M')}")
        print(f"Moon: {phase_name(phase)} (phase {phase:.2f}, {tide_type(phase).value} tide)")
        print(f"Water level now: {level_at(now, events, tides.tz):.2f} m")

        print("\nNext tides:")
        for event in tides.next_tides(station, now):
            label = "HW" if event.kind is TideKind.HIGH else "LW"
            print(f"- {label} {event.time.strftime('%a %H:%M')} {event.height:.1f} m")

        print(f"\nLunar activity: {round(lunar.activity * 100)}%")
        print(f"  Best hours:  {lunar.best_hours[0]:02d}:00, {lunar.best_hours[1]:02d}:00")
        print(f"  Worst hours: {lunar.worst_hours[0]:02d}:00, {lunar.worst_hours[1]:02d}:00")

        history = load_pressure_history(os.getenv("PRESSURE_HISTORY"), config, tides.tz)
        if history is not None:
            print(f"Pressure trend: {history.trend().value}")

        print(f"\nFish scale: {score.combined:.1f} / 3 ({score.label.value})")
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
