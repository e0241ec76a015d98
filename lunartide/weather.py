"""Weather-condition classification and pressure extraction from weather data."""

import logging
import math
from typing import List, Optional

import pandas as pd

from lunartide.models import PressureSample, WeatherConditions
from lunartide.timeutils import clamp

# Score used when no weather is available
NEUTRAL_WEATHER_SCORE = 1.0

# Open-Meteo hourly column names
HOURLY_COLUMNS = {
    "temperature": "temperature_2m",
    "wind_speed": "wind_speed_10m",
    "wind_direction": "wind_direction_10m",
    "pressure": "surface_pressure",
    "humidity": "relative_humidity_2m",
    "weather_code": "weather_code",
}


def condition_points(conditions: WeatherConditions) -> int:
    """Raw points: light wind, high pressure, mild temperature and no precipitation score."""
    points = 0

    # km/h
    if conditions.wind_speed < 15:
        points += 2
    elif conditions.wind_speed < 25:
        points += 1
    else:
        points -= 1

    if conditions.pressure > 1013:
        points += 1
    if conditions.pressure > 1020:
        points += 1

    if 10 <= conditions.temperature <= 20:
        points += 2
    elif 5 <= conditions.temperature <= 25:
        points += 1

    # WMO codes from 50 upward are drizzle, rain, snow and storms
    if conditions.weather_code < 50:
        points += 1

    return points


def weather_score(conditions: Optional[WeatherConditions]) -> float:
    """Weather score in [0, 3]; neutral 1.0 without conditions."""
    if conditions is None:
        return NEUTRAL_WEATHER_SCORE
    return clamp(condition_points(conditions) / 2, 0.0, 3.0)


def fishing_condition(conditions: Optional[WeatherConditions]) -> str:
    """Coarse label: 'excellent', 'good', 'moderate' or 'poor'."""
    if conditions is None:
        return "moderate"
    points = condition_points(conditions)
    if points >= 5:
        return "excellent"
    if points >= 3:
        return "good"
    if points >= 1:
        return "moderate"
    return "poor"


def conditions_from_hourly(df: pd.DataFrame) -> Optional[WeatherConditions]:
    """
    Build WeatherConditions from the latest row of an hourly weather DataFrame.

    Args:
        df: DataFrame with Open-Meteo column names, ordered by time

    Returns:
        WeatherConditions, or None if the frame is empty or incomplete
    """
    if df is None or df.empty:
        logging.warning("No hourly weather data available.")
        return None

    row = df.iloc[-1]
    try:
        return WeatherConditions(
            temperature=float(row[HOURLY_COLUMNS["temperature"]]),
            wind_speed=float(row[HOURLY_COLUMNS["wind_speed"]]),
            wind_direction=float(row[HOURLY_COLUMNS["wind_direction"]]),
            pressure=float(row[HOURLY_COLUMNS["pressure"]]),
            humidity=float(row[HOURLY_COLUMNS["humidity"]]),
            weather_code=int(row[HOURLY_COLUMNS["weather_code"]])
        )
    except KeyError as e:
        logging.warning(f"Hourly weather data is missing column {e}")
        return None
    except (ValueError, TypeError) as e:
        logging.warning(f"Hourly weather data has an invalid value: {e}")
        return None


def pressure_samples_from_hourly(df: pd.DataFrame) -> List[PressureSample]:
    """
    Extract pressure samples from an hourly weather DataFrame.

    Rows with a missing, non-numeric or non-finite pressure are skipped.
    """
    if df is None or df.empty:
        return []

    column = HOURLY_COLUMNS["pressure"]
    if "time" not in df.columns or column not in df.columns:
        logging.warning(f"Hourly weather data needs 'time' and '{column}' columns")
        return []

    samples = []
    skipped = 0
    for time, raw in zip(pd.to_datetime(df["time"]), df[column]):
        try:
            pressure = float(raw)
        except (ValueError, TypeError):
            pressure = math.nan
        if not math.isfinite(pressure):
            skipped += 1
            continue
        samples.append(PressureSample(time=time.to_pydatetime(), pressure=pressure))

    if skipped:
        logging.warning(f"Skipped {skipped} hourly row(s) without a usable pressure value")
    return samples
