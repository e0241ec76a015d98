"""Value objects passed between the lunar, tidal, pressure and scoring layers."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


def require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")


@dataclass(frozen=True)
class Station:
    """A tide station. Identity is by ``id`` only."""

    id: str
    name: str = field(compare=False)
    latitude: float = field(compare=False)  # decimal degrees
    longitude: float = field(compare=False)  # decimal degrees, east positive

    def __post_init__(self) -> None:
        require_finite("latitude", self.latitude)
        require_finite("longitude", self.longitude)


class TideKind(Enum):
    HIGH = "high"
    LOW = "low"


@dataclass(frozen=True)
class TidalEvent:
    """A predicted high or low water."""

    time: datetime
    height: float  # metres
    kind: TideKind


@dataclass(frozen=True)
class PressureSample:
    time: datetime
    pressure: float  # hPa

    def __post_init__(self) -> None:
        require_finite("pressure", self.pressure)


class PressureTrend(Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


class ScoreLabel(Enum):
    POOR = "Poor"
    MODERATE = "Moderate"
    GOOD = "Good"
    EXCELLENT = "Excellent"


@dataclass(frozen=True)
class FishingScore:
    """Combined "fish scale" value in [0, 3] and its label."""

    combined: float
    label: ScoreLabel


@dataclass(frozen=True)
class WeatherConditions:
    """Current weather as reported by the weather client."""

    temperature: float  # °C
    wind_speed: float  # km/h
    wind_direction: float  # degrees
    pressure: float  # hPa
    humidity: float  # %
    weather_code: int  # WMO code

    def __post_init__(self) -> None:
        for name in ("temperature", "wind_speed", "wind_direction", "pressure", "humidity"):
            require_finite(name, getattr(self, name))
