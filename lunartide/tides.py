"""
Module for generating approximate tide predictions from the moon phase.

The tides are synthetic: timing follows the lunar phase plus a crude
longitude-based lag per station, heights follow the spring/neap cycle.
No harmonic constituents or gauge data are involved, so the results are
for indication only.
"""
import logging
import math
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from zoneinfo import ZoneInfo

from lunartide.config import load_config, with_defaults
from lunartide.models import Station, TidalEvent, TideKind
from lunartide.moon import phase_at
from lunartide.timeutils import (
    DEFAULT_TIMEZONE,
    add_elapsed,
    daterange,
    local_midnight,
    to_local,
    to_utc,
)

TIDAL_PERIOD_MINUTES = 12 * 60 + 25
MINUTES_PER_DAY = 24 * 60

HIGH_BASE_HEIGHT = 1.8
LOW_BASE_HEIGHT = 0.4
SPRING_VARIATION = 0.5


def station_offset_minutes(longitude: float) -> float:
    """Phase shift from longitude; 15 degrees is one hour."""
    return (longitude / 15) * 60


def first_high_minute(moon_phase: float, longitude: float) -> float:
    """Minute of the day of the first high water for a given moon phase."""
    return (moon_phase * TIDAL_PERIOD_MINUTES * 2
            + station_offset_minutes(longitude)) % MINUTES_PER_DAY


def _tide_heights(moon_phase: float) -> Tuple[float, float]:
    # 0 at new and full moon, 1 at the quarters
    moon_factor = abs(math.sin(moon_phase * 2 * math.pi))
    variation = moon_factor * SPRING_VARIATION
    return HIGH_BASE_HEIGHT + variation, LOW_BASE_HEIGHT - variation * 0.5


def _day_batch(station: Station, day: date, tz: tzinfo) -> List[TidalEvent]:
    """High, Low, High, Low for one local day, from the moon phase at its midnight."""
    midnight = local_midnight(day, tz)
    moon_phase = phase_at(midnight, tz)
    first_high = first_high_minute(moon_phase, station.longitude)
    high_height, low_height = _tide_heights(moon_phase)

    batch = []
    for i in range(4):
        is_high = i % 2 == 0
        # offsets past 1440 roll over into the following day
        minutes = first_high + i * (TIDAL_PERIOD_MINUTES / 2)
        batch.append(TidalEvent(
            time=add_elapsed(midnight, timedelta(minutes=minutes)),
            height=high_height if is_high else low_height,
            kind=TideKind.HIGH if is_high else TideKind.LOW
        ))
    return batch


def _merge_batch(kept: List[TidalEvent], batch: Sequence[TidalEvent]) -> None:
    """
    Append a day's batch, dropping earlier events that collide with it.

    When the first high water wraps past midnight, the previous day's
    rolled-over events land after this batch's first high. Those are
    dropped, and so is a directly preceding event of the same kind, which
    keeps strict alternation. The batch itself is always kept whole, so a
    day's tides depend only on its own batch and its neighbours', never on
    where the generated range starts.
    """
    first = to_utc(batch[0].time)
    while kept and (to_utc(kept[-1].time) >= first or kept[-1].kind == batch[0].kind):
        kept.pop()
    kept.extend(batch)


def generate_tides(
    station: Station,
    start_date: Union[date, datetime],
    days: int,
    tz: tzinfo = DEFAULT_TIMEZONE
) -> List[TidalEvent]:
    """
    Generate alternating high and low tide events for a range of days.

    Event times are offsets in elapsed time from local midnight, so a batch
    keeps its spacing across a DST change.

    Args:
        station: Station the tides are predicted for
        start_date: First calendar day; datetimes are reduced to their local date
        days: Number of days to generate, at least 1
        tz: Timezone defining local midnight

    Returns:
        TidalEvent list sorted by time, strictly alternating High/Low

    Raises:
        ValueError: If days is less than 1
    """
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")

    if isinstance(start_date, datetime):
        start_date = to_local(start_date, tz).date()

    events: List[TidalEvent] = []
    for day in daterange(start_date, days):
        _merge_batch(events, _day_batch(station, day, tz))
    return events


def upcoming_events(
    events: Iterable[TidalEvent],
    now: datetime,
    count: int = 4,
    tz: tzinfo = DEFAULT_TIMEZONE
) -> List[TidalEvent]:
    """Return the next ``count`` events strictly after ``now``."""
    now = to_utc(to_local(now, tz))
    return [e for e in events if to_utc(e.time) > now][:count]


def nearest_station(stations: Sequence[Station], lat: float, lon: float) -> Station:
    """
    Find the station closest to a position.

    Distance is plain Euclidean distance in degrees, which is adequate for
    picking between nearby coastal stations.
    """
    if not stations:
        raise ValueError("No stations to choose from")
    return min(stations, key=lambda s: math.hypot(s.latitude - lat, s.longitude - lon))


def stations_from_config(config: Dict[str, Any]) -> List[Station]:
    """Build Station objects from the ``stations`` section of the configuration."""
    stations = []
    for entry in config.get('stations') or []:
        try:
            stations.append(Station(
                id=str(entry['id']),
                name=str(entry.get('name', entry['id'])),
                latitude=float(entry['lat']),
                longitude=float(entry['lon'])
            ))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid station entry {entry!r}: {e}")
    return stations


class TidesService:
    """Service for generating tide predictions for configured stations."""

    def __init__(self, config_path: Optional[str] = None, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the TidesService.

        Args:
            config_path: Path to a YAML configuration file; defaults to the
                packaged config.yaml
            config: Already loaded configuration, used instead of config_path
        """
        if config is None:
            config = load_config(config_path)
        else:
            config = with_defaults(config)

        self.tz = ZoneInfo(config['location']['timezone'])
        self.days_before = int(config['tides']['days_before'])
        self.days_after = int(config['tides']['days_after'])
        self.stations: Dict[str, Station] = {
            s.id: s for s in stations_from_config(config)}

        default_id = config['location']['default_station']
        if default_id not in self.stations:
            raise ValueError(
                f"Default station '{default_id}' is not among the configured stations")
        self.default_station = self.stations[default_id]

    def get_station(self, station_id: str) -> Station:
        """Look up a station by id, raising ValueError for unknown ids."""
        try:
            return self.stations[station_id]
        except KeyError:
            raise ValueError(f"Unknown station: {station_id}")

    def station_for_position(self, position: Optional[Tuple[float, float]]) -> Station:
        """
        Pick the station nearest to a (lat, lon) position.

        Falls back to the default station when no position is available.
        """
        if position is None:
            logging.warning(
                f"No position available, using default station {self.default_station.name}")
            return self.default_station
        lat, lon = position
        return nearest_station(list(self.stations.values()), lat, lon)

    def get_predictions(
        self,
        station: Station,
        start_date: Union[date, datetime],
        days: int
    ) -> List[TidalEvent]:
        """Generate tide events for ``days`` local days starting at ``start_date``."""
        return generate_tides(station, start_date, days, self.tz)

    def tide_window(self, station: Station, around: Optional[datetime] = None) -> List[TidalEvent]:
        """
        Generate the events shown around a moment, from ``days_before`` days
        before its local date through ``days_after`` days after it.

        Args:
            station: Station to predict for
            around: Centre of the window; defaults to now
        """
        around = to_local(around or datetime.now(self.tz), self.tz)
        start = around.date() - timedelta(days=self.days_before)
        days = self.days_before + self.days_after + 1
        events = self.get_predictions(station, start, days)
        if not events:
            logging.warning(f"No tide events generated for {station.name} around {around}")
        return events

    def next_tides(self, station: Station, now: Optional[datetime] = None, count: int = 4) -> List[TidalEvent]:
        """Return the next ``count`` tide events after ``now`` for a station."""
        now = to_local(now or datetime.now(self.tz), self.tz)
        return upcoming_events(self.tide_window(station, now), now, count, self.tz)
