"""Atmospheric pressure history and short-term trend classification."""
import logging
import threading
from bisect import bisect_left, bisect_right
from datetime import datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from lunartide.models import PressureSample, PressureTrend
from lunartide.timeutils import DEFAULT_TIMEZONE, to_local, to_utc


class PressureTrendTracker:
    """
    Thread-safe, time-ordered buffer of pressure samples.

    Samples older than the retention window (measured from the newest
    sample unless a ``now`` is given) are dropped on every append. The
    buffer is additionally capped at ``capacity`` samples, oldest first.
    """

    def __init__(
        self,
        retention_hours: float = 72,
        capacity: int = 500,
        lookback_hours: float = 3,
        threshold_hpa: float = 0.5,
        tz: tzinfo = DEFAULT_TIMEZONE
    ):
        """
        Initialize the tracker.

        Args:
            retention_hours: How long samples are kept
            capacity: Maximum number of samples held
            lookback_hours: Distance of the comparison sample used by trend()
            threshold_hpa: Minimum change classified as rising or falling
            tz: Timezone for naive sample times
        """
        if capacity < 2:
            raise ValueError(f"capacity must be at least 2, got {capacity}")
        self.retention = timedelta(hours=retention_hours)
        self.capacity = capacity
        self.lookback = timedelta(hours=lookback_hours)
        self.threshold = threshold_hpa
        self.tz = tz

        self._samples: List[PressureSample] = []
        # UTC keys, so ordering and retention use elapsed time
        self._times: List[datetime] = []
        self.lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Dict[str, Any], tz: tzinfo = DEFAULT_TIMEZONE) -> 'PressureTrendTracker':
        settings = config.get('pressure', {})
        return cls(
            retention_hours=settings.get('retention_hours', 72),
            capacity=settings.get('capacity', 500),
            lookback_hours=settings.get('lookback_hours', 3),
            threshold_hpa=settings.get('threshold_hpa', 0.5),
            tz=tz
        )

    def __len__(self) -> int:
        with self.lock:
            return len(self._samples)

    def append(self, sample: PressureSample, now: Optional[datetime] = None) -> None:
        """Insert a sample in time order and evict expired samples."""
        with self.lock:
            self._insert(sample)
            self._evict(now)

    def extend(self, samples: Iterable[PressureSample], now: Optional[datetime] = None) -> None:
        """Insert several samples under a single lock acquisition."""
        with self.lock:
            for sample in samples:
                self._insert(sample)
            self._evict(now)

    def _insert(self, sample: PressureSample) -> None:
        time = to_local(sample.time, self.tz)
        sample = PressureSample(time=time, pressure=sample.pressure)

        key = to_utc(time)
        idx = bisect_right(self._times, key)
        if idx < len(self._times):
            logging.debug(f"Inserting out-of-order pressure sample at {time}")
        self._times.insert(idx, key)
        self._samples.insert(idx, sample)

    def _evict(self, now: Optional[datetime]) -> None:
        if not self._times:
            return
        reference = to_utc(to_local(now, self.tz)) if now is not None else self._times[-1]
        expired = bisect_left(self._times, reference - self.retention)
        drop = max(expired, len(self._times) - self.capacity)
        if drop > 0:
            logging.debug(f"Evicting {drop} pressure sample(s) older than {self._times[drop - 1]}")
            del self._times[:drop]
            del self._samples[:drop]

    def samples(self) -> List[PressureSample]:
        """Copy of the buffered samples, oldest first."""
        with self.lock:
            return list(self._samples)

    def change(self, at: Optional[datetime] = None) -> Optional[float]:
        """
        Pressure change over the look-back period.

        Compares the newest sample (at or before ``at``, if given) with the
        earlier sample closest to ``lookback`` before it.

        Returns:
            Change in hPa, or None with fewer than two usable samples
        """
        with self.lock:
            if at is None:
                candidates = self._samples
            else:
                candidates = self._samples[:bisect_right(self._times, to_utc(to_local(at, self.tz)))]
            if len(candidates) < 2:
                return None

            latest = candidates[-1]
            target = to_utc(latest.time) - self.lookback
            reference = min(candidates[:-1], key=lambda s: abs(to_utc(s.time) - target))
            return latest.pressure - reference.pressure

    def trend(self, at: Optional[datetime] = None) -> PressureTrend:
        """Classify the short-term trend; Stable when there is not enough data."""
        delta = self.change(at)
        if delta is None:
            return PressureTrend.STABLE
        if delta > self.threshold:
            return PressureTrend.RISING
        if delta < -self.threshold:
            return PressureTrend.FALLING
        return PressureTrend.STABLE

    def to_records(self) -> List[Dict[str, Any]]:
        """Serializable history: ordered ``{time, pressure}`` pairs."""
        return [{"time": s.time.isoformat(), "pressure": s.pressure} for s in self.samples()]

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]], **kwargs: Any) -> 'PressureTrendTracker':
        """Restore a tracker from records produced by to_records()."""
        tracker = cls(**kwargs)
        samples = []
        for record in records:
            time = record["time"]
            if isinstance(time, str):
                time = datetime.fromisoformat(time)
            samples.append(PressureSample(time=time, pressure=float(record["pressure"])))
        tracker.extend(samples)
        return tracker

    def to_frame(self) -> pd.DataFrame:
        """History as a DataFrame with 'time' and 'pressure' columns."""
        rows = [{"time": s.time, "pressure": s.pressure} for s in self.samples()]
        return pd.DataFrame(rows, columns=["time", "pressure"])
