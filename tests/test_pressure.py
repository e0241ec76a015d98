"""Tests for the pressure trend tracker."""
import threading
import pytest
from datetime import datetime, timedelta, timezone

import pandas as pd

from lunartide.models import PressureSample, PressureTrend
from lunartide.pressure import PressureTrendTracker

T0 = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)


def sample(hours: float, pressure: float) -> PressureSample:
    return PressureSample(time=T0 + timedelta(hours=hours), pressure=pressure)


@pytest.fixture
def tracker():
    return PressureTrendTracker()


def test_rising_example(tracker):
    """+1.8 hPa over the 3h look-back is rising."""
    tracker.extend([sample(0, 1015.0), sample(1, 1015.2), sample(3, 1016.8)])
    assert tracker.change() == pytest.approx(1.8)
    assert tracker.trend(at=T0 + timedelta(hours=3)) is PressureTrend.RISING


def test_falling(tracker):
    tracker.extend([sample(0, 1012.0), sample(3, 1010.9)])
    assert tracker.trend() is PressureTrend.FALLING


def test_small_change_is_stable(tracker):
    tracker.extend([sample(0, 1012.0), sample(3, 1012.4)])
    assert tracker.trend() is PressureTrend.STABLE


def test_threshold_is_exclusive(tracker):
    tracker.extend([sample(0, 1012.0), sample(3, 1012.5)])
    assert tracker.trend() is PressureTrend.STABLE


def test_insufficient_data_is_stable(tracker):
    assert tracker.trend() is PressureTrend.STABLE
    assert tracker.change() is None
    tracker.append(sample(0, 1000.0))
    assert tracker.trend() is PressureTrend.STABLE


def test_lookback_uses_nearest_sample(tracker):
    """Samples every 10 minutes: the comparison is the one taken 3h earlier."""
    tracker.extend(sample(i / 6, 1000.0 + i * 0.1) for i in range(37))
    # 36 samples * 0.1 = 6h of history, 3h look-back is 18 samples back
    assert tracker.change() == pytest.approx(1.8)


def test_trend_at_ignores_later_samples(tracker):
    tracker.extend([sample(0, 1015.0), sample(3, 1016.8), sample(4, 1010.0)])
    assert tracker.trend() is PressureTrend.FALLING
    assert tracker.trend(at=T0 + timedelta(hours=3)) is PressureTrend.RISING


def test_out_of_order_samples_are_sorted(tracker):
    tracker.append(sample(2, 1002.0))
    tracker.append(sample(0, 1000.0))
    tracker.append(sample(1, 1001.0))
    assert [s.pressure for s in tracker.samples()] == [1000.0, 1001.0, 1002.0]


def test_old_samples_are_evicted(tracker):
    tracker.append(sample(0, 1000.0))
    tracker.append(sample(10, 1001.0))
    tracker.append(sample(73, 1002.0))
    assert [s.pressure for s in tracker.samples()] == [1001.0, 1002.0]


def test_eviction_relative_to_explicit_now(tracker):
    tracker.append(sample(0, 1000.0))
    tracker.append(sample(1, 1001.0), now=T0 + timedelta(hours=72, minutes=30))
    assert len(tracker) == 1


def test_capacity_drops_oldest():
    tracker = PressureTrendTracker(capacity=5)
    tracker.extend(sample(i / 6, 1000.0 + i) for i in range(8))
    samples = tracker.samples()
    assert len(samples) == 5
    assert samples[0].pressure == 1003.0


def test_rejects_tiny_capacity():
    with pytest.raises(ValueError):
        PressureTrendTracker(capacity=1)


def test_non_finite_pressure_rejected():
    with pytest.raises(ValueError, match="pressure"):
        PressureSample(time=T0, pressure=float("nan"))


def test_naive_times_are_localized(tracker, tz):
    tracker.append(PressureSample(time=datetime(2025, 10, 1, 12, 0), pressure=1010.0))
    assert tracker.samples()[0].time.tzinfo == tz


def test_records_restore_history(tracker):
    tracker.extend([sample(0, 1015.0), sample(1, 1015.2), sample(3, 1016.8)])
    records = tracker.to_records()
    assert records[0] == {"time": T0.astimezone(tracker.tz).isoformat(), "pressure": 1015.0}

    restored = PressureTrendTracker.from_records(records)
    assert restored.samples() == tracker.samples()
    assert restored.trend() is PressureTrend.RISING


def test_to_frame(tracker):
    tracker.extend([sample(0, 1015.0), sample(1, 1015.2)])
    df = tracker.to_frame()
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["time", "pressure"]
    assert df["pressure"].tolist() == [1015.0, 1015.2]


def test_from_config():
    config = {"pressure": {"retention_hours": 24, "capacity": 50, "lookback_hours": 1, "threshold_hpa": 1.0}}
    tracker = PressureTrendTracker.from_config(config)
    assert tracker.retention == timedelta(hours=24)
    assert tracker.capacity == 50
    assert tracker.lookback == timedelta(hours=1)
    assert tracker.threshold == 1.0


def test_concurrent_appends_stay_ordered(tracker):
    def worker(offset):
        for i in range(50):
            tracker.append(sample((i * 4 + offset) / 6, 1000.0 + offset))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    times = [s.time for s in tracker.samples()]
    assert len(times) == 200
    assert times == sorted(times)
