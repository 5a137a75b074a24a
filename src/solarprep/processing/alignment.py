"""Alignment: raw streams → one uniform hourly timeline.

The timeline spans the earliest to the latest observed sample across all
kinds. Each slot takes, per kind, the value of the sample nearest in time,
provided it lies within the tolerance radius; otherwise the slot is NaN.
"""

from datetime import datetime, timedelta

import numpy as np
import pandas as pd

from solarprep.signals import RawData, RawSample, SignalKind

NUMERIC_FIELDS = ("solar", "load", "price", "battery_soc")
ALIGNED_COLUMNS = ("timestamp", "solar", "load", "price", "price_level", "battery_soc")

_FIELD_BY_KIND = {
    SignalKind.SOLAR: "solar",
    SignalKind.LOAD: "load",
    SignalKind.PRICE: "price",
    SignalKind.BATTERY: "battery_soc",
}

_TS_DTYPE = "datetime64[ns, UTC]"


def empty_aligned() -> pd.DataFrame:
    """Aligned frame with the right columns and no slots."""
    frame = pd.DataFrame({col: pd.Series(dtype="float64") for col in ALIGNED_COLUMNS})
    frame["timestamp"] = pd.Series(dtype=_TS_DTYPE)
    frame["price_level"] = pd.Series(dtype="object")
    return frame


def to_utc(dt: datetime) -> pd.Timestamp:
    """Timestamp in UTC; naive values are taken to be UTC already."""
    ts = pd.Timestamp(dt)
    return ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")


def build_timeline(start: datetime, end: datetime) -> pd.DatetimeIndex:
    """Hourly slots from start to end inclusive, in fixed UTC hour steps.

    The first slot is ``start`` itself (not floored to the hour); the last
    slot is the latest ``start + k hours`` not after ``end``.

    Example:
        >>> build_timeline(t0, t0 + timedelta(hours=3, minutes=30))
        4 slots: t0, t0+1h, t0+2h, t0+3h
    """
    start_ts = to_utc(start)
    end_ts = to_utc(end)
    if end_ts < start_ts:
        return pd.DatetimeIndex([], dtype=_TS_DTYPE)
    steps = int((end_ts - start_ts) // pd.Timedelta(hours=1))
    offsets = pd.to_timedelta(np.arange(steps + 1), unit="h")
    return pd.DatetimeIndex(start_ts + offsets).astype(_TS_DTYPE)


def samples_to_frame(samples: tuple[RawSample, ...] | list[RawSample]) -> pd.DataFrame:
    """Sorted frame of (timestamp, value, level) for nearest-match lookup."""
    frame = pd.DataFrame(
        {
            "timestamp": pd.to_datetime([s.timestamp for s in samples], utc=True),
            "value": [s.value for s in samples],
            "level": [s.level for s in samples],
        }
    )
    frame["timestamp"] = frame["timestamp"].astype(_TS_DTYPE)
    return frame.sort_values("timestamp", kind="stable").reset_index(drop=True)


def nearest_match(
    timeline: pd.DatetimeIndex,
    samples: tuple[RawSample, ...] | list[RawSample],
    tolerance: timedelta = timedelta(hours=2),
) -> pd.DataFrame:
    """Nearest sample per slot, NaN where the closest one is beyond tolerance.

    Uses a sorted search (merge_asof) rather than scanning every sample per
    slot. Equidistant candidates resolve to the earlier sample.

    Args:
        timeline: Hourly slots
        samples: Raw samples of one kind, any order
        tolerance: Acceptance radius (inclusive)

    Returns:
        DataFrame aligned to ``timeline`` with ``value`` and ``level`` columns
    """
    left = pd.DataFrame({"timestamp": timeline.astype(_TS_DTYPE)})
    if len(samples) == 0 or len(timeline) == 0:
        left["value"] = np.nan
        left["level"] = None
        return left[["value", "level"]]

    matched = pd.merge_asof(
        left,
        samples_to_frame(samples),
        on="timestamp",
        direction="nearest",
        tolerance=pd.Timedelta(tolerance),
    )
    return matched[["value", "level"]]


def align(raw: RawData, tolerance: timedelta = timedelta(hours=2)) -> pd.DataFrame:
    """Map every raw stream onto the shared hourly timeline.

    Args:
        raw: Raw sequences from the Loader
        tolerance: Nearest-match acceptance radius (default: 2 hours)

    Returns:
        DataFrame with columns timestamp, solar, load, price, price_level,
        battery_soc; one row per slot, ascending. Empty when there are no
        samples at all.

    Raises:
        ValueError: If tolerance is negative
    """
    if tolerance < timedelta(0):
        raise ValueError(f"tolerance ({tolerance}) must be >= 0")

    by_kind = raw.by_kind()
    timestamps = [s.timestamp for samples in by_kind.values() for s in samples]
    if not timestamps:
        return empty_aligned()

    timeline = build_timeline(min(timestamps), max(timestamps))
    aligned = pd.DataFrame({"timestamp": timeline})

    for kind, samples in by_kind.items():
        matched = nearest_match(timeline, samples, tolerance)
        aligned[_FIELD_BY_KIND[kind]] = matched["value"].astype("float64").to_numpy()
        if kind is SignalKind.PRICE:
            aligned["price_level"] = matched["level"].to_numpy()

    return aligned[list(ALIGNED_COLUMNS)]
