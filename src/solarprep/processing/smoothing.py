"""Centered moving-average smoothing of the power fields."""

import pandas as pd

SMOOTHED_FIELDS = ("solar", "load")


def smooth(
    frame: pd.DataFrame,
    half_window: int = 3,
    fields: tuple[str, ...] = SMOOTHED_FIELDS,
) -> pd.DataFrame:
    """Return a copy with a centered moving average applied to ``fields``.

    Each inner slot becomes the mean of the ``2 * half_window + 1`` slots
    centered on it, taken from the unsmoothed input. The first and last
    ``half_window`` slots keep their values; the window never wraps or shrinks.

    Raises:
        ValueError: If half_window < 1
    """
    if half_window < 1:
        raise ValueError(f"half_window ({half_window}) must be >= 1")

    smoothed = frame.copy()
    window = 2 * half_window + 1
    for field in fields:
        averaged = frame[field].rolling(window=window, center=True, min_periods=window).mean()
        # Edge slots have no full window and come back NaN.
        smoothed[field] = averaged.fillna(frame[field])
    return smoothed
