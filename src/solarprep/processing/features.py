"""Calendar and cyclical time features per slot.

Features are derived from the slot timestamp only and never touch the
measured fields:
- hour, day_of_week (Monday=0), day_of_month, month (1-12), day_of_year
- is_weekend, season (spring/summer/autumn/winter by month)
- sin/cos encodings of hour-of-day and day-of-year
"""

from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

FEATURE_COLUMNS = (
    "hour",
    "day_of_week",
    "day_of_month",
    "month",
    "day_of_year",
    "is_weekend",
    "season",
    "hour_sin",
    "hour_cos",
    "day_of_year_sin",
    "day_of_year_cos",
)


@dataclass(frozen=True)
class TimeFeatures:
    """Calendar features of one slot, read in the configured timezone.

    Encodings follow pandas (not Sunday=0 or zero-based months):
    - day_of_week: Monday=0 ... Sunday=6
    - month: 1-12
    - day_of_year: 1 on January 1
    """

    hour: int
    day_of_week: int
    day_of_month: int
    month: int
    day_of_year: int
    is_weekend: bool
    season: str
    hour_sin: float
    hour_cos: float
    day_of_year_sin: float
    day_of_year_cos: float

    def to_dict(self) -> dict:
        return asdict(self)


def season_for_month(month: int) -> str:
    """Meteorological season of a 1-based month (northern hemisphere)."""
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"


def compute_time_features(timestamps: pd.Series | pd.DatetimeIndex, tz: str = "UTC") -> pd.DataFrame:
    """Compute the feature columns for a sequence of tz-aware timestamps.

    Args:
        timestamps: Slot timestamps (UTC)
        tz: Zone in which calendar fields are read (default: UTC)

    Returns:
        DataFrame with FEATURE_COLUMNS, positionally aligned to ``timestamps``

    Example:
        >>> idx = pd.DatetimeIndex(["2024-06-15 12:00"], tz="UTC")
        >>> compute_time_features(idx).iloc[0][["hour", "season", "is_weekend"]].tolist()
        [12, 'summer', True]
    """
    local = pd.DatetimeIndex(timestamps).tz_convert(tz)

    hour = local.hour.to_numpy()
    day_of_year = local.dayofyear.to_numpy()
    month = local.month.to_numpy()
    day_of_week = local.dayofweek.to_numpy()

    return pd.DataFrame(
        {
            "hour": hour,
            "day_of_week": day_of_week,
            "day_of_month": local.day.to_numpy(),
            "month": month,
            "day_of_year": day_of_year,
            "is_weekend": day_of_week >= 5,
            "season": [season_for_month(int(m)) for m in month],
            "hour_sin": np.sin(2 * np.pi * hour / 24),
            "hour_cos": np.cos(2 * np.pi * hour / 24),
            "day_of_year_sin": np.sin(2 * np.pi * day_of_year / 365),
            "day_of_year_cos": np.cos(2 * np.pi * day_of_year / 365),
        },
        columns=list(FEATURE_COLUMNS),
    )


def add_time_features(frame: pd.DataFrame, tz: str = "UTC") -> pd.DataFrame:
    """Return a copy of ``frame`` with the feature columns appended."""
    featured = frame.copy()
    features = compute_time_features(frame["timestamp"], tz=tz)
    for column in FEATURE_COLUMNS:
        featured[column] = features[column].to_numpy()
    return featured
