"""In-memory transformation stages for solarprep.

Each stage takes a DataFrame and returns a new one:
    - alignment: raw streams → hourly slots (nearest match within 2h)
    - gaps: interpolation / forward / backward fill / defaults
    - outliers: > 3 std from the mean → mean
    - smoothing: centered 7-slot moving average of solar and load
    - features: calendar and cyclical time features
"""

from solarprep.processing.alignment import (
    ALIGNED_COLUMNS,
    NUMERIC_FIELDS,
    align,
    build_timeline,
    empty_aligned,
    nearest_match,
)
from solarprep.processing.features import (
    FEATURE_COLUMNS,
    TimeFeatures,
    add_time_features,
    compute_time_features,
    season_for_month,
)
from solarprep.processing.gaps import FIELD_DEFAULTS, fill_gaps
from solarprep.processing.outliers import replace_outliers
from solarprep.processing.smoothing import smooth

__all__ = [
    "ALIGNED_COLUMNS",
    "NUMERIC_FIELDS",
    "align",
    "build_timeline",
    "empty_aligned",
    "nearest_match",
    "FEATURE_COLUMNS",
    "TimeFeatures",
    "add_time_features",
    "compute_time_features",
    "season_for_month",
    "FIELD_DEFAULTS",
    "fill_gaps",
    "replace_outliers",
    "smooth",
]
