"""Descriptive statistics and pairwise correlations of the aligned fields.

- Per field: count, mean, min, max, population std, median, quartiles
- Pearson correlation for every unordered pair of numeric fields
"""

from dataclasses import asdict, dataclass
from itertools import combinations

import numpy as np
import pandas as pd

from solarprep.processing.alignment import NUMERIC_FIELDS


@dataclass(frozen=True)
class FieldStatistics:
    """Descriptive statistics of one field.

    Attributes:
        count: Number of finite values
        mean: Arithmetic mean
        min: Smallest value
        max: Largest value
        std: Population standard deviation (ddof=0)
        median: Middle value (mean of the two middle values for even counts)
        percentile25: 25th percentile, linear between order statistics
        percentile75: 75th percentile, linear between order statistics
    """

    count: int
    mean: float
    min: float
    max: float
    std: float
    median: float
    percentile25: float
    percentile75: float

    @classmethod
    def empty(cls) -> "FieldStatistics":
        """All-zero statistics for a field without values."""
        return cls(count=0, mean=0.0, min=0.0, max=0.0, std=0.0,
                   median=0.0, percentile25=0.0, percentile75=0.0)

    def to_dict(self) -> dict:
        return asdict(self)


def _finite(values: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    return numeric[np.isfinite(numeric)]


def compute_field_statistics(values: pd.Series) -> FieldStatistics:
    """Compute FieldStatistics over the finite values of a series.

    Example:
        >>> compute_field_statistics(pd.Series([1.0, 2.0, 3.0, 4.0])).median
        2.5
    """
    finite = _finite(values)
    if finite.empty:
        return FieldStatistics.empty()

    return FieldStatistics(
        count=int(finite.size),
        mean=float(finite.mean()),
        min=float(finite.min()),
        max=float(finite.max()),
        std=float(finite.std(ddof=0)),
        median=float(finite.median()),
        percentile25=float(finite.quantile(0.25, interpolation="linear")),
        percentile75=float(finite.quantile(0.75, interpolation="linear")),
    )


def pearson_correlation(x: pd.Series, y: pd.Series) -> float:
    """Pearson correlation over the slots where both series have a value.

    Returns:
        Coefficient in [-1, 1]; 0.0 with fewer than 2 paired points or when
        either side is constant.
    """
    pairs = pd.DataFrame({
        "x": pd.to_numeric(x, errors="coerce"),
        "y": pd.to_numeric(y, errors="coerce"),
    }).replace([np.inf, -np.inf], np.nan).dropna()
    if len(pairs) < 2:
        return 0.0
    if pairs["x"].nunique() < 2 or pairs["y"].nunique() < 2:
        return 0.0

    dx = pairs["x"] - pairs["x"].mean()
    dy = pairs["y"] - pairs["y"].mean()
    denominator = np.sqrt((dx ** 2).sum() * (dy ** 2).sum())
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0
    return float(np.clip((dx * dy).sum() / denominator, -1.0, 1.0))


def correlation_key(a: str, b: str, fields: tuple[str, ...] = NUMERIC_FIELDS) -> str:
    """Key of an unordered field pair, in canonical field order."""
    first, second = sorted((a, b), key=fields.index)
    return f"{first}_{second}"


def compute_correlations(
    frame: pd.DataFrame,
    fields: tuple[str, ...] = NUMERIC_FIELDS,
) -> dict[str, float]:
    """Pearson correlation for every unordered pair of ``fields``.

    Returns:
        Dict keyed ``"<a>_<b>"`` (a before b in ``fields`` order)
    """
    if frame.empty:
        return {correlation_key(a, b, fields): 0.0 for a, b in combinations(fields, 2)}
    return {
        correlation_key(a, b, fields): pearson_correlation(frame[a], frame[b])
        for a, b in combinations(fields, 2)
    }
