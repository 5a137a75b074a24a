"""Outlier neutralization.

A value further than ``threshold`` population standard deviations from its
field mean is replaced by the mean. The slot itself is kept so the hourly
timeline stays uniform. Each field is handled on its own.
"""

import logging

import numpy as np
import pandas as pd

from solarprep.processing.alignment import NUMERIC_FIELDS

logger = logging.getLogger(__name__)


def outlier_mask(values: pd.Series, threshold: float = 3.0) -> tuple[pd.Series, float]:
    """Flag values beyond ``threshold`` std of the mean.

    Returns:
        (mask, mean). The mask is all False when the field has fewer than
        one valid value or zero spread.
    """
    valid = values.dropna()
    if valid.empty:
        return pd.Series(False, index=values.index), float("nan")

    mean = float(valid.mean())
    std = float(valid.std(ddof=0))
    if not np.isfinite(std) or std == 0:
        return pd.Series(False, index=values.index), mean

    mask = (values - mean).abs() > threshold * std
    return mask.fillna(False), mean


def replace_outliers(
    frame: pd.DataFrame,
    threshold: float = 3.0,
    fields: tuple[str, ...] = NUMERIC_FIELDS,
) -> pd.DataFrame:
    """Return a copy with outliers of each field replaced by the field mean.

    Args:
        frame: Gap-filled aligned frame
        threshold: Deviation limit in population std (default: 3.0)
        fields: Columns to check (default: all numeric fields)

    Returns:
        New DataFrame; the input is not modified.

    Raises:
        ValueError: If threshold is not positive
    """
    if threshold <= 0:
        raise ValueError(f"threshold ({threshold}) must be > 0")

    cleaned = frame.copy()
    for field in fields:
        mask, mean = outlier_mask(cleaned[field], threshold)
        count = int(mask.sum())
        if count:
            logger.info(
                "Replacing %d %s outliers with mean %.2f (e.g. %s at %s)",
                count, field, mean,
                cleaned.loc[mask, field].iloc[0],
                cleaned.loc[mask, "timestamp"].iloc[0],
            )
            cleaned.loc[mask, field] = mean
    return cleaned
