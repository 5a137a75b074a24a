"""Gap filling for aligned slots.

Policy per field, in priority order:
1. Known values on both sides → linear interpolation by slot position
2. Only an earlier value → forward fill
3. Only a later value → backward fill
4. Nothing at all → fixed per-field default

The defaults are policy, not physics: a field with no samples at all is
reported at its default in every slot and biases the statistics.
"""

import logging

import pandas as pd

from solarprep.processing.alignment import NUMERIC_FIELDS
from solarprep.signals import DEFAULT_PRICE_LEVEL

logger = logging.getLogger(__name__)

FIELD_DEFAULTS: dict[str, float] = {
    "solar": 0.0,
    "load": 500.0,        # W baseline household draw
    "price": 10.0,        # cents
    "battery_soc": 50.0,  # %
}


def fill_series(values: pd.Series, default: float) -> pd.Series:
    """Fill one numeric series; the result has no NaN."""
    filled = values.astype("float64").interpolate(method="linear", limit_area="inside")
    return filled.ffill().bfill().fillna(default)


def fill_gaps(frame: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of the aligned frame with every gap repaired.

    Args:
        frame: Aligned frame (see alignment.align)

    Returns:
        New DataFrame where solar, load, price, battery_soc and price_level
        are non-null in every slot. The input is not modified.
    """
    filled = frame.copy()
    if filled.empty:
        return filled

    for field in NUMERIC_FIELDS:
        missing = int(filled[field].isna().sum())
        if missing:
            logger.debug("%s: filling %d/%d missing slots", field, missing, len(filled))
        filled[field] = fill_series(filled[field], FIELD_DEFAULTS[field])

    levels = filled["price_level"].astype("object")
    if levels.notna().any():
        levels = levels.ffill().bfill()
    filled["price_level"] = levels.fillna(DEFAULT_PRICE_LEVEL)
    return filled
