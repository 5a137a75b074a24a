"""Tests for gap filling."""

from datetime import datetime, timezone

import numpy as np
import pandas as pd
import pytest

from solarprep.processing.gaps import FIELD_DEFAULTS, fill_gaps, fill_series


def make_frame(**columns) -> pd.DataFrame:
    n = len(next(iter(columns.values())))
    frame = pd.DataFrame({
        "timestamp": pd.date_range(datetime(2024, 6, 1, tzinfo=timezone.utc), periods=n, freq="h"),
        "solar": [np.nan] * n,
        "load": [np.nan] * n,
        "price": [np.nan] * n,
        "price_level": [None] * n,
        "battery_soc": [np.nan] * n,
    })
    for name, values in columns.items():
        frame[name] = values
    return frame


class TestFillSeries:
    """Single-series policy."""

    def test_linear_interpolation(self):
        filled = fill_series(pd.Series([100.0, np.nan, np.nan, 300.0]), default=0.0)
        assert filled.tolist() == pytest.approx([100.0, 166.6667, 233.3333, 300.0], rel=1e-4)

    def test_forward_fill_at_end(self):
        filled = fill_series(pd.Series([5.0, 7.0, np.nan, np.nan]), default=0.0)
        assert filled.tolist() == [5.0, 7.0, 7.0, 7.0]

    def test_backward_fill_at_start(self):
        filled = fill_series(pd.Series([np.nan, np.nan, 4.0, 6.0]), default=0.0)
        assert filled.tolist() == [4.0, 4.0, 4.0, 6.0]

    def test_default_when_empty(self):
        filled = fill_series(pd.Series([np.nan, np.nan]), default=500.0)
        assert filled.tolist() == [500.0, 500.0]

    def test_interpolation_uses_nearest_known_neighbours(self):
        filled = fill_series(pd.Series([0.0, np.nan, 10.0, np.nan, np.nan, np.nan, 50.0]), default=0.0)
        assert filled.tolist() == pytest.approx([0.0, 5.0, 10.0, 20.0, 30.0, 40.0, 50.0])


class TestFillGaps:
    """Whole-frame repair."""

    def test_no_nulls_after_fill(self):
        frame = make_frame(solar=[1.0, np.nan, 3.0], price_level=["CHEAP", None, None])
        filled = fill_gaps(frame)

        assert not filled[["solar", "load", "price", "battery_soc", "price_level"]].isna().any().any()

    def test_all_missing_fields_use_defaults(self):
        filled = fill_gaps(make_frame(solar=[100.0, np.nan, np.nan, 300.0]))

        assert filled["load"].tolist() == [FIELD_DEFAULTS["load"]] * 4 == [500.0] * 4
        assert filled["price"].tolist() == [10.0] * 4
        assert filled["battery_soc"].tolist() == [50.0] * 4
        assert filled["price_level"].tolist() == ["NORMAL"] * 4

    def test_price_level_forward_and_backward_fill(self):
        filled = fill_gaps(make_frame(price_level=[None, "CHEAP", None, "EXPENSIVE", None]))
        assert filled["price_level"].tolist() == ["CHEAP", "CHEAP", "CHEAP", "EXPENSIVE", "EXPENSIVE"]

    def test_input_not_modified(self):
        frame = make_frame(solar=[1.0, np.nan, 3.0])
        fill_gaps(frame)
        assert np.isnan(frame["solar"].iloc[1])

    def test_empty_frame(self):
        frame = make_frame(solar=[]).iloc[0:0]
        assert fill_gaps(frame).empty
