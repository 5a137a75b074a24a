"""Tests for calendar feature extraction."""

import numpy as np
import pandas as pd
import pytest

from solarprep.processing.features import (
    FEATURE_COLUMNS,
    add_time_features,
    compute_time_features,
    season_for_month,
)


class TestSeasonForMonth:
    """Month to season mapping."""

    @pytest.mark.parametrize("month,season", [
        (1, "winter"), (2, "winter"), (3, "spring"), (5, "spring"),
        (6, "summer"), (8, "summer"), (9, "autumn"), (11, "autumn"), (12, "winter"),
    ])
    def test_mapping(self, month, season):
        assert season_for_month(month) == season


class TestComputeTimeFeatures:
    """Per-slot features."""

    def test_saturday_noon_in_june(self):
        idx = pd.DatetimeIndex(["2024-06-15 12:00"], tz="UTC")
        row = compute_time_features(idx).iloc[0]

        assert row["hour"] == 12
        assert row["day_of_week"] == 5
        assert row["day_of_month"] == 15
        assert row["month"] == 6
        assert row["day_of_year"] == 167
        assert bool(row["is_weekend"]) is True
        assert row["season"] == "summer"

    def test_weekday_is_not_weekend(self):
        idx = pd.DatetimeIndex(["2024-06-17 08:00"], tz="UTC")  # Monday
        row = compute_time_features(idx).iloc[0]
        assert row["day_of_week"] == 0
        assert bool(row["is_weekend"]) is False

    def test_cyclical_encodings(self):
        idx = pd.DatetimeIndex(["2024-01-01 00:00", "2024-01-01 06:00"], tz="UTC")
        features = compute_time_features(idx)

        assert features["hour_sin"].iloc[0] == pytest.approx(0.0)
        assert features["hour_cos"].iloc[0] == pytest.approx(1.0)
        assert features["hour_sin"].iloc[1] == pytest.approx(1.0)
        assert features["hour_cos"].iloc[1] == pytest.approx(0.0, abs=1e-12)
        assert features["day_of_year_sin"].iloc[0] == pytest.approx(np.sin(2 * np.pi / 365))

    def test_encodings_on_unit_circle(self):
        idx = pd.date_range("2024-01-01", periods=48, freq="h", tz="UTC")
        features = compute_time_features(idx)

        hour_norm = features["hour_sin"] ** 2 + features["hour_cos"] ** 2
        assert np.allclose(hour_norm, 1.0)

    def test_calendar_read_in_configured_zone(self):
        idx = pd.DatetimeIndex(["2024-06-15 22:30"], tz="UTC")
        row = compute_time_features(idx, tz="Europe/Berlin").iloc[0]

        assert row["hour"] == 0
        assert row["day_of_month"] == 16
        assert row["day_of_week"] == 6

    def test_columns(self):
        idx = pd.DatetimeIndex(["2024-06-15 12:00"], tz="UTC")
        assert tuple(compute_time_features(idx).columns) == FEATURE_COLUMNS


class TestAddTimeFeatures:
    """Feature columns appended to the aligned frame."""

    def test_appends_without_touching_fields(self):
        frame = pd.DataFrame({
            "timestamp": pd.date_range("2024-06-01", periods=3, freq="h", tz="UTC"),
            "solar": [1.0, 2.0, 3.0],
        })
        featured = add_time_features(frame)

        assert featured["solar"].tolist() == [1.0, 2.0, 3.0]
        assert featured["hour"].tolist() == [0, 1, 2]
        assert "hour" not in frame.columns

    def test_empty_frame(self):
        frame = pd.DataFrame({"timestamp": pd.DatetimeIndex([], tz="UTC"), "solar": []})
        featured = add_time_features(frame)
        assert featured.empty
        assert set(FEATURE_COLUMNS) <= set(featured.columns)
