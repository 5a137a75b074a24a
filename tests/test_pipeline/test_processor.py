"""Tests for Processor — raw samples to Dataset."""

from datetime import datetime, timedelta, timezone

import pytest

from solarprep.pipeline.processor import Processor
from solarprep.signals import RawData, RawSample, SignalKind


T0 = datetime(2024, 6, 1, tzinfo=timezone.utc)


def series(kind: SignalKind, values: list[float], level: str | None = None) -> tuple[RawSample, ...]:
    return tuple(
        RawSample(timestamp=T0 + timedelta(hours=i), value=v, kind=kind, level=level)
        for i, v in enumerate(values)
    )


def complete_raw(hours: int) -> RawData:
    """Every kind sampled every hour, values cycling over a day."""
    return RawData(
        solar=series(SignalKind.SOLAR, [100.0 * (i % 24) for i in range(hours)]),
        load=series(SignalKind.LOAD, [400.0 + 10 * (i % 12) for i in range(hours)]),
        prices=series(SignalKind.PRICE, [20.0 + (i % 6) for i in range(hours)], level="NORMAL"),
        battery=series(SignalKind.BATTERY, [float(30 + i % 40) for i in range(hours)]),
    )


class TestProcess:
    """Full stage chain."""

    def test_one_record_per_hour(self):
        raw = complete_raw(48)
        dataset = Processor().process(raw, now=T0 + timedelta(hours=47))

        assert len(dataset.aligned) == 48
        assert dataset.time_range.hours == 48
        assert dataset.time_range.start == T0
        assert dataset.time_range.end == T0 + timedelta(hours=47)

        steps = {
            b.timestamp - a.timestamp for a, b in zip(dataset.aligned, dataset.aligned[1:])
        }
        assert steps == {timedelta(hours=1)}

    def test_no_nulls_in_aligned_records(self):
        raw = RawData(solar=series(SignalKind.SOLAR, [5.0, 7.0]))
        dataset = Processor().process(raw, now=T0)

        for record in dataset.aligned:
            assert None not in (record.solar, record.load, record.price,
                                record.price_level, record.battery_soc)
            assert record.features is not None

    def test_interpolation_scenario_with_exact_matching(self):
        """Two solar samples three hours apart; no other kind observed."""
        raw = RawData(solar=(
            RawSample(timestamp=T0, value=100.0, kind=SignalKind.SOLAR),
            RawSample(timestamp=T0 + timedelta(hours=3), value=300.0, kind=SignalKind.SOLAR),
        ))
        dataset = Processor(tolerance_hours=0).process(raw, now=T0 + timedelta(hours=3))

        assert [r.solar for r in dataset.aligned] == pytest.approx([100.0, 166.6667, 233.3333, 300.0], rel=1e-4)
        assert [r.load for r in dataset.aligned] == [500.0] * 4
        assert [r.price for r in dataset.aligned] == [10.0] * 4
        assert [r.battery_soc for r in dataset.aligned] == [50.0] * 4
        assert [r.price_level for r in dataset.aligned] == ["NORMAL"] * 4

    def test_raw_sequences_passed_through(self):
        raw = complete_raw(5)
        dataset = Processor().process(raw, now=T0)
        assert dataset.solar == raw.solar
        assert dataset.prices == raw.prices

    def test_complete_fresh_week_scores_100(self):
        raw = complete_raw(200)
        dataset = Processor().process(raw, now=T0 + timedelta(hours=200))

        quality = dataset.statistics.data_quality
        assert quality.score == 100.0
        assert quality.issues == ()
        assert quality.total_points == 200

    def test_completeness_measured_before_repair(self):
        raw = RawData(solar=series(SignalKind.SOLAR, [float(i) for i in range(200)]))
        dataset = Processor().process(raw, now=T0 + timedelta(hours=200))

        issues = dataset.statistics.data_quality.issues
        assert "load data only 0.0% complete" in issues
        assert "solar data only" not in " ".join(issues)

    def test_statistics_and_correlations(self):
        dataset = Processor().process(complete_raw(48), now=T0)
        stats = dataset.statistics

        assert stats.solar.count == 48
        assert stats.battery.count == 48
        assert len(stats.correlations) == 6
        assert stats.correlation("load", "solar") == stats.correlations["solar_load"]
        for value in stats.correlations.values():
            assert -1.0 <= value <= 1.0

    def test_naive_now_read_as_utc(self):
        dataset = Processor().process(complete_raw(200), now=datetime(2024, 6, 9, 8))
        assert dataset.statistics.data_quality.score == 100.0

    def test_empty_input(self):
        dataset = Processor().process(RawData(), now=T0)

        assert dataset.aligned == ()
        assert dataset.time_range.hours == 0
        assert dataset.time_range.start is None
        assert dataset.statistics.data_quality.score == 0.0
        assert dataset.statistics.data_quality.issues == ("No data available",)
        assert all(v == 0.0 for v in dataset.statistics.correlations.values())


class TestProcessorInit:
    """Argument validation."""

    @pytest.mark.parametrize("kwargs,match", [
        ({"tolerance_hours": -1}, "tolerance_hours"),
        ({"outlier_threshold": 0}, "outlier_threshold"),
        ({"smoothing_half_window": 0}, "smoothing_half_window"),
    ])
    def test_invalid_arguments(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            Processor(**kwargs)
