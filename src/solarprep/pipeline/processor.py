"""Processor — Raw samples → Align → Repair → Features → Statistics.

Runs the in-memory stages as a chain of pure DataFrame transformations
and assembles the resulting Dataset.
"""

import logging
from datetime import datetime, timedelta, timezone

import pandas as pd

from solarprep.engine import (
    QualityAssessor,
    compute_correlations,
    compute_field_statistics,
    completeness,
)
from solarprep.pipeline.dataset import AlignedRecord, Dataset, DatasetStatistics, TimeRange
from solarprep.processing import (
    add_time_features,
    align,
    fill_gaps,
    replace_outliers,
    smooth,
)
from solarprep.processing.features import TimeFeatures
from solarprep.signals import RawData

logger = logging.getLogger(__name__)


class Processor:
    """Turns one RawData load into a Dataset.

    Stages, in order: alignment, gap filling, outlier replacement,
    smoothing, time features, statistics and quality. None of them mutates
    its input.

    Args:
        tolerance_hours: Nearest-match acceptance radius (default: 2)
        outlier_threshold: Outlier limit in population std (default: 3.0)
        smoothing_half_window: Moving average half window (default: 3)
        timezone: Zone for calendar features (default: UTC)
        assessor: Quality scorer (default: QualityAssessor())

    Usage:
        processor = Processor()
        dataset = processor.process(raw)
        print(dataset.statistics.data_quality.score)
    """

    def __init__(
        self,
        tolerance_hours: float = 2.0,
        outlier_threshold: float = 3.0,
        smoothing_half_window: int = 3,
        timezone: str = "UTC",
        assessor: QualityAssessor | None = None,
    ) -> None:
        if tolerance_hours < 0:
            raise ValueError(f"tolerance_hours ({tolerance_hours}) must be >= 0")
        if outlier_threshold <= 0:
            raise ValueError(f"outlier_threshold ({outlier_threshold}) must be > 0")
        if smoothing_half_window < 1:
            raise ValueError(f"smoothing_half_window ({smoothing_half_window}) must be >= 1")

        self.tolerance = timedelta(hours=tolerance_hours)
        self.outlier_threshold = outlier_threshold
        self.smoothing_half_window = smoothing_half_window
        self.timezone = timezone
        self.assessor = assessor or QualityAssessor()

    def prepare(self, raw: RawData) -> tuple[pd.DataFrame, dict[str, float]]:
        """Run alignment through feature extraction.

        Returns:
            (featured frame, completeness per field measured before gap repair)
        """
        aligned = align(raw, tolerance=self.tolerance)
        observed = completeness(aligned)
        if aligned.empty:
            return add_time_features(aligned, tz=self.timezone), observed

        logger.info("Aligned %d hourly slots", len(aligned))
        filled = fill_gaps(aligned)
        cleaned = replace_outliers(filled, threshold=self.outlier_threshold)
        smoothed = smooth(cleaned, half_window=self.smoothing_half_window)
        return add_time_features(smoothed, tz=self.timezone), observed

    def compute_statistics(
        self,
        frame: pd.DataFrame,
        observed: dict[str, float],
        now: datetime | None = None,
    ) -> DatasetStatistics:
        """Descriptive statistics, correlations and quality of a prepared frame."""
        return DatasetStatistics(
            solar=compute_field_statistics(frame["solar"]),
            load=compute_field_statistics(frame["load"]),
            price=compute_field_statistics(frame["price"]),
            battery=compute_field_statistics(frame["battery_soc"]),
            correlations=compute_correlations(frame),
            data_quality=self.assessor.assess(frame["timestamp"], observed, now=now),
        )

    @staticmethod
    def to_records(frame: pd.DataFrame) -> tuple[AlignedRecord, ...]:
        """Convert the featured frame into AlignedRecord values."""
        records = []
        for row in frame.itertuples(index=False):
            features = TimeFeatures(
                hour=int(row.hour),
                day_of_week=int(row.day_of_week),
                day_of_month=int(row.day_of_month),
                month=int(row.month),
                day_of_year=int(row.day_of_year),
                is_weekend=bool(row.is_weekend),
                season=str(row.season),
                hour_sin=float(row.hour_sin),
                hour_cos=float(row.hour_cos),
                day_of_year_sin=float(row.day_of_year_sin),
                day_of_year_cos=float(row.day_of_year_cos),
            )
            records.append(
                AlignedRecord(
                    timestamp=row.timestamp.to_pydatetime(),
                    solar=float(row.solar),
                    load=float(row.load),
                    price=float(row.price),
                    price_level=str(row.price_level),
                    battery_soc=float(row.battery_soc),
                    features=features,
                )
            )
        return tuple(records)

    def process(self, raw: RawData, now: datetime | None = None) -> Dataset:
        """Run every stage and assemble the Dataset.

        Args:
            raw: Raw sequences from the Loader
            now: Evaluation time for the staleness check (default: current UTC time)

        Returns:
            Dataset whose ``aligned`` has one gap-free record per hour
        """
        now = now or datetime.now(timezone.utc)
        frame, observed = self.prepare(raw)
        statistics = self.compute_statistics(frame, observed, now=now)
        aligned = self.to_records(frame)

        time_range = TimeRange(
            start=aligned[0].timestamp if aligned else None,
            end=aligned[-1].timestamp if aligned else None,
            hours=len(aligned),
        )
        logger.info(
            "Prepared %d slots (quality %.1f/100)",
            time_range.hours, statistics.data_quality.score,
        )

        return Dataset(
            solar=raw.solar,
            load=raw.load,
            prices=raw.prices,
            battery=raw.battery,
            aligned=aligned,
            statistics=statistics,
            time_range=time_range,
        )
