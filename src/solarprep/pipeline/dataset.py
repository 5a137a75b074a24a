"""Dataset — the terminal artifact of one pipeline run.

All types here are frozen; consumers treat a Dataset as read-only and
re-request instead of patching it.
"""

from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from solarprep.engine import (
    FieldStatistics,
    QualityReport,
    compute_correlations,
    correlation_key,
)
from solarprep.processing import FEATURE_COLUMNS, TimeFeatures, empty_aligned
from solarprep.signals import RawSample


@dataclass(frozen=True)
class AlignedRecord:
    """One hourly slot with all four fields and its time features."""

    timestamp: datetime
    solar: float | None
    load: float | None
    price: float | None
    price_level: str | None
    battery_soc: float | None
    features: TimeFeatures | None = None

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "solar": self.solar,
            "load": self.load,
            "price": self.price,
            "price_level": self.price_level,
            "battery_soc": self.battery_soc,
            "features": self.features.to_dict() if self.features else None,
        }


@dataclass(frozen=True)
class TimeRange:
    """First and last slot plus the slot count."""

    start: datetime | None = None
    end: datetime | None = None
    hours: int = 0

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "hours": self.hours,
        }


@dataclass(frozen=True)
class DatasetStatistics:
    """Per-field statistics, correlations and quality of a dataset."""

    solar: FieldStatistics
    load: FieldStatistics
    price: FieldStatistics
    battery: FieldStatistics
    correlations: dict[str, float]
    data_quality: QualityReport

    @classmethod
    def empty(cls) -> "DatasetStatistics":
        """Zeroed statistics with a "No data available" quality issue."""
        return cls(
            solar=FieldStatistics.empty(),
            load=FieldStatistics.empty(),
            price=FieldStatistics.empty(),
            battery=FieldStatistics.empty(),
            correlations=compute_correlations(empty_aligned()),
            data_quality=QualityReport.no_data(),
        )

    def correlation(self, a: str, b: str) -> float:
        """Correlation of two fields, in either order."""
        return self.correlations[correlation_key(a, b)]

    def to_dict(self) -> dict:
        return {
            "solar": self.solar.to_dict(),
            "load": self.load.to_dict(),
            "price": self.price.to_dict(),
            "battery": self.battery.to_dict(),
            "correlations": dict(self.correlations),
            "data_quality": self.data_quality.to_dict(),
        }


@dataclass(frozen=True)
class Dataset:
    """Raw sequences, aligned slots, statistics and time range of one run."""

    solar: tuple[RawSample, ...] = ()
    load: tuple[RawSample, ...] = ()
    prices: tuple[RawSample, ...] = ()
    battery: tuple[RawSample, ...] = ()
    aligned: tuple[AlignedRecord, ...] = ()
    statistics: DatasetStatistics = field(default_factory=DatasetStatistics.empty)
    time_range: TimeRange = field(default_factory=TimeRange)

    def to_dict(self, include_records: bool = True) -> dict:
        """Convert to dictionary for serialization.

        Args:
            include_records: Include raw samples and aligned slots (default: True).
                Statistics and time range are always included.
        """
        data = {
            "statistics": self.statistics.to_dict(),
            "time_range": self.time_range.to_dict(),
        }
        if include_records:
            data["solar"] = [s.to_dict() for s in self.solar]
            data["load"] = [s.to_dict() for s in self.load]
            data["prices"] = [s.to_dict() for s in self.prices]
            data["battery"] = [s.to_dict() for s in self.battery]
            data["aligned"] = [r.to_dict() for r in self.aligned]
        return data

    def to_frame(self) -> pd.DataFrame:
        """Aligned slots as a DataFrame indexed by timestamp.

        Feature fields are flattened into columns next to the measurements,
        ready to hand to a model-training job.
        """
        columns = ["solar", "load", "price", "price_level", "battery_soc", *FEATURE_COLUMNS]
        rows = []
        for record in self.aligned:
            row = {
                "timestamp": record.timestamp,
                "solar": record.solar,
                "load": record.load,
                "price": record.price,
                "price_level": record.price_level,
                "battery_soc": record.battery_soc,
            }
            if record.features is not None:
                row.update(record.features.to_dict())
            rows.append(row)

        if not rows:
            return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], tz="UTC", name="timestamp"))
        frame = pd.DataFrame(rows).set_index("timestamp")
        frame.index = pd.DatetimeIndex(frame.index, name="timestamp")
        return frame.reindex(columns=columns)


def empty_dataset() -> Dataset:
    """Well-formed Dataset without any data."""
    return Dataset()
