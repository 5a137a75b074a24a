"""Data-quality scoring of a prepared dataset.

The score starts at 100 and is reduced for:
- Incomplete fields: completeness c < 0.8 costs (1 - c) × 20 per field
- Low volume: fewer than 168 hourly slots (one week) costs 30
- Staleness: latest slot older than 7 days costs min(20, days)

The score is floored at 0. Each deduction adds a human-readable issue.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

import pandas as pd

from solarprep.processing.alignment import NUMERIC_FIELDS, to_utc

logger = logging.getLogger(__name__)

NO_DATA_ISSUE = "No data available"


@dataclass(frozen=True)
class QualityReport:
    """Quality verdict for one dataset.

    Attributes:
        score: Heuristic quality in [0, 100]
        issues: One message per deduction
        total_points: Number of aligned slots
        time_span: Slots expressed in days, e.g. "7.0 days"
    """

    score: float
    issues: tuple[str, ...] = field(default_factory=tuple)
    total_points: int = 0
    time_span: str = "0 days"

    @classmethod
    def no_data(cls) -> "QualityReport":
        return cls(score=0.0, issues=(NO_DATA_ISSUE,), total_points=0, time_span="0 days")

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "issues": list(self.issues),
            "total_points": self.total_points,
            "time_span": self.time_span,
        }


def completeness(frame: pd.DataFrame, fields: tuple[str, ...] = NUMERIC_FIELDS) -> dict[str, float]:
    """Share of slots holding an observed (non-null) value, per field."""
    if frame.empty:
        return {name: 0.0 for name in fields}
    return {name: float(frame[name].notna().mean()) for name in fields}


class QualityAssessor:
    """Scores completeness, volume and recency of an aligned dataset.

    Args:
        min_completeness: Completeness below which a field is penalized (default: 0.8)
        completeness_weight: Penalty per unit of missing share (default: 20)
        min_points: Slots required for a usable dataset (default: 168)
        volume_penalty: Penalty for too few slots (default: 30)
        max_age_days: Age of the latest slot tolerated without penalty (default: 7)
        max_staleness_penalty: Cap of the staleness penalty (default: 20)

    Example:
        >>> assessor = QualityAssessor()
        >>> report = assessor.assess(timestamps, {"solar": 1.0, "load": 0.5}, now)
        >>> report.issues
        ('load data only 50.0% complete', ...)
    """

    def __init__(
        self,
        min_completeness: float = 0.8,
        completeness_weight: float = 20.0,
        min_points: int = 168,
        volume_penalty: float = 30.0,
        max_age_days: float = 7.0,
        max_staleness_penalty: float = 20.0,
    ) -> None:
        if not 0 < min_completeness <= 1:
            raise ValueError(f"min_completeness ({min_completeness}) must be in (0, 1]")
        if min_points < 1:
            raise ValueError(f"min_points ({min_points}) must be >= 1")

        self.min_completeness = min_completeness
        self.completeness_weight = completeness_weight
        self.min_points = min_points
        self.volume_penalty = volume_penalty
        self.max_age_days = max_age_days
        self.max_staleness_penalty = max_staleness_penalty

    def assess(
        self,
        timestamps: pd.Series,
        field_completeness: dict[str, float],
        now: datetime | None = None,
    ) -> QualityReport:
        """Score one dataset.

        Args:
            timestamps: Aligned slot timestamps (naive values are read as UTC)
            field_completeness: Observed share per field, before gap repair
            now: Evaluation time for the staleness check; naive values are
                read as UTC (default: current UTC time)

        Returns:
            QualityReport; ``QualityReport.no_data()`` when there are no slots
        """
        total_points = len(timestamps)
        if total_points == 0:
            return QualityReport.no_data()

        now_ts = to_utc(now or datetime.now(timezone.utc))
        issues: list[str] = []
        score = 100.0

        for name, ratio in field_completeness.items():
            if ratio < self.min_completeness:
                issues.append(f"{name} data only {ratio * 100:.1f}% complete")
                score -= (1 - ratio) * self.completeness_weight

        if total_points < self.min_points:
            issues.append("Insufficient data volume for reliable training")
            score -= self.volume_penalty

        latest = to_utc(pd.Series(timestamps).max())
        days_since_latest = (now_ts - latest).total_seconds() / 86400
        if days_since_latest > self.max_age_days:
            issues.append(f"Latest data is {days_since_latest:.0f} days old")
            score -= min(self.max_staleness_penalty, days_since_latest)

        score = max(0.0, score)
        if issues:
            logger.info("Data quality %.1f/100: %s", score, "; ".join(issues))

        return QualityReport(
            score=score,
            issues=tuple(issues),
            total_points=total_points,
            time_span=f"{total_points / 24:.1f} days",
        )


def assess_quality(
    timestamps: pd.Series,
    field_completeness: dict[str, float],
    now: datetime | None = None,
) -> QualityReport:
    """Score a dataset with the default QualityAssessor thresholds."""
    return QualityAssessor().assess(timestamps, field_completeness, now=now)
