"""Statistics and quality engine for solarprep.

Modules:
    - statistics: Per-field descriptive statistics, Pearson correlations
    - quality: Completeness / volume / recency quality score
"""

from solarprep.engine.quality import (
    NO_DATA_ISSUE,
    QualityAssessor,
    QualityReport,
    assess_quality,
    completeness,
)
from solarprep.engine.statistics import (
    FieldStatistics,
    compute_correlations,
    compute_field_statistics,
    correlation_key,
    pearson_correlation,
)

__all__ = [
    "NO_DATA_ISSUE",
    "QualityAssessor",
    "QualityReport",
    "assess_quality",
    "completeness",
    "FieldStatistics",
    "compute_correlations",
    "compute_field_statistics",
    "correlation_key",
    "pearson_correlation",
]
