"""Data pipeline orchestration — Store → Align → Repair → Features → Statistics.

The pipeline coordinates the entire data flow:
1. Load raw samples per signal kind from the time-series store
2. Align them onto an hourly timeline
3. Repair gaps, neutralize outliers, smooth power fields
4. Extract time features
5. Compute statistics and a quality report
6. Cache the resulting Dataset per lookback window

Components:
- HistoricalDataService: Main coordinator with caching
- Loader: Store → RawData
- Processor: RawData → Dataset
"""

from solarprep.pipeline.dataset import (
    AlignedRecord,
    Dataset,
    DatasetStatistics,
    TimeRange,
    empty_dataset,
)
from solarprep.pipeline.loader import Loader
from solarprep.pipeline.orchestrator import HistoricalDataService
from solarprep.pipeline.processor import Processor

__all__ = [
    "AlignedRecord",
    "Dataset",
    "DatasetStatistics",
    "TimeRange",
    "empty_dataset",
    "Loader",
    "HistoricalDataService",
    "Processor",
]
