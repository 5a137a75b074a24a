"""Orchestrator — Cache → Store → Processor → Dataset.

Entry point for consumers (training jobs, quality reports):

    service = HistoricalDataService()
    dataset = await service.load_historical_data(window_days=30)
    service.clear_cache()

Failures never reach the caller: a kind that cannot be loaded is left
empty, and any other failure yields an empty Dataset.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from solarprep.cache import ResultCache
from solarprep.clients.influx import InfluxClient, SeriesStore
from solarprep.config import settings
from solarprep.pipeline.dataset import Dataset, empty_dataset
from solarprep.pipeline.loader import Loader
from solarprep.pipeline.processor import Processor
from solarprep.signals import SignalKind

logger = logging.getLogger(__name__)


class HistoricalDataService:
    """Prepares and caches historical datasets per lookback window.

    Args:
        store: Query interface to use. When None, an InfluxClient is built
            from settings and opened for the duration of each load.
        cache: Result cache (default: ResultCache with settings TTL)
        processor: Stage runner (default: Processor from settings)

    Usage:
        service = HistoricalDataService()
        dataset = await service.load_historical_data(30)
        print(dataset.statistics.data_quality.score)
    """

    def __init__(
        self,
        store: SeriesStore | None = None,
        cache: ResultCache | None = None,
        processor: Processor | None = None,
    ) -> None:
        self.store = store
        self.cache = cache or ResultCache(ttl_hours=settings.cache_ttl_hours)
        self.processor = processor or Processor(
            tolerance_hours=settings.alignment_tolerance_hours,
            outlier_threshold=settings.outlier_threshold,
            smoothing_half_window=settings.smoothing_half_window,
            timezone=settings.timezone,
        )

    @asynccontextmanager
    async def _open_store(self) -> AsyncIterator[SeriesStore]:
        """Yield the injected store, or a settings-configured InfluxClient."""
        if self.store is not None:
            yield self.store
            return

        async with InfluxClient(
            url=settings.influx_url,
            database=settings.influx_database,
            username=settings.influx_username,
            password=settings.influx_password,
            rate_limit=settings.influx_rate_limit,
            timeout=settings.influx_timeout,
            topic_patterns={
                SignalKind.SOLAR: settings.solar_topic_pattern,
                SignalKind.LOAD: settings.load_topic_pattern,
                SignalKind.BATTERY: settings.battery_topic_pattern,
            },
            price_measurement=settings.price_measurement,
        ) as client:
            yield client

    async def _build(self, window_days: int) -> Dataset:
        now = datetime.now(timezone.utc)
        async with self._open_store() as store:
            loader = Loader(store, price_multiplier=settings.price_multiplier)
            raw = await loader.load(window_days=window_days, now=now)
        return self.processor.process(raw, now=now)

    async def load_historical_data(self, window_days: int | None = None) -> Dataset:
        """Return the prepared dataset for the last ``window_days`` days.

        Served from the cache while the entry is younger than the TTL;
        otherwise the pipeline runs and the entry is replaced. Concurrent
        calls for the same window wait for the one computation in flight.

        Args:
            window_days: Lookback window (default: settings.lookback_days)

        Returns:
            Dataset; an empty Dataset if the pipeline failed

        Raises:
            ValueError: If window_days < 1
        """
        if window_days is None:
            window_days = settings.lookback_days
        if window_days < 1:
            raise ValueError(f"window_days ({window_days}) must be >= 1")

        async with self.cache.lock(window_days):
            cached = self.cache.get(window_days)
            if cached is not None:
                logger.info("Using cached historical data (%d days)", window_days)
                return cached

            try:
                dataset = await self._build(window_days)
            except Exception as e:
                logger.error("Error loading historical data: %s", e, exc_info=True)
                return empty_dataset()

            self.cache.put(window_days, dataset)
            logger.info("Historical data loaded and processed (%d days)", window_days)
            return dataset

    def clear_cache(self) -> None:
        """Invalidate every cached dataset."""
        self.cache.clear()
