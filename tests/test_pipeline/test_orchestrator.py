"""Tests for HistoricalDataService — caching and failure handling.

The store is replaced by an in-memory fake so the tests verify:
- Cache hits return the stored Dataset without touching the store
- Concurrent requests for one window trigger a single load
- Pipeline failures yield an empty, uncached Dataset
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from solarprep.cache import ResultCache
from solarprep.pipeline.dataset import empty_dataset
from solarprep.pipeline.orchestrator import HistoricalDataService
from solarprep.pipeline.processor import Processor
from solarprep.signals import SignalKind


def epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


class FakeStore:
    """SeriesStore returning a day of hourly rows for every kind."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.calls: list[SignalKind] = []

    async def query(self, kind, start, end):
        self.calls.append(kind)
        if self.delay:
            await asyncio.sleep(self.delay)
        value = {
            SignalKind.SOLAR: 1200.0,
            SignalKind.LOAD: 450.0,
            SignalKind.PRICE: 0.22,
            SignalKind.BATTERY: 60.0,
        }[kind]
        return [
            {"time": epoch_ms(end - timedelta(hours=h)), "value": value + h}
            for h in range(24)
        ]


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def service(store) -> HistoricalDataService:
    return HistoricalDataService(store=store, cache=ResultCache(ttl_hours=6), processor=Processor())


class TestLoadHistoricalData:
    """Cache-aside loading."""

    @pytest.mark.asyncio
    async def test_builds_dataset(self, service, store):
        dataset = await service.load_historical_data(7)

        assert len(dataset.aligned) == 24
        assert len(dataset.solar) == 24
        assert dataset.prices[0].value == pytest.approx(22.0)
        assert len(store.calls) == 4

    @pytest.mark.asyncio
    async def test_cache_hit_returns_same_dataset(self, service, store):
        first = await service.load_historical_data(7)
        second = await service.load_historical_data(7)

        assert second is first
        assert len(store.calls) == 4

    @pytest.mark.asyncio
    async def test_windows_cached_separately(self, service, store):
        await service.load_historical_data(7)
        await service.load_historical_data(30)

        assert len(store.calls) == 8
        assert len(service.cache) == 2

    @pytest.mark.asyncio
    async def test_clear_cache_forces_reload(self, service, store):
        first = await service.load_historical_data(7)
        service.clear_cache()
        second = await service.load_historical_data(7)

        assert second is not first
        assert len(store.calls) == 8

    @pytest.mark.asyncio
    async def test_concurrent_requests_single_load(self, store):
        store.delay = 0.01
        service = HistoricalDataService(store=store, cache=ResultCache(), processor=Processor())

        results = await asyncio.gather(*(service.load_historical_data(7) for _ in range(3)))

        assert results[0] is results[1] is results[2]
        assert len(store.calls) == 4

    @pytest.mark.asyncio
    async def test_default_window_from_settings(self, service, monkeypatch):
        from solarprep.config import settings

        monkeypatch.setattr(settings, "lookback_days", 14)
        await service.load_historical_data()
        assert 14 in service.cache

    @pytest.mark.asyncio
    @pytest.mark.parametrize("window_days", [0, -7])
    async def test_window_below_one_rejected(self, service, store, window_days):
        with pytest.raises(ValueError, match="window_days"):
            await service.load_historical_data(window_days)

        assert store.calls == []
        assert len(service.cache) == 0

    @pytest.mark.asyncio
    async def test_failure_returns_empty_dataset(self, store, caplog):
        processor = MagicMock(spec=Processor)
        processor.process.side_effect = RuntimeError("boom")
        service = HistoricalDataService(store=store, cache=ResultCache(), processor=processor)

        dataset = await service.load_historical_data(7)

        assert dataset == empty_dataset()
        assert dataset.statistics.data_quality.issues == ("No data available",)
        assert len(service.cache) == 0
        assert "Error loading historical data" in caplog.text

    @pytest.mark.asyncio
    async def test_failing_store_degrades_per_kind(self):
        class PriceDown(FakeStore):
            async def query(self, kind, start, end):
                if kind is SignalKind.PRICE:
                    raise ConnectionError("timeout")
                return await super().query(kind, start, end)

        service = HistoricalDataService(store=PriceDown(), cache=ResultCache(), processor=Processor())
        dataset = await service.load_historical_data(7)

        assert dataset.prices == ()
        assert len(dataset.aligned) == 24
        assert {r.price for r in dataset.aligned} == {10.0}
