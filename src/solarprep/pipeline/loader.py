"""Loader — Store → normalized raw samples.

Queries the time-series store once per signal kind and normalizes the
rows into RawSample values. A kind whose query fails degrades to an empty
sequence; the other kinds are still returned.
"""

import asyncio
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any

import pandas as pd

from solarprep.clients.influx import SeriesStore
from solarprep.signals import DEFAULT_PRICE_LEVEL, RawData, RawSample, SignalKind

logger = logging.getLogger(__name__)


def _parse_time(raw: Any) -> datetime | None:
    """Parse an epoch-ms or ISO-8601 store timestamp into aware UTC."""
    if raw is None:
        return None
    try:
        if isinstance(raw, (int, float)):
            ts = pd.Timestamp(raw, unit="ms", tz="UTC")
        else:
            ts = pd.Timestamp(raw)
            ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
    except (ValueError, TypeError):
        return None
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _to_float(raw: Any) -> float | None:
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


class Loader:
    """Loads and normalizes raw history for all four signal kinds.

    Args:
        store: Query interface to the time-series store
        price_multiplier: Factor turning store price units into cents (default: 100)

    Usage:
        loader = Loader(store)
        raw = await loader.load(window_days=30)
        print(len(raw.solar), len(raw.prices))
    """

    def __init__(self, store: SeriesStore, price_multiplier: float = 100.0) -> None:
        self.store = store
        self.price_multiplier = price_multiplier

    def normalize(self, kind: SignalKind, row: dict[str, Any]) -> RawSample | None:
        """Turn one store row into a RawSample, or None if it is unusable.

        Power is floored at 0, SOC clamped to [0, 100], prices rescaled to
        cents and a missing price level defaults to NORMAL.
        """
        timestamp = _parse_time(row.get("time"))
        value = _to_float(row.get("value"))
        if timestamp is None or value is None:
            return None

        if kind in (SignalKind.SOLAR, SignalKind.LOAD):
            return RawSample(timestamp=timestamp, value=max(0.0, value), kind=kind)

        if kind is SignalKind.BATTERY:
            return RawSample(timestamp=timestamp, value=min(100.0, max(0.0, value)), kind=kind)

        energy = _to_float(row.get("energy"))
        return RawSample(
            timestamp=timestamp,
            value=value * self.price_multiplier,
            kind=kind,
            level=row.get("level") or DEFAULT_PRICE_LEVEL,
            energy=energy * self.price_multiplier if energy is not None else None,
        )

    async def load_kind(
        self,
        kind: SignalKind,
        start: datetime,
        end: datetime,
    ) -> tuple[RawSample, ...]:
        """Query and normalize one kind; failures degrade to an empty tuple."""
        try:
            rows = await self.store.query(kind, start, end)
        except Exception as e:
            logger.warning("Could not load %s data: %s", kind.value, e)
            return ()

        samples = []
        skipped = 0
        for row in rows:
            sample = self.normalize(kind, row)
            if sample is None:
                skipped += 1
                continue
            samples.append(sample)

        if skipped:
            logger.debug("%s: skipped %d rows without time or value", kind.value, skipped)
        logger.info("Loaded %d %s data points", len(samples), kind.value)
        return tuple(samples)

    async def load(self, window_days: int = 365, now: datetime | None = None) -> RawData:
        """Load all four kinds over ``[now - window_days, now]``.

        The per-kind queries are independent and run concurrently.

        Args:
            window_days: Lookback window in days (default: 365)
            now: End of the window (default: current UTC time)

        Returns:
            RawData with one sequence per kind, in the order the store returned it
        """
        end = now or datetime.now(timezone.utc)
        start = end - timedelta(days=window_days)
        logger.info("Loading %d days of historical data...", window_days)

        solar, load, prices, battery = await asyncio.gather(
            self.load_kind(SignalKind.SOLAR, start, end),
            self.load_kind(SignalKind.LOAD, start, end),
            self.load_kind(SignalKind.PRICE, start, end),
            self.load_kind(SignalKind.BATTERY, start, end),
        )
        return RawData(solar=solar, load=load, prices=prices, battery=battery)
