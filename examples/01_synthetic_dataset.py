"""Example 1: Prepare a Dataset from Synthetic History

This example runs the full preparation pipeline against an in-memory
store that serves one week of synthetic solar, load, price and battery
rows, with gaps and a sensor spike thrown in.

In production, HistoricalDataService() reads from InfluxDB using the
settings in .env.
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone

import numpy as np

from solarprep.cli import format_report
from solarprep.pipeline import HistoricalDataService
from solarprep.signals import SignalKind


class SyntheticStore:
    """SeriesStore serving hourly rows shaped like a sunny week."""

    def __init__(self, seed: int = 42) -> None:
        self.rng = np.random.default_rng(seed)

    async def query(self, kind: SignalKind, start: datetime, end: datetime) -> list[dict]:
        hours = int((end - start).total_seconds() // 3600)
        rows = []
        for h in range(hours + 1):
            ts = start + timedelta(hours=h)
            if self.rng.random() < 0.1:
                continue  # missing reading
            rows.append({"time": int(ts.timestamp() * 1000), **self._row(kind, ts)})

        if kind is SignalKind.LOAD and rows:
            rows[len(rows) // 2]["value"] = 25000.0  # sensor spike
        return rows

    def _row(self, kind: SignalKind, ts: datetime) -> dict:
        daylight = max(0.0, np.sin(np.pi * (ts.hour - 6) / 12))
        if kind is SignalKind.SOLAR:
            return {"value": 4000 * daylight + self.rng.normal(0, 50)}
        if kind is SignalKind.LOAD:
            return {"value": 450 + 300 * (ts.hour in (7, 8, 18, 19, 20)) + self.rng.normal(0, 30)}
        if kind is SignalKind.PRICE:
            total = 0.28 - 0.08 * daylight
            return {"value": total, "energy": total * 0.6, "level": "CHEAP" if daylight > 0.5 else "NORMAL"}
        return {"value": 20 + 70 * daylight}


async def run() -> None:
    service = HistoricalDataService(store=SyntheticStore())

    print("=" * 60)
    print("solarprep: Example 1: Synthetic Dataset")
    print("=" * 60)
    print()

    dataset = await service.load_historical_data(window_days=7)
    print(format_report(dataset))
    print()

    # Second call within the TTL is served from the cache
    again = await service.load_historical_data(window_days=7)
    print(f"Cached: {again is dataset}")
    print()

    frame = dataset.to_frame()
    print("Training frame (first 5 slots):")
    print(frame[["solar", "load", "price", "battery_soc", "hour", "season"]].head())
    print()

    print(json.dumps(dataset.to_dict(include_records=False)["time_range"], indent=2))


def main():
    asyncio.run(run())


if __name__ == '__main__':
    main()
