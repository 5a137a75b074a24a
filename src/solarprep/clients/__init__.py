"""Store client layer for solarprep.

Async HTTP clients for reading raw sensor history from:
- InfluxDB 1.x: Home Assistant state series (PV power, load, battery SOC)
  and Tibber price series
"""

from solarprep.clients.base import BaseAsyncClient, RateLimiter, StoreQueryError
from solarprep.clients.influx import InfluxClient, SeriesStore

__all__ = [
    "BaseAsyncClient",
    "RateLimiter",
    "StoreQueryError",
    "InfluxClient",
    "SeriesStore",
]
