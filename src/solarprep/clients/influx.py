"""InfluxDB 1.x query client.

Reads hourly aggregates of the Home Assistant state series and the Tibber
price series through the InfluxQL HTTP endpoint.

API Documentation: https://docs.influxdata.com/influxdb/v1/tools/api/#query-http-endpoint

Usage:
    from solarprep.clients.influx import InfluxClient

    async with InfluxClient(url="http://localhost:8086", database="home_assistant") as client:
        rows = await client.query(SignalKind.SOLAR, start, end)
"""

from datetime import datetime, timezone
from typing import Any, Protocol

from solarprep.clients.base import BaseAsyncClient, StoreQueryError
from solarprep.signals import SignalKind


class SeriesStore(Protocol):
    """Query interface the Loader depends on.

    Returns one row per hourly bucket as a dict with a ``time`` key
    (epoch milliseconds or ISO-8601 string) and a ``value`` key. Price rows
    additionally carry ``energy`` and ``level``.
    """

    async def query(
        self,
        kind: SignalKind,
        start: datetime,
        end: datetime,
    ) -> list[dict[str, Any]]:
        ...


_STATE_QUERY = (
    'SELECT mean("value") AS "value" FROM "state" '
    'WHERE "topic" =~ /{pattern}/ '
    "AND time >= '{start}' AND time <= '{end}' "
    "GROUP BY time(1h) fill(none) ORDER BY time ASC"
)

_PRICE_QUERY = (
    'SELECT mean("total") AS "value", mean("energy") AS "energy", last("level") AS "level" '
    'FROM "{measurement}" '
    "WHERE time >= '{start}' AND time <= '{end}' "
    "GROUP BY time(1h) fill(none) ORDER BY time ASC"
)


def _isoformat(dt: datetime) -> str:
    """RFC3339 UTC timestamp as InfluxQL expects it."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class InfluxClient(BaseAsyncClient):
    """Async client for the InfluxDB 1.x ``/query`` endpoint.

    Args:
        url: InfluxDB base URL
        database: Database name
        username: Optional user (sent as ``u``)
        password: Optional password (sent as ``p``)
        rate_limit: Max requests per second (default: 10)
        timeout: Request timeout in seconds (default: 30)
        topic_patterns: Regex on the ``topic`` tag per state-backed kind
        price_measurement: Measurement holding price rows
    """

    def __init__(
        self,
        url: str,
        database: str,
        username: str | None = None,
        password: str | None = None,
        rate_limit: int = 10,
        timeout: float = 30.0,
        topic_patterns: dict[SignalKind, str] | None = None,
        price_measurement: str = "tibber_prices",
    ) -> None:
        super().__init__(base_url=url, rate_limit=rate_limit, timeout=timeout)
        self.database = database
        self.username = username
        self.password = password
        self.topic_patterns = topic_patterns or {
            SignalKind.SOLAR: ".*pv_power.*state$",
            SignalKind.LOAD: ".*load.*state$",
            SignalKind.BATTERY: ".*battery.*soc.*state$",
        }
        self.price_measurement = price_measurement

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Override to inject database, credentials and epoch precision."""
        params = params or {}
        params["db"] = self.database
        params["epoch"] = "ms"
        if self.username:
            params["u"] = self.username
            params["p"] = self.password or ""
        return await super()._request(method, endpoint, params)

    def build_query(self, kind: SignalKind, start: datetime, end: datetime) -> str:
        """Build the InfluxQL statement for one kind over an inclusive range.

        Raises:
            ValueError: If no topic pattern is configured for a state kind
        """
        if kind is SignalKind.PRICE:
            return _PRICE_QUERY.format(
                measurement=self.price_measurement,
                start=_isoformat(start),
                end=_isoformat(end),
            )
        pattern = self.topic_patterns.get(kind)
        if not pattern:
            raise ValueError(f"No topic pattern configured for {kind.value}")
        return _STATE_QUERY.format(
            pattern=pattern.replace("/", r"\/"),
            start=_isoformat(start),
            end=_isoformat(end),
        )

    async def query(
        self,
        kind: SignalKind,
        start: datetime,
        end: datetime,
    ) -> list[dict[str, Any]]:
        """Fetch hourly aggregated rows for one signal kind.

        Args:
            kind: Signal to query
            start: Inclusive range start
            end: Inclusive range end

        Returns:
            List of rows keyed by column name ("time", "value", ...),
            ascending in time. Empty if the series has no data in range.

        Raises:
            StoreQueryError: If the request fails or InfluxDB reports an error
        """
        result = await self.get("/query", params={"q": self.build_query(kind, start, end)})
        return self._parse_rows(result)

    @staticmethod
    def _parse_rows(payload: dict[str, Any]) -> list[dict[str, Any]]:
        """Flatten the InfluxDB ``results/series/values`` envelope into dict rows."""
        if "error" in payload:
            raise StoreQueryError(f"InfluxDB error: {payload['error']}")

        rows: list[dict[str, Any]] = []
        for statement in payload.get("results", []):
            if "error" in statement:
                raise StoreQueryError(f"InfluxQL error: {statement['error']}")
            for series in statement.get("series", []):
                columns = series.get("columns", [])
                for values in series.get("values", []):
                    rows.append(dict(zip(columns, values)))
        return rows
