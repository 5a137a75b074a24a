"""Raw signal types shared by the store client and the pipeline.

Four independently sampled streams feed the pipeline:
- solar: PV generation power (W)
- load: household consumption power (W)
- price: energy price (cents) with a categorical level
- battery: battery state of charge (%)
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SignalKind(Enum):
    """Kinds of raw sensor streams read from the store."""

    SOLAR = "solar"
    LOAD = "load"
    PRICE = "price"
    BATTERY = "battery"


DEFAULT_PRICE_LEVEL = "NORMAL"


@dataclass(frozen=True)
class RawSample:
    """One normalized sample of a raw stream.

    Attributes:
        timestamp: Sample time (tz-aware, UTC)
        value: Normalized value (W, cents or % depending on kind)
        kind: Stream the sample belongs to
        level: Price level category (price samples only)
        energy: Energy-only share of the price in cents (price samples only)
    """

    timestamp: datetime
    value: float
    kind: SignalKind
    level: str | None = None
    energy: float | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = {
            "timestamp": self.timestamp.isoformat(),
            "value": self.value,
            "kind": self.kind.value,
        }
        if self.kind is SignalKind.PRICE:
            data["level"] = self.level
            data["energy"] = self.energy
        return data


@dataclass(frozen=True)
class RawData:
    """The four raw sequences of one load, in store order."""

    solar: tuple[RawSample, ...] = ()
    load: tuple[RawSample, ...] = ()
    prices: tuple[RawSample, ...] = ()
    battery: tuple[RawSample, ...] = ()

    def by_kind(self) -> dict[SignalKind, tuple[RawSample, ...]]:
        return {
            SignalKind.SOLAR: self.solar,
            SignalKind.LOAD: self.load,
            SignalKind.PRICE: self.prices,
            SignalKind.BATTERY: self.battery,
        }

    def is_empty(self) -> bool:
        return not (self.solar or self.load or self.prices or self.battery)
