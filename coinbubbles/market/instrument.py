"""
Market Instrument Model

Read-only records describing the instruments ("coins") that the layout
engine sizes and places. Records are supplied by an external market-data
source once per refresh cycle; this module only parses them.
"""

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class Timeframe(Enum):
    """Time window selecting which percent-change field is used."""
    HOUR = "1h"
    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"
    YEAR = "365d"

    @classmethod
    def parse(cls, value: Union[str, "Timeframe", None]) -> "Timeframe":
        """Coerce a string to a Timeframe, defaulting to 24h."""
        if isinstance(value, cls):
            return value
        for tf in cls:
            if tf.value == value:
                return tf
        return cls.DAY


class SizeMode(Enum):
    """Metric driving bubble radius."""
    CAP = "cap"
    PERCENT = "percent"
    VOLUME = "volume"

    @classmethod
    def parse(cls, value: Union[str, "SizeMode", None]) -> "SizeMode":
        """Coerce a string to a SizeMode, defaulting to cap."""
        if isinstance(value, cls):
            return value
        for mode in cls:
            if mode.value == value:
                return mode
        return cls.CAP


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Instrument:
    """A ranked market instrument."""
    id: str
    symbol: str = ""
    name: str = ""
    image: Optional[str] = None
    current_price: Optional[float] = None
    market_cap: Optional[float] = None
    total_volume: Optional[float] = None
    market_cap_rank: Optional[int] = None
    circulating_supply: Optional[float] = None
    total_supply: Optional[float] = None

    # Percent change per time window
    change_1h: Optional[float] = None
    change_24h: Optional[float] = None
    change_7d: Optional[float] = None
    change_30d: Optional[float] = None
    change_1y: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Instrument":
        """Parse a coin-markets style record.

        Raises:
            ValueError: If the record is not a mapping or has no id.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Instrument record must be a mapping, got {type(data).__name__}")
        ident = data.get("id")
        if ident is None or str(ident) == "":
            raise ValueError(f"Instrument record has no id: {data!r}")

        rank = _optional_float(data.get("market_cap_rank"))
        return cls(
            id=str(ident),
            symbol=str(data.get("symbol") or ""),
            name=str(data.get("name") or ""),
            image=data.get("image"),
            current_price=_optional_float(data.get("current_price")),
            market_cap=_optional_float(data.get("market_cap")),
            total_volume=_optional_float(data.get("total_volume")),
            market_cap_rank=int(rank) if rank is not None and math.isfinite(rank) else None,
            circulating_supply=_optional_float(data.get("circulating_supply")),
            total_supply=_optional_float(data.get("total_supply")),
            change_1h=_optional_float(data.get("price_change_percentage_1h_in_currency")),
            change_24h=_optional_float(data.get("price_change_percentage_24h")),
            change_7d=_optional_float(data.get("price_change_percentage_7d_in_currency")),
            change_30d=_optional_float(data.get("price_change_percentage_30d_in_currency")),
            change_1y=_optional_float(data.get("price_change_percentage_1y_in_currency")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the coin-markets record shape."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "image": self.image,
            "current_price": self.current_price,
            "market_cap": self.market_cap,
            "total_volume": self.total_volume,
            "market_cap_rank": self.market_cap_rank,
            "circulating_supply": self.circulating_supply,
            "total_supply": self.total_supply,
            "price_change_percentage_1h_in_currency": self.change_1h,
            "price_change_percentage_24h": self.change_24h,
            "price_change_percentage_7d_in_currency": self.change_7d,
            "price_change_percentage_30d_in_currency": self.change_30d,
            "price_change_percentage_1y_in_currency": self.change_1y,
        }


def load_instruments(path: Union[str, Path]) -> List[Instrument]:
    """Load instruments from a JSON file holding an array of records.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not hold a list of valid records.
    """
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Instrument file not found: {source}")

    with open(source, "r") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of instruments in {source}")

    instruments = [Instrument.from_dict(record) for record in data]
    logger.debug("Loaded %d instruments from %s", len(instruments), source)
    return instruments
