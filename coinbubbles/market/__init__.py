"""Market instrument records and the metrics derived from them."""

from .instrument import Instrument, SizeMode, Timeframe, load_instruments
from .metrics import (
    Metric,
    bubble_color,
    compute_metrics,
    format_percent,
    format_price,
    has_price_changed,
    select_change,
)

__all__ = [
    "Instrument",
    "SizeMode",
    "Timeframe",
    "load_instruments",
    "Metric",
    "bubble_color",
    "compute_metrics",
    "format_percent",
    "format_price",
    "has_price_changed",
    "select_change",
]
