"""
Instrument Metrics

Pure helpers mapping instrument records to the scalars the layout engine
consumes, plus the display helpers a renderer needs (price/percent text,
bubble color) and refresh change detection.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .instrument import Instrument, Timeframe

CHANGE_TOLERANCE = 0.0001
STRONG_CHANGE = 1.5

BUBBLE_COLORS = {
    "gain_strong": "rgba(180, 229, 13, 0.95)",
    "gain": "rgba(120, 200, 65, 0.9)",
    "loss_strong": "rgba(255, 0, 0, 0.95)",
    "loss": "rgba(215, 108, 130, 0.9)",
}


@dataclass
class Metric:
    """Per-build sizing inputs for one instrument."""
    instrument: Instrument
    cap: float
    change: float  # Absolute percent change for the selected window
    volume: float


def select_change(instrument: Instrument, timeframe: Union[Timeframe, str, None]) -> float:
    """Return the percent change for a time window, 0 when absent.

    Unknown windows fall back to the 24h field.
    """
    tf = Timeframe.parse(timeframe)
    if tf is Timeframe.HOUR:
        value = instrument.change_1h
    elif tf is Timeframe.WEEK:
        value = instrument.change_7d
    elif tf is Timeframe.MONTH:
        value = instrument.change_30d
    elif tf is Timeframe.YEAR:
        value = instrument.change_1y
    else:
        value = instrument.change_24h
    return value if value is not None else 0.0


def compute_metrics(
    instruments: Sequence[Instrument],
    timeframe: Union[Timeframe, str, None] = Timeframe.DAY,
) -> List[Metric]:
    """Derive the sizing metric for every instrument in a batch."""
    return [
        Metric(
            instrument=inst,
            cap=inst.market_cap or 0.0,
            change=abs(select_change(inst, timeframe)),
            volume=inst.total_volume if inst.total_volume is not None else 1.0,
        )
        for inst in instruments
    ]


def _is_finite(value: Optional[float]) -> bool:
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def format_price(value: Optional[float]) -> str:
    """Format a price for display ("-" when missing)."""
    if not _is_finite(value):
        return "-"
    num = float(value)
    if num >= 1000:
        return f"{num:,.0f}"
    if num >= 1:
        return f"{num:,.2f}".rstrip("0").rstrip(".")
    text = f"{num:.6f}".rstrip("0").rstrip(".")
    return text or "0"


def format_percent(value: Optional[float]) -> str:
    """Format a percent change with an explicit sign ("-" when missing)."""
    if not _is_finite(value):
        return "-"
    num = float(value)
    sign = "+" if num >= 0 else ""
    return f"{sign}{num:.2f}%"


def bubble_color(change: Optional[float]) -> str:
    """Pick the bubble fill for a percent change."""
    val = change or 0.0
    strong = abs(val) >= STRONG_CHANGE
    if val >= 0:
        return BUBBLE_COLORS["gain_strong"] if strong else BUBBLE_COLORS["gain"]
    return BUBBLE_COLORS["loss_strong"] if strong else BUBBLE_COLORS["loss"]


def has_price_changed(prev: Optional[Instrument], new: Optional[Instrument]) -> bool:
    """Check whether a refreshed record differs in any displayed price field.

    A missing side always counts as changed.
    """
    if prev is None or new is None:
        return True
    for attr in ("current_price", "change_1h", "change_24h", "change_7d"):
        a = getattr(prev, attr) or 0.0
        b = getattr(new, attr) or 0.0
        if abs(a - b) > CHANGE_TOLERANCE:
            return True
    return False
