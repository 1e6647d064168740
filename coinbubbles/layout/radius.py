"""
Radius Model

Converts a batch of instrument metrics into per-instrument pixel radii.

Percent mode is a plain min-max normalization into [min_radius, max_radius].

Cap and volume modes walk the batch in rank order instead of normalizing:
the largest instrument anchors the scale and every following rank shrinks
from its predecessor by an eased ratio blended with a 50% floor. A naive log
or linear map produces either indistinguishable small bubbles or one giant
bubble on low-rank pages; the rank chain keeps neighbours comparable while
preserving strict ordering. A final global correction derived from the
batch spread (max / min) compacts batches whose values are all close.
"""

import logging
import math
from typing import List, Optional, Sequence, Union

from ..config import EngineConfig
from ..market.instrument import SizeMode
from ..market.metrics import Metric

logger = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def percent_radii(metrics: Sequence[Metric], config: EngineConfig) -> List[float]:
    """Linear min-max mapping of absolute percent change to radius."""
    if not metrics:
        return []
    changes = [m.change for m in metrics]
    lo = min(changes)
    hi = max(changes)
    span = (hi - lo) or 1.0
    return [
        config.min_radius + clamp((c - lo) / span, 0.0, 1.0) * (config.max_radius - config.min_radius)
        for c in changes
    ]


def global_scale(spread: float, config: EngineConfig) -> float:
    """Shrink factor for a batch with the given max/min spread.

    spread <= spread_low gives compact_scale, spread >= spread_high gives 1.0,
    linear in between.
    """
    tightness = clamp(
        (spread - config.spread_low) / (config.spread_high - config.spread_low), 0.0, 1.0
    )
    return config.compact_scale + (1.0 - config.compact_scale) * tightness


def ranked_radii(values: Sequence[float], config: EngineConfig) -> List[float]:
    """Rank-chained radii for raw cap/volume values, in input order."""
    if not values:
        return []

    ranked = sorted(
        ((i, max(v, 1.0)) for i, v in enumerate(values)),
        key=lambda item: item[1],
        reverse=True,
    )
    max_val = ranked[0][1]
    min_val = ranked[-1][1]
    spread = max_val / max(min_val, 1.0)
    scale = global_scale(spread, config)

    chain_floor = config.min_radius * config.chain_floor_factor
    radii = [config.min_radius] * len(values)
    radii[ranked[0][0]] = config.max_radius * config.anchor_scale

    for k in range(1, len(ranked)):
        prev_index, prev_val = ranked[k - 1]
        index, val = ranked[k]
        ratio = clamp(val / max(prev_val, 1.0), 0.0, 1.0)
        eased = math.pow(ratio, config.ratio_exponent)
        weighted = config.ratio_blend + (1.0 - config.ratio_blend) * eased
        radii[index] = max(chain_floor, radii[prev_index] * weighted)

    floor = config.min_radius * config.global_floor_factor
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Rank chain: %d values, spread %.2f, global scale %.3f",
            len(values), spread, scale,
        )
    return [max(floor, r * scale) for r in radii]


def compute_radii(
    metrics: Sequence[Metric],
    size_mode: Union[SizeMode, str, None] = SizeMode.CAP,
    config: Optional[EngineConfig] = None,
) -> List[float]:
    """Radius (px) for every metric, in input order."""
    config = config or EngineConfig()
    mode = SizeMode.parse(size_mode)
    if mode is SizeMode.PERCENT:
        return percent_radii(metrics, config)
    if mode is SizeMode.VOLUME:
        return ranked_radii([m.volume for m in metrics], config)
    return ranked_radii([m.cap for m in metrics], config)


def size_factor(radius: float, config: EngineConfig) -> float:
    """Position of radius within the nominal [min_radius, max_radius] range.

    Not clamped: the anchor bubble in cap/volume mode lands above 1.
    """
    return (radius - config.min_radius) / config.radius_span
