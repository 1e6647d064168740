"""
Engine Configuration

Tunable constants for radius derivation, pack layout, overlap resolution
and the per-frame physics step. Defaults ship in engine_defaults.yaml next
to this module; users can point the CLI at their own YAML file to override
any subset of values.
"""

import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "engine_defaults.yaml"

BROAD_PHASES = ("pairs", "grid")

# YAML section names accepted around the flat keys
CONFIG_SECTIONS = ("radius", "pack", "resolver", "physics", "grow", "clock")


@dataclass
class EngineConfig:
    """Configuration for bubble layout and physics."""
    # Radius model (px)
    min_radius: float = 18.0
    max_radius: float = 54.0
    anchor_scale: float = 1.55  # Top-ranked bubble is max_radius * anchor_scale
    chain_floor_factor: float = 0.65  # Floor while walking the rank chain
    global_floor_factor: float = 0.7  # Floor after the global spread correction
    ratio_exponent: float = 0.5
    ratio_blend: float = 0.5  # weighted = blend + (1 - blend) * eased
    compact_scale: float = 0.72  # globalScale when the batch spread is tight
    spread_low: float = 2.0
    spread_high: float = 12.0

    # Pack layout
    min_viewport: float = 200.0
    pack_margin: float = 8.0
    base_scale: float = 0.75
    size_scale_gain: float = 0.45
    small_batch: int = 60
    medium_batch: int = 80
    coverage_small: float = 0.82
    coverage_medium: float = 0.78
    coverage_large: float = 0.75
    coverage_floor: float = 0.62
    radius_inflation_start: float = 30.0
    radius_inflation_span: float = 18.0
    radius_inflation_cut: float = 0.12
    area_scale_min: float = 0.85
    area_scale_max: float = 1.35
    initial_speed: float = 5.0  # px/s, initial velocity in [-speed, speed]

    # Overlap resolution
    resolve_iterations: int = 14
    collision_gap: float = 8.0  # px between neighbouring bubbles
    boundary_margin: float = 12.0
    min_distance_sq: float = 0.0001  # Coincident centers are left alone

    # Physics
    bounce_damping: float = 0.85
    collision_response: float = 0.45
    velocity_damping: float = 0.992  # Per frame, not scaled by dt
    wander_strength: float = 14.0
    wander_freq_x: float = 1.2
    wander_freq_y: float = 1.35
    jitter_strength: float = 4.0
    broad_phase: str = "pairs"  # "pairs" or "grid"

    # Grow-in animation
    grow_speed_min: float = 1.5
    grow_speed_range: float = 1.2
    grow_delay_max: float = 0.7

    # Frame clock
    max_frame_dt: float = 0.05

    @property
    def radius_span(self) -> float:
        """Width of the nominal radius range, never zero."""
        return (self.max_radius - self.min_radius) or 1.0

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        problems = []
        if self.min_radius <= 0:
            problems.append("min_radius must be positive")
        if self.min_radius >= self.max_radius:
            problems.append(
                f"min_radius ({self.min_radius}) must be below max_radius ({self.max_radius})"
            )
        if self.resolve_iterations < 0:
            problems.append("resolve_iterations must not be negative")
        if self.area_scale_min > self.area_scale_max:
            problems.append("area_scale_min must not exceed area_scale_max")
        if self.spread_high <= self.spread_low:
            problems.append("spread_high must be above spread_low")
        if self.min_viewport <= 0:
            problems.append("min_viewport must be positive")
        if self.max_frame_dt <= 0:
            problems.append("max_frame_dt must be positive")
        if self.broad_phase not in BROAD_PHASES:
            problems.append(
                f"broad_phase must be one of {', '.join(BROAD_PHASES)}, got {self.broad_phase!r}"
            )
        return problems

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EngineConfig":
        """Build a config from a (possibly sectioned) mapping.

        Keys may sit at the top level or inside one of the sections in
        CONFIG_SECTIONS. Unknown keys raise ValueError.
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Engine config must be a mapping, got {type(data).__name__}")

        flat: Dict[str, Any] = {}
        for key, value in data.items():
            if key in CONFIG_SECTIONS and isinstance(value, dict):
                flat.update(value)
            else:
                flat[key] = value

        known = {f.name: f for f in fields(cls)}
        unknown = sorted(k for k in flat if k not in known)
        if unknown:
            raise ValueError(f"Unknown engine config keys: {unknown}")

        values = {}
        for key, value in flat.items():
            field_type = known[key].type
            try:
                if field_type in (int, "int"):
                    values[key] = int(value)
                elif field_type in (float, "float"):
                    values[key] = float(value)
                else:
                    values[key] = value
            except (TypeError, ValueError, OverflowError):
                raise ValueError(f"Invalid value for {key}: {value!r}") from None

        config = cls(**values)
        problems = config.validate()
        if problems:
            raise ValueError("Invalid engine config: " + "; ".join(problems))
        return config

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "EngineConfig":
        """Load a config from a YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Engine config file not found: {config_path}")

        # Security: Check for symlinks to prevent reading unintended files
        if config_path.is_symlink():
            raise ValueError(f"Engine config file cannot be a symlink: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        logger.debug("Loaded engine config from %s", config_path)
        return cls.from_dict(data)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


def load_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """Load engine configuration.

    Args:
        path: Optional path to a YAML file. If None, the shipped
              engine_defaults.yaml is used, falling back to dataclass
              defaults if it is missing or unreadable.

    Returns:
        EngineConfig instance
    """
    if path is not None:
        return EngineConfig.from_yaml(path)

    if not DEFAULT_CONFIG_PATH.exists():
        logger.warning(
            "Engine defaults not found at %s, using built-in defaults",
            DEFAULT_CONFIG_PATH,
        )
        return EngineConfig()

    try:
        return EngineConfig.from_yaml(DEFAULT_CONFIG_PATH)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load engine defaults: %s", e)
        return EngineConfig()
