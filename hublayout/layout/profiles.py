"""
Layout Profiles

Canvas and force constants for the force-directed layout. The engine takes
one of these explicitly instead of reading module-level constants, so views
with different canvas sizes can share it.
"""

import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Configuration for force-directed layout."""

    name: str = "custom"

    # Canvas (px)
    width: float = 900.0
    height: float = 560.0
    padding: float = 60.0  # Hard clamp margin on every side

    # Anchor rings
    cluster_radius: float = 180.0
    secondary_radius: float = 100.0
    secondary_phase: float = math.pi / 4  # Offset so the rings don't share radii

    # Leaf scatter
    leaf_radius_base: float = 60.0
    leaf_radius_jitter: float = 100.0
    leaf_noise: float = 20.0  # +/- offset on each axis

    # Force strengths
    repulsion_strength: float = 3000.0
    attraction_strength: float = 0.04
    gravity_strength: float = 0.004

    # Physics parameters
    damping: float = 0.82
    distance_epsilon: float = 0.1
    steps: int = 120
    convergence_threshold: Optional[float] = None  # px; None = always run all steps

    # Spring rest length per edge weight class
    rest_lengths: Dict[int, float] = field(default_factory=lambda: {1: 80.0, 2: 120.0})
    default_rest_length: float = 80.0

    seed: Optional[int] = None

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) every output coordinate lies within."""
        return (self.padding, self.padding,
                self.width - self.padding, self.height - self.padding)

    def rest_length(self, weight: int) -> float:
        """Target spring length for an edge weight class."""
        return self.rest_lengths.get(weight, self.default_rest_length)

    def validate(self) -> "LayoutConfig":
        """
        Check that the constants describe a usable simulation.

        Returns:
            self, so calls can be chained

        Raises:
            ValueError: On the first invalid value found
        """
        self._check_types()
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas must have positive size, got {self.width}x{self.height}")
        if not 0 < self.padding < min(self.width, self.height) / 2:
            raise ValueError(
                f"Padding must be in (0, {min(self.width, self.height) / 2}), got {self.padding}"
            )
        if not 0 <= self.damping < 1:
            raise ValueError(f"Damping must be in [0, 1), got {self.damping}")
        for name in ("repulsion_strength", "attraction_strength", "gravity_strength",
                     "cluster_radius", "secondary_radius", "leaf_radius_base",
                     "leaf_radius_jitter", "leaf_noise"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.steps < 0:
            raise ValueError(f"steps must not be negative, got {self.steps}")
        if self.distance_epsilon <= 0:
            raise ValueError(f"distance_epsilon must be positive, got {self.distance_epsilon}")
        if self.convergence_threshold is not None and self.convergence_threshold <= 0:
            raise ValueError(
                f"convergence_threshold must be positive, got {self.convergence_threshold}"
            )
        if self.default_rest_length <= 0 or any(v <= 0 for v in self.rest_lengths.values()):
            raise ValueError("Rest lengths must be positive")
        return self

    def _check_types(self):
        """Reject values of the wrong type (e.g. from a YAML file) as ValueError."""
        for name in _NUMBER_FIELDS:
            if not _is_number(getattr(self, name)):
                raise ValueError(f"{name} must be a number, got {getattr(self, name)!r}")
        if not _is_int(self.steps):
            raise ValueError(f"steps must be an integer, got {self.steps!r}")
        if self.seed is not None and not _is_int(self.seed):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if self.convergence_threshold is not None and not _is_number(self.convergence_threshold):
            raise ValueError(
                f"convergence_threshold must be a number, got {self.convergence_threshold!r}"
            )
        if not isinstance(self.rest_lengths, dict):
            raise ValueError(f"rest_lengths must be a mapping, got {self.rest_lengths!r}")
        for weight, length in self.rest_lengths.items():
            if not _is_int(weight) or not _is_number(length):
                raise ValueError(f"Bad rest length entry {weight!r}: {length!r}")

    def with_overrides(self, **overrides) -> "LayoutConfig":
        """Return a validated copy with some fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown layout setting(s): {', '.join(unknown)}")
        rest_lengths = overrides.get("rest_lengths")
        if isinstance(rest_lengths, dict):
            try:
                overrides["rest_lengths"] = {
                    int(k): float(v) for k, v in rest_lengths.items()
                }
            except (TypeError, ValueError):
                raise ValueError(f"Bad rest_lengths table: {rest_lengths!r}") from None
        return replace(self, **overrides).validate()


_NUMBER_FIELDS = (
    "width", "height", "padding",
    "cluster_radius", "secondary_radius", "secondary_phase",
    "leaf_radius_base", "leaf_radius_jitter", "leaf_noise",
    "repulsion_strength", "attraction_strength", "gravity_strength",
    "damping", "distance_epsilon", "default_rest_length",
)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


# Pre-defined profiles

KNOWLEDGE_GRAPH = LayoutConfig(
    name="knowledge_graph",
)

COMPACT = LayoutConfig(
    name="compact",
    width=600.0,
    height=400.0,
    padding=40.0,
    cluster_radius=130.0,
    secondary_radius=70.0,
    leaf_radius_base=40.0,
    leaf_radius_jitter=70.0,
    leaf_noise=15.0,
    repulsion_strength=1500.0,
    rest_lengths={1: 55.0, 2: 85.0},
    default_rest_length=55.0,
)

WIDE = LayoutConfig(
    name="wide",
    width=1600.0,
    height=1000.0,
    padding=80.0,
    cluster_radius=360.0,
    secondary_radius=200.0,
    leaf_radius_base=120.0,
    leaf_radius_jitter=220.0,
    leaf_noise=30.0,
    repulsion_strength=6000.0,
    gravity_strength=0.003,
    steps=240,
    rest_lengths={1: 110.0, 2: 170.0},
    default_rest_length=110.0,
)

# Profile registry
PROFILES: Dict[str, LayoutConfig] = {
    "knowledge_graph": KNOWLEDGE_GRAPH,
    "compact": COMPACT,
    "wide": WIDE,
}

DEFAULT_PROFILE = "knowledge_graph"


def get_profile(name: str) -> LayoutConfig:
    """
    Get layout profile by name.

    Args:
        name: Profile identifier (e.g., "knowledge_graph")

    Returns:
        A copy of the LayoutConfig, safe to modify

    Raises:
        ValueError: If profile name is not found
    """
    if name not in PROFILES:
        available = ", ".join(sorted(PROFILES.keys()))
        raise ValueError(f"Unknown layout profile '{name}'. Available: {available}")
    profile = PROFILES[name]
    return replace(profile, rest_lengths=dict(profile.rest_lengths))


def list_profiles() -> List[str]:
    """List all available layout profile names."""
    return sorted(PROFILES.keys())


def load_config(path: Union[str, Path], base: str = DEFAULT_PROFILE) -> LayoutConfig:
    """
    Load a layout configuration from a YAML file.

    The file is a mapping of LayoutConfig fields applied on top of a base
    profile. A top-level ``profile`` key selects the base instead of the
    ``base`` argument.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is not a mapping or holds bad settings
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Layout configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Layout configuration must be a mapping: {config_path}")

    data = dict(data)
    base_name = data.pop("profile", base)
    config = get_profile(base_name).with_overrides(**data)
    logger.debug("Loaded layout config from %s (base=%s)", config_path, base_name)
    return config
