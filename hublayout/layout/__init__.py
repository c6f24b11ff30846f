"""Force-directed layout engine and its configuration profiles."""

from .force_directed import (
    ForceDirectedLayout,
    LayoutState,
    compute_layout,
    layout_graph,
)
from .profiles import (
    LayoutConfig,
    PROFILES,
    get_profile,
    list_profiles,
    load_config,
)

__all__ = [
    "ForceDirectedLayout",
    "LayoutState",
    "compute_layout",
    "layout_graph",
    "LayoutConfig",
    "PROFILES",
    "get_profile",
    "list_profiles",
    "load_config",
]
