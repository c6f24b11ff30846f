"""
HubLayout - Force-directed layout for knowledge graphs

Places categories, agents and tasks of a productivity dashboard's knowledge
graph on a fixed canvas as a hub-and-leaf node-link diagram.
"""

__version__ = "0.1.0"
__author__ = "HubLayout Team"

from .graph.abstraction import Edge, Graph, Node, NodeType, Position
from .layout.force_directed import ForceDirectedLayout, compute_layout, layout_graph
from .layout.profiles import LayoutConfig, get_profile, list_profiles, load_config

__all__ = [
    "Edge",
    "Graph",
    "Node",
    "NodeType",
    "Position",
    "ForceDirectedLayout",
    "compute_layout",
    "layout_graph",
    "LayoutConfig",
    "get_profile",
    "list_profiles",
    "load_config",
]
