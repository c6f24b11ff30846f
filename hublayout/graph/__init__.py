"""Graph records consumed by the layout engine."""

from .abstraction import Edge, Graph, GraphSummary, Node, NodeType, Position

__all__ = [
    "Edge",
    "Graph",
    "GraphSummary",
    "Node",
    "NodeType",
    "Position",
]
