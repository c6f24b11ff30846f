"""
Graph Abstraction Layer

Typed node/edge records consumed by the layout engine. Graph construction
(turning tasks, categories and agents into nodes and edges) happens upstream;
this module only describes the result and offers the lookups the renderer
needs for focus highlighting.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


class NodeType(Enum):
    """Node categories, in seeding priority order."""
    CLUSTER_ANCHOR = "cluster-anchor"      # Outer ring (categories)
    SECONDARY_ANCHOR = "secondary-anchor"  # Inner ring (agents)
    LEAF = "leaf"                          # Scattered (tasks)

    @classmethod
    def from_label(cls, label) -> "NodeType":
        """Resolve a node type from an enum, canonical value or domain label.

        The dashboard payload tags nodes as "category", "agent" or "task".
        Anything unrecognised is treated as a leaf so that it still gets a
        position.
        """
        if isinstance(label, cls):
            return label
        key = str(label).strip().lower() if label is not None else ""
        for member in cls:
            if member.value == key:
                return member
        if key in _DOMAIN_LABELS:
            return _DOMAIN_LABELS[key]
        logger.debug("Unknown node type %r, treating as leaf", label)
        return cls.LEAF


_DOMAIN_LABELS: Dict[str, NodeType] = {
    "category": NodeType.CLUSTER_ANCHOR,
    "agent": NodeType.SECONDARY_ANCHOR,
    "task": NodeType.LEAF,
}


@dataclass
class Node:
    """A point to be placed."""
    id: str
    type: NodeType = NodeType.LEAF
    size: float = 8.0  # Visual radius hint, not used by the force model
    label: str = ""

    def __post_init__(self):
        self.type = NodeType.from_label(self.type)

    @property
    def is_anchor(self) -> bool:
        return self.type is not NodeType.LEAF


@dataclass
class Edge:
    """An undirected relation between two node ids."""
    source: str
    target: str
    weight: int = 1  # Discrete weight class, selects the spring rest length
    label: str = ""

    def endpoints(self) -> Tuple[str, str]:
        return (self.source, self.target)

    def touches(self, node_id: str) -> bool:
        """Check whether this edge is incident to node_id."""
        return self.source == node_id or self.target == node_id


@dataclass
class Position:
    """Output coordinate for one node."""
    id: str
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    def distance_to(self, other: "Position") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass
class GraphSummary:
    """Counts reported alongside a graph payload."""
    total_nodes: int
    total_edges: int
    counts_by_type: Dict[NodeType, int] = field(default_factory=dict)
    dangling_edges: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalNodes": self.total_nodes,
            "totalEdges": self.total_edges,
            "countsByType": {t.value: n for t, n in self.counts_by_type.items()},
            "danglingEdges": self.dangling_edges,
        }


class Graph:
    """
    Node and edge lists as handed over by graph construction.

    The lists are kept as given: edges that reference missing nodes are not
    removed, since callers may still count them (e.g. for a degree badge).
    """

    def __init__(self, nodes: Optional[Iterable[Node]] = None,
                 edges: Optional[Iterable[Edge]] = None):
        self.nodes: List[Node] = list(nodes or [])
        self.edges: List[Edge] = list(edges or [])
        self._index: Dict[str, Node] = {}
        for node in self.nodes:
            self._index.setdefault(node.id, node)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index

    def node_ids(self) -> List[str]:
        """Unique node ids in input order."""
        return list(self._index)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._index.get(node_id)

    def nodes_of_type(self, node_type: NodeType) -> List[Node]:
        node_type = NodeType.from_label(node_type)
        return [n for n in self._index.values() if n.type is node_type]

    def dangling_edges(self) -> List[Edge]:
        """Edges with at least one endpoint missing from the node set."""
        return [e for e in self.edges
                if e.source not in self._index or e.target not in self._index]

    def incident_edges(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.touches(node_id)]

    def neighbors(self, node_id: str) -> Set[str]:
        """Ids highlighted when node_id is focused.

        Collects both endpoints of every incident edge, so the focused id is
        part of the result whenever it has at least one edge.
        """
        result: Set[str] = set()
        for edge in self.incident_edges(node_id):
            result.update(edge.endpoints())
        return result

    def degree(self, node_id: str) -> int:
        return len(self.incident_edges(node_id))

    def summary(self) -> GraphSummary:
        counts: Dict[NodeType, int] = {t: 0 for t in NodeType}
        for node in self._index.values():
            counts[node.type] += 1
        return GraphSummary(
            total_nodes=len(self._index),
            total_edges=len(self.edges),
            counts_by_type=counts,
            dangling_edges=len(self.dangling_edges()),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":
        """
        Build a graph from the dashboard's JSON payload.

        Args:
            data: Mapping with "nodes" and "edges" lists. Extra keys on the
                payload or on individual records are ignored.

        Returns:
            Graph instance

        Raises:
            ValueError: If the payload or a record is missing required fields
        """
        if not isinstance(data, dict):
            raise ValueError(f"Graph payload must be a mapping, got {type(data).__name__}")

        nodes = []
        for i, record in enumerate(data.get("nodes") or []):
            if not isinstance(record, dict) or "id" not in record:
                raise ValueError(f"Node record {i} has no 'id'")
            nodes.append(Node(
                id=str(record["id"]),
                type=NodeType.from_label(record.get("type")),
                size=float(record.get("size", 8.0)),
                label=str(record.get("label", "")),
            ))

        edges = []
        for i, record in enumerate(data.get("edges") or []):
            if not isinstance(record, dict) or "source" not in record or "target" not in record:
                raise ValueError(f"Edge record {i} needs 'source' and 'target'")
            edges.append(Edge(
                source=str(record["source"]),
                target=str(record["target"]),
                weight=_coerce_weight(record.get("weight", 1)),
                label=str(record.get("label", "")),
            ))

        graph = cls(nodes, edges)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Loaded graph: nodes=%d edges=%d dangling=%d",
                len(graph), len(graph.edges), len(graph.dangling_edges()),
            )
        return graph


def _coerce_weight(value) -> int:
    try:
        weight = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Edge weight must be an integer, got {value!r}") from None
    return max(1, weight)
