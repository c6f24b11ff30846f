"""
Shared test fixtures for HubLayout tests.

Provides reusable graph payloads, node/edge lists and configs
for testing the layout engine, profiles and CLI.
"""

import json
import random

import pytest

from hublayout.graph.abstraction import Edge, Graph, Node, NodeType
from hublayout.layout.profiles import LayoutConfig, get_profile


@pytest.fixture
def default_config() -> LayoutConfig:
    """The dashboard's knowledge-graph profile."""
    return get_profile("knowledge_graph")


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def graph_payload() -> dict:
    """A small payload in the shape served by the knowledge graph endpoint."""
    return {
        "nodes": [
            {"id": "cat:1", "label": "Work", "type": "category", "color": "#3b82f6", "size": 22},
            {"id": "cat:2", "label": "Home", "type": "category", "color": "#10b981", "size": 18},
            {"id": "agent:scout", "label": "scout", "type": "agent", "color": "#8b5cf6", "size": 16},
            {"id": "task:1", "label": "Write report", "type": "task", "size": 14,
             "meta": {"status": "done", "priority": "high"}},
            {"id": "task:2", "label": "Fix sink", "type": "task", "size": 8},
            {"id": "task:3", "label": "Plan trip", "type": "task", "size": 11},
        ],
        "edges": [
            {"source": "task:1", "target": "cat:1", "weight": 2},
            {"source": "task:2", "target": "cat:2", "weight": 2},
            {"source": "task:3", "target": "cat:2", "weight": 2},
            {"source": "task:1", "target": "agent:scout", "weight": 1, "label": "worked by"},
            {"source": "task:3", "target": "cat:99", "weight": 2},
        ],
        "stats": {"totalNodes": 6, "totalEdges": 5},
    }


@pytest.fixture
def sample_graph(graph_payload) -> Graph:
    return Graph.from_dict(graph_payload)


@pytest.fixture
def graph_file(tmp_path, graph_payload):
    """Graph payload written to a JSON file."""
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(graph_payload))
    return path


@pytest.fixture
def star_graph():
    """One cluster anchor with five leaves hanging off it."""
    nodes = [Node("hub", NodeType.CLUSTER_ANCHOR, size=24)]
    edges = []
    for i in range(5):
        nodes.append(Node(f"leaf{i}", NodeType.LEAF))
        edges.append(Edge(f"leaf{i}", "hub", weight=1))
    return nodes, edges
