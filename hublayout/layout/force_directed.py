"""
Force-Directed Graph Layout

Places the nodes of a knowledge graph on a fixed canvas with a small physics
simulation: every pair of nodes repels, edges act as springs toward a rest
length chosen by weight class, and a weak gravity pulls everything toward the
canvas center. Positions are clamped to the padded canvas after each step.

Anchor nodes are seeded on fixed rings before the first step and only leaf
nodes start at random, so repeated runs converge to the same overall shape.
"""

import hashlib
import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..graph.abstraction import Edge, Graph, Node, NodeType, Position
from .profiles import LayoutConfig, get_profile, DEFAULT_PROFILE

logger = logging.getLogger(__name__)

# (source index, target index, rest length)
Spring = Tuple[int, int, float]


def _deterministic_jitter(key: str, scale: float) -> Tuple[float, float]:
    """Reproducible offset in [-scale, scale] derived from a string key.

    Used to split nodes that sit on exactly the same point, where the
    repulsion direction is otherwise undefined.
    """
    h = hashlib.md5(key.encode()).hexdigest()
    x_val = int(h[:8], 16) / 0xFFFFFFFF
    y_val = int(h[8:16], 16) / 0xFFFFFFFF
    return (x_val * 2 * scale - scale, y_val * 2 * scale - scale)


@dataclass
class LayoutState:
    """Working state of one layout run."""
    positions: Dict[str, Tuple[float, float]]  # id -> (x, y)
    velocities: Dict[str, Tuple[float, float]]  # id -> (vx, vy)
    step: int = 0
    max_movement: float = 0.0
    converged: bool = False
    cancelled: bool = False

    def to_positions(self) -> Dict[str, Position]:
        return {node_id: Position(node_id, x, y)
                for node_id, (x, y) in self.positions.items()}


class ForceDirectedLayout:
    """
    Compute 2-D positions for a node/edge list.

    Forces applied each step:
    1. Repulsion - inverse-square push between every pair of nodes
    2. Attraction - spring along each edge toward its weight's rest length
    3. Gravity - linear pull toward the canvas center

    The instance holds configuration only. All positions and velocities live
    in a LayoutState created per call, and inputs are never modified.
    """

    def __init__(self, config: Optional[LayoutConfig] = None, rng=None):
        """
        Args:
            config: Canvas and force constants (default: knowledge_graph profile)
            rng: Random source with a ``random()`` method used for leaf jitter.
                When omitted, each run gets its own ``random.Random(config.seed)``.
        """
        self.config = (config or get_profile(DEFAULT_PROFILE)).validate()
        self.rng = rng

    def _random_source(self):
        if self.rng is not None:
            return self.rng
        return random.Random(self.config.seed)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def initialize_state(self, nodes: Iterable[Node], rng=None) -> LayoutState:
        """Seed positions: anchors on fixed rings, leaves scattered with jitter.

        Duplicate ids keep their first occurrence.
        """
        rng = rng if rng is not None else self._random_source()
        cfg = self.config
        cx, cy = cfg.center

        groups: Dict[NodeType, List[Node]] = {t: [] for t in NodeType}
        seen = set()
        order: List[str] = []
        for node in nodes:
            if node.id in seen:
                logger.debug("Duplicate node id %r ignored", node.id)
                continue
            seen.add(node.id)
            order.append(node.id)
            groups[node.type].append(node)

        seeded: Dict[str, Tuple[float, float]] = {}

        clusters = groups[NodeType.CLUSTER_ANCHOR]
        for i, node in enumerate(clusters):
            angle = 2 * math.pi * i / len(clusters)
            seeded[node.id] = (cx + math.cos(angle) * cfg.cluster_radius,
                               cy + math.sin(angle) * cfg.cluster_radius)

        secondaries = groups[NodeType.SECONDARY_ANCHOR]
        for i, node in enumerate(secondaries):
            angle = 2 * math.pi * i / len(secondaries) + cfg.secondary_phase
            seeded[node.id] = (cx + math.cos(angle) * cfg.secondary_radius,
                               cy + math.sin(angle) * cfg.secondary_radius)

        leaves = groups[NodeType.LEAF]
        for i, node in enumerate(leaves):
            angle = 2 * math.pi * i / len(leaves)
            r = cfg.leaf_radius_base + rng.random() * cfg.leaf_radius_jitter
            seeded[node.id] = (
                cx + math.cos(angle) * r + (rng.random() - 0.5) * 2 * cfg.leaf_noise,
                cy + math.sin(angle) * r + (rng.random() - 0.5) * 2 * cfg.leaf_noise,
            )

        # Rings and scatter may exceed a small canvas; seeds obey the same clamp as steps
        min_x, min_y, max_x, max_y = cfg.bounds()
        positions = {}
        for node_id in order:
            x, y = seeded[node_id]
            positions[node_id] = (min(max_x, max(min_x, x)), min(max_y, max(min_y, y)))

        return LayoutState(
            positions=positions,
            velocities={node_id: (0.0, 0.0) for node_id in order},
        )

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _resolve_springs(self, ids: List[str], edges: Iterable[Edge]) -> List[Spring]:
        """Map edges onto node indices, skipping edges with a missing endpoint."""
        index = {node_id: i for i, node_id in enumerate(ids)}
        springs: List[Spring] = []
        skipped = 0
        for edge in edges:
            a = index.get(edge.source)
            b = index.get(edge.target)
            if a is None or b is None:
                skipped += 1
                continue
            springs.append((a, b, self.config.rest_length(edge.weight)))
        if skipped:
            logger.debug("Skipping %d edge(s) with missing endpoints", skipped)
        return springs

    def _add_repulsion_forces(self, ids: List[str], xs: List[float], ys: List[float],
                              vxs: List[float], vys: List[float]):
        strength = self.config.repulsion_strength
        eps = self.config.distance_epsilon
        n = len(ids)
        for i in range(n):
            for j in range(i + 1, n):
                dx = xs[j] - xs[i]
                dy = ys[j] - ys[i]
                if dx == 0.0 and dy == 0.0:
                    dx, dy = _deterministic_jitter(f"{ids[i]}|{ids[j]}", eps)
                dist = math.sqrt(dx * dx + dy * dy) + eps
                force = strength / (dist * dist)
                fx = dx / dist * force
                fy = dy / dist * force
                vxs[i] -= fx
                vys[i] -= fy
                vxs[j] += fx
                vys[j] += fy

    def _add_attraction_forces(self, springs: List[Spring], xs: List[float], ys: List[float],
                               vxs: List[float], vys: List[float]):
        strength = self.config.attraction_strength
        eps = self.config.distance_epsilon
        for a, b, rest in springs:
            dx = xs[b] - xs[a]
            dy = ys[b] - ys[a]
            dist = math.sqrt(dx * dx + dy * dy) + eps
            # Positive when stretched (pull together), negative when compressed
            force = strength * (dist - rest)
            fx = dx / dist * force
            fy = dy / dist * force
            vxs[a] += fx
            vys[a] += fy
            vxs[b] -= fx
            vys[b] -= fy

    def _add_gravity_forces(self, xs: List[float], ys: List[float],
                            vxs: List[float], vys: List[float]):
        strength = self.config.gravity_strength
        cx, cy = self.config.center
        for i in range(len(xs)):
            vxs[i] += (cx - xs[i]) * strength
            vys[i] += (cy - ys[i]) * strength

    def _integrate(self, xs: List[float], ys: List[float],
                   vxs: List[float], vys: List[float]) -> float:
        """Damp velocities, move, clamp to the padded canvas.

        Returns:
            Largest displacement of any node this step
        """
        cfg = self.config
        min_x, min_y, max_x, max_y = cfg.bounds()
        max_movement = 0.0
        for i in range(len(xs)):
            vxs[i] *= cfg.damping
            vys[i] *= cfg.damping
            new_x = min(max_x, max(min_x, xs[i] + vxs[i]))
            new_y = min(max_y, max(min_y, ys[i] + vys[i]))
            movement = math.hypot(new_x - xs[i], new_y - ys[i])
            max_movement = max(max_movement, movement)
            xs[i] = new_x
            ys[i] = new_y
        return max_movement

    def _step(self, state: LayoutState, ids: List[str], springs: List[Spring]) -> float:
        xs = [state.positions[i][0] for i in ids]
        ys = [state.positions[i][1] for i in ids]
        vxs = [state.velocities[i][0] for i in ids]
        vys = [state.velocities[i][1] for i in ids]

        # Forces read xs/ys only, so every pass sees the same snapshot
        self._add_repulsion_forces(ids, xs, ys, vxs, vys)
        self._add_attraction_forces(springs, xs, ys, vxs, vys)
        self._add_gravity_forces(xs, ys, vxs, vys)
        max_movement = self._integrate(xs, ys, vxs, vys)

        for k, node_id in enumerate(ids):
            state.positions[node_id] = (xs[k], ys[k])
            state.velocities[node_id] = (vxs[k], vys[k])
        state.step += 1
        state.max_movement = max_movement
        return max_movement

    def step(self, state: LayoutState, edges: Iterable[Edge]) -> float:
        """Advance the simulation by one step.

        Lets a caller spread the run across animation frames. Each call is
        computed entirely from the state left by the previous one.

        Returns:
            Largest displacement of any node this step
        """
        ids = list(state.positions)
        return self._step(state, ids, self._resolve_springs(ids, edges))

    def run(self, nodes: Iterable[Node], edges: Iterable[Edge],
            callback: Optional[Callable[[LayoutState], Optional[bool]]] = None
            ) -> LayoutState:
        """
        Seed and simulate for ``config.steps`` steps.

        Args:
            nodes: Nodes to place
            edges: Edges between them; those with a missing endpoint are skipped
            callback: Called after every step with the current state. Returning
                True stops the run before the next step.

        Returns:
            Final LayoutState
        """
        cfg = self.config
        state = self.initialize_state(nodes)
        ids = list(state.positions)
        if not ids:
            return state

        springs = self._resolve_springs(ids, edges)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Force layout start: nodes=%d springs=%d steps=%d canvas=%gx%g",
                len(ids), len(springs), cfg.steps, cfg.width, cfg.height,
            )
            logger.debug(
                "Layout config: repulsion=%.2f attraction=%.4f gravity=%.4f damping=%.2f",
                cfg.repulsion_strength,
                cfg.attraction_strength,
                cfg.gravity_strength,
                cfg.damping,
            )

        log_every = 20

        for _ in range(cfg.steps):
            max_movement = self._step(state, ids, springs)

            if logger.isEnabledFor(logging.DEBUG) and state.step % log_every == 0:
                logger.debug("Step %d: max_move=%.4f", state.step, max_movement)

            if callback and callback(state):
                state.cancelled = True
                logger.debug("Layout cancelled after step %d", state.step)
                break

            if cfg.convergence_threshold is not None and max_movement < cfg.convergence_threshold:
                state.converged = True
                logger.debug(
                    "Converged at step %d: max_move=%.4f", state.step, max_movement
                )
                break

        if (cfg.convergence_threshold is not None and not state.converged
                and not state.cancelled):
            logger.warning(
                "Layout did not converge after %d steps (max_move=%.3f). "
                "Consider increasing steps or adjusting force strengths.",
                state.step,
                state.max_movement,
            )

        return state

    def layout(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> Dict[str, Position]:
        """Position map with exactly one entry per unique node id."""
        return self.run(nodes, edges).to_positions()


def compute_layout(nodes: Iterable[Node], edges: Iterable[Edge],
                   config: Optional[LayoutConfig] = None,
                   rng=None) -> Dict[str, Position]:
    """Lay out a node/edge list and return its position map."""
    return ForceDirectedLayout(config, rng=rng).layout(nodes, edges)


def layout_graph(graph: Graph, config: Optional[LayoutConfig] = None,
                 rng=None) -> Dict[str, Position]:
    """Same as compute_layout, for a Graph container."""
    return compute_layout(graph.nodes, graph.edges, config=config, rng=rng)
