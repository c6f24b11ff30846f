#!/usr/bin/env python3
"""
HubLayout CLI

Command-line interface for laying out knowledge-graph payloads.

Usage:
    hublayout layout <graph.json> [options]
    hublayout summary <graph.json>
    hublayout profiles
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional


def load_graph(path: str):
    """
    Load a graph payload from a JSON file.

    Returns:
        Graph, or None if the file is missing or malformed
    """
    from .graph.abstraction import Graph

    graph_path = Path(path)
    if not graph_path.exists():
        print(f"Error: Graph file not found: {graph_path}")
        return None

    try:
        with open(graph_path, "r") as f:
            data = json.load(f)
        return Graph.from_dict(data)
    except (json.JSONDecodeError, ValueError) as e:
        print(f"Error: Cannot read graph from {graph_path}: {e}")
        return None


def build_config(args):
    """Resolve the layout config from --profile, --config and flag overrides."""
    from .layout.profiles import get_profile, load_config

    if args.config:
        config = load_config(args.config, base=args.profile)
    else:
        config = get_profile(args.profile)

    overrides = {}
    if args.steps is not None:
        overrides["steps"] = args.steps
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.converge is not None:
        overrides["convergence_threshold"] = args.converge
    return config.with_overrides(**overrides) if overrides else config


def cmd_layout(args):
    """Run the force-directed layout and write positions."""
    from .layout.force_directed import ForceDirectedLayout

    graph = load_graph(args.graph)
    if graph is None:
        return 1

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Loaded graph: {args.graph}")
    print(f"  Nodes: {len(graph)}")
    print(f"  Edges: {len(graph.edges)}")
    dangling = graph.dangling_edges()
    if dangling:
        print(f"  Dangling edges (ignored by layout): {len(dangling)}")

    print(f"\nRunning force layout (profile={config.name}, steps={config.steps})...")
    engine = ForceDirectedLayout(config)

    def progress_callback(state):
        if state.step % 20 == 0:
            print(f"  Step {state.step}: max_move={state.max_movement:.3f}")

    state = engine.run(graph.nodes, graph.edges,
                       callback=progress_callback if args.verbose else None)

    if state.converged:
        print(f"  Converged after {state.step} steps")
    else:
        print(f"  Finished after {state.step} steps")

    payload = {
        "canvas": {
            "width": config.width,
            "height": config.height,
            "padding": config.padding,
        },
        "positions": {
            node_id: pos.to_dict() for node_id, pos in state.to_positions().items()
        },
    }

    text = json.dumps(payload, indent=2)
    if args.output:
        try:
            Path(args.output).write_text(text)
        except OSError as e:
            print(f"Error: Cannot write positions to {args.output}: {e}")
            return 1
        print(f"\nPositions written to {args.output}")
    else:
        print(text)
    return 0


def cmd_summary(args):
    """Print node and edge counts for a graph payload."""
    graph = load_graph(args.graph)
    if graph is None:
        return 1

    summary = graph.summary()
    print(f"Graph: {args.graph}")
    print(f"  Nodes: {summary.total_nodes}")
    for node_type, count in summary.counts_by_type.items():
        print(f"    {node_type.value}: {count}")
    print(f"  Edges: {summary.total_edges}")
    print(f"  Dangling edges: {summary.dangling_edges}")
    return 0


def cmd_profiles(args):
    """List available layout profiles."""
    from .layout.profiles import get_profile, list_profiles

    for name in list_profiles():
        profile = get_profile(name)
        print(f"{name}: {profile.width:g}x{profile.height:g} "
              f"padding={profile.padding:g} steps={profile.steps}")
    return 0


def main(argv: Optional[list] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="HubLayout - Force-directed knowledge graph layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hublayout layout graph.json -o positions.json
  hublayout layout graph.json --profile wide --steps 300 --seed 42
  hublayout layout graph.json --config layout.yaml
  hublayout summary graph.json
  hublayout profiles
        """,
    )

    parser.add_argument('--version', action='version', version='hublayout 0.1.0')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Layout command
    layout_parser = subparsers.add_parser('layout', help='Compute node positions')
    layout_parser.add_argument('graph', help='Path to graph JSON ({"nodes": [...], "edges": [...]})')
    layout_parser.add_argument('-o', '--output', help='Output file path (default: stdout)')
    layout_parser.add_argument('--profile', default='knowledge_graph',
                               help='Layout profile (default: knowledge_graph)')
    layout_parser.add_argument('--config', help='YAML file with layout overrides')
    layout_parser.add_argument('--steps', type=int, help='Simulation steps')
    layout_parser.add_argument('--seed', type=int, help='Seed for leaf jitter')
    layout_parser.add_argument('--converge', type=float,
                               help='Stop early once max movement falls below this (px)')
    layout_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    # Summary command
    summary_parser = subparsers.add_parser('summary', help='Show graph counts')
    summary_parser.add_argument('graph', help='Path to graph JSON')

    # Profiles command
    subparsers.add_parser('profiles', help='List layout profiles')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if getattr(args, 'verbose', False):
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    commands = {
        'layout': cmd_layout,
        'summary': cmd_summary,
        'profiles': cmd_profiles,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
