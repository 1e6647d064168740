#!/usr/bin/env python3
"""
CoinBubbles CLI

Command-line interface for headless bubble layout and simulation.

Usage:
    coinbubbles layout <instruments.json> [options]
    coinbubbles simulate <instruments.json> [options]
    coinbubbles config [--config custom.yaml]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def write_output(data, output):
    """Write JSON to a file, or stdout when no path is given."""
    text = json.dumps(data, indent=2)
    if output:
        Path(output).write_text(text + "\n")
        print(f"Saved to: {output}")
    else:
        print(text)


def _build_simulation(args):
    from .config import load_config
    from .market.instrument import load_instruments
    from .physics.simulation import BubbleSimulation

    config = load_config(args.config)
    instruments = load_instruments(args.instruments)
    sim = BubbleSimulation(config, seed=args.seed)
    sim.rebuild(
        instruments,
        timeframe=args.timeframe,
        size_mode=args.size_mode,
        width=args.width,
        height=args.height,
    )
    return sim


def cmd_layout(args):
    """Build the initial layout and write a snapshot."""
    sim = _build_simulation(args)
    snapshot = sim.snapshot()
    snapshot["separation_ratio"] = sim.separation()
    print(f"Bubbles: {len(sim.nodes)}", file=sys.stderr)
    print(f"Separation: {snapshot['separation_ratio']:.1%}", file=sys.stderr)
    write_output(snapshot, args.output)
    return 0


def cmd_simulate(args):
    """Build, run a number of frames and write the final snapshot."""
    sim = _build_simulation(args)
    initial = sim.separation()
    contacts = sim.run(args.frames, args.dt)
    snapshot = sim.snapshot()
    snapshot["separation_ratio"] = sim.separation()
    snapshot["contacts"] = contacts
    print(f"Bubbles: {len(sim.nodes)}", file=sys.stderr)
    print(f"Frames: {sim.frames} (dt={min(args.dt, sim.config.max_frame_dt):.3f}s)",
          file=sys.stderr)
    print(f"Separation: {initial:.1%} -> {snapshot['separation_ratio']:.1%}", file=sys.stderr)
    write_output(snapshot, args.output)
    return 0


def cmd_config(args):
    """Print the effective engine configuration."""
    from .config import load_config

    config = load_config(args.config)
    print(config.to_yaml(), end="")
    return 0


def _add_build_arguments(parser):
    parser.add_argument('instruments', help='Path to JSON array of market records')
    parser.add_argument('-o', '--output', help='Output JSON file (default: stdout)')
    parser.add_argument('--config', help='Engine config YAML (default: shipped defaults)')
    parser.add_argument('--width', type=float, default=1280.0, help='Viewport width px (default: 1280)')
    parser.add_argument('--height', type=float, default=800.0, help='Viewport height px (default: 800)')
    parser.add_argument('--size-mode', choices=['cap', 'volume', 'percent'], default='cap',
                        help='Metric driving bubble size (default: cap)')
    parser.add_argument('--timeframe', choices=['1h', '24h', '7d', '30d', '365d'], default='24h',
                        help='Percent-change window (default: 24h)')
    parser.add_argument('--seed', type=int, help='Random seed for reproducible layouts')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="CoinBubbles - bubble layout and physics for market instruments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  coinbubbles layout markets.json --width 1440 --height 900 -o layout.json
  coinbubbles simulate markets.json --size-mode volume --frames 600 --seed 7
  coinbubbles config --config tuned.yaml
        """,
    )

    parser.add_argument('--version', action='version', version=f'coinbubbles {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    layout_parser = subparsers.add_parser('layout', help='Compute the initial bubble layout')
    _add_build_arguments(layout_parser)

    simulate_parser = subparsers.add_parser('simulate', help='Run the bubble physics headless')
    _add_build_arguments(simulate_parser)
    simulate_parser.add_argument('--frames', type=int, default=300, help='Frames to simulate (default: 300)')
    simulate_parser.add_argument('--dt', type=float, default=1 / 60,
                                 help='Seconds per frame, clamped to max_frame_dt (default: 1/60)')

    config_parser = subparsers.add_parser('config', help='Show the effective engine config')
    config_parser.add_argument('--config', help='Engine config YAML (default: shipped defaults)')
    config_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(getattr(args, 'verbose', False))

    commands = {
        'layout': cmd_layout,
        'simulate': cmd_simulate,
        'config': cmd_config,
    }

    try:
        return commands[args.command](args)
    except (FileNotFoundError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
