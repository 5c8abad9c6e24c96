"""
Preview CLI

Prints the zones a tiling algorithm produces for a given screen size.

Usage:
    python -m autotile [options]
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .algorithms import TilingParams
from .constants import DEFAULT_GAP, DEFAULT_MASTER_COUNT, DEFAULT_SPLIT_RATIO
from .geometry import Rect
from .registry import AlgorithmRegistry
from .tiling_state import TilingState

log = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autotile-preview",
        description="Show the zones produced by an autotile algorithm",
    )
    parser.add_argument(
        "-a",
        "--algorithm",
        default=AlgorithmRegistry.default_algorithm_id(),
        help="Algorithm id (default: %(default)s)",
    )
    parser.add_argument("-n", "--windows", type=int, default=3, help="Number of windows")
    parser.add_argument("--width", type=int, default=1920, help="Screen width in pixels")
    parser.add_argument("--height", type=int, default=1080, help="Screen height in pixels")
    parser.add_argument("--inner-gap", type=int, default=DEFAULT_GAP, help="Gap between windows")
    parser.add_argument("--outer-gap", type=int, default=DEFAULT_GAP, help="Gap at screen edges")
    parser.add_argument("--ratio", type=float, default=DEFAULT_SPLIT_RATIO, help="Split ratio")
    parser.add_argument("--masters", type=int, default=DEFAULT_MASTER_COUNT, help="Master count")
    parser.add_argument("--list", action="store_true", help="List registered algorithms and exit")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def list_algorithms(registry: AlgorithmRegistry, as_json: bool) -> int:
    infos = [
        AlgorithmRegistry.algorithm_info(registry.algorithm(algorithm_id), algorithm_id)
        for algorithm_id in registry.available_algorithms()
    ]
    if as_json:
        print(json.dumps(infos, indent=2))
        return 0

    for info in infos:
        flags = []
        if info["supportsMasterCount"]:
            flags.append("master-count")
        if info["supportsSplitRatio"]:
            flags.append("split-ratio")
        print(f"{info['id']:<24} {info['name']:<16} {', '.join(flags)}")
    return 0


def preview(registry: AlgorithmRegistry, args: argparse.Namespace) -> int:
    algorithm = registry.algorithm(args.algorithm)
    if algorithm is None:
        log.error("Unknown algorithm: %s", args.algorithm)
        print(f"Unknown algorithm: {args.algorithm}", file=sys.stderr)
        print(f"Available: {', '.join(registry.available_algorithms())}", file=sys.stderr)
        return 1

    screen = Rect(0, 0, args.width, args.height)
    if not screen.is_valid():
        print(f"Invalid screen size: {args.width}x{args.height}", file=sys.stderr)
        return 1

    state = TilingState("preview")
    for i in range(max(0, args.windows)):
        state.add_window(f"window-{i + 1}")
    state.set_master_count(args.masters)
    state.set_split_ratio(args.ratio)

    zones = algorithm.calculate_zones(
        TilingParams(
            window_count=state.tiled_window_count(),
            screen=screen,
            state=state,
            inner_gap=args.inner_gap,
            outer_gap=args.outer_gap,
        )
    )

    if args.json:
        print(json.dumps([dict(zip(("x", "y", "width", "height"), z.to_tuple())) for z in zones], indent=2))
        return 0

    print(f"{algorithm.name}: {len(zones)} zones on {args.width}x{args.height}")
    for i, zone in enumerate(zones):
        print(f"  {i + 1:>2}  x={zone.x:<5} y={zone.y:<5} {zone.width}x{zone.height}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = create_parser().parse_args(argv)
    setup_logging(args.verbose)

    registry = AlgorithmRegistry.instance()
    if args.list:
        return list_algorithms(registry, args.json)
    return preview(registry, args)


if __name__ == "__main__":
    sys.exit(main())
