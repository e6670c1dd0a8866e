"""
CLI entry point for rendering a quaternion attractor to PNG.

Usage:
    quattractor [options]
    python -m quattractor [options]
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from quattractor.core.config import AttractorConfig, SideFlipVariation, validate_config
from quattractor.core.engine import AttractorEngine
from quattractor.core.errors import AttractorError
from quattractor.params import random_config
from quattractor.render.renderer import NORMALIZATIONS, PROJECTIONS, AttractorRenderer, RenderConfig, save_png

# Map profile to defaults
PROFILES = {
    "low": {"width": 640, "height": 480, "points": 20_000},
    "medium": {"width": 1280, "height": 960, "points": 100_000},
    "high": {"width": 2560, "height": 1920, "points": 500_000},
}

VARIATIONS = {
    "plain": SideFlipVariation.PLAIN_FLIP,
    "smallest": SideFlipVariation.FLIP_SMALLEST,
    "all-except-largest": SideFlipVariation.FLIP_ALL_EXCEPT_LARGEST,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quattractor",
        description="Deterministic quaternion attractor image generator",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output PNG path (default: attractor_<seed>.png)",
    )
    parser.add_argument("-s", "--seed", type=int, default=0, help="Seed for the generated parameters (default: 0)")

    # Size & Profile
    parser.add_argument(
        "-p", "--profile", type=str, default="medium",
        choices=sorted(PROFILES),
        help="Target profile (low: 640x480 20k points, medium: 1280x960 100k, high: 2560x1920 500k)",
    )
    parser.add_argument("-n", "--points", type=int, default=None, help="Number of points (overrides profile)")
    parser.add_argument("--width", type=int, default=None, help="Image width (overrides profile)")
    parser.add_argument("--height", type=int, default=None, help="Image height (overrides profile)")

    # Attractor parameters
    parser.add_argument("--config", type=Path, default=None, help="JSON attractor config (replaces seeded parameters)")
    parser.add_argument("--variation", type=str, default=None, choices=list(VARIATIONS), help="Side flip variation")
    parser.add_argument("--step", type=float, nargs=3, metavar=("X", "Y", "Z"), default=None, help="Step vector")
    parser.add_argument("--start", type=float, nargs=3, metavar=("X", "Y", "Z"), default=None, help="Initial position")
    parser.add_argument(
        "--rotation", type=float, nargs=4, metavar=("W", "X", "Y", "Z"), default=None,
        help="Global rotation quaternion (1 0 0 0 disables rotation)",
    )

    # Rendering
    parser.add_argument("--projection", type=str, default="simple", choices=PROJECTIONS, help="2D projection")
    parser.add_argument(
        "--normalization", type=str, default="logarithmic", choices=NORMALIZATIONS,
        help="Brightness normalization",
    )
    parser.add_argument("--blur", type=float, default=1.0, help="Gaussian blur sigma in pixels (0 disables)")
    parser.add_argument("--no-glow", action="store_true", help="Disable glow")
    parser.add_argument("--no-vignette", action="store_true", help="Disable vignette")

    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> AttractorConfig:
    """Seeded (or file) config with explicit flags layered on top."""
    if args.config is not None:
        with open(args.config, "r", encoding="utf-8") as f:
            config = AttractorConfig.from_dict(json.load(f))
    else:
        config = random_config(args.seed)

    overrides = config.to_dict()
    if args.step is not None:
        overrides["step_vector"] = args.step
    if args.start is not None:
        overrides["initial_position"] = args.start
    if args.rotation is not None:
        overrides["global_rotation"] = args.rotation
    if args.variation is not None:
        overrides["side_flip_variation"] = VARIATIONS[args.variation]
    return AttractorConfig.from_dict(overrides)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    p_cfg = PROFILES[args.profile]
    width = args.width if args.width is not None else p_cfg["width"]
    height = args.height if args.height is not None else p_cfg["height"]
    n_points = args.points if args.points is not None else p_cfg["points"]
    if n_points < 0:
        parser.error("--points must be non-negative")

    try:
        config = resolve_config(args)
        render_cfg = RenderConfig(
            width=width,
            height=height,
            projection=args.projection,
            normalization=args.normalization,
            blur_sigma=args.blur,
            glow_intensity=0.0 if args.no_glow else 0.25,
            vignette_strength=0.0 if args.no_vignette else 0.2,
        )
    except (OSError, ValueError, AttractorError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for warning in validate_config(config).warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    output = args.output or Path(f"attractor_{config.seed}.png")

    # Step 1: Generate
    print(f"Generating {n_points} points (seed {config.seed}, {config.side_flip_variation.name})")
    t0 = time.time()
    engine = AttractorEngine(n_points, config)
    engine.generate_points(n_points)

    stats = engine.get_statistics()
    print(f"  Side flips: {stats.side_flip_count}")
    print(f"  Final position: ({', '.join(f'{c:.4f}' for c in stats.current_position)}), side {int(stats.current_side):+d}")
    print(f"  Generation took {time.time() - t0:.1f}s")

    # Step 2: Render
    print(f"\nRendering {width}x{height} ({args.projection}, {args.normalization})")
    t1 = time.time()
    image = AttractorRenderer(render_cfg).render_engine(engine)
    try:
        save_png(image, output)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nDone! Render took {time.time() - t1:.1f}s")
    print(f"  Output: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
