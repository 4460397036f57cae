"""
Command line interface for rendering bulge patterns to PNG files.

Examples:
    py-bulge render --out pattern.png --size 1800x1350 --seed 42 --bulge-count 4
    py-bulge render --out tilted.png --preset tilted --pixel-ratio 2
    py-bulge gallery --out-dir gallery --count 8 --seed 7
"""

import argparse
from pathlib import Path
from typing import Optional, Sequence, Tuple

import structlog

from .config import settings
from .config.presets import get_preset, list_presets
from .core.gallery import random_gallery
from .core.grid_renderer import PatternConfig, render
from .core.randomizer import default_config, make_rng, random_config
from .core.surface import RasterSurface
from .utils.log_config import configure_logging

logger = structlog.get_logger()


def parse_size(s: str) -> Tuple[int, int]:
    if "x" not in s.lower():
        raise argparse.ArgumentTypeError("Size must be like 900x675")
    a, b = s.lower().split("x", 1)
    try:
        width, height = int(a), int(b)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid size: {s!r}") from None
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive: {s!r}")
    return (width, height)


def build_config(args: argparse.Namespace) -> PatternConfig:
    """Start from a preset, a random draw, or the defaults; apply explicit overrides."""
    if args.preset:
        config = get_preset(args.preset)
    elif args.random:
        config = random_config(make_rng(args.random_seed))
    else:
        config = default_config(args.seed)

    overrides = {
        "grid_size": args.grid_size,
        "bulge_strength": args.bulge_strength,
        "bulge_count": args.bulge_count,
        "seed": args.seed,
        "line_opacity": args.line_opacity,
        "rotation": args.rotation,
    }
    changes = {key: value for key, value in overrides.items() if value is not None}
    return config.with_changes(**changes).validate()


def cmd_render(args: argparse.Namespace) -> int:
    config = build_config(args)
    width, height = args.size

    surface = RasterSurface(width, height, pixel_ratio=args.pixel_ratio)
    try:
        render(surface, config)
        path = surface.save_png(args.out)
    finally:
        surface.close()

    print(path)
    print(f"config: {config.to_dict()}")
    return 0


def cmd_gallery(args: argparse.Namespace) -> int:
    width, height = args.size
    out_dir = Path(args.out_dir)

    gallery = random_gallery(args.count, width, height, seed=args.seed, pixel_ratio=args.pixel_ratio)
    try:
        for index, (config, surface) in enumerate(gallery):
            path = surface.save_png(out_dir / f"pattern-{index:03d}.png")
            print(f"{path} {config.to_dict()}")
    finally:
        for _, surface in gallery:
            surface.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="py-bulge", description="Render bulge-distorted grid patterns to PNG")
    sub = ap.add_subparsers(dest="command", required=True)

    default_size = (settings.default_canvas_width, settings.default_canvas_height)

    rp = sub.add_parser("render", help="Render a single pattern")
    rp.add_argument("--out", required=True, help="Output PNG path")
    rp.add_argument("--size", type=parse_size, default=default_size, help="WIDTHxHEIGHT in logical pixels")
    rp.add_argument("--pixel-ratio", type=float, default=1.0, help="Device pixel ratio for high density output")
    source = rp.add_mutually_exclusive_group()
    source.add_argument("--preset", choices=list_presets(), help="Start from a named preset")
    source.add_argument("--random", action="store_true", help="Start from a random configuration")
    rp.add_argument("--random-seed", type=int, default=None, help="Seed for --random")
    rp.add_argument("--grid-size", type=float, default=None)
    rp.add_argument("--bulge-strength", type=float, default=None)
    rp.add_argument("--bulge-count", type=int, default=None)
    rp.add_argument("--seed", type=float, default=None, help="Bulge placement seed")
    rp.add_argument("--line-opacity", type=float, default=None)
    rp.add_argument("--rotation", type=float, default=None, help="Rotation in degrees")
    rp.set_defaults(func=cmd_render)

    gp = sub.add_parser("gallery", help="Render a gallery of random patterns")
    gp.add_argument("--out-dir", default=settings.output_dir, help="Output directory")
    gp.add_argument("--count", type=int, default=6)
    gp.add_argument(
        "--size", type=parse_size,
        default=(settings.gallery_tile_width, settings.gallery_tile_height),
        help="WIDTHxHEIGHT of each pattern",
    )
    gp.add_argument("--pixel-ratio", type=float, default=1.0)
    gp.add_argument("--seed", type=int, default=None, help="Seed for a reproducible gallery")
    gp.set_defaults(func=cmd_gallery)

    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    ap = build_parser()
    args = ap.parse_args(argv)
    try:
        return args.func(args)
    except ValueError as e:
        logger.error("Pattern generation failed", error=str(e))
        ap.error(str(e))


if __name__ == "__main__":
    raise SystemExit(main())
