"""
Galleries of independently rendered patterns, plus export naming.
"""

import time
from typing import List, Optional, Sequence, Tuple

import structlog

from .grid_renderer import PatternConfig, render
from .randomizer import make_rng, random_config
from .surface import RasterSurface

logger = structlog.get_logger()


def export_filename(timestamp_ms: Optional[int] = None) -> str:
    """File name for a downloaded pattern: ``pattern-<epoch millis>.png``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"pattern-{timestamp_ms}.png"


def render_gallery(
    configs: Sequence[PatternConfig],
    width: int,
    height: int,
    pixel_ratio: float = 1.0,
    supersample: Optional[int] = None,
) -> List[RasterSurface]:
    """Render each config onto its own fresh surface, in order."""
    surfaces = []
    for config in configs:
        surface = RasterSurface(width, height, pixel_ratio=pixel_ratio, supersample=supersample)
        render(surface, config)
        surfaces.append(surface)

    logger.info("Gallery rendered", count=len(surfaces), width=width, height=height)
    return surfaces


def random_gallery(
    count: int,
    width: int,
    height: int,
    seed: Optional[int] = None,
    pixel_ratio: float = 1.0,
    supersample: Optional[int] = None,
) -> List[Tuple[PatternConfig, RasterSurface]]:
    """Draw ``count`` random configurations and render each one."""
    if count < 0:
        raise ValueError(f"Gallery size must not be negative: {count}")

    rng = make_rng(seed)
    configs = [random_config(rng) for _ in range(count)]
    surfaces = render_gallery(configs, width, height, pixel_ratio=pixel_ratio, supersample=supersample)
    return list(zip(configs, surfaces))
