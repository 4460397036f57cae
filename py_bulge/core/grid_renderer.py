"""
Grid rendering for bulge-distorted patterns.

The renderer lays a regular lattice of horizontal and vertical lines over the
canvas, pushes every lattice sample through the bulge field, and strokes each
line as a smooth curve through the displaced samples.
"""

import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import numpy as np
import structlog

from .bulge_field import BulgeDescriptor, displace_points, generate_bulges
from .surface import RasterSurface

logger = structlog.get_logger()

BACKGROUND_COLOR = "#fafafa"
LINE_GRAY = 128
LINE_WIDTH = 0.8

# Lattice overflows the canvas by this many cells on every side
LATTICE_MARGIN = 2


@dataclass(frozen=True)
class PatternConfig:
    """Parameters for one pattern render."""

    grid_size: float = 40.0
    bulge_strength: float = 60.0
    bulge_count: int = 3
    seed: float = 0.0
    line_opacity: float = 0.15
    rotation: float = 0.0

    def validate(self) -> "PatternConfig":
        """Raise ValueError if any field is outside its numeric domain."""
        if not math.isfinite(self.grid_size) or self.grid_size <= 0:
            raise ValueError(f"Grid size must be a positive finite number: {self.grid_size}")
        if self.bulge_strength < 0:
            raise ValueError(f"Bulge strength must not be negative: {self.bulge_strength}")
        if self.bulge_count < 0:
            raise ValueError(f"Bulge count must not be negative: {self.bulge_count}")
        if not 0.0 <= self.line_opacity <= 1.0:
            raise ValueError(f"Line opacity must be within [0, 1]: {self.line_opacity}")
        return self

    def with_changes(self, **changes: Any) -> "PatternConfig":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LatticeExtent(NamedTuple):
    """Lattice size: line indices run from -2 up to (excluding) rows/cols."""

    cols: int
    rows: int

    @property
    def horizontal_lines(self) -> int:
        return self.rows + LATTICE_MARGIN

    @property
    def vertical_lines(self) -> int:
        return self.cols + LATTICE_MARGIN


def lattice_extent(width: float, height: float, grid_size: float) -> LatticeExtent:
    """Compute cols/rows covering the canvas plus the overflow margin."""
    if not math.isfinite(grid_size) or grid_size <= 0:
        raise ValueError(f"Grid size must be a positive finite number: {grid_size}")

    cols = math.ceil(width / grid_size) + 2 * LATTICE_MARGIN
    rows = math.ceil(height / grid_size) + 2 * LATTICE_MARGIN
    return LatticeExtent(cols=cols, rows=rows)


def stroke_color(opacity: float) -> str:
    return f"rgba({LINE_GRAY}, {LINE_GRAY}, {LINE_GRAY}, {opacity})"


def smooth_path(surface: RasterSurface, points: np.ndarray) -> None:
    """
    Add a midpoint-smoothed curve through ``points`` to the current path.

    Each interior point becomes the control point of a quadratic curve ending
    halfway to the next point; the last segment ends on the last point.
    """
    if len(points) == 0:
        return

    surface.move_to(points[0, 0], points[0, 1])

    for k in range(1, len(points) - 1):
        xc = (points[k, 0] + points[k + 1, 0]) / 2
        yc = (points[k, 1] + points[k + 1, 1]) / 2
        surface.quadratic_curve_to(points[k, 0], points[k, 1], xc, yc)

    if len(points) > 1:
        last = points[-1]
        surface.quadratic_curve_to(last[0], last[1], last[0], last[1])


def lattice_lines(
    extent: LatticeExtent, grid_size: float
) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """
    Undistorted sample points for every horizontal and vertical line.

    Returns (horizontal, vertical); each entry is an (n, 2) array ordered
    along the line, lines in increasing index order.
    """
    col_idx = np.arange(-LATTICE_MARGIN, extent.cols, dtype=np.float64)
    row_idx = np.arange(-LATTICE_MARGIN, extent.rows, dtype=np.float64)

    horizontal = [
        np.column_stack((col_idx * grid_size, np.full_like(col_idx, i * grid_size)))
        for i in row_idx
    ]
    vertical = [
        np.column_stack((np.full_like(row_idx, j * grid_size), row_idx * grid_size))
        for j in col_idx
    ]
    return horizontal, vertical


def render(surface: Optional[RasterSurface], config: PatternConfig) -> None:
    """
    Draw the pattern described by ``config`` onto ``surface``.

    A missing or unusable surface is a no-op. Everything is recomputed on
    every call; nothing is cached between renders.
    """
    if surface is None or not getattr(surface, "is_usable", False):
        logger.warning("Render skipped, surface is unusable")
        return

    width = surface.width
    height = surface.height
    extent = lattice_extent(width, height, config.grid_size)

    surface.fill_rect(0, 0, width, height, BACKGROUND_COLOR)

    with surface.transformed():
        surface.translate(width / 2, height / 2)
        surface.rotate(config.rotation * math.pi / 180)
        surface.translate(-width / 2, -height / 2)

        bulges = generate_bulges(config.seed, config.bulge_count, width, height)

        surface.stroke_style = stroke_color(config.line_opacity)
        surface.line_width = LINE_WIDTH
        surface.line_cap = "round"
        surface.line_join = "round"

        horizontal, vertical = lattice_lines(extent, config.grid_size)
        for line in horizontal + vertical:
            _stroke_line(surface, line, bulges, config.bulge_strength)

    logger.debug(
        "Pattern rendered",
        width=width,
        height=height,
        cols=extent.cols,
        rows=extent.rows,
        bulges=len(bulges),
    )


def _stroke_line(
    surface: RasterSurface,
    samples: np.ndarray,
    bulges: List[BulgeDescriptor],
    strength: float,
) -> None:
    surface.begin_path()
    smooth_path(surface, displace_points(samples, bulges, strength))
    surface.stroke()
