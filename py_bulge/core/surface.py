"""
Canvas-like raster surface backed by Pillow.

The renderer only needs a small subset of an HTML canvas 2D context: filled
rectangles, paths made of lines and quadratic curves, stroking, and a
save/restore transform stack. ``RasterSurface`` provides exactly that on top
of a Pillow image. Drawing happens on an oversampled image which is
downsampled on export for antialiasing.
"""

import io
import math
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np
import structlog
from PIL import Image, ImageColor, ImageDraw

from ..config.config import settings

logger = structlog.get_logger()

RGBA = Tuple[int, int, int, float]

# Target length in device pixels of one flattened curve segment
CURVE_TOLERANCE_PX = 2.0
MAX_CURVE_SEGMENTS = 64

_RGBA_PATTERN = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)$"
)


def parse_color(color: Union[str, Tuple[int, ...]]) -> RGBA:
    """
    Parse a CSS-style color into (r, g, b, alpha) with alpha in [0, 1].

    Accepts ``#rgb``, ``#rrggbb``, ``rgb(r, g, b)``, ``rgba(r, g, b, a)``
    with a fractional alpha, named colors, and RGB/RGBA tuples.
    """
    if isinstance(color, tuple):
        if len(color) == 3:
            return (int(color[0]), int(color[1]), int(color[2]), 1.0)
        if len(color) == 4:
            return (int(color[0]), int(color[1]), int(color[2]), float(color[3]))
        raise ValueError(f"Invalid color tuple: {color!r}")

    match = _RGBA_PATTERN.match(color.strip().lower())
    if match:
        r, g, b, a = match.groups()
        alpha = float(a) if a is not None else 1.0
        return (
            int(round(float(r))),
            int(round(float(g))),
            int(round(float(b))),
            min(max(alpha, 0.0), 1.0),
        )

    r, g, b = ImageColor.getrgb(color)[:3]
    return (r, g, b, 1.0)


def backing_pixels(width: int, height: int, pixel_ratio: float = 1.0, supersample: Optional[int] = None) -> int:
    """Pixel count of the oversampled image a surface of this size allocates."""
    supersample = int(supersample or settings.supersample)
    pixel_width = max(int(round(int(width) * pixel_ratio)), 0)
    pixel_height = max(int(round(int(height) * pixel_ratio)), 0)
    return pixel_width * supersample * pixel_height * supersample


def _identity() -> np.ndarray:
    return np.eye(3, dtype=np.float64)


class RasterSurface:
    """
    A fixed-size drawing target with a canvas-style API.

    Coordinates passed to drawing calls are logical pixels. The surface maps
    them through the current transform, the pixel ratio (device pixel
    density), and the internal supersample factor.
    """

    def __init__(
        self,
        width: int,
        height: int,
        pixel_ratio: float = 1.0,
        supersample: Optional[int] = None,
        background: str = "#ffffff",
    ):
        if pixel_ratio <= 0:
            raise ValueError(f"Pixel ratio must be positive: {pixel_ratio}")

        self.width = int(width)
        self.height = int(height)
        self.pixel_ratio = float(pixel_ratio)
        self.supersample = int(supersample or settings.supersample)
        if self.supersample < 1:
            raise ValueError(f"Supersample factor must be at least 1: {self.supersample}")

        self.pixel_width = max(int(round(self.width * self.pixel_ratio)), 0)
        self.pixel_height = max(int(round(self.height * self.pixel_ratio)), 0)

        backing = backing_pixels(self.width, self.height, self.pixel_ratio, self.supersample)
        if backing > settings.max_backing_pixels:
            raise ValueError(
                f"Backing image of {backing} pixels exceeds the limit of {settings.max_backing_pixels}"
            )

        self._image: Optional[Image.Image] = None
        self._mask: Optional[Image.Image] = None
        if self.pixel_width > 0 and self.pixel_height > 0:
            self._image = Image.new(
                "RGB",
                (self.pixel_width * self.supersample, self.pixel_height * self.supersample),
                parse_color(background)[:3],
            )

        # Logical -> oversampled device pixels, before any user transform
        self._base_scale = self.pixel_ratio * self.supersample
        self._matrix = _identity()
        self._stack: List[Tuple[np.ndarray, dict]] = []
        self._subpaths: List[List[Tuple[float, float]]] = []

        self.stroke_style = "#000000"
        self.fill_style = "#000000"
        self.line_width = 1.0
        self.line_cap = "butt"
        self.line_join = "miter"

    # -- state -----------------------------------------------------------

    @property
    def is_usable(self) -> bool:
        """True while the surface has a backing image to draw on."""
        return self._image is not None

    def close(self) -> None:
        """Release the backing image; the surface is unusable afterwards."""
        if self._image is not None:
            self._image.close()
        if self._mask is not None:
            self._mask.close()
        self._image = None
        self._mask = None

    def _style_state(self) -> dict:
        return {
            "stroke_style": self.stroke_style,
            "fill_style": self.fill_style,
            "line_width": self.line_width,
            "line_cap": self.line_cap,
            "line_join": self.line_join,
        }

    def save(self) -> None:
        """Push the current transform and stroke/fill state."""
        self._stack.append((self._matrix.copy(), self._style_state()))

    def restore(self) -> None:
        """Pop the last saved state. A restore without a save is ignored."""
        if not self._stack:
            return
        matrix, style = self._stack.pop()
        self._matrix = matrix
        for key, value in style.items():
            setattr(self, key, value)

    @contextmanager
    def transformed(self) -> Iterator["RasterSurface"]:
        """Scope transform and style changes to a ``with`` block."""
        self.save()
        try:
            yield self
        finally:
            self.restore()

    # -- transforms ------------------------------------------------------

    def translate(self, dx: float, dy: float) -> None:
        m = _identity()
        m[0, 2] = dx
        m[1, 2] = dy
        self._matrix = self._matrix @ m

    def rotate(self, radians: float) -> None:
        c = math.cos(radians)
        s = math.sin(radians)
        m = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
        self._matrix = self._matrix @ m

    def scale(self, sx: float, sy: Optional[float] = None) -> None:
        if sy is None:
            sy = sx
        m = _identity()
        m[0, 0] = sx
        m[1, 1] = sy
        self._matrix = self._matrix @ m

    def reset_transform(self) -> None:
        self._matrix = _identity()

    def get_transform(self) -> np.ndarray:
        """Current user transform as a 3x3 matrix (copy)."""
        return self._matrix.copy()

    def _to_device(self, x: float, y: float) -> Tuple[float, float]:
        m = self._matrix
        tx = m[0, 0] * x + m[0, 1] * y + m[0, 2]
        ty = m[1, 0] * x + m[1, 1] * y + m[1, 2]
        return (tx * self._base_scale, ty * self._base_scale)

    def _device_scale(self) -> float:
        det = self._matrix[0, 0] * self._matrix[1, 1] - self._matrix[0, 1] * self._matrix[1, 0]
        return math.sqrt(abs(det)) * self._base_scale

    # -- paths -----------------------------------------------------------

    def begin_path(self) -> None:
        self._subpaths = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append([self._to_device(x, y)])

    def line_to(self, x: float, y: float) -> None:
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append(self._to_device(x, y))

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        """
        Add a quadratic Bezier from the current point to (x, y).

        Affine transforms map Bezier curves onto Bezier curves, so the control
        points are transformed first and the curve is flattened in device
        space.
        """
        if not self._subpaths:
            self.move_to(cpx, cpy)

        current = self._subpaths[-1]
        p0 = np.array(current[-1])
        p1 = np.array(self._to_device(cpx, cpy))
        p2 = np.array(self._to_device(x, y))

        chord = np.linalg.norm(p1 - p0) + np.linalg.norm(p2 - p1)
        segments = int(min(max(math.ceil(chord / CURVE_TOLERANCE_PX), 1), MAX_CURVE_SEGMENTS))

        t = np.linspace(0.0, 1.0, segments + 1)[1:, None]
        curve = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2
        current.extend((float(px), float(py)) for px, py in curve)

    def path_points(self) -> List[List[Tuple[float, float]]]:
        """Flattened subpaths of the current path in oversampled device pixels."""
        return [list(subpath) for subpath in self._subpaths]

    # -- painting --------------------------------------------------------

    def _coverage_mask(self) -> Image.Image:
        """Full-size coverage layer, reused across paints and kept cleared."""
        if self._mask is None or self._mask.size != self._image.size:
            self._mask = Image.new("L", self._image.size, 0)
        return self._mask

    def _paint(self, color: RGBA, draw_mask) -> None:
        """
        Composite ``color`` through a coverage mask drawn by ``draw_mask``.

        Coverage is drawn at the alpha level directly, so overlapping parts of
        one paint share a single level. Only the touched box is composited and
        then cleared again.
        """
        if self._image is None:
            return

        r, g, b, alpha = color
        level = int(round(min(alpha, 1.0) * 255))
        if level <= 0:
            return

        mask = self._coverage_mask()
        draw_mask(ImageDraw.Draw(mask), level)
        box = mask.getbbox()
        if box is None:
            return

        self._image.paste((r, g, b), box, mask.crop(box))
        mask.paste(0, box)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Optional[str] = None) -> None:
        """Fill a rectangle with ``color`` (defaults to ``fill_style``)."""
        corners = [
            self._to_device(x, y),
            self._to_device(x + w, y),
            self._to_device(x + w, y + h),
            self._to_device(x, y + h),
        ]

        def draw(mask_draw, level):
            mask_draw.polygon(corners, fill=level)

        self._paint(parse_color(color or self.fill_style), draw)

    def clear(self, color: str) -> None:
        """Fill the whole surface with ``color``, ignoring the transform."""
        if self._image is None:
            return
        r, g, b, _ = parse_color(color)
        self._image.paste((r, g, b), (0, 0) + self._image.size)

    def stroke(self) -> None:
        """
        Stroke the current path with the current stroke style.

        The whole path is composited once, so self-overlapping segments do
        not darken at partial opacity.
        """
        subpaths = [sp for sp in self._subpaths if sp]
        if self._image is None or not subpaths:
            return

        width_px = self.line_width * self._device_scale()
        pen = max(int(round(width_px)), 1)
        radius = pen / 2.0
        round_join = self.line_join == "round"
        round_cap = self.line_cap == "round"

        def draw(mask_draw, level):
            for subpath in subpaths:
                if len(subpath) > 1:
                    mask_draw.line(subpath, fill=level, width=pen, joint="curve" if round_join else None)
                if round_cap or len(subpath) == 1:
                    for px, py in (subpath[0], subpath[-1]):
                        mask_draw.ellipse(
                            (px - radius, py - radius, px + radius, py + radius), fill=level
                        )

        self._paint(parse_color(self.stroke_style), draw)

    # -- export ----------------------------------------------------------

    def to_image(self) -> Image.Image:
        """Return the surface content at its output pixel size."""
        if self._image is None:
            raise ValueError("Surface has no backing image")
        if self.supersample == 1:
            return self._image.copy()
        return self._image.resize(
            (self.pixel_width, self.pixel_height), Image.Resampling.LANCZOS
        )

    def to_png_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.to_image().save(buffer, format="PNG")
        return buffer.getvalue()

    def save_png(self, path: Union[str, Path]) -> Path:
        """Write the surface to ``path`` as PNG and return the path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_image().save(path, format="PNG")
        logger.info("Pattern image written", path=str(path), size=(self.pixel_width, self.pixel_height))
        return path
