"""Headless rendering service — draw plans onto Pillow images.

Pure Python (PIL + numpy), no Qt or GUI dependencies.
PILSurface implements DrawingSurface on an RGBA image; ImageService
wraps plan + paint into a single render call for the CLI and tests.
"""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image as PILImage
from PIL import ImageDraw

from ..core.models import Color, DerivedState, MeterConfig, RadialGradient, Rect
from ..core.surface import DrawingSurface
from .mapper import SegmentMapper
from .renderer import SegmentRenderer

log = logging.getLogger(__name__)

Box = Tuple[int, int, int, int]


def _px(v: float) -> int:
    """Snap a coordinate to the nearest pixel edge."""
    return int(math.floor(v + 0.5))


class PILSurface(DrawingSurface):
    """DrawingSurface backed by an RGBA Pillow image.

    Every fill is alpha-composited, so translucent colors blend with
    what is underneath like they do on a QPainter.
    """

    def __init__(self, width: int, height: int,
                 background: Optional[Color] = None):
        self.width = width
        self.height = height
        fill = background.to_rgba8() if background else (0, 0, 0, 0)
        self.image = PILImage.new('RGBA', (width, height), fill)
        self._clip = Rect(0, 0, width, height)
        self._clip_stack: List[Rect] = []

    # ── Clip state ──────────────────────────────────────────────────

    def clip_rect(self, rect: Rect) -> None:
        self._clip = self._clip.intersect(rect)

    def save(self) -> None:
        self._clip_stack.append(self._clip)

    def restore(self) -> None:
        if not self._clip_stack:
            log.warning("restore() without matching save()")
            return
        self._clip = self._clip_stack.pop()

    def _box(self, rect: Rect) -> Optional[Box]:
        """Pixel box of rect inside the current clip, None when empty."""
        r = rect.intersect(self._clip)
        x0, y0 = _px(r.min_x), _px(r.min_y)
        x1, y1 = _px(r.max_x), _px(r.max_y)
        if x1 <= x0 or y1 <= y0:
            return None
        return (x0, y0, x1, y1)

    def _composite(self, layer: PILImage.Image, box: Box) -> None:
        self.image.alpha_composite(layer, dest=(box[0], box[1]))

    # ── Drawing ─────────────────────────────────────────────────────

    def fill_rect(self, rect: Rect, color: Color) -> None:
        box = self._box(rect)
        if box is None:
            return
        size = (box[2] - box[0], box[3] - box[1])
        self._composite(PILImage.new('RGBA', size, color.to_rgba8()), box)

    def stroke_rect(self, rect: Rect, color: Color, width: float = 1.0) -> None:
        """Outline drawn inward from rect grown by half the pen width."""
        pen = max(1, int(round(width)))
        grow = pen // 2
        outer = Rect(rect.x - grow, rect.y - grow,
                     rect.width + 2 * grow, rect.height + 2 * grow)
        x0, y0 = _px(outer.min_x), _px(outer.min_y)
        x1, y1 = _px(outer.max_x), _px(outer.max_y)
        if x1 <= x0 or y1 <= y0:
            return
        box = self._box(Rect(0, 0, self.width, self.height))
        if box is None:
            return
        layer = PILImage.new('RGBA', self.image.size, (0, 0, 0, 0))
        ImageDraw.Draw(layer).rectangle(
            [x0, y0, x1 - 1, y1 - 1], outline=color.to_rgba8(), width=pen)
        self._composite(layer.crop(box), box)

    def fill_radial_gradient(self, rect: Rect, gradient: RadialGradient) -> None:
        box = self._box(rect)
        if box is None:
            return
        x0, y0, x1, y1 = box
        cx, cy = gradient.center
        xs = np.arange(x0, x1, dtype=np.float64) + 0.5
        ys = np.arange(y0, y1, dtype=np.float64) + 0.5
        dist = np.hypot(xs[np.newaxis, :] - cx, ys[:, np.newaxis] - cy)

        span = gradient.end_radius - gradient.start_radius
        if span > 0:
            t = np.clip((dist - gradient.start_radius) / span, 0.0, 1.0)
        else:
            t = np.zeros_like(dist)

        locations = [loc for loc, _ in gradient.stops]
        channels = [
            np.interp(t, locations, [getattr(clr, ch) for _, clr in gradient.stops])
            for ch in ('r', 'g', 'b', 'a')
        ]
        rgba = np.clip(np.stack(channels, axis=-1) * 255.0 + 0.5, 0, 255).astype(np.uint8)
        self._composite(PILImage.fromarray(rgba), box)


class ImageService:
    """Stateless render-to-image helpers."""

    @staticmethod
    def render(config: MeterConfig, derived: Optional[DerivedState] = None,
               size: Tuple[int, int] = (40, 200)) -> PILImage.Image:
        """Render a meter into a new RGBA image of the given size."""
        if derived is None:
            derived = SegmentMapper.derive(config)
        width, height = size
        plan = SegmentRenderer.plan(config, derived, Rect(0, 0, width, height))
        surface = PILSurface(width, height)
        SegmentRenderer.paint(plan, surface)
        return surface.image

    @staticmethod
    def save_png(image: PILImage.Image, path: Union[str, Path]) -> Path:
        """Write image as PNG, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(path, 'PNG')
        log.info("Saved meter image to %s", path)
        return path
