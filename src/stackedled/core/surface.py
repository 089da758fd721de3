"""
Drawing surface capability interface.

The renderer only ever talks to a DrawingSurface; concrete backends
(Pillow image, QPainter) live next to the code that owns them:
- services/image.py: PILSurface
- qt_components/uc_stacked_led.py: QPainterSurface
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, List, Tuple

from .models import Color, RadialGradient, Rect


class DrawingSurface(ABC):
    """Minimal 2D drawing capabilities the segment renderer needs."""

    @abstractmethod
    def fill_rect(self, rect: Rect, color: Color) -> None:
        """Fill rect, blending color over what is already there."""

    @abstractmethod
    def stroke_rect(self, rect: Rect, color: Color, width: float = 1.0) -> None:
        """Stroke the outline of rect with a pen of the given width."""

    @abstractmethod
    def fill_radial_gradient(self, rect: Rect, gradient: RadialGradient) -> None:
        """Fill rect with a radial gradient (clipped to rect)."""

    @abstractmethod
    def clip_rect(self, rect: Rect) -> None:
        """Intersect the current clip with rect until the next restore()."""

    @abstractmethod
    def save(self) -> None:
        """Push clip state."""

    @abstractmethod
    def restore(self) -> None:
        """Pop clip state."""

    @contextmanager
    def state(self) -> Iterator['DrawingSurface']:
        """Scoped save/restore."""
        self.save()
        try:
            yield self
        finally:
            self.restore()


class RecordingSurface(DrawingSurface):
    """Surface that records every call as a tuple instead of drawing.

    Used to inspect or compare paint passes without a graphics backend.
    """

    def __init__(self):
        self.ops: List[Tuple[Any, ...]] = []

    def fill_rect(self, rect, color):
        self.ops.append(('fill_rect', rect, color))

    def stroke_rect(self, rect, color, width=1.0):
        self.ops.append(('stroke_rect', rect, color, width))

    def fill_radial_gradient(self, rect, gradient):
        self.ops.append(('fill_radial_gradient', rect, gradient))

    def clip_rect(self, rect):
        self.ops.append(('clip_rect', rect))

    def save(self):
        self.ops.append(('save',))

    def restore(self):
        self.ops.append(('restore',))
