#!/usr/bin/env python3
"""
Stacked LED meter widget (UCStackedLED).

Custom QPainter widget that shows a value as a column or row of discrete
LED segments, with optional peak hold, gradient lighting and
normal/warning/danger color zones. Layout and colors come from the
pure-Python SegmentRenderer; this module only supplies the QPainter
drawing surface and the widget plumbing.
"""

from __future__ import annotations

from typing import Any, Optional

from PySide6.QtCore import QPointF, QRectF, QSize, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QPen, QRadialGradient
from PySide6.QtWidgets import QWidget

from ..core.controllers import MeterController
from ..core.models import Color, DerivedState, DrawPlan, MeterConfig, RadialGradient, Rect
from ..core.surface import DrawingSurface
from ..services.meter import MeterService


def to_qcolor(color: Color) -> QColor:
    """Convert a model Color to QColor."""
    return QColor(*color.to_rgba8())


def to_qrectf(rect: Rect) -> QRectF:
    return QRectF(rect.x, rect.y, rect.width, rect.height)


class QPainterSurface(DrawingSurface):
    """DrawingSurface that forwards to an active QPainter."""

    def __init__(self, painter: QPainter):
        self.painter = painter

    def fill_rect(self, rect: Rect, color: Color) -> None:
        self.painter.fillRect(to_qrectf(rect), to_qcolor(color))

    def stroke_rect(self, rect: Rect, color: Color, width: float = 1.0) -> None:
        pen = QPen(to_qcolor(color), width)
        pen.setJoinStyle(Qt.PenJoinStyle.MiterJoin)
        self.painter.setPen(pen)
        self.painter.setBrush(Qt.BrushStyle.NoBrush)
        self.painter.drawRect(to_qrectf(rect))

    def fill_radial_gradient(self, rect: Rect, gradient: RadialGradient) -> None:
        cx, cy = gradient.center
        grad = QRadialGradient(QPointF(cx, cy), gradient.end_radius)
        for location, color in gradient.stops:
            grad.setColorAt(location, to_qcolor(color))
        self.painter.fillRect(to_qrectf(rect), QBrush(grad))

    def clip_rect(self, rect: Rect) -> None:
        self.painter.setClipRect(to_qrectf(rect), Qt.ClipOperation.IntersectClip)

    def save(self) -> None:
        self.painter.save()

    def restore(self) -> None:
        self.painter.restore()


class UCStackedLED(QWidget):
    """Segmented LED-bar meter.

    Vertical when taller than wide, horizontal otherwise. Every accepted
    change that alters the picture schedules exactly one update().
    """

    config_rejected = Signal(str)  # reason

    def __init__(self, parent=None, config: Optional[MeterConfig] = None,
                 derived: Optional[DerivedState] = None):
        super().__init__(parent)
        self.setMinimumSize(8, 8)

        self.controller = MeterController(MeterService(config, derived))
        self.controller.on_redraw = self.update
        self.controller.on_config_rejected = self.config_rejected.emit

    def sizeHint(self) -> QSize:
        return QSize(40, 200)

    # ── Configuration surface ───────────────────────────────────────

    def set_value(self, value: float) -> bool:
        """Set the quantity to display."""
        return self.controller.set_value(value)

    def set_options(self, **changes: Any) -> bool:
        """Set any meter options (hold_peak, num_bars, normal_color, ...)."""
        return self.controller.set_options(**changes)

    def set_peak_value(self, value: float) -> bool:
        return self.controller.set_peak_value(value)

    def reset_peak(self) -> None:
        """Clear the held peak segment."""
        self.controller.reset_peak()

    @property
    def config(self) -> MeterConfig:
        return self.controller.config

    @property
    def derived(self) -> DerivedState:
        return self.controller.derived

    def viewport(self) -> Rect:
        return Rect(0, 0, self.width(), self.height())

    def current_plan(self) -> DrawPlan:
        """Draw plan for the widget's current size."""
        return self.controller.plan(self.viewport())

    # ── Painting ────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            self.controller.paint(QPainterSurface(painter), self.viewport())
        finally:
            painter.end()
