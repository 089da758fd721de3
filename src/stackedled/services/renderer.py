"""Segment layout and paint pass for the stacked LED meter.

Pure Python, no Qt dependencies.
plan() computes an immutable DrawPlan (one SegmentPlan per bar);
paint() replays a plan onto any DrawingSurface.
"""
from __future__ import annotations

import logging
from typing import List

from ..core.models import (
    Color,
    DerivedState,
    DrawPlan,
    FillStyle,
    MeterConfig,
    Orientation,
    RadialGradient,
    Rect,
    SegmentPlan,
)
from ..core.surface import DrawingSurface

log = logging.getLogger(__name__)

# Unlit segments show their zone color at this fraction of its alpha
UNLIT_ALPHA = 0.2
# Gradient stop positions: segment color at the centre, dark variant halfway
GRADIENT_LOCATIONS = (0.0, 0.5)
OUTER_BORDER_WIDTH = 2.0
INNER_BORDER_WIDTH = 1.0


class SegmentRenderer:
    """Stateless renderer: (config, derived, viewport) -> DrawPlan -> surface."""

    @staticmethod
    def segment_color(config: MeterConfig, derived: DerivedState, index: int) -> Color:
        """Zone color for a segment: danger beats warning beats normal."""
        if derived.danger_bar_idx >= 0 and index >= derived.danger_bar_idx:
            return config.danger_color
        if derived.warning_bar_idx >= 0 and index >= derived.warning_bar_idx:
            return config.warning_color
        return config.normal_color

    @staticmethod
    def segment_rect(bounds: Rect, orientation: Orientation, bar_size: int,
                     index: int, reverse: bool) -> Rect:
        """Rectangle of segment `index` inside the adjusted bounds.

        Not reversed: vertical grows bottom-to-top, horizontal left-to-right.
        Reversed: vertical top-to-bottom, horizontal right-to-left.
        """
        if orientation == Orientation.VERTICAL:
            width = max(0, bounds.width - 2)
            if reverse:
                y = bounds.min_y + index * bar_size
            else:
                y = bounds.max_y - (index + 1) * bar_size
            return Rect(bounds.x + 1, y, width, bar_size)

        height = max(0, bounds.height - 2)
        if reverse:
            x = bounds.max_x - (index + 1) * bar_size
        else:
            x = bounds.min_x + index * bar_size
        return Rect(x, bounds.y + 1, bar_size, height)

    @staticmethod
    def gradient_for(fill_rect: Rect, color: Color) -> RadialGradient:
        """Radial gradient reaching the rectangle's full diagonal."""
        return RadialGradient(
            center=fill_rect.center,
            end_radius=fill_rect.diagonal,
            stops=(
                (GRADIENT_LOCATIONS[0], color),
                (GRADIENT_LOCATIONS[1], color.darkened()),
            ),
        )

    @classmethod
    def plan(cls, config: MeterConfig, derived: DerivedState, viewport: Rect) -> DrawPlan:
        """Lay out every segment for the given viewport.

        The primary axis is shrunk to an exact multiple of num_bars so all
        segments share one integer size; the remainder is left unused.
        """
        num_bars = config.num_bars
        vertical = viewport.height >= viewport.width
        orientation = Orientation.VERTICAL if vertical else Orientation.HORIZONTAL

        if vertical:
            bar_size = int(viewport.height // num_bars)
            bounds = Rect(viewport.x, viewport.y, viewport.width, bar_size * num_bars)
        else:
            bar_size = int(viewport.width // num_bars)
            bounds = Rect(viewport.x, viewport.y, bar_size * num_bars, viewport.height)

        segments: List[SegmentPlan] = []
        if bar_size <= 0:
            log.debug("Viewport %sx%s too small for %d bars",
                      viewport.width, viewport.height, num_bars)
        else:
            for i in range(num_bars):
                rect = cls.segment_rect(bounds, orientation, bar_size, i,
                                        config.reverse_direction)
                fill_rect = rect.inset(1)
                color = cls.segment_color(config, derived, i)
                lit = derived.is_lit(i)
                gradient = None
                if not lit:
                    style = FillStyle.UNLIT
                elif config.lit_effect:
                    style = FillStyle.GRADIENT
                    gradient = cls.gradient_for(fill_rect, color)
                else:
                    style = FillStyle.SOLID
                segments.append(SegmentPlan(
                    index=i,
                    rect=rect,
                    fill_rect=fill_rect,
                    color=color,
                    lit=lit,
                    style=style,
                    gradient=gradient,
                ))

        return DrawPlan(
            viewport=viewport,
            bounds=bounds,
            orientation=orientation,
            bar_size=bar_size,
            background_color=config.background_color,
            inner_border_color=config.inner_border_color,
            outer_border_color=config.outer_border_color,
            segments=tuple(segments),
        )

    @classmethod
    def paint(cls, plan: DrawPlan, surface: DrawingSurface) -> None:
        """Replay a plan: background, segments, then the outer border."""
        surface.fill_rect(plan.bounds, plan.background_color)

        for seg in plan.segments:
            surface.stroke_rect(seg.rect, plan.inner_border_color, INNER_BORDER_WIDTH)
            with surface.state():
                surface.clip_rect(seg.fill_rect)
                cls._paint_fill(seg, plan.background_color, surface)

        surface.stroke_rect(plan.border_rect, plan.outer_border_color, OUTER_BORDER_WIDTH)

    @staticmethod
    def _paint_fill(seg: SegmentPlan, background: Color, surface: DrawingSurface) -> None:
        """Fill one segment interior according to its style."""
        if seg.style == FillStyle.GRADIENT:
            surface.fill_radial_gradient(seg.fill_rect, seg.gradient)
        elif seg.style == FillStyle.SOLID:
            surface.fill_rect(seg.fill_rect, seg.color)
        else:
            surface.fill_rect(seg.fill_rect, background)
            surface.fill_rect(seg.fill_rect, seg.color.with_alpha_scaled(UNLIT_ALPHA))
