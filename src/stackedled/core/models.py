"""
Stacked LED Models - Pure data classes with no GUI dependencies.

These models can be used by any drawing backend (PySide6, Pillow, etc.)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import Optional, Sequence, Tuple


class ConfigError(ValueError):
    """Raised when a meter configuration change cannot be applied."""


# =============================================================================
# Colors
# =============================================================================

@dataclass(frozen=True)
class Color:
    """RGBA color, each component in the 0.0-1.0 range."""
    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_rgba8(cls, r: int, g: int, b: int, a: int = 255) -> 'Color':
        """Create a Color from 0-255 components."""
        return cls(r / 255.0, g / 255.0, b / 255.0, a / 255.0)

    @classmethod
    def from_hex(cls, value: str) -> 'Color':
        """Parse '#rgb', '#rrggbb' or '#rrggbbaa' (leading '#' optional)."""
        text = value.strip().lstrip('#')
        if len(text) == 3:
            text = ''.join(ch * 2 for ch in text)
        if len(text) not in (6, 8):
            raise ConfigError(f"Invalid hex color: {value!r}")
        try:
            parts = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError:
            raise ConfigError(f"Invalid hex color: {value!r}") from None
        return cls.from_rgba8(*parts)

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> 'Color':
        """Create a Color from a [r, g, b] or [r, g, b, a] list of 0-255 ints."""
        if len(values) not in (3, 4):
            raise ConfigError(f"Color needs 3 or 4 components, got {len(values)}")
        return cls.from_rgba8(*(int(v) for v in values))

    def to_rgba8(self) -> Tuple[int, int, int, int]:
        """Convert to 0-255 integer components."""
        return tuple(
            max(0, min(255, int(round(c * 255))))
            for c in (self.r, self.g, self.b, self.a)
        )

    def to_hex(self) -> str:
        """Format as '#rrggbbaa'."""
        return '#' + ''.join(f'{c:02x}' for c in self.to_rgba8())

    def darkened(self) -> 'Color':
        """Inner stop of the lit gradient: RGB components above 0.3 lose 0.3."""
        def _dim(c: float) -> float:
            return c - 0.3 if c > 0.3 else c
        return Color(_dim(self.r), _dim(self.g), _dim(self.b), self.a)

    def with_alpha_scaled(self, factor: float) -> 'Color':
        """Same color with alpha multiplied by factor."""
        return Color(self.r, self.g, self.b, self.a * factor)


GRAY = Color(0.5, 0.5, 0.5)
BLACK = Color(0.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)
YELLOW = Color(1.0, 1.0, 0.0)
RED = Color(1.0, 0.0, 0.0)

COLOR_OPTIONS = (
    'outer_border_color',
    'inner_border_color',
    'normal_color',
    'warning_color',
    'danger_color',
    'background_color',
)


# =============================================================================
# Meter configuration and derived state
# =============================================================================

@dataclass(frozen=True)
class MeterConfig:
    """
    Everything a host can set on the meter.

    Defaults give a 10-bar meter over 0..1 with green/yellow/red zones.
    """
    hold_peak: bool = False
    lit_effect: bool = True          # Radial gradient for lit segments
    reverse_direction: bool = False  # Top-to-bottom / right-to-left
    value: float = 0.0
    max_limit: float = 1.0
    min_limit: float = 0.0
    warn_threshold: float = 0.6      # Fraction of num_bars
    danger_threshold: float = 0.8
    num_bars: int = 10

    outer_border_color: Color = GRAY
    inner_border_color: Color = BLACK
    normal_color: Color = GREEN
    warning_color: Color = YELLOW
    danger_color: Color = RED
    background_color: Color = BLACK

    def visual_key(self) -> tuple:
        """All fields except value (a value change alone may not need a redraw)."""
        return tuple(
            getattr(self, f.name) for f in fields(self)
            if f.name != 'value'
        )


@dataclass(frozen=True)
class DerivedState:
    """Indices computed from a MeterConfig; never set directly by hosts."""
    on_idx: int = 0
    off_idx: int = 0
    peak_value: float = -math.inf
    peak_bar_idx: int = -1
    warning_bar_idx: int = 6
    danger_bar_idx: int = 8

    def is_lit(self, index: int) -> bool:
        """Segment is inside the lit range or is the held peak."""
        return self.on_idx <= index < self.off_idx or index == self.peak_bar_idx


# =============================================================================
# Draw plan
# =============================================================================

class Orientation(Enum):
    """Primary axis of the meter."""
    VERTICAL = auto()
    HORIZONTAL = auto()


class FillStyle(Enum):
    """How a segment interior is filled."""
    GRADIENT = auto()   # Lit, radial gradient
    SOLID = auto()      # Lit, flat color
    UNLIT = auto()      # Background + 20% tint


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in y-down coordinates."""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inset(self, dx: float, dy: Optional[float] = None) -> 'Rect':
        """Shrink by dx/dy on every side (never below zero size)."""
        if dy is None:
            dy = dx
        return Rect(
            self.x + dx,
            self.y + dy,
            max(0, self.width - 2 * dx),
            max(0, self.height - 2 * dy),
        )

    def intersect(self, other: 'Rect') -> 'Rect':
        """Overlap of two rectangles (zero-sized when disjoint)."""
        x0 = max(self.min_x, other.min_x)
        y0 = max(self.min_y, other.min_y)
        x1 = min(self.max_x, other.max_x)
        y1 = min(self.max_y, other.max_y)
        return Rect(x0, y0, max(0, x1 - x0), max(0, y1 - y0))


@dataclass(frozen=True)
class RadialGradient:
    """Radial gradient centred in a segment, growing outward from radius 0."""
    center: Tuple[float, float]
    end_radius: float
    stops: Tuple[Tuple[float, Color], ...]
    start_radius: float = 0.0


@dataclass(frozen=True)
class SegmentPlan:
    """Draw instructions for one segment."""
    index: int
    rect: Rect           # Stroked with inner border color
    fill_rect: Rect      # rect inset by 1, clip + fill area
    color: Color         # Zone color (normal/warning/danger)
    lit: bool
    style: FillStyle
    gradient: Optional[RadialGradient] = None


@dataclass(frozen=True)
class DrawPlan:
    """Complete, immutable description of one paint pass."""
    viewport: Rect
    bounds: Rect                 # Viewport shrunk to bar_size * num_bars
    orientation: Orientation
    bar_size: int
    background_color: Color
    inner_border_color: Color
    outer_border_color: Color
    segments: Tuple[SegmentPlan, ...] = field(default_factory=tuple)

    @property
    def border_rect(self) -> Rect:
        return self.bounds.inset(1)

    def lit_indices(self) -> Tuple[int, ...]:
        return tuple(seg.index for seg in self.segments if seg.lit)
