"""
Stacked LED - Segmented LED-bar meter

Renders a continuous value as a column or row of discrete LED segments,
with optional peak hold, radial-gradient lighting and
normal/warning/danger color zones.

Features:
- Value-to-segment mapping with peak hold and threshold zones
- Immutable draw plans replayable onto any drawing surface
- PySide6 widget (UCStackedLED) and headless Pillow rendering

Usage:
    # As a library
    from stackedled import MeterService, ImageService
    svc = MeterService()
    svc.set_value(0.65)
    image = ImageService.render(svc.config, svc.derived, (40, 200))

    # Command line
    stackedled render meter.png --value 0.65
    stackedled gui --sweep
"""

from stackedled.__version__ import __version__

# Core exports
from stackedled.core.models import (
    Color,
    ConfigError,
    DerivedState,
    DrawPlan,
    MeterConfig,
    Rect,
)
from stackedled.core.surface import DrawingSurface, RecordingSurface
from stackedled.services.image import ImageService, PILSurface
from stackedled.services.mapper import SegmentMapper
from stackedled.services.meter import MeterService
from stackedled.services.renderer import SegmentRenderer

__all__ = [
    # Version
    "__version__",
    # Models
    "Color",
    "ConfigError",
    "DerivedState",
    "DrawPlan",
    "MeterConfig",
    "Rect",
    # Surfaces
    "DrawingSurface",
    "RecordingSurface",
    "PILSurface",
    # Services
    "ImageService",
    "MeterService",
    "SegmentMapper",
    "SegmentRenderer",
]
