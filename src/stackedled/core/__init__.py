"""
Stacked LED Core - Models, surfaces and controllers

Models: Data classes only (MeterConfig, DerivedState, DrawPlan, ...)
Surface: DrawingSurface capability interface
Controllers: Driving adapters that wrap services for views

Note: Controllers are NOT re-exported here to avoid circular imports
(services → core.models → core.__init__ → controllers → services).
Import controllers directly: `from stackedled.core.controllers import ...`
"""

from .models import (
    Color,
    ConfigError,
    DerivedState,
    DrawPlan,
    FillStyle,
    MeterConfig,
    Orientation,
    Rect,
    SegmentPlan,
)

__all__ = [
    'Color',
    'ConfigError',
    'DerivedState',
    'DrawPlan',
    'FillStyle',
    'MeterConfig',
    'Orientation',
    'Rect',
    'SegmentPlan',
]
