"""Stacked LED Services — Core hexagon (pure Python, no Qt/CLI).

Business logic shared by all driving adapters:
- core/controllers.py (views)
- qt_components (PySide6 widget)
- cli.py (argparse CLI)
"""

from .image import ImageService, PILSurface
from .mapper import SegmentMapper
from .meter import MeterService
from .renderer import SegmentRenderer

__all__ = [
    'ImageService',
    'PILSurface',
    'MeterService',
    'SegmentMapper',
    'SegmentRenderer',
]
