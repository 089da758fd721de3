"""PySide6 GUI components for the stacked LED meter."""

from .qt_app import MeterDemoWindow, run_app
from .uc_stacked_led import QPainterSurface, UCStackedLED, to_qcolor

__all__ = [
    'MeterDemoWindow',
    'run_app',
    'QPainterSurface',
    'UCStackedLED',
    'to_qcolor',
]
