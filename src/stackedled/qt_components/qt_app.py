"""
Demo window for the stacked LED meter.

Shows the same configuration as a vertical and a horizontal meter.
With sweep enabled a QTimer drives the value back and forth so peak
hold and the color zones can be watched live.
"""

from __future__ import annotations

import logging
import math
import sys
from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication, QHBoxLayout, QWidget

from ..core.models import DerivedState, MeterConfig
from .uc_stacked_led import UCStackedLED

log = logging.getLogger(__name__)

SWEEP_INTERVAL_MS = 30
SWEEP_STEP = 0.05  # Radians per tick


class MeterDemoWindow(QWidget):
    """Vertical + horizontal meter sharing one configuration."""

    def __init__(self, config: Optional[MeterConfig] = None, sweep: bool = False,
                 derived: Optional[DerivedState] = None):
        super().__init__()
        self.setWindowTitle("Stacked LED")

        self.vertical = UCStackedLED(self, config, derived)
        self.vertical.setFixedSize(40, 200)
        self.horizontal = UCStackedLED(self, config, derived)
        self.horizontal.setFixedSize(300, 30)

        layout = QHBoxLayout(self)
        layout.addWidget(self.vertical)
        layout.addWidget(self.horizontal)

        self._phase = 0.0
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._tick)
        if sweep:
            self._timer.start(SWEEP_INTERVAL_MS)

    @property
    def meters(self):
        return (self.vertical, self.horizontal)

    def _tick(self):
        """Advance the sweep one step between min_limit and max_limit."""
        self._phase += SWEEP_STEP
        cfg = self.vertical.config
        frac = (math.sin(self._phase) + 1.0) / 2.0
        value = cfg.min_limit + frac * (cfg.max_limit - cfg.min_limit)
        for meter in self.meters:
            meter.set_value(value)


def run_app(config: Optional[MeterConfig] = None, sweep: bool = False,
            derived: Optional[DerivedState] = None) -> int:
    """Open the demo window and run the Qt event loop.

    derived carries state built up before the window opens (held peak).
    """
    app = QApplication.instance() or QApplication(sys.argv)
    window = MeterDemoWindow(config, sweep=sweep, derived=derived)
    window.show()
    log.info("Demo window open (sweep=%s)", sweep)
    return app.exec()
