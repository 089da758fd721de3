"""
Stacked LED Controllers - Coordinate the meter service and its views.

Controllers are GUI-framework independent. They:
1. Own and manage the MeterService
2. Provide methods that views call to change the meter
3. Emit callbacks that views subscribe to for updates
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..services.meter import MeterService
from .models import ConfigError, DerivedState, DrawPlan, MeterConfig, Rect
from .surface import DrawingSurface

log = logging.getLogger(__name__)


class MeterController:
    """Controller for one stacked LED meter.

    Owns a MeterService and turns its redraw flags into at most one
    on_redraw() call per mutating operation. Invalid configuration is
    rejected locally: the previous configuration stays in effect.
    """

    def __init__(self, svc: Optional[MeterService] = None):
        self.svc = svc or MeterService()

        # View callbacks
        self.on_redraw: Optional[Callable[[], None]] = None
        self.on_config_rejected: Optional[Callable[[str], None]] = None

    # ── Mutators (True when the change was accepted) ───────────────

    def set_options(self, **changes: Any) -> bool:
        """Apply several option changes as a single update."""
        return self._apply(self.svc.set_options, **changes)

    def set_option(self, name: str, value: Any) -> bool:
        return self._apply(self.svc.set_option, name, value)

    def set_value(self, value: float) -> bool:
        return self._apply(self.svc.set_value, value)

    def set_peak_value(self, value: float) -> bool:
        return self._apply(self.svc.set_peak_value, value)

    def reset_peak(self) -> None:
        """Forget the held peak and redraw."""
        self._apply(self.svc.reset_peak)

    def _apply(self, op: Callable[..., bool], *args: Any, **kwargs: Any) -> bool:
        try:
            redraw = op(*args, **kwargs)
        except ConfigError as e:
            log.warning("Rejected meter configuration: %s", e)
            if self.on_config_rejected:
                self.on_config_rejected(str(e))
            return False
        if redraw and self.on_redraw:
            self.on_redraw()
        return True

    # ── Queries ─────────────────────────────────────────────────────

    @property
    def config(self) -> MeterConfig:
        return self.svc.config

    @property
    def derived(self) -> DerivedState:
        return self.svc.derived

    def plan(self, viewport: Rect) -> DrawPlan:
        return self.svc.plan(viewport)

    def paint(self, surface: DrawingSurface, viewport: Rect) -> DrawPlan:
        """Render entry point: paint the meter into viewport."""
        return self.svc.paint(surface, viewport)
