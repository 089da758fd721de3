"""Meter state ownership — configuration, derived snapshot, render entry.

Pure Python, no Qt dependencies.
Every mutation goes through SegmentMapper.apply_config() and reports
whether a redraw is needed instead of triggering one itself.
"""
from __future__ import annotations

import logging
import math
from dataclasses import fields, replace
from typing import Any, Dict, Optional

from ..core.models import (
    COLOR_OPTIONS,
    Color,
    ConfigError,
    DerivedState,
    DrawPlan,
    MeterConfig,
    Rect,
)
from ..core.surface import DrawingSurface
from .mapper import SegmentMapper
from .renderer import SegmentRenderer

log = logging.getLogger(__name__)

OPTION_NAMES = tuple(f.name for f in fields(MeterConfig))
BOOL_OPTIONS = ('hold_peak', 'lit_effect', 'reverse_direction')
FLOAT_OPTIONS = ('value', 'max_limit', 'min_limit', 'warn_threshold', 'danger_threshold')


def _to_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def coerce_option(name: str, value: Any) -> Any:
    """Convert a raw option value to the type MeterConfig stores.

    Raises:
        ConfigError: unknown option or value of the wrong kind.
    """
    if name not in OPTION_NAMES:
        raise ConfigError(f"Unknown meter option: {name!r}")
    if name in BOOL_OPTIONS:
        # "false" from a preset must not read as True
        if not isinstance(value, (bool, int)):
            raise ConfigError(f"{name} must be true or false, got {value!r}")
        return bool(value)
    if name in FLOAT_OPTIONS:
        return _to_float(name, value)
    if name == 'num_bars':
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"num_bars must be an integer, got {value!r}")
        return value
    if name in COLOR_OPTIONS:
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return Color.from_hex(value)
        if isinstance(value, (list, tuple)):
            return Color.from_sequence(value)
        raise ConfigError(f"{name} must be a color, got {value!r}")
    return value


class MeterService:
    """Configuration + derived-state owner for one meter instance.

    Orchestrates:
    - Option changes (validated, applied atomically)
    - Peak control (reset, direct peak writes)
    - Render entry points (plan / paint for a viewport)
    """

    def __init__(self, config: Optional[MeterConfig] = None,
                 derived: Optional[DerivedState] = None) -> None:
        """Start from config, or resume a derived snapshot taken with it."""
        self.config = config or MeterConfig()
        if derived is None:
            derived = SegmentMapper.derive(self.config)
        else:
            SegmentMapper.validate(self.config)
        self.derived: DerivedState = derived

    # ── Mutators (return True when a redraw is needed) ─────────────

    def set_options(self, **changes: Any) -> bool:
        """Apply several option changes as one configuration change.

        Raises:
            ConfigError: nothing is applied if any change is invalid.
        """
        if not changes:
            return False
        peak_value = changes.pop('peak_value', None)
        if peak_value is not None:
            peak_value = _to_float('peak_value', peak_value)
        coerced = {name: coerce_option(name, v) for name, v in changes.items()}

        new_config = replace(self.config, **coerced)
        derived, redraw = SegmentMapper.apply_config(new_config, self.config, self.derived)
        self.config, self.derived = new_config, derived
        log.debug("Applied %s (redraw=%s)", sorted(coerced), redraw)

        if peak_value is not None:
            redraw = self.set_peak_value(peak_value) or redraw
        return redraw

    def set_option(self, name: str, value: Any) -> bool:
        """Apply a single option change."""
        return self.set_options(**{name: value})

    def set_value(self, value: float) -> bool:
        """Update the displayed quantity."""
        return self.set_options(value=value)

    def set_peak_value(self, value: float) -> bool:
        """Overwrite the stored peak value; the peak segment is left as is."""
        value = _to_float('peak_value', value)
        if value == self.derived.peak_value:
            return False
        self.derived = replace(self.derived, peak_value=value)
        return True

    def reset_peak(self) -> bool:
        """Forget the held peak. Always requests a redraw."""
        self.derived = SegmentMapper.reset_peak(self.derived)
        return True

    # ── Queries ─────────────────────────────────────────────────────

    @property
    def peak_value(self) -> float:
        return self.derived.peak_value

    @property
    def has_peak(self) -> bool:
        return self.derived.peak_bar_idx >= 0 and not math.isinf(self.derived.peak_value)

    def options(self) -> Dict[str, Any]:
        """Current option values keyed by name (peak_value included)."""
        opts = {name: getattr(self.config, name) for name in OPTION_NAMES}
        opts['peak_value'] = self.derived.peak_value
        return opts

    # ── Rendering ───────────────────────────────────────────────────

    def plan(self, viewport: Rect) -> DrawPlan:
        """Draw plan for the current state and viewport."""
        return SegmentRenderer.plan(self.config, self.derived, viewport)

    def paint(self, surface: DrawingSurface, viewport: Rect) -> DrawPlan:
        """Plan and replay onto surface; returns the plan used."""
        plan = self.plan(viewport)
        SegmentRenderer.paint(plan, surface)
        return plan
