"""Value-to-segment mapping for the stacked LED meter.

Pure Python, no Qt dependencies.
Turns a MeterConfig into the DerivedState indices the renderer consumes:
lit range, held peak and the warning/danger break indices.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Optional, Tuple

from ..core.models import ConfigError, DerivedState, MeterConfig

log = logging.getLogger(__name__)


class SegmentMapper:
    """Stateless mapping from configuration to segment indices."""

    @staticmethod
    def validate(config: MeterConfig) -> None:
        """Reject configurations the renderer cannot lay out.

        Raises:
            ConfigError: num_bars is not a positive integer.
        """
        num_bars = config.num_bars
        if isinstance(num_bars, bool) or not isinstance(num_bars, int):
            raise ConfigError(f"num_bars must be an integer, got {num_bars!r}")
        if num_bars <= 0:
            raise ConfigError(f"num_bars must be positive, got {num_bars}")

    @staticmethod
    def has_range(config: MeterConfig) -> bool:
        """True when max_limit lies above min_limit (NaN limits count as no range)."""
        return config.max_limit / 2 - config.min_limit / 2 > 0

    @classmethod
    def raw_off_index(cls, config: MeterConfig, value: float) -> Optional[int]:
        """First index past the lit range, before clamping.

        Returns None for NaN. Out-of-range and infinite values saturate one
        past either end so the result stays a plain int.
        """
        if math.isnan(value):
            return None
        num_bars = config.num_bars
        if not cls.has_range(config):
            # Degenerate range: step function at min_limit
            return num_bars if value >= config.min_limit else -1
        # Halved operands keep finite limits like +-1e308 from overflowing
        offset = value / 2 - config.min_limit / 2
        scaled = offset / (config.max_limit / 2 - config.min_limit / 2) * num_bars
        if math.isnan(scaled):
            # Infinite limits: inf / inf
            return num_bars + 1 if offset > 0 else 0
        if scaled >= num_bars + 1:
            return num_bars + 1
        if scaled <= -1:
            return -1
        return math.floor(scaled)

    @classmethod
    def map_value(cls, config: MeterConfig, value: float,
                  prior_peak_value: float = -math.inf,
                  prior_peak_bar_idx: int = -1) -> Tuple[int, int, float, int]:
        """Map a value onto (on_idx, off_idx, peak_value, peak_bar_idx).

        off_idx is clamped to [0, num_bars]; the peak marker is taken from
        the unclamped index so a value below min_limit never marks segment 0.
        """
        num_bars = config.num_bars
        on_idx = 0 if value >= config.min_limit else num_bars

        raw = cls.raw_off_index(config, value)
        if raw is None:
            return num_bars, 0, prior_peak_value, prior_peak_bar_idx
        off_idx = max(0, min(raw, num_bars))

        peak_value, peak_bar_idx = prior_peak_value, prior_peak_bar_idx
        if config.hold_peak and value > prior_peak_value:
            peak_value = value
            peak_bar_idx = min(raw, num_bars - 1)
            if peak_bar_idx < 0:
                peak_bar_idx = -1
        return on_idx, off_idx, peak_value, peak_bar_idx

    @staticmethod
    def threshold_index(threshold: float, num_bars: int) -> int:
        """Segment index where a color zone starts, or -1 when disabled.

        Thresholds above 1.0 give indices past the last segment (zone never
        shown); an infinite product is capped at num_bars.
        """
        if math.isnan(threshold) or threshold <= 0.0:
            return -1
        scaled = threshold * num_bars
        if math.isinf(scaled):
            return num_bars
        return math.floor(scaled)

    @staticmethod
    def reset_peak(derived: DerivedState) -> DerivedState:
        """Forget the held peak; any later value will exceed -inf."""
        return replace(derived, peak_value=-math.inf, peak_bar_idx=-1)

    @classmethod
    def derive(cls, config: MeterConfig) -> DerivedState:
        """Derived state for a freshly constructed meter."""
        return cls.apply_config(config, None, None)[0]

    @classmethod
    def apply_config(cls, config: MeterConfig,
                     prior_config: Optional[MeterConfig],
                     prior: Optional[DerivedState]) -> Tuple[DerivedState, bool]:
        """Single entry point for every configuration change.

        Order: validate, reset peak on a bar-count change, re-derive the lit
        range (and peak, when the value was re-applied), re-derive thresholds.

        Returns:
            (derived state, whether the meter must be redrawn)

        Raises:
            ConfigError: configuration rejected, nothing changed.
        """
        cls.validate(config)

        limits_changed = (prior_config is None
                          or (config.min_limit, config.max_limit)
                          != (prior_config.min_limit, prior_config.max_limit))
        if limits_changed and not cls.has_range(config):
            log.warning("min_limit %s >= max_limit %s; meter degrades to on/off",
                        config.min_limit, config.max_limit)

        if prior is None or prior_config is None:
            prior = cls.reset_peak(DerivedState())
            value_applied = True
        else:
            value_applied = config.value != prior_config.value
            if config.num_bars != prior_config.num_bars:
                log.debug("num_bars %d -> %d, resetting peak",
                          prior_config.num_bars, config.num_bars)
                prior = cls.reset_peak(prior)
                value_applied = True

        if value_applied:
            on_idx, off_idx, peak_value, peak_bar_idx = cls.map_value(
                config, config.value, prior.peak_value, prior.peak_bar_idx)
        else:
            on_idx, off_idx, _, _ = cls.map_value(
                replace(config, hold_peak=False), config.value)
            peak_value, peak_bar_idx = prior.peak_value, prior.peak_bar_idx

        derived = DerivedState(
            on_idx=on_idx,
            off_idx=off_idx,
            peak_value=peak_value,
            peak_bar_idx=peak_bar_idx,
            warning_bar_idx=cls.threshold_index(config.warn_threshold, config.num_bars),
            danger_bar_idx=cls.threshold_index(config.danger_threshold, config.num_bars),
        )

        if prior_config is None:
            return derived, True
        redraw = (derived != prior
                  or config.visual_key() != prior_config.visual_key())
        return derived, redraw
