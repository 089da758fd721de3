"""Stacked LED version information."""

__version__ = "1.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 1.0.0 - Initial release: segment mapper, renderer, PySide6 widget
# 1.0.1 - Clamp off index for out-of-range values, degenerate min/max range
#         falls back to on/off instead of dividing by zero
# 1.0.2 - Reject num_bars <= 0 at configuration time instead of at paint time
# 1.1.0 - Immutable derived-state snapshots (apply_config), controller with
#         single on_redraw per change, Pillow surface, CLI render/plan/gui,
#         JSON presets
