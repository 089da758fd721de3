"""Meter presets for the stacked LED meter.

A preset is a JSON object of meter options. Keys may be snake_case
(num_bars) or camelCase (numBars); colors are hex strings or
[r, g, b(, a)] lists of 0-255 ints.
The default preset lives at ~/.config/stackedled/preset.json (XDG-compliant)
and is only ever read.

Usage:
    from stackedled.conf import load_preset, config_from_options

    options = load_preset()              # {} when missing or corrupt
    config = config_from_options(options)
"""
from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core.models import COLOR_OPTIONS, MeterConfig
from .services.meter import OPTION_NAMES, coerce_option

log = logging.getLogger(__name__)

# =========================================================================
# Preset file location (XDG-compliant)
# =========================================================================

_XDG_CONFIG = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
CONFIG_DIR = os.path.join(_XDG_CONFIG, 'stackedled')
PRESET_PATH = os.path.join(CONFIG_DIR, 'preset.json')

_CAMEL_RE = re.compile(r'(?<!^)(?=[A-Z])')


def normalize_key(key: str) -> str:
    """'numBars' -> 'num_bars'; snake_case keys pass through."""
    return _CAMEL_RE.sub('_', key).lower()


# =========================================================================
# Loading
# =========================================================================

def load_preset(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load a preset file. Returns empty dict on missing/corrupt file."""
    path = path or PRESET_PATH
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Ignoring unreadable preset %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring preset %s: expected a JSON object", path)
        return {}
    return data


def normalize_options(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Map preset keys onto option names, dropping unknown keys."""
    options = {}
    for key, value in raw.items():
        name = normalize_key(key)
        if name not in OPTION_NAMES:
            log.warning("Unknown preset key %r ignored", key)
            continue
        options[name] = value
    return options


def config_from_options(options: Dict[str, Any],
                        base: Optional[MeterConfig] = None) -> MeterConfig:
    """Build a MeterConfig from raw preset options.

    Raises:
        ConfigError: a value has the wrong type or an invalid color.
    """
    normalized = normalize_options(options)
    coerced = {name: coerce_option(name, v) for name, v in normalized.items()}
    return replace(base or MeterConfig(), **coerced)


def config_to_dict(config: MeterConfig) -> Dict[str, Any]:
    """JSON-ready dict of a configuration (colors as hex strings)."""
    out: Dict[str, Any] = {}
    for f in fields(config):
        value = getattr(config, f.name)
        out[f.name] = value.to_hex() if f.name in COLOR_OPTIONS else value
    return out
