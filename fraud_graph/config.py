"""
Configuration tables for the streaming fraud graph.

Defaults live in module-level constants. A YAML thresholds file can
override any detector or scoring value:

    detectors:
      rapid_transfer:
        burst_count: 4
    risk:
      nudge: 0.01
"""

import copy
import logging

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────
# RISK SCORE BOUNDS
# ─────────────────────────────────────────────────────────────
RISK_MIN   = 0.0
RISK_MAX   = 1.0
RISK_NUDGE = 0.005          # liveness signal on every ingestion, not a detection

# ─────────────────────────────────────────────────────────────
# DETECTOR DEFAULTS
# ─────────────────────────────────────────────────────────────
DETECTOR_DEFAULTS = {
    "rapid_transfer": {
        "window":      60.0,
        "min_amount":  500.0,
        "burst_count": 3,
        "severity":    0.6,
        "risk_bump":   0.03,
    },
    "circular_flow": {
        "window":           300.0,
        "min_amount":       0.0,
        "max_cycle_length": 4,
        "severity":         0.8,
        "risk_bump":        0.05,
    },
    "high_velocity": {
        "window":    60.0,
        "min_count": 5,
        "severity":  0.4,
        "risk_bump": 0.02,
    },
}

# ─────────────────────────────────────────────────────────────
# RISK TIERS  (half-open bands over [0, 1])
# ─────────────────────────────────────────────────────────────
THRESHOLDS = {
    "CLEAN":      (0.0, 0.3),
    "WATCH":      (0.3, 0.6),
    "SUSPICIOUS": (0.6, 0.9),
    "BLOCK":      (0.9, 1.0),
}

TIER_ORDER = ["CLEAN", "WATCH", "SUSPICIOUS", "BLOCK"]

TIER_COLORS_HEX = {
    "CLEAN":      "#00cc66",
    "WATCH":      "#ffcc00",
    "SUSPICIOUS": "#ff8c00",
    "BLOCK":      "#ff2244",
}


def default_config():
    """Return a fresh, mutable copy of every default."""
    return {
        "risk": {
            "nudge": RISK_NUDGE,
        },
        "detectors": copy.deepcopy(DETECTOR_DEFAULTS),
    }


def _merge(base, override, path=""):
    for key, value in override.items():
        where = f"{path}.{key}" if path else str(key)
        if key not in base:
            logger.warning("Ignoring unknown config key %s", where)
            continue
        if isinstance(base[key], dict):
            if not isinstance(value, dict):
                raise ConfigError(f"Config key {where} must be a mapping")
            _merge(base[key], value, where)
        else:
            base[key] = value
    return base


def load_config(path=None):
    """
    Load the thresholds file at `path` over the defaults.
    A missing path (None) returns the defaults untouched.
    """
    config = default_config()
    if path is None:
        return config

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"Thresholds file {path} must contain a mapping")

    return _merge(config, data)
