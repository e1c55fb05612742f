# -*- coding: utf-8 -*-
# Homotrack/tracking/config.py

"""
Project: Homotrack
Date: 9/26/2026

Purpose
-------
Assemble a validated tracker configuration from sectioned defaults and user overrides.
Keys are canonicalized through `ALIASES`, numeric scalars are checked against
`RANGES`, and the ray direction is normalized to a unit vector.

Main Tasks
----------
    1. Flatten curated defaults and merge normalized, schema-checked user params.
    2. Validate numeric ranges and the ray direction (raise `SchemaError`).
    3. Return a frozen `TrackerConfig`.

Notes
-----
- Recognized options: ray_direction, collinearity_tolerance, crossing_epsilon.
- Unknown keys are rejected with `SchemaError`.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple
import numpy as np
from geometry.crossings import DEFAULT_CROSSING_EPSILON
from geometry.punctures import DEFAULT_RAY_DIRECTION
from geometry.simplify import DEFAULT_COLLINEARITY_TOLERANCE
from .errors import SchemaError

__all__ = ["TrackerConfig", "build_config", "normalize_keys", "validate", "ALIASES", "RANGES"]


# -----------------------------
_DEFAULTS_SECTIONS = [
    ("PUNCTURES", {
        "ray_direction": DEFAULT_RAY_DIRECTION,
    }),
    ("TOLERANCES", {
        "collinearity_tolerance": DEFAULT_COLLINEARITY_TOLERANCE,
        "crossing_epsilon": DEFAULT_CROSSING_EPSILON,
    }),
]


def _flatten_defaults(sections):
    """
    Turn sectioned defaults into a single flat dict (stable order preserved).
    """
    flat: Dict[str, Any] = {}
    for _name, block in sections:
        flat.update(block)
    return flat


_DEFAULTS = _flatten_defaults(_DEFAULTS_SECTIONS)

# --------------------------
# Canonicalization (aliases)
# --------------------------
ALIASES = {
    "ray": "ray_direction",
    "ray_dir": "ray_direction",
    "eps": "crossing_epsilon",
    "epsilon": "crossing_epsilon",
    "collinear_tol": "collinearity_tolerance",
    "collinearity_tol": "collinearity_tolerance",
}

# --------------------------
# Numeric ranges (inclusive flag)
# --------------------------
# key -> (min, max, inclusive_bounds)
RANGES = {
    "crossing_epsilon": (0.0, 1.0, False),
    "collinearity_tolerance": (0.0, 1e3, True),
}


@dataclass(frozen=True)
class TrackerConfig:
    ray_direction: Tuple[float, float] = DEFAULT_RAY_DIRECTION
    collinearity_tolerance: float = DEFAULT_COLLINEARITY_TOLERANCE
    crossing_epsilon: float = DEFAULT_CROSSING_EPSILON


def normalize_keys(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map user-friendly keys to canonical option names (no value coercion).
    Keys are matched case-insensitively.
    """
    out: Dict[str, Any] = {}
    for k, v in params.items():
        key = str(k).lower()
        out[ALIASES.get(key, key)] = v
    return out


def _check_range(key: str, val: Any) -> float:
    """
    Validate a numeric parameter against `RANGES` and return it as float.

    Raises
    ------
    SchemaError
        If the value is non-numeric or violates the configured bounds.
    """
    lo, hi, inclusive = RANGES[key]
    if isinstance(val, bool):
        raise SchemaError("Non-numeric value for {k}: {v!r}".format(k=key, v=val))
    try:
        fval = float(val)
    except (TypeError, ValueError):
        raise SchemaError("Non-numeric value for {k}: {v!r}".format(k=key, v=val)) from None
    ok = (lo <= fval <= hi) if inclusive else (lo < fval < hi)
    if not ok:
        raise SchemaError(
            "Out-of-range {k}: {v} (expected {lo} {ineq} {hi})".format(
                k=key, v=fval, lo=lo, ineq="≤ ... ≤" if inclusive else "< ... <", hi=hi
            ),
            {"key": key, "value": fval},
        )
    return fval


def _check_direction(key: str, val: Any) -> Tuple[float, float]:
    """
    Validate and normalize a 2D direction.

    Raises
    ------
    SchemaError
        If the value is not a finite, non-zero 2-vector.
    """
    try:
        vec = np.asarray(val, dtype=np.float64)
    except (TypeError, ValueError):
        raise SchemaError("Non-numeric value for {k}: {v!r}".format(k=key, v=val)) from None
    if vec.shape != (2,) or not np.isfinite(vec).all():
        raise SchemaError("{k} must be a finite (x, y) pair, got {v!r}".format(k=key, v=val))
    norm = float(np.hypot(vec[0], vec[1]))
    if norm <= 1e-12:
        raise SchemaError("{k} must be non-zero, got {v!r}".format(k=key, v=val))
    return (float(vec[0] / norm), float(vec[1] / norm))


def validate(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate canonical params and return a coerced copy.

    Raises
    ------
    SchemaError
        On unknown keys, bad numbers, or a malformed ray direction.
    """
    unknown = sorted(k for k in params if k not in _DEFAULTS)
    if unknown:
        raise SchemaError(
            "Unknown configuration keys: {}. Allowed: {}".format(unknown, sorted(_DEFAULTS)),
            {"unknown": unknown},
        )
    out: Dict[str, Any] = {}
    for k, v in params.items():
        if k in RANGES:
            out[k] = _check_range(k, v)
        elif k == "ray_direction":
            out[k] = _check_direction(k, v)
        else:
            out[k] = v
    return out


# ---------- Public API ----------
def build_config(params: Optional[Mapping[str, Any]] = None, **overrides: Any) -> TrackerConfig:
    """
    Merge user params (and keyword overrides) over the defaults.

    Examples
    --------
    >>> build_config({"eps": 1e-6}).crossing_epsilon
    1e-06
    """
    cfg = dict(_DEFAULTS)
    merged: Dict[str, Any] = {}
    if params:
        merged.update(params)
    merged.update(overrides)
    if merged:
        # Canonicalize and validate *before* merging
        cfg.update(validate(normalize_keys(merged)))
    return TrackerConfig(
        ray_direction=tuple(cfg["ray_direction"]),
        collinearity_tolerance=float(cfg["collinearity_tolerance"]),
        crossing_epsilon=float(cfg["crossing_epsilon"]),
    )
