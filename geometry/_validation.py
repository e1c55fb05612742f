# -*- coding: utf-8 -*-
# Homotrack/geometry/_validation.py

"""
Project: Homotrack
Date: 9/14/2026

Purpose:
--------
Centralized input validation for the geometry layer so that registry, detector,
simplifier and detour code coerce points the same way.

Main Tasks:
   1. Coerce caller-supplied points / vectors into float64 arrays of shape (2,).
   2. Reject non-finite coordinates and zero-length direction vectors.
   3. Validate polylines as (N, 2) arrays.
"""

from typing import Any, Tuple
import numpy as np


def _as_xy(value: Any, name: str = "point") -> np.ndarray:
    """
    Coerce `value` to a finite float64 array of shape (2,).

    Raises
    ------
    ValueError
        If the value is None, not a 2-vector, or holds NaN/Inf.
    """
    if value is None:
        raise ValueError(f"No {name} provided ({name} is None).")
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (2,):
        raise ValueError(f"Expected a 2D {name} (x, y), got shape {arr.shape}.")
    if not np.isfinite(arr).all():
        raise ValueError(f"Non-finite coordinates in {name}: {arr.tolist()}")
    return arr


def _as_direction(value: Any, name: str = "ray_direction", tol: float = 1e-12) -> np.ndarray:
    """
    Coerce `value` to a unit 2-vector.

    Raises
    ------
    ValueError
        If the vector is invalid or its length is <= tol.
    """
    vec = _as_xy(value, name=name)
    norm = float(np.hypot(vec[0], vec[1]))
    if norm <= tol:
        raise ValueError(f"Zero-length {name}: {vec.tolist()}")
    return vec / norm


def _as_polyline(points: Any, check_finite: bool = True) -> np.ndarray:
    """
    Coerce a sequence of points to an (N, 2) float64 array.

    Raises
    ------
    ValueError
        If the array is not (N, 2) or (optionally) holds non-finite values.
    """
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected (N, 2) array for points, got shape {arr.shape}.")
    if check_finite and not np.isfinite(arr).all():
        bad_indices = np.argwhere(~np.isfinite(arr))
        raise ValueError(f"Non-finite coordinates detected at indices: {bad_indices.tolist()}")
    return arr


def _to_tuple(point: np.ndarray) -> Tuple[float, float]:
    """Plain-float (x, y) tuple for immutable records."""
    return (float(point[0]), float(point[1]))
