# -*- coding: utf-8 -*-
# Homotrack/geometry/_kernels.py

"""
Project: Homotrack
Date: 9/14/2026

Purpose:
--------
Numpy-only 2D kernels shared by the crossing detector, path simplifier and
detour router. Every routine is vectorized over a batch of punctures
(origins/directions shaped (K, 2)) against one segment.

Main Tasks:
-----------
   - 2D cross products and point-to-segment / point-to-ray distances.
   - Segment-vs-ray intersection parameters (Cramer's rule on the 2x2 system).
   - Point-in-triangle predicate and chord deviation for collinearity tests.

Notes:
------
   - No logging, no exceptions beyond shape errors raised by numpy itself.
   - Divisions by zero are silenced and surface as NaN/Inf; callers mask them.
"""

from typing import Tuple
import numpy as np


# ---------------------------
# Basic vector helpers
# ---------------------------
def cross2(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    z-component of the 2D cross product a x b, broadcast over leading axes.
    """
    a = np.asarray(a); b = np.asarray(b)
    return a[..., 0] * b[..., 1] - a[..., 1] * b[..., 0]


def point_segment_distance(points: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Distance from each of `points` (K, 2) to the closed segment [a, b].
    """
    points = np.atleast_2d(points)
    d = b - a
    dd = float(np.dot(d, d))
    w = points - a
    if dd == 0.0:
        return np.linalg.norm(w, axis=1)
    t = np.clip((w @ d) / dd, 0.0, 1.0)
    closest = a + t[:, None] * d
    return np.linalg.norm(points - closest, axis=1)


def point_ray_distance(point: np.ndarray, origins: np.ndarray, directions: np.ndarray) -> np.ndarray:
    """
    Distance from one point to each ray `origins[k] + s * directions[k]`, s >= 0.

    `directions` must be unit vectors.
    """
    v = point - origins
    s = np.maximum(np.einsum("ij,ij->i", v, directions), 0.0)
    foot = origins + s[:, None] * directions
    return np.linalg.norm(point - foot, axis=1)


# ---------------------------
# Segment / ray intersection
# ---------------------------
def segment_ray_params(a: np.ndarray, b: np.ndarray,
                       origins: np.ndarray, directions: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Solve a + t*(b - a) = origins[k] + s*directions[k] for every ray k.

    Returns
    -------
    (t, s, denom) : tuple of (K,) arrays
        Segment parameter, ray parameter and the system determinant
        cross(b - a, direction). Entries with denom == 0 (parallel) hold NaN/Inf.
    """
    d = b - a
    w = origins - a
    denom = cross2(d, directions)
    with np.errstate(divide="ignore", invalid="ignore"):
        t = cross2(w, directions) / denom
        s = cross2(w, d) / denom
    return t, s, denom


# ---------------------------
# Triangle & chord predicates
# ---------------------------
def points_in_triangle(points: np.ndarray, p1: np.ndarray, p2: np.ndarray, p3: np.ndarray,
                       eps: float = 1e-12) -> np.ndarray:
    """
    Barycentric point-in-triangle test for each of `points` (K, 2).

    Boundary points count as inside (within eps). Degenerate (zero-area)
    triangles contain nothing.
    """
    points = np.atleast_2d(points)
    denom = (p2[1] - p3[1]) * (p1[0] - p3[0]) + (p3[0] - p2[0]) * (p1[1] - p3[1])
    if abs(denom) <= eps:
        return np.zeros(points.shape[0], dtype=bool)
    dx = points[:, 0] - p3[0]
    dy = points[:, 1] - p3[1]
    l1 = ((p2[1] - p3[1]) * dx + (p3[0] - p2[0]) * dy) / denom
    l2 = ((p3[1] - p1[1]) * dx + (p1[0] - p3[0]) * dy) / denom
    l3 = 1.0 - l1 - l2
    lo, hi = -eps, 1.0 + eps
    return (l1 >= lo) & (l1 <= hi) & (l2 >= lo) & (l2 <= hi) & (l3 >= lo) & (l3 <= hi)


def chord_deviation(a: np.ndarray, m: np.ndarray, b: np.ndarray) -> Tuple[float, float]:
    """
    Position of `m` relative to the chord [a, b].

    Returns
    -------
    (distance, u) : (float, float)
        Perpendicular distance of m from the chord line and the normalized
        projection parameter of m along a -> b (0 at a, 1 at b).
        A zero-length chord yields (|m - a|, 0.0).
    """
    d = b - a
    L2 = float(np.dot(d, d))
    if L2 == 0.0:
        return float(np.linalg.norm(m - a)), 0.0
    w = m - a
    u = float(np.dot(w, d)) / L2
    dist = abs(float(cross2(d, w))) / np.sqrt(L2)
    return float(dist), u


def left_normal(d: np.ndarray) -> np.ndarray:
    """Unit normal rotated +90 degrees from `d` (d must be non-zero)."""
    n = np.array([-d[1], d[0]], dtype=np.float64)
    return n / np.linalg.norm(n)
