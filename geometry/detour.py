# -*- coding: utf-8 -*-
# Homotrack/geometry/detour.py

"""
Project: Homotrack
Date: 9/24/2026

Purpose:
--------
Build a puncture-avoiding polyline between two points. Callers use it to re-route a
movement whose straight segment would pass through a puncture (and therefore raise
`DegenerateCrossing`) into samples the tracker can accept.

Pipeline:
---------
straight [start, end] → recursive midpoint nudging along the left normal while a
sub-segment still touches a puncture (bounded depth) → drop intermediate vertices
whose triangle holds no puncture and whose shortcut stays clear.

Notes:
------
   - Deterministic: the nudge always goes to the left of the sub-segment direction.
   - Dropping a vertex whose triangle is puncture-free preserves the homotopy class
     rel endpoints, so the reduced word of the route is unaffected by pruning.
   - Only puncture collisions are routed around; endpoints lying on a reference ray
     are the caller's concern.
"""

from typing import List, Tuple
import numpy as np
from ._kernels import left_normal, point_segment_distance, points_in_triangle
from ._validation import _as_xy, _to_tuple
from .errors import DegenerateCrossing
from .punctures import PunctureSnapshot

DEFAULT_NUDGE = 0.25
MAX_DEPTH = 10


def detour(start, end, snapshot: PunctureSnapshot, *,
           nudge: float = DEFAULT_NUDGE,
           max_depth: int = MAX_DEPTH,
           eps: float = 1e-9) -> List[Tuple[float, float]]:
    """
    Return vertices [start, ..., end] of a polyline that keeps every segment more
    than `eps` away from every puncture.

    Parameters
    ----------
    start, end : (float, float)
        Endpoints (must not coincide with a puncture).
    snapshot : PunctureSnapshot
        Punctures to avoid.
    nudge : float
        Perpendicular offset applied to each inserted midpoint.
    max_depth : int
        Subdivision depth limit.
    eps : float
        Clearance tolerance.

    Raises
    ------
    DegenerateCrossing
        If an endpoint sits on a puncture, or the route is still blocked at max_depth.
    ValueError
        If start == end or nudge <= 0.
    """
    a = _as_xy(start, name="start")
    b = _as_xy(end, name="end")
    if np.array_equal(a, b):
        raise ValueError("[detour] start and end coincide.")
    if nudge <= 0.0:
        raise ValueError(f"[detour] nudge must be > 0, got {nudge}.")

    P = snapshot.positions
    if P.shape[0] == 0:
        return [_to_tuple(a), _to_tuple(b)]

    for q in (a, b):
        hit = np.nonzero(np.linalg.norm(P - q, axis=1) <= eps)[0]
        if hit.size:
            k = int(hit[0])
            raise DegenerateCrossing(
                int(snapshot.ids[k]),
                "route endpoint coincides with puncture {!r}".format(snapshot.punctures[k].label),
                {"point": _to_tuple(q)},
            )

    def blocked(u, v) -> int:
        """Index of the first puncture touching [u, v], or -1."""
        idx = np.nonzero(point_segment_distance(P, u, v) <= eps)[0]
        return int(idx[0]) if idx.size else -1

    def route(u, v, depth) -> List[np.ndarray]:
        k = blocked(u, v)
        if k < 0:
            return [u, v]
        if depth >= max_depth:
            raise DegenerateCrossing(
                int(snapshot.ids[k]),
                "no clear detour around puncture {!r} within depth {}".format(
                    snapshot.punctures[k].label, max_depth),
                {"start": _to_tuple(u), "end": _to_tuple(v)},
            )
        mid = 0.5 * (u + v) + nudge * left_normal(v - u)
        left = route(u, mid, depth + 1)
        right = route(mid, v, depth + 1)
        return left[:-1] + right

    nodes = route(a, b, 0)

    # Prune: drop node i when the triangle (i-1, i, i+1) is puncture-free.
    i = 1
    while i < len(nodes) - 1:
        p1, p2, p3 = nodes[i - 1], nodes[i], nodes[i + 1]
        if not points_in_triangle(P, p1, p2, p3, eps=eps).any() and blocked(p1, p3) < 0:
            del nodes[i]
            i = max(i - 1, 1)
        else:
            i += 1

    return [_to_tuple(n) for n in nodes]
