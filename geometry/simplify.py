# -*- coding: utf-8 -*-
# Homotrack/geometry/simplify.py

"""
Project: Homotrack
Date: 9/20/2026

Purpose:
--------
Keep a minimal polyline of the traveled path that still reproduces, segment by
segment, the exact crossing-letter sequence of the raw sample stream.

Merge rule:
-----------
A new sample replaces the last stored vertex (collapsing the previous segment) only if
   (a) the stored path has >= 2 vertices (the basepoint is never replaced), the
       dropped vertex lies within `collinearity_tolerance` of the merged chord and
       projects strictly inside it (no backtracking), and
   (b) detecting crossings on the merged chord yields exactly the letters of the last
       stored segment followed by the new step's letters.
Otherwise the sample is appended as a new vertex.

Notes:
------
   - Only the last vertex is ever replaced; earlier vertices never change.
   - `plan` is side-effect free and `commit` cannot fail, so callers can make
     multi-component updates atomic.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import numpy as np
from ._kernels import chord_deviation
from ._validation import _as_xy, _to_tuple
from .crossings import CrossingDetector, CrossingEvent, letters_of
from .errors import DegenerateCrossing

logger = logging.getLogger(__name__)

DEFAULT_COLLINEARITY_TOLERANCE = 1e-6

Point = Tuple[float, float]


@dataclass(frozen=True)
class Path:
    basepoint: Point
    vertices: Tuple[Point, ...]

    def __post_init__(self):
        if not self.vertices or self.vertices[0] != self.basepoint:
            raise ValueError("Path vertices must start at the basepoint.")

    def __len__(self) -> int:
        return len(self.vertices)

    def as_array(self) -> np.ndarray:
        """(N, 2) float64 copy of the vertices."""
        return np.array(self.vertices, dtype=np.float64).reshape(-1, 2)

    def closed(self) -> Tuple[Point, ...]:
        """Vertices plus the straight return to the basepoint (if not already there)."""
        if self.vertices[-1] == self.basepoint and len(self.vertices) > 1:
            return self.vertices
        return self.vertices + (self.basepoint,)

    def to_list(self) -> List[Point]:
        return list(self.vertices)


@dataclass(frozen=True)
class MergePlan:
    point: Point
    merge: bool
    tail_keys: Tuple[Tuple[int, int], ...]


class PathSimplifier:
    """
    Incremental polyline simplifier.

    Parameters
    ----------
    basepoint : (float, float)
        First (fixed) vertex.
    detector : CrossingDetector
        Used to validate candidate merges; may be rebound between updates.
    collinearity_tolerance : float
        Maximum perpendicular distance of a dropped vertex from the merged chord.
    """

    def __init__(self, basepoint: Sequence[float], detector: CrossingDetector,
                 collinearity_tolerance: float = DEFAULT_COLLINEARITY_TOLERANCE):
        if collinearity_tolerance < 0.0:
            raise ValueError("[PathSimplifier] collinearity_tolerance must be >= 0.")
        self.detector = detector
        self.collinearity_tolerance = float(collinearity_tolerance)
        self._vertices: List[Point] = []
        self._tail_keys: Tuple[Tuple[int, int], ...] = ()
        self.reset(basepoint)

    # --------------------
    # Core API
    # --------------------
    def reset(self, basepoint: Sequence[float]) -> None:
        self._vertices = [_to_tuple(_as_xy(basepoint, name="basepoint"))]
        self._tail_keys = ()

    def extend(self, new_point: Sequence[float], events: Sequence[CrossingEvent]) -> bool:
        """
        Append or merge `new_point`; `events` are the crossings of the raw step
        from the current last vertex to `new_point`.

        Returns
        -------
        bool
            True if the point was merged into the previous vertex.
        """
        plan = self.plan(new_point, events)
        self.commit(plan)
        return plan.merge

    def plan(self, new_point: Sequence[float], events: Sequence[CrossingEvent]) -> MergePlan:
        """Decide append vs. merge without mutating state."""
        p = _to_tuple(_as_xy(new_point))
        keys = tuple(letters_of(events))
        if len(self._vertices) >= 2:
            a = np.asarray(self._vertices[-2])
            m = np.asarray(self._vertices[-1])
            dist, u = chord_deviation(a, m, np.asarray(p))
            if dist <= self.collinearity_tolerance and 0.0 < u < 1.0:
                combined = self._tail_keys + keys
                try:
                    merged = tuple(letters_of(self.detector.detect(a, p)))
                except DegenerateCrossing as exc:
                    logger.debug("[PathSimplifier] Merge rejected, chord is degenerate: %s", exc)
                    merged = None
                if merged == combined:
                    return MergePlan(point=p, merge=True, tail_keys=combined)
        return MergePlan(point=p, merge=False, tail_keys=keys)

    def commit(self, plan: MergePlan) -> None:
        if plan.merge:
            self._vertices[-1] = plan.point
        else:
            self._vertices.append(plan.point)
        self._tail_keys = plan.tail_keys

    def path(self) -> Path:
        return Path(basepoint=self._vertices[0], vertices=tuple(self._vertices))

    @property
    def last_vertex(self) -> Point:
        return self._vertices[-1]

    def __len__(self) -> int:
        return len(self._vertices)

    # transactional helpers used by the tracker
    def _state(self):
        return (list(self._vertices), self._tail_keys)

    def _restore(self, state) -> None:
        vertices, tail = state
        self._vertices = list(vertices)
        self._tail_keys = tail
