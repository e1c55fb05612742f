# -*- coding: utf-8 -*-
# Homotrack/geometry/crossings.py

"""
Project: Homotrack
Date: 9/16/2026

Purpose:
--------
Detect, for one movement segment, the ordered list of signed reference-ray crossings
against a puncture snapshot. Owned responsibilities:
   - Vectorized segment-vs-ray intersection over all punctures.
   - Orientation sign per crossing (CCW = +1, CW = -1).
   - Deterministic ordering with explicit tie-breaking.
   - Surfacing geometric ambiguity as `DegenerateCrossing` instead of guessing.

Conventions:
------------
   - Segment: start + t * (end - start), t in (0, 1].
   - Ray:     position + s * ray_direction, s >= 0 (direction is unit length).
   - Sign = sign(cross(ray_direction, end - start)); positive means the mover passes
     the ray counter-clockwise about its puncture, for every ray direction.
   - Order: ascending t; crossings whose t agree within eps/|end - start| form a
     tie group that is ordered by case-folded label, so the result does not
     depend on the order punctures were registered in.

Degenerate cases (raise, smallest puncture id first):
-----------------------------------------------------
   - Segment passes within eps of a puncture.
   - Either segment endpoint lies within eps of a reference ray.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple
import numpy as np
from ._kernels import point_ray_distance, point_segment_distance, segment_ray_params
from ._validation import _as_xy, _as_polyline, _to_tuple
from .errors import DegenerateCrossing
from .punctures import PunctureSnapshot

DEFAULT_CROSSING_EPSILON = 1e-9


@dataclass(frozen=True)
class CrossingEvent:
    puncture_id: int
    sign: int  # +1 CCW | -1 CW
    t: float
    label: str = ""

    @property
    def key(self) -> Tuple[int, int]:
        """(puncture_id, sign): the algebraic content of the event."""
        return (self.puncture_id, self.sign)


class CrossingDetector:
    """
    Ray-crossing detector bound to one puncture snapshot.

    Parameters
    ----------
    snapshot : PunctureSnapshot
        Immutable registry view (read-only).
    eps : float
        Absolute distance tolerance for degeneracy and tie detection.
    """

    def __init__(self, snapshot: PunctureSnapshot, eps: float = DEFAULT_CROSSING_EPSILON):
        if eps <= 0.0:
            raise ValueError(f"[CrossingDetector] eps must be > 0, got {eps}.")
        self.snapshot = snapshot
        self.eps = float(eps)

    # --------------------
    # Core API
    # --------------------
    def detect(self, start, end) -> List[CrossingEvent]:
        """
        Ordered crossing events generated by the segment start -> end.

        Raises
        ------
        ValueError
            If start == end or either point is not a finite 2-vector.
        DegenerateCrossing
            If the segment touches a puncture or an endpoint sits on a ray.
        """
        a = _as_xy(start, name="start")
        b = _as_xy(end, name="end")
        length = float(np.hypot(*(b - a)))
        if length == 0.0:
            raise ValueError("[CrossingDetector] Zero-length segment (start == end).")

        snap = self.snapshot
        if len(snap) == 0:
            return []
        P, R = snap.positions, snap.directions

        self._raise_if_degenerate(a, b, P, R)

        t, s, denom = segment_ray_params(a, b, P, R)
        hit = (denom != 0.0) & (t > 0.0) & (t <= 1.0) & (s >= 0.0)
        idx = np.nonzero(hit)[0]
        if idx.size == 0:
            return []

        signs = np.where(denom[idx] < 0.0, 1, -1)  # sign(cross(r, d)) == -sign(cross(d, r))
        events = [
            CrossingEvent(
                puncture_id=int(snap.ids[k]),
                sign=int(sg),
                t=float(t[k]),
                label=snap.punctures[k].label,
            )
            for k, sg in zip(idx, signs)
        ]
        return _order_events(events, tie_tol=self.eps / length)

    def check_position(self, point) -> None:
        """
        Require that `point` is a valid standing position (off every ray and puncture).

        Raises
        ------
        DegenerateCrossing
            For the smallest-id puncture whose ray passes within eps of the point.
        """
        p = _as_xy(point)
        snap = self.snapshot
        if len(snap) == 0:
            return
        dist = point_ray_distance(p, snap.positions, snap.directions)
        bad = np.nonzero(dist <= self.eps)[0]
        if bad.size:
            k = int(bad[0])
            raise DegenerateCrossing(
                int(snap.ids[k]),
                "position lies on the reference ray of {!r}".format(snap.punctures[k].label),
                {"point": _to_tuple(p)},
            )

    # --------------------
    # Batch helpers
    # --------------------
    def polyline_events(self, points) -> List[List[CrossingEvent]]:
        """
        Per-segment crossing events for consecutive vertices of a polyline.
        Zero-length segments contribute an empty list.
        """
        P = _as_polyline(points)
        out = []
        for i in range(P.shape[0] - 1):
            if np.array_equal(P[i], P[i + 1]):
                out.append([])
                continue
            out.append(self.detect(P[i], P[i + 1]))
        return out

    def polyline_letters(self, points) -> List[Tuple[int, int]]:
        """Flattened (puncture_id, sign) sequence over a whole polyline (unreduced)."""
        return [ev.key for seg in self.polyline_events(points) for ev in seg]

    # --------------------
    # Internals
    # --------------------
    def _raise_if_degenerate(self, a, b, P, R) -> None:
        snap = self.snapshot
        through = point_segment_distance(P, a, b) <= self.eps
        on_ray = (point_ray_distance(a, P, R) <= self.eps) | (point_ray_distance(b, P, R) <= self.eps)
        bad = np.nonzero(through | on_ray)[0]
        if bad.size == 0:
            return
        k = int(bad[0])
        label = snap.punctures[k].label
        if through[k]:
            reason = "segment passes through puncture {!r}".format(label)
        else:
            reason = "segment endpoint lies on the reference ray of {!r}".format(label)
        raise DegenerateCrossing(
            int(snap.ids[k]), reason,
            {"start": _to_tuple(a), "end": _to_tuple(b)},
        )


def _tie_key(ev: CrossingEvent) -> Tuple[str, int]:
    return (ev.label.casefold(), ev.puncture_id)


def _order_events(events: Sequence[CrossingEvent], tie_tol: float) -> List[CrossingEvent]:
    """
    Stable order for crossing events:
      1) Primary: ascending t.
      2) Ties: consecutive t within tie_tol of the group's first t form one group.
      3) Within a group: ascending case-folded label. Labels are unique per registry
         and do not depend on registration order (ids do).
    """
    by_t = sorted(events, key=lambda ev: (ev.t, _tie_key(ev)))
    ordered: List[CrossingEvent] = []
    group: List[CrossingEvent] = []
    for ev in by_t:
        if group and ev.t - group[0].t > tie_tol:
            ordered.extend(sorted(group, key=_tie_key))
            group = []
        group.append(ev)
    ordered.extend(sorted(group, key=_tie_key))
    return ordered


def letters_of(events: Iterable[CrossingEvent]) -> List[Tuple[int, int]]:
    """(puncture_id, sign) keys of a sequence of events."""
    return [ev.key for ev in events]
