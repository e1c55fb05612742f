# -*- coding: utf-8 -*-
# Homotrack/geometry/punctures.py

"""
Project: Homotrack
Date: 9/15/2026

Purpose:
--------
Session-scoped registry of puncture points. Each puncture is defined once here with
its metadata (id, label, position, reference-ray direction), providing a single
source of truth that every tracker reads through immutable snapshots.

Main Tasks:
-----------
   - Bind caller definitions into frozen `Puncture` records with registry-assigned ids.
   - Reject label collisions (case-insensitive) with `DuplicateLabel`.
   - Serve `PunctureSnapshot` views: id-ordered tuple + read-only (K, 2) arrays.

Inputs/Contracts:
-----------------
   - Registration/removal happens between tracking phases, never while an update
     is in flight. A snapshot taken before a mutation is never altered by it.
   - Ids are assigned in registration order and never reused.

Notes:
------
   - Labels are compared case-insensitively because letter case encodes
     orientation when a word is rendered ("A" = CCW, "a" = CW).
   - Ray directions are normalized to unit length on registration.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple
import numpy as np
from ._validation import _as_xy, _as_direction, _to_tuple
from .errors import DuplicateLabel, UnknownPuncture

logger = logging.getLogger(__name__)

# Straight down; shared by every puncture unless overridden.
DEFAULT_RAY_DIRECTION: Tuple[float, float] = (0.0, -1.0)


# ---- Records ----

@dataclass(frozen=True)
class Puncture:
    id: int
    label: str
    position: Tuple[float, float]
    ray_direction: Tuple[float, float] = DEFAULT_RAY_DIRECTION


class PunctureSnapshot:
    """
    Immutable view of a registry at one point in time.

    Attributes
    ----------
    punctures : Tuple[Puncture, ...]
        Ordered by ascending id, independent of registration order.
    positions : np.ndarray
        (K, 2) float64, read-only.
    directions : np.ndarray
        (K, 2) float64 unit vectors, read-only.
    ids : np.ndarray
        (K,) int64, read-only.
    """

    __slots__ = ("punctures", "positions", "directions", "ids", "_by_id")

    def __init__(self, punctures: Sequence[Puncture]):
        ordered = tuple(sorted(punctures, key=lambda p: p.id))
        positions = np.array([p.position for p in ordered], dtype=np.float64).reshape(-1, 2)
        directions = np.array([p.ray_direction for p in ordered], dtype=np.float64).reshape(-1, 2)
        ids = np.array([p.id for p in ordered], dtype=np.int64)
        for arr in (positions, directions, ids):
            arr.setflags(write=False)
        self.punctures = ordered
        self.positions = positions
        self.directions = directions
        self.ids = ids
        self._by_id = {p.id: p for p in ordered}

    def __len__(self) -> int:
        return len(self.punctures)

    def __iter__(self) -> Iterator[Puncture]:
        return iter(self.punctures)

    def __contains__(self, puncture_id) -> bool:
        return puncture_id in self._by_id

    def get(self, puncture_id: int) -> Puncture:
        try:
            return self._by_id[puncture_id]
        except KeyError:
            raise UnknownPuncture(puncture_id) from None

    def label_of(self, puncture_id: int) -> str:
        return self.get(puncture_id).label


# ---- Registry ----

class PunctureRegistry:
    """
    Append/remove-only set of punctures for a tracking session.

    Parameters
    ----------
    default_ray_direction : (float, float), optional
        Reference-ray direction applied when `register` gets no override.
        Normalized to unit length. Default: straight down (0, -1).
    """

    def __init__(self, default_ray_direction: Optional[Sequence[float]] = None):
        if default_ray_direction is None:
            default_ray_direction = DEFAULT_RAY_DIRECTION
        self.default_ray_direction = _to_tuple(_as_direction(default_ray_direction))
        self._punctures: Dict[int, Puncture] = {}
        self._labels: Dict[str, int] = {}
        self._next_id = 0
        self._snapshot: Optional[PunctureSnapshot] = None

    # --------------------
    # Mutation (between tracking phases only)
    # --------------------
    def register(self, label: str, position: Sequence[float],
                 ray_direction: Optional[Sequence[float]] = None) -> Puncture:
        """
        Add a puncture and return its record.

        Raises
        ------
        DuplicateLabel
            If `label` (case-insensitive) is already present.
        ValueError
            If the label is empty or position/direction are not finite 2-vectors.
        """
        if not isinstance(label, str) or not label:
            raise ValueError(f"[PunctureRegistry] Label must be a non-empty string, got {label!r}.")
        key = label.casefold()
        if key in self._labels:
            raise DuplicateLabel(label, existing_id=self._labels[key])

        pos = _to_tuple(_as_xy(position, name="position"))
        if ray_direction is None:
            ray = self.default_ray_direction
        else:
            ray = _to_tuple(_as_direction(ray_direction))

        puncture = Puncture(id=self._next_id, label=label, position=pos, ray_direction=ray)
        self._next_id += 1
        self._punctures[puncture.id] = puncture
        self._labels[key] = puncture.id
        self._snapshot = None
        logger.info(
            "[PunctureRegistry] Registered %r as id=%d at %s (ray=%s).",
            label, puncture.id, pos, ray
        )
        return puncture

    def remove(self, puncture_id: int) -> Puncture:
        """
        Remove a puncture by id and return its record.

        Raises
        ------
        UnknownPuncture
            If no puncture with that id is registered.
        """
        puncture = self._punctures.pop(puncture_id, None)
        if puncture is None:
            raise UnknownPuncture(puncture_id)
        del self._labels[puncture.label.casefold()]
        self._snapshot = None
        logger.info("[PunctureRegistry] Removed %r (id=%d).", puncture.label, puncture_id)
        return puncture

    # --------------------
    # Read access
    # --------------------
    def snapshot(self) -> PunctureSnapshot:
        """Immutable view, cached until the next mutation."""
        if self._snapshot is None:
            self._snapshot = PunctureSnapshot(list(self._punctures.values()))
        return self._snapshot

    def get(self, puncture_id: int) -> Puncture:
        try:
            return self._punctures[puncture_id]
        except KeyError:
            raise UnknownPuncture(puncture_id) from None

    def by_label(self, label: str) -> Puncture:
        key = label.casefold() if isinstance(label, str) else label
        if key not in self._labels:
            raise UnknownPuncture(label=label)
        return self._punctures[self._labels[key]]

    def labels(self) -> List[str]:
        """Labels in ascending id order."""
        return [p.label for p in self.snapshot()]

    def __len__(self) -> int:
        return len(self._punctures)

    def __iter__(self) -> Iterator[Puncture]:
        return iter(self.snapshot())

    def __contains__(self, puncture_id) -> bool:
        return puncture_id in self._punctures
