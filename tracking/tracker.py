# -*- coding: utf-8 -*-
# Homotrack/tracking/tracker.py

"""
Project: Homotrack
Date: 9/28/2026

Purpose:
--------
Per-subject orchestrator. A `PathTracker` owns a basepoint, the freely reduced word
of every ray crossing since that basepoint, and the simplified path, and advances
all three atomically on each position sample.

Pipeline (per update):
----------------------
sample → segment from last raw position → CrossingDetector (registry snapshot)
       → letters → WordReducer, and sample + events → PathSimplifier
       → record sample as last raw position.

State machine:
--------------
Uninitialized --(first sample)--> Tracking --(reset)--> Tracking (fresh basepoint)

Notes:
------
   - Detection and the simplifier's merge decision run before anything is mutated,
     so a `DegenerateCrossing` leaves the tracker exactly as it was.
   - Movements shorter than `crossing_epsilon` are ignored.
   - The registry is only read, through cached immutable snapshots; a new snapshot
     (after a between-session registry change) rebinds the detector.
   - Rebinding re-checks the last position. If a newly registered ray passes through
     it, every query that needs the detector raises `DegenerateCrossing` until
     `reset` moves the tracker to a valid basepoint.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple
import numpy as np
from algebra.letters import Letter, Word
from algebra.reducer import WordReducer
from geometry._validation import _as_xy, _to_tuple
from geometry.crossings import CrossingDetector, CrossingEvent
from geometry.punctures import PunctureRegistry
from geometry.simplify import Path, PathSimplifier
from .config import TrackerConfig, build_config
from .errors import DegenerateCrossing, HomotrackError, TrackerNotInitialized

logger = logging.getLogger(__name__)


def _letters(events: Iterable[CrossingEvent]) -> List[Letter]:
    return [Letter(ev.puncture_id, ev.sign, ev.label) for ev in events]


class PathTracker:
    """
    Incremental homotopy-word tracker for one moving subject.

    Parameters
    ----------
    registry : PunctureRegistry
        Shared, read-only puncture set.
    basepoint : (float, float), optional
        If given, the tracker starts in the Tracking state at this point;
        otherwise the first `update` sample becomes the basepoint.
    config : TrackerConfig, optional
        Tolerances (defaults from `build_config()`).
    """

    def __init__(self, registry: PunctureRegistry,
                 basepoint: Optional[Sequence[float]] = None,
                 config: Optional[TrackerConfig] = None):
        self.registry = registry
        self.config = config or build_config()
        self._snapshot = None
        self._detector: Optional[CrossingDetector] = None
        self._reducer = WordReducer()
        self._simplifier: Optional[PathSimplifier] = None
        self._last: Optional[Tuple[float, float]] = None
        if basepoint is not None:
            self.reset(basepoint)

    # --------------------
    # State
    # --------------------
    @property
    def is_initialized(self) -> bool:
        return self._simplifier is not None

    @property
    def last_position(self) -> Optional[Tuple[float, float]]:
        return self._last

    @property
    def basepoint(self) -> Optional[Tuple[float, float]]:
        return self._simplifier.path().basepoint if self._simplifier else None

    # --------------------
    # Core API
    # --------------------
    def update(self, new_position: Sequence[float]) -> List[CrossingEvent]:
        """
        Advance the tracker to `new_position`.

        Returns
        -------
        List[CrossingEvent]
            Crossings generated by this step, in order (empty for the first sample
            and for ignored micro-movements).

        Raises
        ------
        DegenerateCrossing
            If the step (or a first sample used as basepoint) is ambiguous with
            respect to some puncture. The tracker is left unchanged.
        ValueError
            If the position is not a finite 2-vector.
        """
        p = _as_xy(new_position, name="position")
        detector = self._bind()

        if not self.is_initialized:
            self._start(p, detector)
            return []

        last = np.asarray(self._last)
        if float(np.hypot(*(p - last))) <= self.config.crossing_epsilon:
            logger.debug("[PathTracker] Ignoring micro-movement to %s.", _to_tuple(p))
            return []

        try:
            events = detector.detect(last, p)
        except DegenerateCrossing as exc:
            logger.warning("[PathTracker] Update rejected: %s", exc)
            raise
        plan = self._simplifier.plan(p, events)

        # ---- commit (no failure past this point) ----
        self._reducer.extend(_letters(events))
        self._simplifier.commit(plan)
        self._last = plan.point

        if events and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "[PathTracker] %d crossing(s) %s -> word length %d",
                len(events), [str(l) for l in _letters(events)], len(self._reducer)
            )
        return events

    def update_along(self, points: Iterable[Sequence[float]]) -> List[CrossingEvent]:
        """
        Feed several samples as one transaction: either all are applied or, on the
        first failure, the tracker is restored to its state before the call.
        Typical use: the vertices of a `geometry.detour.detour` route.
        """
        checkpoint = self._checkpoint()
        events: List[CrossingEvent] = []
        try:
            for point in points:
                events.extend(self.update(point))
        except (HomotrackError, ValueError):
            self._rollback(checkpoint)
            raise
        return events

    def reset(self, new_basepoint: Sequence[float]) -> None:
        """
        Clear the word and restart the path at `new_basepoint`.

        Raises
        ------
        DegenerateCrossing
            If the basepoint lies on a reference ray (tracker unchanged).
        """
        p = _as_xy(new_basepoint, name="basepoint")
        self._start(p, self._bind(check_last=False))

    def current_word(self) -> Word:
        return self._reducer.current()

    def current_path(self) -> Path:
        if self._simplifier is None:
            raise TrackerNotInitialized("[PathTracker] No sample received yet; path is undefined.")
        return self._simplifier.path()

    def loop_word(self) -> Word:
        """
        Word of the closed loop: the current word followed by the crossings of the
        straight segment from the last position back to the basepoint.

        Raises
        ------
        DegenerateCrossing
            If the closing segment passes through a puncture.
        """
        word = self._reducer.current()
        if self._simplifier is None:
            return word
        base = self.basepoint
        if self._last == base:
            return word
        closing = self._bind().detect(self._last, base)
        return word.concat(_letters(closing))

    # --------------------
    # Internals
    # --------------------
    def _bind(self, check_last: bool = True) -> CrossingDetector:
        snap = self.registry.snapshot()
        if snap is not self._snapshot:
            detector = CrossingDetector(snap, eps=self.config.crossing_epsilon)
            if check_last and self._last is not None:
                try:
                    detector.check_position(self._last)
                except DegenerateCrossing as exc:
                    logger.warning(
                        "[PathTracker] Registry change puts last position %s on a ray; "
                        "reset required: %s", self._last, exc
                    )
                    raise
            self._snapshot = snap
            self._detector = detector
            if self._simplifier is not None:
                self._simplifier.detector = self._detector
            logger.debug("[PathTracker] Bound to registry snapshot with %d puncture(s).", len(snap))
        return self._detector

    def _start(self, p: np.ndarray, detector: CrossingDetector) -> None:
        detector.check_position(p)
        if self._simplifier is None:
            self._simplifier = PathSimplifier(
                p, detector, collinearity_tolerance=self.config.collinearity_tolerance
            )
        else:
            self._simplifier.reset(p)
        self._reducer.clear()
        self._last = _to_tuple(p)
        logger.info("[PathTracker] Tracking from basepoint %s.", self._last)

    def _checkpoint(self):
        simp = self._simplifier._state() if self._simplifier is not None else None
        return (self._reducer._state(), simp, self._last)

    def _rollback(self, checkpoint) -> None:
        stack, simp, last = checkpoint
        self._reducer._restore(stack)
        if simp is None:
            self._simplifier = None
        else:
            self._simplifier._restore(simp)
        self._last = last
