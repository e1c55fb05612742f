# -*- coding: utf-8 -*-
# Homotrack/tracking/session.py

"""
Project: Homotrack
Date: 9/29/2026

Purpose
-------
Host-facing boundary: one `PathTracker` per subject id over a shared registry. The
host integration layer feeds `(subject_id, position)` samples and reads words and
paths back as plain Python values.

Main Tasks
----------
    1. `update(subject_id, position)` creates the tracker on the first sample.
    2. `current_word` / `current_path` return plain lists; `word` returns the `Word`.
    3. `reset(subject_id, basepoint)` restarts an existing subject (e.g. respawn).

Notes
-----
- Every method except `update` raises `UnknownSubject` for an unseen subject.
- Trackers of different subjects share nothing mutable; the registry must not be
  mutated while updates are running.
"""

import logging
from typing import Dict, Hashable, List, Optional, Sequence, Tuple
from algebra.letters import Word
from geometry.crossings import CrossingEvent
from geometry.punctures import PunctureRegistry
from .config import TrackerConfig, build_config
from .errors import UnknownSubject
from .tracker import PathTracker

logger = logging.getLogger(__name__)


class TrackingSession:
    """
    Multi-subject façade.

    Parameters
    ----------
    registry : PunctureRegistry
        Shared puncture set for all subjects.
    config : TrackerConfig, optional
        Tolerances applied to every tracker created by this session.
    """

    def __init__(self, registry: PunctureRegistry, config: Optional[TrackerConfig] = None):
        self.registry = registry
        self.config = config or build_config()
        self._trackers: Dict[Hashable, PathTracker] = {}

    # --------------------
    # Core API
    # --------------------
    def update(self, subject_id: Hashable, position: Sequence[float]) -> List[CrossingEvent]:
        """
        Feed one sample. The first sample for a subject becomes its basepoint; the
        tracker is only kept if that sample is accepted.
        """
        tracker = self._trackers.get(subject_id)
        if tracker is None:
            tracker = PathTracker(self.registry, config=self.config)
            tracker.update(position)
            self._trackers[subject_id] = tracker
            logger.info("[TrackingSession] Started tracking subject %r.", subject_id)
            return []
        return tracker.update(position)

    def current_word(self, subject_id: Hashable) -> List[Tuple[str, str]]:
        """[(label, 'CW'|'CCW'), ...] for the subject's reduced word."""
        return self.tracker(subject_id).current_word().to_pairs()

    def current_path(self, subject_id: Hashable) -> List[Tuple[float, float]]:
        return self.tracker(subject_id).current_path().to_list()

    def word(self, subject_id: Hashable) -> Word:
        return self.tracker(subject_id).current_word()

    def reset(self, subject_id: Hashable, basepoint: Sequence[float]) -> None:
        self.tracker(subject_id).reset(basepoint)
        logger.info("[TrackingSession] Reset subject %r at %s.", subject_id, tuple(basepoint))

    # --------------------
    # Subject management
    # --------------------
    def tracker(self, subject_id: Hashable) -> PathTracker:
        try:
            return self._trackers[subject_id]
        except KeyError:
            raise UnknownSubject(subject_id) from None

    def discard(self, subject_id: Hashable) -> None:
        """Stop tracking a subject."""
        if self._trackers.pop(subject_id, None) is None:
            raise UnknownSubject(subject_id)
        logger.info("[TrackingSession] Stopped tracking subject %r.", subject_id)

    def subjects(self) -> List[Hashable]:
        return list(self._trackers)

    def __contains__(self, subject_id) -> bool:
        return subject_id in self._trackers

    def __len__(self) -> int:
        return len(self._trackers)
