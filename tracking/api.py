# -*- coding: utf-8 -*-
# Homotrack/tracking/api.py

"""
Project: Homotrack
Date: 9/30/2026

Purpose
-------
Thin, import-only façade for batch use of the tracker: replay a recorded sample
sequence, or compute the word of a whole polyline in one call.

Main Tasks
----------
    1. `replay` → run a fresh `PathTracker` over a sample sequence.
    2. `polyline_word` → reduced word of a polyline (optionally closed back to its start).
"""

from typing import Iterable, Optional, Sequence

from algebra.letters import Letter, Word
from geometry.crossings import CrossingDetector
from geometry.punctures import PunctureRegistry
from .config import TrackerConfig, build_config
from .tracker import PathTracker

__all__ = [
    "replay",
    "polyline_word",
]


def replay(
    samples: Iterable[Sequence[float]],
    registry: PunctureRegistry,
    *,
    config: Optional[TrackerConfig] = None,
) -> PathTracker:
    """
    Feed `samples` in order to a new tracker; the first sample is the basepoint.

    Raises
    ------
    DegenerateCrossing
        On the first ambiguous step (samples before it have been applied).
    """
    tracker = PathTracker(registry, config=config)
    for point in samples:
        tracker.update(point)
    return tracker


def polyline_word(
    points: Sequence[Sequence[float]],
    registry: PunctureRegistry,
    *,
    closed: bool = True,
    config: Optional[TrackerConfig] = None,
) -> Word:
    """
    Reduced word of the polyline `points`, with a closing segment back to
    `points[0]` when `closed` is True.

    Args
    ----
    points : sequence of (x, y)
        Vertices; consecutive duplicates are skipped.
    registry : PunctureRegistry
        Puncture set (its current snapshot is used).
    closed : bool, optional
        Append the return segment to the first vertex (default: True).
    config : TrackerConfig, optional
        Supplies `crossing_epsilon`.

    Returns
    -------
    Word
        Freely reduced word of all crossings, in order.
    """
    cfg = config or build_config()
    pts = [tuple(map(float, p)) for p in points]
    if closed and len(pts) > 1 and pts[-1] != pts[0]:
        pts.append(pts[0])
    if len(pts) < 2:
        return Word()
    detector = CrossingDetector(registry.snapshot(), eps=cfg.crossing_epsilon)
    letters = [
        Letter(ev.puncture_id, ev.sign, ev.label)
        for segment in detector.polyline_events(pts)
        for ev in segment
    ]
    return Word.reduce(letters)
