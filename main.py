# -*- coding: utf-8 -*-
# Homotrack/main.py

"""
End-to-end driver:
  1) Configure tolerances and build the puncture registry (scene setup)
  2) Replay Scenario A: one clockwise loop around D
  3) Replay Scenario B: the same loop conjugated by a pass under C
  4) Re-route a movement that would hit a puncture (detour) and feed it
  5) Respawn (reset) and print a JSON summary per subject
"""

import json
import logging
import sys

from geometry.api import build_registry
from geometry.detour import detour
from tracking.config import build_config
from tracking.errors import DegenerateCrossing
from tracking.session import TrackingSession


if __name__ == "__main__":
    # ------------------------------------------------------------------
    # 0) Logging
    # ------------------------------------------------------------------
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    log = logging.getLogger("Homotrack")

    # ------------------------------------------------------------------
    # 1) Configuration + punctures (rays point straight down)
    # ------------------------------------------------------------------
    config = build_config({"eps": 1e-9, "collinear_tol": 1e-6})
    registry = build_registry(
        [
            ("A", (-225.0, 100.0)),
            ("B", (-75.0, 150.0)),
            ("C", (75.0, 150.0)),
            ("D", (225.0, 100.0)),
        ],
        default_ray_direction=config.ray_direction,
    )
    session = TrackingSession(registry, config)

    # ------------------------------------------------------------------
    # 2) Scenario A: up, right over D, down, back left under D → "d"
    # ------------------------------------------------------------------
    for p in [(150.0, 0.0), (150.0, 250.0), (300.0, 250.0), (300.0, 0.0), (150.0, 0.0)]:
        session.update("scenario_a", p)

    # ------------------------------------------------------------------
    # 3) Scenario B: under C leftwards, over C and D, back under D, over C,
    #    then under C rightwards to the start → "cdC"
    # ------------------------------------------------------------------
    for p in [
        (150.0, 0.0), (0.0, 0.0), (0.0, 250.0), (300.0, 250.0), (300.0, 0.0),
        (150.0, 0.0), (150.0, 250.0), (0.0, 250.0), (0.0, 0.0), (150.0, 0.0),
    ]:
        session.update("scenario_b", p)

    # ------------------------------------------------------------------
    # 4) Detour: a straight move through B is rejected; route around it
    # ------------------------------------------------------------------
    session.update("rover", (-150.0, 150.0))
    target = (0.0, 150.0)
    try:
        session.update("rover", target)
    except DegenerateCrossing as e:
        log.warning("Direct move rejected (%s); re-routing.", e)
        route = detour((-150.0, 150.0), target, registry.snapshot(), nudge=5.0)
        session.tracker("rover").update_along(route[1:])

    # ------------------------------------------------------------------
    # 5) Summary, then respawn the rover
    # ------------------------------------------------------------------
    summary = {}
    for subject in session.subjects():
        tracker = session.tracker(subject)
        try:
            loop_word = str(tracker.loop_word())
        except DegenerateCrossing as e:
            # closing segment runs through a puncture (the rover ends right of B)
            log.info("No closed-loop word for %r: %s", subject, e)
            loop_word = None
        summary[subject] = {
            "word": str(tracker.current_word()),
            "free_class": str(tracker.current_word().cyclically_reduced()),
            "loop_word": loop_word,
            "path_vertices": len(tracker.current_path()),
        }
    session.reset("rover", (-150.0, 160.0))
    summary["rover_after_reset"] = {"word": str(session.word("rover")),
                                    "path": session.current_path("rover")}

    json.dump(summary, sys.stdout, indent=2)
    print()
