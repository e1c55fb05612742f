# -*- coding: utf-8 -*-
# Homotrack/geometry/__init__.py

"""
Project: Homotrack
Date: 9/14/2026 (Updated: 9/24/2026)

Modules:
--------
- punctures: Session registry of puncture points (id, label, position, ray direction)
             and immutable `PunctureSnapshot` views with (K, 2) numpy arrays.

- crossings: Vectorized segment-vs-reference-ray detection producing ordered,
             signed `CrossingEvent`s with deterministic tie-breaking; raises
             `DegenerateCrossing` on ambiguous configurations.

- simplify:  Incremental polyline simplifier that merges collinear samples only when
             the merged chord reproduces the exact crossing letters; `Path` record.

- detour:    Puncture-avoiding re-routing of a straight movement (midpoint nudging +
             triangle pruning).

- errors:    Base `HomotrackError` and geometry-layer exceptions.

- api:       Minimal public façade.
              * build_registry(definitions, default_ray_direction=None)
              * detect_crossings(start, end, registry, eps=1e-9)

            Usage:
                from geometry.api import build_registry, detect_crossings
"""

__all__ = ["api", "crossings", "detour", "errors", "punctures", "simplify"]
