# -*- coding: utf-8 -*-
# Homotrack/tracking/__init__.py

"""
Project: Homotrack
Date: 9/26/2026 (Updated: 9/30/2026)

Modules:
--------
- tracker: `PathTracker`, the per-subject orchestrator (atomic updates, reset,
           closed-loop word, transactional multi-sample updates).
- session: `TrackingSession`, the host-facing boundary keyed by subject id.
- config:  Sectioned defaults, alias canonicalization and schema checks → `TrackerConfig`.
- errors:  Tracking-layer exceptions (UnknownSubject, TrackerNotInitialized, SchemaError)
           plus re-exports of the geometry errors.
- api:     Batch helpers.
             * replay(samples, registry, config=None)       → PathTracker
             * polyline_word(points, registry, closed=True) → Word
"""

__all__ = ["api", "config", "errors", "session", "tracker"]
