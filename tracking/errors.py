# -*- coding: utf-8 -*-
# Homotrack/tracking/errors.py


"""
Project: Homotrack
Date: 9/26/2026

Purpose
-------
Typed exceptions for the tracking layer (trackers, sessions, configuration). They
share `HomotrackError` with the geometry layer so callers can catch one base.

Main Tasks
----------
    1. Re-export the geometry errors surfaced through tracker updates.
    2. Define UnknownSubject, TrackerNotInitialized, ConfigError and SchemaError.
"""

from geometry.errors import (
    DegenerateCrossing,
    DuplicateLabel,
    HomotrackError,
    UnknownPuncture,
)

__all__ = [
    "HomotrackError",
    "DuplicateLabel",
    "UnknownPuncture",
    "DegenerateCrossing",
    "UnknownSubject",
    "TrackerNotInitialized",
    "ConfigError",
    "SchemaError",
]


class UnknownSubject(HomotrackError):
    """
    A session query or reset names a subject that has no tracker yet.
    (`update` never raises this; it creates the tracker.)
    """
    def __init__(self, subject_id):
        self.subject_id = subject_id
        super().__init__(
            "No tracker for subject {!r}.".format(subject_id),
            {"subject_id": subject_id},
        )


class TrackerNotInitialized(HomotrackError):
    """
    A path query on a tracker that has not received its first sample.
    """


class ConfigError(HomotrackError):
    """
    Base class for configuration errors.
    """


class SchemaError(ConfigError):
    """
    Per-key issues detected by the schema:
      - unknown keys
      - non-numeric where numeric is required
      - out-of-range scalar values
      - malformed ray direction
    """
