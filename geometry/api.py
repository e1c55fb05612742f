# -*- coding: utf-8 -*-
# Homotrack/geometry/api.py

"""
Project: Homotrack
Date: 9/24/2026

Purpose
-------
Thin, import-only façade for geometry setup. Exposes helpers to (1) build a
puncture registry from plain definitions at scene setup and (2) run one-off
crossing detection without holding a detector.

Main Tasks
----------
    1. `build_registry` → register (label, position[, ray_direction]) definitions.
    2. `detect_crossings` → ordered crossing events for a single segment.

Notes
-----
- Detailed behavior lives in `punctures` and `crossings`.
"""

from typing import Iterable, List, Optional, Sequence

from .crossings import DEFAULT_CROSSING_EPSILON, CrossingDetector, CrossingEvent
from .punctures import PunctureRegistry

__all__ = [
    "build_registry",
    "detect_crossings",
]


def build_registry(
    definitions: Iterable[Sequence],
    *,
    default_ray_direction: Optional[Sequence[float]] = None,
) -> PunctureRegistry:
    """
    Create a registry from puncture definitions.

    Args
    ----
    definitions : Iterable[Sequence]
        Items of `(label, position)` or `(label, position, ray_direction)`.
    default_ray_direction : (float, float), optional
        Shared ray direction for items without an override (default: straight down).

    Returns
    -------
    PunctureRegistry
        Registry with every definition registered in the given order.

    Raises
    ------
    DuplicateLabel
        On the first colliding label (earlier definitions stay registered).
    ValueError
        If an item has neither 2 nor 3 fields.
    """
    registry = PunctureRegistry(default_ray_direction=default_ray_direction)
    for item in definitions:
        if len(item) == 2:
            label, position = item
            registry.register(label, position)
        elif len(item) == 3:
            label, position, ray = item
            registry.register(label, position, ray_direction=ray)
        else:
            raise ValueError(f"Puncture definition must be (label, position[, ray]), got {item!r}.")
    return registry


def detect_crossings(
    start: Sequence[float],
    end: Sequence[float],
    registry: PunctureRegistry,
    *,
    eps: float = DEFAULT_CROSSING_EPSILON,
) -> List[CrossingEvent]:
    """
    Ordered crossing events of the segment start → end against the registry's
    current snapshot.
    """
    return CrossingDetector(registry.snapshot(), eps=eps).detect(start, end)
