# -*- coding: utf-8 -*-
# Homotrack/geometry/errors.py


"""
Project: Homotrack
Date: 9/14/2026

Purpose
-------
Typed exceptions for the geometry layer with compact, context-aware messages so
registry, detector and router failures read the same way in logs and tracebacks.

Main Tasks
----------
    1. Define HomotrackError(message, context) with a compact context suffix in __str__.
    2. Provide typed subclasses: DuplicateLabel, UnknownPuncture, DegenerateCrossing.
    3. Supply _format_context helper and expose public names via __all__.

Notes
-----
- Context is optional; long values are truncated for readability.
- DegenerateCrossing keeps `puncture_id` as an attribute for programmatic retries.
"""

__all__ = [
    "HomotrackError",
    "DuplicateLabel",
    "UnknownPuncture",
    "DegenerateCrossing",
]


def _format_context(ctx):
    """Return a compact ' | key1=val1, key2=val2' string or '' if no context."""
    if not ctx:
        return ""
    parts = []
    for k in sorted(ctx.keys()):
        sv = repr(ctx[k])
        # Keep it short; avoid huge dumps
        if len(sv) > 120:
            sv = sv[:117] + "..."
        parts.append("{}={}".format(k, sv))
    return " | " + ", ".join(parts)


class HomotrackError(Exception):
    """
    Base class for all Homotrack errors.

    Parameters
    ----------
    message : str
        Human-readable error.
    context : dict, optional
        Extra fields to append in the string form (e.g., {"label": "A"}).
    """
    def __init__(self, message, context=None):
        self.context = dict(context) if context else None
        super().__init__(message)

    def __str__(self):
        base = super().__str__()
        return base + _format_context(self.context)


class DuplicateLabel(HomotrackError):
    """
    A puncture label collides (case-insensitively) with one already registered.
    The registry is left unchanged.
    """
    def __init__(self, label, existing_id=None):
        self.label = label
        super().__init__(
            "Puncture label {!r} is already registered.".format(label),
            {"label": label, "existing_id": existing_id},
        )


class UnknownPuncture(HomotrackError):
    """
    No puncture with the requested id (never registered, or already removed), or,
    for label lookups, no puncture with the requested label.
    """
    def __init__(self, puncture_id=None, label=None):
        self.puncture_id = puncture_id
        self.label = label
        if label is not None:
            super().__init__("No puncture labeled {!r}.".format(label), {"label": label})
        else:
            super().__init__(
                "No puncture with id {!r}.".format(puncture_id),
                {"puncture_id": puncture_id},
            )


class DegenerateCrossing(HomotrackError):
    """
    A segment's relation to a puncture's reference ray is ambiguous:
      - the segment passes through (within tolerance of) the puncture itself,
      - a segment endpoint lies on (within tolerance of) the reference ray.

    Callers must perturb the sample and retry; nothing is approximated.
    """
    def __init__(self, puncture_id, reason, context=None):
        self.puncture_id = puncture_id
        self.reason = reason
        ctx = {"puncture_id": puncture_id}
        if context:
            ctx.update(context)
        super().__init__("Degenerate crossing: {}".format(reason), ctx)
