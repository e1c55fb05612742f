# -*- coding: utf-8 -*-
# Homotrack/algebra/letters.py

"""
Project: Homotrack
Date: 9/18/2026

Purpose
-------
Value types for words in the free group generated by the punctures: signed letters
and freely reduced words, plus the handful of group operations callers need to
compare and present homotopy classes.

Main Tasks
----------
    1. `Letter`: (puncture_id, sign) with a display-only label.
    2. `Word`: immutable, freely reduced tuple of letters.
    3. Group helpers: inverse, concatenation, cyclic reduction, exponent sums.

Notes
-----
- Equality and hashing of letters ignore the label; only (puncture_id, sign) is algebra.
- Rendering: sign +1 -> uppercase label (CCW), sign -1 -> lowercase label (CW).
- Pure data; no logging.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Tuple

__all__ = ["CCW", "CW", "Letter", "Word", "cancels"]

CCW = 1
CW = -1
_ORIENTATION = {CCW: "CCW", CW: "CW"}


@dataclass(frozen=True)
class Letter:
    puncture_id: int
    sign: int
    label: str = field(default="", compare=False)

    def __post_init__(self):
        if self.sign not in (CCW, CW):
            raise ValueError(f"Letter sign must be +1 or -1, got {self.sign!r}.")

    def inverse(self) -> "Letter":
        return Letter(self.puncture_id, -self.sign, self.label)

    @property
    def orientation(self) -> str:
        return _ORIENTATION[self.sign]

    def __str__(self) -> str:
        name = self.label or str(self.puncture_id)
        return name.upper() if self.sign == CCW else name.lower()


def cancels(a: Letter, b: Letter) -> bool:
    """True if `a` followed by `b` is a generator/inverse pair."""
    return a.puncture_id == b.puncture_id and a.sign == -b.sign


class Word:
    """
    Freely reduced word (immutable).

    Construct through `Word.reduce(letters)` when the input may hold cancelling
    neighbours; the plain constructor validates and rejects unreduced input.
    """

    __slots__ = ("_letters",)

    def __init__(self, letters: Iterable[Letter] = ()):
        letters = tuple(letters)
        for a, b in zip(letters, letters[1:]):
            if cancels(a, b):
                raise ValueError(f"Word is not freely reduced at {a}{b}.")
        self._letters = letters

    @classmethod
    def reduce(cls, letters: Iterable[Letter]) -> "Word":
        """Freely reduce an arbitrary letter sequence."""
        stack: List[Letter] = []
        for letter in letters:
            if stack and cancels(stack[-1], letter):
                stack.pop()
            else:
                stack.append(letter)
        return cls(stack)

    # ---- sequence protocol ----
    @property
    def letters(self) -> Tuple[Letter, ...]:
        return self._letters

    def __len__(self) -> int:
        return len(self._letters)

    def __iter__(self) -> Iterator[Letter]:
        return iter(self._letters)

    def __getitem__(self, index):
        return self._letters[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, Word):
            return self._letters == other._letters
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._letters)

    def __repr__(self) -> str:
        return f"Word({str(self)!r})"

    def __str__(self) -> str:
        return "".join(str(l) for l in self._letters)

    # ---- presentation ----
    def symbols(self) -> List[str]:
        """Per-letter display strings, e.g. ['c', 'd', 'C']."""
        return [str(l) for l in self._letters]

    def to_pairs(self) -> List[Tuple[str, str]]:
        """[(label, 'CW'|'CCW'), ...] for host-facing output."""
        return [(l.label, l.orientation) for l in self._letters]

    # ---- group operations ----
    def is_identity(self) -> bool:
        return not self._letters

    def inverse(self) -> "Word":
        return Word(l.inverse() for l in reversed(self._letters))

    def concat(self, other: Iterable[Letter]) -> "Word":
        """Reduced product self * other."""
        return Word.reduce(list(self._letters) + list(other))

    def cyclically_reduced(self) -> "Word":
        """
        Strip matching inverse letters from both ends. The result represents the
        free homotopy class (basepoint allowed to move) of the loop.
        """
        letters = self._letters
        i, j = 0, len(letters) - 1
        while i < j and cancels(letters[j], letters[i]):
            i += 1
            j -= 1
        return Word(letters[i:j + 1])

    def exponent_sums(self) -> Dict[int, int]:
        """Net signed count per puncture id (winding numbers); zero entries dropped."""
        sums: Dict[int, int] = {}
        for l in self._letters:
            sums[l.puncture_id] = sums.get(l.puncture_id, 0) + l.sign
        return {k: v for k, v in sums.items() if v != 0}
