# -*- coding: utf-8 -*-
# Homotrack/algebra/reducer.py

"""
Project: Homotrack
Date: 9/18/2026

Purpose
-------
Incremental free reduction. Letters arrive in temporal order and the reducer keeps
the unique freely reduced word of everything seen so far.

Notes
-----
- The stack is always reduced, so an incoming letter can only cancel the top;
  a batch that unwinds several letters does so one comparison per letter.
- O(1) amortized per letter; stack depth is bounded by word length (no recursion).
"""

from typing import Iterable, List
from .letters import Letter, Word, cancels

__all__ = ["WordReducer", "reduce_letters"]


class WordReducer:
    """Last-in-first-out free reduction of a letter stream."""

    def __init__(self, letters: Iterable[Letter] = ()):
        self._stack: List[Letter] = []
        self.extend(letters)

    def append(self, letter: Letter) -> bool:
        """
        Push `letter`, or pop the top if the two cancel.

        Returns
        -------
        bool
            True if a cancellation happened.
        """
        if self._stack and cancels(self._stack[-1], letter):
            self._stack.pop()
            return True
        self._stack.append(letter)
        return False

    def extend(self, letters: Iterable[Letter]) -> int:
        """Append letters in order; return the number of cancellations."""
        cancelled = 0
        for letter in letters:
            if self.append(letter):
                cancelled += 1
        return cancelled

    def current(self) -> Word:
        return Word(self._stack)

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)

    # transactional helpers used by the tracker
    def _state(self) -> List[Letter]:
        return list(self._stack)

    def _restore(self, state: List[Letter]) -> None:
        self._stack = list(state)


def reduce_letters(letters: Iterable[Letter]) -> Word:
    """Batch form of `WordReducer`."""
    return Word.reduce(letters)
