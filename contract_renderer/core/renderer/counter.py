from __future__ import annotations

"""Clause numbering state for one render pass.

Top-level clauses are numbered ``1.``, ``2.``, ... across the whole document;
clauses nested in a clause are lettered ``(a)``, ``(b)``, ... and the letters
restart whenever a new top-level clause begins. Every nesting depth below the
top level shares the same letter sequence.

A counter belongs to exactly one render pass. Create a new one (or call
:meth:`ClauseCounter.reset`) before rendering another document version.
"""

import logging

__all__ = ["ClauseCounter", "letter_label"]

logger = logging.getLogger(__name__)


def letter_label(index: int) -> str:
    """Return the lowercase letters for a 1-based *index*.

    ``1 -> "a"``, ``26 -> "z"``, then ``27 -> "aa"``, ``28 -> "ab"`` ...
    """
    if index < 1:
        raise ValueError(f"index must be >= 1, got {index}")
    letters = []
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters.append(chr(ord("a") + remainder))
    return "".join(reversed(letters))


class ClauseCounter:
    """Two-tier clause counter shared by every node of a render pass."""

    __slots__ = ("main_index", "sub_index")

    def __init__(self) -> None:
        self.main_index = 0
        self.sub_index = 0

    def increment_main(self) -> int:
        """Advance to the next top-level clause and restart the letters."""
        self.main_index += 1
        self.sub_index = 0
        logger.debug("Numbering: increment_main main=%d", self.main_index)
        return self.main_index

    def increment_sub(self) -> str:
        """Advance to the next nested clause and return its ``(x)`` label."""
        self.sub_index += 1
        label = f"({letter_label(self.sub_index)})"
        logger.debug("Numbering: increment_sub sub=%d label=%s", self.sub_index, label)
        return label

    def current(self) -> int:
        return self.main_index

    def reset(self) -> None:
        logger.debug("Numbering: reset main=%d sub=%d", self.main_index, self.sub_index)
        self.main_index = 0
        self.sub_index = 0

    def __repr__(self) -> str:
        return f"ClauseCounter(main_index={self.main_index}, sub_index={self.sub_index})"
