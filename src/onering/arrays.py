"""Small sequence helpers used while collecting neighbors.

Neighbor lists around a vertex are short (usually single digit), so a linear
scan beats building a set and keeps discovery order.
"""

from __future__ import annotations

from typing import Any, List, Sequence


def index_of(seq: Sequence[Any], value: Any) -> int:
    """Return the index of the first element equal to `value`, or -1."""
    for i, item in enumerate(seq):
        if item == value:
            return i
    return -1


def append_unique(seq: List[Any], value: Any) -> None:
    """Append `value` to `seq` in place unless it is already present."""
    if index_of(seq, value) < 0:
        seq.append(value)
