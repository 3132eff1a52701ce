"""Topological elements, axes and index ranges used throughout the grid."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, IntEnum


class Axis(IntEnum):
    """Array axes in (k, j, i) storage order."""

    KAXIS = 0
    JAXIS = 1
    IAXIS = 2


class TopologicalElement(IntEnum):
    """Where on a cell a quantity lives.

    ``value % 3`` of a face or edge gives its direction: 0 for x1, 1 for x2
    and 2 for x3.
    """

    CC = 0
    F1 = 3
    F2 = 4
    F3 = 5
    E1 = 6
    E2 = 7
    E3 = 8
    NN = 9

    @property
    def staggered(self) -> tuple[Axis, ...]:
        """The axes along which this element sits on cell boundaries."""
        return _STAGGERED[self]


_TE = TopologicalElement

_STAGGERED: dict[TopologicalElement, tuple[Axis, ...]] = {
    _TE.CC: (),
    _TE.F1: (Axis.IAXIS,),
    _TE.F2: (Axis.JAXIS,),
    _TE.F3: (Axis.KAXIS,),
    _TE.E1: (Axis.KAXIS, Axis.JAXIS),
    _TE.E2: (Axis.KAXIS, Axis.IAXIS),
    _TE.E3: (Axis.JAXIS, Axis.IAXIS),
    _TE.NN: (Axis.KAXIS, Axis.JAXIS, Axis.IAXIS),
}

FACES: tuple[TopologicalElement, ...] = (_TE.F1, _TE.F2, _TE.F3)
EDGES: tuple[TopologicalElement, ...] = (_TE.E1, _TE.E2, _TE.E3)


class IndexDomain(Enum):
    """Which cells of a block an index range covers."""

    INTERIOR = "interior"
    ENTIRE = "entire"


@dataclass(frozen=True)
class IndexRange:
    """An inclusive range of indices from ``s`` to ``e``."""

    s: int
    e: int

    @property
    def size(self) -> int:
        return max(self.e - self.s + 1, 0)

    @property
    def slice(self) -> slice:
        """The range as a slice usable on arrays."""
        return slice(self.s, self.e + 1)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.s, self.e + 1))


def increment_te(
    out_te: TopologicalElement, in_te: TopologicalElement, increment: int
) -> TopologicalElement:
    """Return the element of ``out_te``'s kind offset cyclically from ``in_te``."""
    offset = (int(in_te) + increment) % 3
    return TopologicalElement(int(out_te) + offset)


def is_edge(te: TopologicalElement) -> bool:
    """Return True if ``te`` is one of the edges E1 to E3."""
    return TopologicalElement.E1 <= te <= TopologicalElement.E3