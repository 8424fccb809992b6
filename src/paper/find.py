"""Predicate-filtered, skip-counting search over a node sequence.

A `Find` borrows the sequence and owns only its cursor, direction, and remaining skip count. It
never wraps around and never revisits an index, so one search is O(n) in the sequence length. A
search is restartable only by building a new `Find`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from src.paper.nodes import Node, NodeIndex, Predicate


class Direction(StrEnum):
    """Search direction over the node sequence."""

    forward = "forward"
    backward = "backward"


@dataclass
class Find:
    """Search state: yields the match that follows `skip` skipped matches from `next`.

    The starting index is inclusive in both directions. Each matching node consumes one unit of
    `skip`; the first match found with `skip == 0` is the result.
    """

    nodes: Sequence[Node]
    predicate: Predicate
    next: int
    skip: int
    direction: Direction = Direction.forward

    def __post_init__(self) -> None:
        if self.skip < 0:
            raise ValueError("skip must be >= 0")

    def _view(self, index: int) -> NodeIndex:
        return NodeIndex(index=index, node=self.nodes[index])

    def _take(self, view: NodeIndex) -> bool:
        if not self.predicate.matches(view):
            return False
        if self.skip >= 1:
            self.skip -= 1
            return False
        return True

    def next_forward(self) -> NodeIndex | None:
        """Scan upward from the cursor; `None` once the sequence is exhausted."""

        while 0 <= self.next < len(self.nodes):
            view = self._view(self.next)
            self.next += 1
            if self._take(view):
                return view
        return None

    def next_backward(self) -> NodeIndex | None:
        """Scan downward from the cursor to index 0; `None` once exhausted."""

        # A cursor past the end starts from the last node.
        self.next = min(self.next, len(self.nodes) - 1)
        while self.next >= 0:
            view = self._view(self.next)
            self.next -= 1
            if self._take(view):
                return view
        return None

    def next_match(self) -> NodeIndex | None:
        """Produce the next match in this search's direction."""

        if self.direction == Direction.forward:
            return self.next_forward()
        return self.next_backward()
