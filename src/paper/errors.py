"""Typed resolution failures.

Every failure is raised before any session state is touched, so callers may treat them as
all-or-nothing: a failed read never moves the cursor and a failed write never records anything.
"""

from __future__ import annotations

from src.paper.find import Direction


class ResolutionError(ValueError):
    """Base class for intents that cannot be resolved against the paper."""


class ResolutionNotFound(ResolutionError):
    """Raised when the search exhausts the sequence without reaching the requested match."""

    def __init__(self, direction: Direction) -> None:
        self.direction = direction
        which = "next" if direction == Direction.forward else "previous"
        super().__init__(f"could not find a {which} node")


class EmptyBatch(ResolutionError):
    """Raised when a write intent carries no read intents."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"nothing to {action}: no node reference was given")


class BatchResolutionFailed(ResolutionError):
    """Raised when the deciding (last) read intent of a write batch cannot be resolved."""

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(f"cannot {action}: {reason}")
