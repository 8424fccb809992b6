"""Question paper session state and intent dispatcher.

`QuestionPaper` owns the node sequence and all mutable session data: the cursor (`prev_index`), the
marked and skipped stores, and the note list. It is not thread-safe; callers that share a paper
must serialize calls to `resolve_intent` themselves.

Cursor contract:
    - only a successful read intent moves `prev_index`;
    - write and meta intents never move it, and neither does a failed read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from src.intent.schema import (
    Anchor,
    MetaIntent,
    MetaQuery,
    ReadIntent,
    ReadTarget,
    Reference,
    WriteAction,
    WriteIntent,
)
from src.paper.errors import BatchResolutionFailed, EmptyBatch, ResolutionNotFound
from src.paper.find import Direction, Find
from src.paper.nodes import (
    Node,
    NodeData,
    NodeIndex,
    NodeKind,
    Predicate,
    QuestionPredicate,
    SectionPredicate,
)

logger = logging.getLogger(__name__)

_PREDICATES: dict[ReadTarget, Predicate] = {
    ReadTarget.question: QuestionPredicate(),
    ReadTarget.section: SectionPredicate(),
}


class Note(BaseModel):
    """A free-text note attached to a node index."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int
    text: str


class WriteStatus(BaseModel):
    """Successful outcome of a write intent."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    action: WriteAction
    index: int
    message: str


IntentResult = NodeData | WriteStatus | str


def _plural(count: int, noun: str) -> str:
    return noun if count == 1 else f"{noun}s"


class QuestionPaper:
    """An ordered, fixed sequence of nodes plus the session's navigation and annotation state."""

    def __init__(self, nodes: Sequence[Node], last_index: int, total_questions: int) -> None:
        if not nodes:
            raise ValueError("a question paper needs at least one node")
        if not 0 <= last_index < len(nodes):
            raise ValueError(f"last_index must be in [0, {len(nodes)}), got {last_index}")
        if total_questions < 0:
            raise ValueError("total_questions must be >= 0")

        self._nodes: tuple[Node, ...] = tuple(nodes)
        self._prev_index = 0
        self._last_index = last_index
        self._total_questions = total_questions
        self._marked: dict[int, NodeData] = {}
        self._skipped: dict[int, NodeData] = {}
        self._notes: list[Note] = []

    @classmethod
    def from_nodes(cls, nodes: Sequence[Node]) -> QuestionPaper:
        """Build a paper whose bounds and question count are derived from `nodes`."""

        total = sum(1 for node in nodes if node.kind == NodeKind.question)
        return cls(nodes, last_index=len(nodes) - 1, total_questions=total)

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def prev_index(self) -> int:
        return self._prev_index

    @property
    def last_index(self) -> int:
        return self._last_index

    @property
    def total_questions(self) -> int:
        return self._total_questions

    @property
    def marked(self) -> Mapping[int, NodeData]:
        return MappingProxyType(self._marked)

    @property
    def skipped(self) -> Mapping[int, NodeData]:
        return MappingProxyType(self._skipped)

    @property
    def notes(self) -> tuple[Note, ...]:
        return tuple(self._notes)

    @property
    def num_marked(self) -> int:
        return len(self._marked)

    @property
    def num_skipped(self) -> int:
        return len(self._skipped)

    def notes_for(self, index: int) -> list[str]:
        """Return the note texts attached to `index`, oldest first."""

        return [note.text for note in self._notes if note.index == index]

    def nth(self, index: int) -> NodeIndex | None:
        """Return the indexed view of the node at `index`, or `None` if out of range."""

        if 0 <= index < len(self._nodes):
            return NodeIndex(index=index, node=self._nodes[index])
        return None

    def update_previous(self, index: int) -> None:
        self._prev_index = index

    def find(self, predicate: Predicate, start: int, skip: int, direction: Direction) -> Find:
        return Find(nodes=self._nodes, predicate=predicate, next=start, skip=skip, direction=direction)

    def resolve_reference(self, reference: Reference, predicate: Predicate) -> NodeIndex:
        """Resolve a relative reference to the matching node.

        Skip counts per anchor:
            - start:   `|offset|` matches skipped forward from index 0;
            - current: `|offset| + 1` matches skipped from `prev_index`, so the node under the
              cursor is always passed over;
            - end:     `|offset|` matches skipped backward from `last_index`.

        Raises:
            ResolutionNotFound: If the sequence runs out before the required match.
        """

        if reference.anchor == Anchor.start:
            start, skip = 0, reference.magnitude
        elif reference.anchor == Anchor.current:
            start, skip = self._prev_index, reference.magnitude + 1
        else:
            start, skip = self._last_index, reference.magnitude

        direction = reference.direction
        found = self.find(predicate, start, skip, direction).next_match()
        if found is None:
            raise ResolutionNotFound(direction)
        return found

    def _locate(self, read_intent: ReadIntent) -> NodeIndex:
        found = self.resolve_reference(read_intent.reference, _PREDICATES[read_intent.target])
        logger.debug(
            "resolved target=%s anchor=%s offset=%d index=%d",
            read_intent.target,
            read_intent.reference.anchor,
            read_intent.reference.offset,
            found.index,
        )
        return found

    def resolve_intent(self, intent: ReadIntent | WriteIntent | MetaIntent) -> IntentResult:
        """Resolve a typed intent against this paper.

        Returns:
            `NodeData` for reads, `WriteStatus` for writes, a formatted sentence for meta queries.

        Raises:
            ResolutionError: If the intent cannot be resolved; session state is left unchanged.
        """

        if isinstance(intent, ReadIntent):
            return self._resolve_read(intent)
        if isinstance(intent, WriteIntent):
            return self._resolve_write(intent)
        if isinstance(intent, MetaIntent):
            return self._resolve_meta(intent)
        raise TypeError(f"Unsupported intent: {type(intent).__name__}")

    def _resolve_read(self, read_intent: ReadIntent) -> NodeData:
        found = self._locate(read_intent)
        self.update_previous(found.index)
        return found.data

    def _resolve_write(self, write_intent: WriteIntent) -> WriteStatus:
        action = write_intent.action
        if not write_intent.reads:
            raise EmptyBatch(action)

        # Every entry is evaluated; only the last one decides the target.
        deciding: NodeIndex | None = None
        failure: ResolutionNotFound | None = None
        for read_intent in write_intent.reads:
            try:
                deciding, failure = self._locate(read_intent), None
            except ResolutionNotFound as exc:
                logger.debug("batch entry unresolved action=%s reason=%s", action, exc)
                deciding, failure = None, exc

        if deciding is None:
            assert failure is not None
            raise BatchResolutionFailed(action, str(failure)) from failure

        writers: dict[WriteAction, Callable[[NodeIndex, WriteIntent], str]] = {
            WriteAction.mark: self._mark,
            WriteAction.skip: self._skip,
            WriteAction.note: self._note,
        }
        message = writers[action](deciding, write_intent)
        logger.info("write action=%s index=%d", action, deciding.index)
        return WriteStatus(action=action, index=deciding.index, message=message)

    def _mark(self, view: NodeIndex, _intent: WriteIntent) -> str:
        self._marked[view.index] = view.data.model_copy(deep=True)
        return f"Marked {view.data.label} for review."

    def _skip(self, view: NodeIndex, _intent: WriteIntent) -> str:
        self._skipped[view.index] = view.data.model_copy(deep=True)
        return f"Skipped {view.data.label}."

    def _note(self, view: NodeIndex, intent: WriteIntent) -> str:
        assert intent.text is not None
        self._notes.append(Note(index=view.index, text=intent.text))
        return f"Added a note to {view.data.label}."

    def _resolve_meta(self, meta_intent: MetaIntent) -> str:
        total = self._total_questions
        questions = _plural(total, "question")
        if meta_intent.query == MetaQuery.marked:
            return f"{self.num_marked} of {total} {questions} marked for review."
        return f"{self.num_skipped} of {total} {questions} skipped."
