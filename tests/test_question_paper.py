"""Tests for reference resolution, the intent dispatcher, and session state."""

from __future__ import annotations

import pytest

from src.intent.schema import MetaIntent, ReadIntent, Reference, WriteAction, WriteIntent
from src.paper.errors import BatchResolutionFailed, EmptyBatch, ResolutionNotFound
from src.paper.find import Direction
from src.paper.nodes import Node, NodeData, QuestionPredicate, SectionPredicate
from src.paper.question_paper import QuestionPaper, WriteStatus

Q = ReadIntent.question
S = ReadIntent.section


def test_from_nodes_derives_bounds(paper: QuestionPaper) -> None:
    assert len(paper) == 5
    assert paper.last_index == 4
    assert paper.total_questions == 3
    assert paper.prev_index == 0


def test_construction_validates_bounds(nodes: list[Node]) -> None:
    with pytest.raises(ValueError):
        QuestionPaper([], last_index=0, total_questions=0)
    with pytest.raises(ValueError):
        QuestionPaper(nodes, last_index=5, total_questions=3)
    with pytest.raises(ValueError):
        QuestionPaper(nodes, last_index=-1, total_questions=3)
    with pytest.raises(ValueError):
        QuestionPaper(nodes, last_index=4, total_questions=-1)


def test_total_questions_is_trusted_as_supplied(nodes: list[Node]) -> None:
    paper = QuestionPaper(nodes, last_index=4, total_questions=40)
    assert paper.total_questions == 40


def test_nth_returns_indexed_view_or_none(paper: QuestionPaper) -> None:
    view = paper.nth(2)
    assert view is not None
    assert view.index == 2
    assert view.data.label == "Question 2"
    assert paper.nth(5) is None
    assert paper.nth(-1) is None


def test_forward_from_start(paper: QuestionPaper) -> None:
    assert paper.resolve_reference(Reference.start(0), QuestionPredicate()).index == 0
    assert paper.resolve_reference(Reference.start(1), QuestionPredicate()).index == 2


def test_start_offset_sign_is_ignored(paper: QuestionPaper) -> None:
    assert paper.resolve_reference(Reference.start(-1), QuestionPredicate()).index == 2


def test_current_moves_past_cursor(paper: QuestionPaper) -> None:
    paper.resolve_intent(Q(Reference.start(1)))
    assert paper.prev_index == 2

    assert paper.resolve_reference(Reference.current(0), QuestionPredicate()).index == 3

    data = paper.resolve_intent(Q(Reference.current(0)))
    assert data.label == "Question 3"
    assert paper.prev_index == 3


def test_current_backward_passes_over_cursor_node(paper: QuestionPaper) -> None:
    paper.resolve_intent(Q(Reference.start(2)))
    assert paper.prev_index == 3

    # Skips the node under the cursor plus one more question.
    assert paper.resolve_reference(Reference.current(-1), QuestionPredicate()).index == 0


def test_backward_from_end(paper: QuestionPaper) -> None:
    assert paper.resolve_reference(Reference.end(0), SectionPredicate()).index == 4
    assert paper.resolve_reference(Reference.end(1), SectionPredicate()).index == 1


def test_end_uses_supplied_last_index(nodes: list[Node]) -> None:
    paper = QuestionPaper(nodes, last_index=2, total_questions=3)
    assert paper.resolve_reference(Reference.end(0), SectionPredicate()).index == 1
    assert paper.resolve_reference(Reference.end(0), QuestionPredicate()).index == 2


def test_not_found_leaves_cursor_unchanged(paper: QuestionPaper) -> None:
    paper.resolve_intent(Q(Reference.start(1)))

    with pytest.raises(ResolutionNotFound) as excinfo:
        paper.resolve_intent(Q(Reference.start(10)))

    assert excinfo.value.direction == Direction.forward
    assert "next" in str(excinfo.value)
    assert paper.prev_index == 2


def test_backward_not_found_names_direction(paper: QuestionPaper) -> None:
    with pytest.raises(ResolutionNotFound) as excinfo:
        paper.resolve_intent(S(Reference.end(5)))

    assert excinfo.value.direction == Direction.backward
    assert "previous" in str(excinfo.value)


def test_read_returns_node_data(paper: QuestionPaper) -> None:
    data = paper.resolve_intent(S(Reference.start(1)))

    assert data == NodeData(label="Section B")
    assert paper.prev_index == 4


def test_marking_same_index_twice_keeps_one_entry(paper: QuestionPaper) -> None:
    paper.resolve_intent(WriteIntent.mark(Q(Reference.start(0))))
    paper.resolve_intent(WriteIntent.mark(Q(Reference.start(0))))

    assert paper.num_marked == 1
    assert list(paper.marked) == [0]


def test_write_batch_uses_last_entry_only(paper: QuestionPaper) -> None:
    status = paper.resolve_intent(WriteIntent.mark(Q(Reference.start(0)), S(Reference.start(0))))

    assert isinstance(status, WriteStatus)
    assert status.action == WriteAction.mark
    assert status.index == 1
    assert list(paper.marked) == [1]


def test_write_batch_ignores_earlier_failures(paper: QuestionPaper) -> None:
    paper.resolve_intent(WriteIntent.mark(Q(Reference.start(10)), S(Reference.start(0))))

    assert list(paper.marked) == [1]


def test_write_batch_fails_when_last_entry_fails(paper: QuestionPaper) -> None:
    with pytest.raises(BatchResolutionFailed) as excinfo:
        paper.resolve_intent(WriteIntent.mark(S(Reference.start(0)), Q(Reference.start(10))))

    assert isinstance(excinfo.value.__cause__, ResolutionNotFound)
    assert paper.num_marked == 0


def test_empty_batch_is_rejected(paper: QuestionPaper) -> None:
    with pytest.raises(EmptyBatch):
        paper.resolve_intent(WriteIntent.skip())

    assert paper.num_skipped == 0


def test_marked_stores_snapshot(paper: QuestionPaper) -> None:
    paper.resolve_intent(WriteIntent.mark(Q(Reference.start(1))))

    snapshot = paper.marked[2]
    assert snapshot == paper.nodes[2].data
    assert snapshot is not paper.nodes[2].data
    assert snapshot.attributes is not paper.nodes[2].data.attributes


def test_skip_records_index(paper: QuestionPaper) -> None:
    status = paper.resolve_intent(WriteIntent.skip(Q(Reference.end(0))))

    assert status.message == "Skipped Question 3."
    assert dict(paper.skipped) == {3: NodeData(label="Question 3")}


def test_notes_preserve_order_per_index(paper: QuestionPaper) -> None:
    paper.resolve_intent(WriteIntent.note("check units", Q(Reference.start(1))))
    paper.resolve_intent(WriteIntent.note("revisit", Q(Reference.start(0))))
    paper.resolve_intent(WriteIntent.note("show working", Q(Reference.start(1))))

    assert paper.notes_for(2) == ["check units", "show working"]
    assert paper.notes_for(0) == ["revisit"]
    assert [note.index for note in paper.notes] == [2, 0, 2]


def test_meta_counts(paper: QuestionPaper) -> None:
    paper.resolve_intent(WriteIntent.mark(Q(Reference.start(0))))
    paper.resolve_intent(WriteIntent.mark(Q(Reference.start(1))))
    paper.resolve_intent(WriteIntent.skip(Q(Reference.start(2))))

    assert paper.resolve_intent(MetaIntent.marked()) == "2 of 3 questions marked for review."
    assert paper.resolve_intent(MetaIntent.skipped()) == "1 of 3 questions skipped."


def test_meta_uses_singular_for_one_question() -> None:
    paper = QuestionPaper.from_nodes([Node.question("Question 1")])
    assert paper.resolve_intent(MetaIntent.skipped()) == "0 of 1 question skipped."


def test_only_successful_reads_move_cursor(paper: QuestionPaper) -> None:
    paper.resolve_intent(Q(Reference.start(1)))
    assert paper.prev_index == 2

    paper.resolve_intent(WriteIntent.mark(S(Reference.end(0))))
    paper.resolve_intent(WriteIntent.note("later", Q(Reference.current(0))))
    paper.resolve_intent(MetaIntent.marked())
    with pytest.raises(ResolutionNotFound):
        paper.resolve_intent(S(Reference.current(5)))
    assert paper.prev_index == 2

    paper.resolve_intent(Q(Reference.current(0)))
    assert paper.prev_index == 3


def test_write_batch_entries_resolve_against_same_cursor(paper: QuestionPaper) -> None:
    paper.resolve_intent(Q(Reference.start(0)))

    status = paper.resolve_intent(WriteIntent.mark(Q(Reference.current(0)), Q(Reference.current(0))))

    assert status.index == 2
    assert paper.prev_index == 0
