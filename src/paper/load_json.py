"""Load an already-built node sequence from JSON.

The document is expected to be a JSON object with a top-level key `"nodes"` containing a list of
node objects (`{"kind": ..., "data": {...}}`). Optional `"last_index"` and `"total_questions"` keys
override the values derived from the node list.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.paper.nodes import Node, NodeKind
from src.paper.question_paper import QuestionPaper

logger = logging.getLogger(__name__)


class PaperDocument(BaseModel):
    """Validated shape of a node sequence document."""

    model_config = ConfigDict(extra="forbid")

    nodes: list[Node] = Field(min_length=1)
    last_index: int | None = None
    total_questions: int | None = None


def paper_from_obj(payload: Any) -> QuestionPaper:
    """Build a `QuestionPaper` from a decoded JSON object.

    Raises:
        ValueError: If the payload does not match the expected document format.
    """

    if not isinstance(payload, dict) or not isinstance(payload.get("nodes"), list):
        raise ValueError("Unexpected paper format: expected object with key 'nodes' containing a list")

    try:
        document = PaperDocument.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid paper document: {exc}") from exc

    nodes = document.nodes
    last_index = document.last_index if document.last_index is not None else len(nodes) - 1
    total_questions = document.total_questions
    if total_questions is None:
        total_questions = sum(1 for node in nodes if node.kind == NodeKind.question)

    return QuestionPaper(nodes, last_index=last_index, total_questions=total_questions)


def load_paper(path: str | Path) -> QuestionPaper:
    """Read a node sequence document from disk and build a `QuestionPaper`."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    paper = paper_from_obj(payload)
    logger.info(
        "loaded paper path=%s nodes=%d total_questions=%d",
        path,
        len(paper),
        paper.total_questions,
    )
    return paper
