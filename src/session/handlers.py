"""Intent handlers: the response boundary between the paper and a presenter.

Hard contract: every intent produces exactly one `Response`. Resolution failures and unsupported
input become `ok=False` responses with a human-readable message; details of internal errors are
logged, never returned.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from time import monotonic

from pydantic import BaseModel, ConfigDict, ValidationError

from src.intent.schema import MetaIntent, ReadIntent, WriteIntent, intent_from_json
from src.paper.errors import ResolutionError
from src.paper.nodes import NodeData
from src.paper.question_paper import QuestionPaper, WriteStatus

logger = logging.getLogger(__name__)


class ResponseKind(StrEnum):
    """What a response carries."""

    node = "node"
    status = "status"
    meta = "meta"
    error = "error"


class Response(BaseModel):
    """Tagged outcome of one intent, ready for rendering."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ok: bool
    kind: ResponseKind
    message: str
    data: NodeData | None = None
    index: int | None = None


def _error(message: str) -> Response:
    return Response(ok=False, kind=ResponseKind.error, message=message)


def handle_intent(paper: QuestionPaper, intent: ReadIntent | WriteIntent | MetaIntent) -> Response:
    """Resolve `intent` against `paper` and wrap the outcome in a `Response`."""

    started = monotonic()
    try:
        result = paper.resolve_intent(intent)
    except ResolutionError as exc:
        latency_ms = int((monotonic() - started) * 1000)
        logger.info("unresolved kind=%s reason=%s latency_ms=%d", intent.kind, exc, latency_ms)
        return _error(str(exc))

    latency_ms = int((monotonic() - started) * 1000)
    logger.info("handled kind=%s latency_ms=%d", intent.kind, latency_ms)

    if isinstance(result, NodeData):
        return Response(
            ok=True,
            kind=ResponseKind.node,
            message=result.label,
            data=result,
            index=paper.prev_index,
        )
    if isinstance(result, WriteStatus):
        return Response(ok=True, kind=ResponseKind.status, message=result.message, index=result.index)
    return Response(ok=True, kind=ResponseKind.meta, message=result)


def handle_line(paper: QuestionPaper, raw: str) -> Response:
    """Decode one JSON intent and handle it; never raises."""

    try:
        intent = intent_from_json(raw)
    except ValidationError as exc:
        logger.info("unsupported intent errors=%d", exc.error_count())
        return _error("unsupported intent")

    # noinspection PyBroadException
    try:
        return handle_intent(paper, intent)
    except Exception:
        # Handler boundary: internal errors become a generic failure without leaking details.
        logger.exception("handler failed")
        return _error("internal error")
