"""Intent JSON schema (Pydantic models).

This schema is the contract between an external intent parser (voice/text/CLI) and the question
paper. Only values validated against these models are dispatched; anything else is treated as
unsupported.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from src.paper.find import Direction


class Anchor(StrEnum):
    """Where a relative reference is anchored."""

    start = "start"
    current = "current"
    end = "end"


class ReadTarget(StrEnum):
    """Node kind a read intent navigates to."""

    question = "question"
    section = "section"


class WriteAction(StrEnum):
    """Supported annotation actions."""

    mark = "mark"
    skip = "skip"
    note = "note"


class MetaQuery(StrEnum):
    """Supported session queries."""

    marked = "marked"
    skipped = "skipped"


class Reference(BaseModel):
    """A relative address: an anchor plus a signed offset.

    `start` always searches forward and `end` always backward; for both, the sign of the offset is
    ignored. `current` searches forward for `offset >= 0` and backward otherwise.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    anchor: Anchor
    offset: int = 0

    @classmethod
    def start(cls, offset: int = 0) -> Reference:
        return cls(anchor=Anchor.start, offset=offset)

    @classmethod
    def current(cls, offset: int = 0) -> Reference:
        return cls(anchor=Anchor.current, offset=offset)

    @classmethod
    def end(cls, offset: int = 0) -> Reference:
        return cls(anchor=Anchor.end, offset=offset)

    @property
    def direction(self) -> Direction:
        if self.anchor == Anchor.end:
            return Direction.backward
        if self.anchor == Anchor.current and self.offset < 0:
            return Direction.backward
        return Direction.forward

    @property
    def magnitude(self) -> int:
        return abs(self.offset)


class ReadIntent(BaseModel):
    """Locate a single node; advances the cursor on success."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["read"] = "read"
    target: ReadTarget
    reference: Reference

    @classmethod
    def question(cls, reference: Reference) -> ReadIntent:
        return cls(target=ReadTarget.question, reference=reference)

    @classmethod
    def section(cls, reference: Reference) -> ReadIntent:
        return cls(target=ReadTarget.section, reference=reference)


class WriteIntent(BaseModel):
    """Annotate the node located by the last read intent of `reads`.

    All entries are evaluated in order, but only the final one decides the target.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    kind: Literal["write"] = "write"
    action: WriteAction
    reads: list[ReadIntent] = Field(default_factory=list)
    text: str | None = None

    @model_validator(mode="after")
    def validate_text(self) -> WriteIntent:
        """Notes require text; marks and skips must not carry any."""

        if self.action == WriteAction.note:
            if not self.text:
                raise ValueError("text is required for action=note")
        elif self.text is not None:
            raise ValueError(f"text is not allowed for action={self.action}")
        return self

    @classmethod
    def mark(cls, *reads: ReadIntent) -> WriteIntent:
        return cls(action=WriteAction.mark, reads=list(reads))

    @classmethod
    def skip(cls, *reads: ReadIntent) -> WriteIntent:
        return cls(action=WriteAction.skip, reads=list(reads))

    @classmethod
    def note(cls, text: str, *reads: ReadIntent) -> WriteIntent:
        return cls(action=WriteAction.note, reads=list(reads), text=text)


class MetaIntent(BaseModel):
    """Query session counters without touching the cursor."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["meta"] = "meta"
    query: MetaQuery

    @classmethod
    def marked(cls) -> MetaIntent:
        return cls(query=MetaQuery.marked)

    @classmethod
    def skipped(cls) -> MetaIntent:
        return cls(query=MetaQuery.skipped)


Intent = Annotated[ReadIntent | WriteIntent | MetaIntent, Field(discriminator="kind")]

_INTENT_ADAPTER: TypeAdapter[Intent] = TypeAdapter(Intent)


def intent_from_obj(obj: Any) -> ReadIntent | WriteIntent | MetaIntent:
    """Validate and parse an Intent from an arbitrary decoded JSON object."""

    return _INTENT_ADAPTER.validate_python(obj)


def intent_from_json(raw: str | bytes) -> ReadIntent | WriteIntent | MetaIntent:
    """Validate and parse an Intent from a JSON document."""

    return _INTENT_ADAPTER.validate_json(raw)
