"""Document nodes, indexed views, and node-kind predicates.

Nodes are immutable once a paper is built. Predicates classify a node by its kind and are used to
filter the sequence during reference resolution; adding a new node kind means adding a new
predicate class, never editing the existing ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(StrEnum):
    """Supported document node kinds."""

    question = "question"
    section = "section"


class NodeData(BaseModel):
    """Opaque node content handed to the presenter."""

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    label: str
    text: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)


class Node(BaseModel):
    """One element of the paper: a tagged kind plus its content."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: NodeKind
    data: NodeData

    @classmethod
    def question(cls, label: str, text: str = "", **attributes: Any) -> Node:
        return cls(kind=NodeKind.question, data=NodeData(label=label, text=text, attributes=attributes))

    @classmethod
    def section(cls, label: str, text: str = "", **attributes: Any) -> Node:
        return cls(kind=NodeKind.section, data=NodeData(label=label, text=text, attributes=attributes))


@dataclass(frozen=True)
class NodeIndex:
    """A node paired with its absolute position in the sequence (never stored)."""

    index: int
    node: Node

    @property
    def kind(self) -> NodeKind:
        return self.node.kind

    @property
    def data(self) -> NodeData:
        return self.node.data


class Predicate(Protocol):
    """Node classification capability."""

    def matches(self, view: NodeIndex) -> bool:
        """Whether the node behind `view` belongs to this predicate's kind."""


@dataclass(frozen=True)
class QuestionPredicate:
    """Matches question nodes."""

    def matches(self, view: NodeIndex) -> bool:
        return view.kind == NodeKind.question


@dataclass(frozen=True)
class SectionPredicate:
    """Matches section nodes."""

    def matches(self, view: NodeIndex) -> bool:
        return view.kind == NodeKind.section
