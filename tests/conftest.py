"""Pytest configuration.

The repository uses a flat `src/` layout without an installed package. This conftest ensures tests
can import from the `src.*` namespace when running `pytest` locally, and provides a small paper
shaped `[Q, S, Q, Q, S]` shared by the test modules.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.paper.nodes import Node  # noqa: E402
from src.paper.question_paper import QuestionPaper  # noqa: E402


@pytest.fixture()
def nodes() -> list[Node]:
    return [
        Node.question("Question 1", "State Ohm's law."),
        Node.section("Section A"),
        Node.question("Question 2", "Define current.", marks=2),
        Node.question("Question 3"),
        Node.section("Section B"),
    ]


@pytest.fixture()
def paper(nodes: list[Node]) -> QuestionPaper:
    return QuestionPaper.from_nodes(nodes)
