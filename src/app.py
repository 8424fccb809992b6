"""Application composition root.

This module wires together configuration and the question paper session for the console runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from src.config.settings import Settings
from src.paper.load_json import load_paper
from src.paper.question_paper import QuestionPaper


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers."""

    settings: Settings
    paper: QuestionPaper


def create_app(settings: Settings, *, paper_path: str | Path | None = None) -> App:
    """Create the application container.

    Raises:
        RuntimeError: If no paper document is configured.
    """

    path = paper_path or settings.paper_path
    if path is None:
        raise RuntimeError("PAPER_PATH is required (set it in .env, environment, or pass --paper)")
    return App(settings=settings, paper=load_paper(path))
