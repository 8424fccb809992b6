"""Console entrypoint.

Reads one JSON intent per line from stdin and writes one JSON response per line to stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable
from typing import TextIO

from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.paper.question_paper import QuestionPaper
from src.session.handlers import handle_line

logger = logging.getLogger(__name__)


def run(paper: QuestionPaper, lines: Iterable[str], out: TextIO) -> int:
    """Handle every non-blank line and return the number of responses written."""

    handled = 0
    for line in lines:
        if not line.strip():
            continue
        response = handle_line(paper, line)
        out.write(response.model_dump_json(exclude_none=True) + "\n")
        out.flush()
        handled += 1
    return handled


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for an interactive paper session."""

    parser = argparse.ArgumentParser(
        description="Navigate a question paper with JSON intents read from stdin."
    )
    parser.add_argument("--paper", help="Path to the paper JSON document (defaults to PAPER_PATH).")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run.")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)

    app = create_app(settings, paper_path=args.paper)
    handled = run(app.paper, sys.stdin, sys.stdout)
    logger.info(
        "session ended handled=%d marked=%d skipped=%d",
        handled,
        app.paper.num_marked,
        app.paper.num_skipped,
    )


if __name__ == "__main__":
    main()
