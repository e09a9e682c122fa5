"""Entry point: python -m ccsession <command>

- resume: project memory + recent session summaries (default)
- list / search / show: browse the archive
- save / prompt: compress workflow helpers
"""

from __future__ import annotations

import logging
import sys

from ccsession.cli import build_parser
from ccsession.config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    _setup_logging(config.log_level)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
