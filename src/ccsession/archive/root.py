"""Project root discovery."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def _has_marker(directory: Path, markers: Iterable[str]) -> bool:
    for marker in markers:
        try:
            if (directory / marker).exists():
                return True
        except OSError:
            continue
    return False


def resolve_project_root(start_dir: str | Path, markers: Iterable[str]) -> Path:
    """Walk up from start_dir, return the nearest directory holding a marker.

    Falls back to start_dir itself when no ancestor qualifies, so a fresh
    archive is simply created under the starting directory.
    """
    start = Path(start_dir).expanduser().resolve()
    markers = list(markers)
    p = start
    while True:
        if _has_marker(p, markers):
            logger.debug("Project root: %s", p)
            return p
        if p == p.parent:
            break
        p = p.parent
    logger.debug("No project marker above %s, using it as root", start)
    return start
