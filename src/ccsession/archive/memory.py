"""Read-only snapshot of the project memory document (CLAUDE.md)."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import frontmatter

from ccsession.config import DEFAULT_MEMORY_FILES

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^## +(.+?)[ \t\r]*$", re.MULTILINE)
_TITLE_RE = re.compile(r"^# +(.+?)[ \t\r]*$", re.MULTILINE)


@dataclass
class MemorySnapshot:
    """Project memory as read at the start of a retrieval."""

    path: Path
    content: str
    title: str = ""
    metadata: dict = field(default_factory=dict)
    sections: dict[str, str] = field(default_factory=dict)

    def section(self, name: str) -> str:
        """Body of a '## name' section (case-insensitive), or ''."""
        for heading, body in self.sections.items():
            if heading.lower() == name.lower():
                return body
        return ""


def find_memory_file(root: Path, memory_files: Iterable[str] = DEFAULT_MEMORY_FILES) -> Path | None:
    """First existing memory file under root, in configured order."""
    for name in memory_files:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def parse_memory(path: Path, text: str) -> MemorySnapshot:
    metadata: dict = {}
    body = text
    if text.startswith("---"):
        try:
            post = frontmatter.loads(text)
            metadata, body = dict(post.metadata), post.content
        except Exception:
            logger.warning("Ignoring unparseable frontmatter in %s", path)

    title_match = _TITLE_RE.search(body)
    sections: dict[str, str] = {}
    matches = list(_SECTION_RE.finditer(body))
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(body)
        sections[match.group(1)] = body[match.end() : end].strip()

    return MemorySnapshot(
        path=path,
        content=text,
        title=title_match.group(1) if title_match else "",
        metadata=metadata,
        sections=sections,
    )


def load_project_memory(
    root: Path, memory_files: Iterable[str] = DEFAULT_MEMORY_FILES
) -> MemorySnapshot | None:
    """Load the project memory, or None when no memory file exists."""
    path = find_memory_file(root, memory_files)
    if path is None:
        logger.info("No project memory under %s", root)
        return None
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Cannot read project memory %s: %s", path, e)
        return None
    return parse_memory(path, text)
