"""Summary/raw boundary handling and Quick Reference parsing.

A session log is a markdown document whose summary region precedes a line
exactly equal to ``## Raw Session Log``. Everything from that line on is the
raw archive and is only loaded when explicitly asked for.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import frontmatter

from ccsession.errors import NotFoundError

logger = logging.getLogger(__name__)

RAW_MARKER = "## Raw Session Log"
QUICK_REFERENCE_HEADING = "## Quick Reference"

KEYWORDS_LABEL = "**Confidence keywords:**"
PROJECTS_LABEL = "**Projects:**"
OUTCOME_LABEL = "**Outcome:**"

_MARKER_RE = re.compile(rf"^{re.escape(RAW_MARKER)}[ \t\r]*$", re.MULTILINE)
_SECTION_RE = re.compile(r"^## +(.+?)\s*$", re.MULTILINE)
_BULLET_RE = re.compile(r"^\s*(?:[-*+]|\d+\.)\s+(.*\S)")


@dataclass
class QuickReference:
    """Fields parsed from the Quick Reference block of a summary."""

    keywords: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    outcome: str = ""


def _is_marker_line(line: str) -> bool:
    return line.rstrip(" \t\r\n") == RAW_MARKER


def split(content: str) -> tuple[str, str | None]:
    """Split content into (summary_region, raw_region).

    raw_region starts at the first line equal to the marker and runs to the
    end; it is None when the marker is absent.
    """
    match = _MARKER_RE.search(content)
    if not match:
        return content, None
    return content[: match.start()], content[match.start() :]


def read_summary(path: Path) -> str:
    """Read a log's summary region, stopping at the raw marker.

    Raises NotFoundError if the file is gone.
    """
    lines: list[str] = []
    try:
        with path.open(encoding="utf-8", errors="replace", newline="") as f:
            for line in f:
                if _is_marker_line(line):
                    break
                lines.append(line)
    except FileNotFoundError as e:
        raise NotFoundError(path) from e
    return "".join(lines)


def _parse_frontmatter(text: str) -> tuple[dict, str]:
    """Parse optional YAML frontmatter. Returns (metadata, body)."""
    if not text.startswith("---"):
        return {}, text
    try:
        metadata, body = frontmatter.parse(text)
        return dict(metadata), body
    except Exception:
        return {}, text


def _split_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        items = str(value).split(",")
    return [item.strip() for item in items if item and item.strip()]


def _section(text: str, heading: str) -> str | None:
    """Body of a '## heading' section, up to the next '## ' heading."""
    pattern = rf"^{re.escape(heading)}[ \t]*\r?\n(.*?)(?=^## |\Z)"
    match = re.search(pattern, text, re.DOTALL | re.MULTILINE)
    return match.group(1) if match else None


def _label_value(text: str, label: str) -> str:
    pattern = rf"^[ \t]*(?:[-*+][ \t]+)?{re.escape(label)}[ \t]*(.*?)[ \t\r]*$"
    match = re.search(pattern, text, re.MULTILINE | re.IGNORECASE)
    return match.group(1).strip() if match else ""


def parse_quick_reference(summary: str) -> QuickReference:
    """Extract keywords, projects and outcome by their fixed labels.

    Labels are looked up in the Quick Reference section if present, else
    anywhere in the summary. Frontmatter keys fill in values left empty.
    """
    metadata, body = _parse_frontmatter(summary)
    block = _section(body, QUICK_REFERENCE_HEADING)
    if block is None:
        block = body

    ref = QuickReference(
        keywords=_split_list(_label_value(block, KEYWORDS_LABEL)),
        projects=_split_list(_label_value(block, PROJECTS_LABEL)),
        outcome=_label_value(block, OUTCOME_LABEL),
    )
    if not ref.keywords:
        ref.keywords = _split_list(metadata.get("keywords"))
    if not ref.projects:
        ref.projects = _split_list(metadata.get("projects"))
    if not ref.outcome and metadata.get("outcome"):
        ref.outcome = str(metadata["outcome"]).strip()
    return ref


def summary_highlights(summary: str, limit: int = 5) -> list[str]:
    """First bullet points of the summary outside the Quick Reference block.

    Falls back to the first prose lines when the summary has no bullets.
    """
    _, body = _parse_frontmatter(summary)
    highlights: list[str] = []
    prose: list[str] = []
    current_section = ""
    for line in body.splitlines():
        heading = _SECTION_RE.match(line)
        if heading:
            current_section = f"## {heading.group(1)}"
            continue
        if current_section == QUICK_REFERENCE_HEADING:
            continue
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped == "---":
            continue
        bullet = _BULLET_RE.match(line)
        if bullet:
            highlights.append(bullet.group(1))
        elif len(prose) < limit:
            prose.append(stripped)
        if len(highlights) >= limit:
            break
    return highlights or prose
