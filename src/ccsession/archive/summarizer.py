"""Compress workflow: summarizer prompt building, draft parsing, log rendering.

Deciding what to preserve is left to an injected Summarizer (usually an
LLM). This module only turns its draft into a finished log document and
hands it to the LogStore.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from ccsession.archive import document
from ccsession.archive.memory import MemorySnapshot, load_project_memory
from ccsession.archive.root import resolve_project_root
from ccsession.archive.store import LogStore
from ccsession.config import SessionConfig

logger = logging.getLogger(__name__)

COMPRESS_PROMPT_TEMPLATE = """\
You are archiving a finished work session so it can be resumed later
without replaying the transcript. Read the conversation below and produce
a compact summary.

## Project memory
{project_memory}

## Conversation
{transcript}

## Respond with a single JSON object
  - topic: 2-6 word subject, lowercase, hyphen-separated
  - keywords: list of terms someone might later search for
  - projects: list of project or repository names touched
  - outcome: one line, what was achieved or where it stopped
  - summary: markdown with "## Decisions", "## Changes" and "## Next Steps" sections
"""


@dataclass
class SessionDraft:
    """Summarizer output for one session."""

    topic: str
    summary_markdown: str = ""
    keywords: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    outcome: str = ""


@runtime_checkable
class Summarizer(Protocol):
    """Anything that can turn a raw transcript into a SessionDraft."""

    def summarize(self, transcript: str) -> SessionDraft: ...


def build_compress_prompt(transcript: str, memory: MemorySnapshot | None = None) -> str:
    """Build the prompt handed to an LLM summarizer."""
    return COMPRESS_PROMPT_TEMPLATE.format(
        project_memory=memory.content.strip() if memory else "(none)",
        transcript=transcript,
    )


def _as_list(value: object) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if str(v).strip()]


def parse_draft_response(response_text: str) -> SessionDraft:
    """Parse a summarizer's JSON reply. Raises ValueError if none is found."""
    text = response_text.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Try to extract JSON from surrounding prose or a code fence
        match = re.search(r"\{.*\}", text, re.DOTALL)
        if not match:
            raise ValueError("No JSON object in summarizer response") from None
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError as e:
            raise ValueError(f"Unparseable summarizer response: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Summarizer response is not a JSON object")

    return SessionDraft(
        topic=str(data.get("topic", "")).strip() or "session",
        summary_markdown=str(data.get("summary", "")).strip(),
        keywords=_as_list(data.get("keywords", [])),
        projects=_as_list(data.get("projects", [])),
        outcome=str(data.get("outcome", "")).strip(),
    )


def render_log_document(draft: SessionDraft, transcript: str, timestamp: datetime) -> str:
    """Render a draft and its transcript as a session log document."""
    title = draft.topic.replace("-", " ").strip().capitalize() or "Session"
    lines = [
        f"# Session: {title}",
        "",
        f"*{timestamp.strftime('%d-%m-%Y %H:%M')}*",
        "",
        document.QUICK_REFERENCE_HEADING,
        "",
        f"{document.KEYWORDS_LABEL} {', '.join(draft.keywords)}",
        f"{document.PROJECTS_LABEL} {', '.join(draft.projects)}",
        f"{document.OUTCOME_LABEL} {draft.outcome}",
        "",
    ]
    if draft.summary_markdown:
        lines += [draft.summary_markdown.strip(), ""]
    lines += [document.RAW_MARKER, "", transcript.rstrip(), ""]
    return "\n".join(lines)


def compress(
    start_dir: str | Path,
    transcript: str,
    *,
    draft: SessionDraft | None = None,
    summarizer: Summarizer | None = None,
    config: SessionConfig | None = None,
    now: datetime | None = None,
) -> Path:
    """Summarize a transcript (or use a given draft) and archive it."""
    if draft is None:
        if summarizer is None:
            raise ValueError("compress() needs a draft or a summarizer")
        draft = summarizer.summarize(transcript)

    config = config or SessionConfig()
    now = now or datetime.now()
    root = resolve_project_root(start_dir, config.archive.root_markers)
    content = render_log_document(draft, transcript, now)
    path = LogStore(root, config.archive.dirname).write(now, draft.topic, content)
    logger.info("Archived session %r under %s", draft.topic, root)
    return path


def memory_for(start_dir: str | Path, config: SessionConfig | None = None) -> MemorySnapshot | None:
    """Project memory for the prompt, resolved from start_dir."""
    config = config or SessionConfig()
    root = resolve_project_root(start_dir, config.archive.root_markers)
    return load_project_memory(root, config.archive.memory_files)
