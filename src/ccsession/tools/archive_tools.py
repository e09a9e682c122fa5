"""Tools for agent access to the session log archive.

These functions are designed to be exposed as tools to the AI agent,
allowing it to resume, search and extend its own session history.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from ccsession.archive.assembler import build_report
from ccsession.archive.models import SearchQuery
from ccsession.archive.root import resolve_project_root
from ccsession.archive.search import TopicSearchEngine
from ccsession.archive.store import LogStore
from ccsession.cli import render_report
from ccsession.config import SessionConfig
from ccsession.errors import MalformedNameError


def get_archive_tools(
    start_dir: str | Path, config: SessionConfig | None = None
) -> dict[str, Callable[..., str]]:
    """Return a dict of tool_name -> callable for archive operations.

    These can be registered as MCP tools or called directly.
    """
    config = config or SessionConfig()

    def _store() -> LogStore:
        root = resolve_project_root(start_dir, config.archive.root_markers)
        return LogStore(root, config.archive.dirname)

    def list_sessions(n: int = 10) -> str:
        """List the n most recent session logs, newest first."""
        logs = _store().recent(min(n, config.query.max_recent))
        if not logs:
            return "(no session history yet)"
        return "\n".join(
            f"- {log.created_at.strftime('%d-%m-%Y %H:%M')}  {log.topic}  ({log.filename})"
            for log in logs
        )

    def resume(n: int | None = None, topic: str | None = None) -> str:
        """Project memory, recent session summaries and logs related to topic."""
        query = SearchQuery(
            recent_count=config.query.default_recent if n is None else n,
            topic_keyword=topic,
            max_recent=config.query.max_recent,
        )
        return render_report(build_report(start_dir, query, config))

    def search_sessions(keyword: str) -> str:
        """Find session logs mentioning keyword."""
        matches = TopicSearchEngine(_store(), config.search).search(keyword)
        if not matches:
            return f"(no session logs match {keyword!r})"
        return "\n".join(f"- [{m.reason}] {m.log.filename}  {m.log.outcome}".rstrip() for m in matches)

    def read_session(filename: str, include_raw: bool = False) -> str:
        """Read one session log. The raw transcript is omitted unless asked for."""
        store = _store()
        try:
            log = store.load(store.find(filename), include_raw=include_raw)
        except (OSError, MalformedNameError) as e:
            return f"Error: {e}"
        return log.content if include_raw else log.summary_region

    def save_session(topic: str, content: str) -> str:
        """Archive a finished session log document under topic."""
        try:
            path = _store().write(datetime.now(), topic, content)
        except OSError as e:
            return f"Error: {e}"
        return f"Saved {path.name}"

    return {
        "list_sessions": list_sessions,
        "resume": resume,
        "search_sessions": search_sessions,
        "read_session": read_session,
        "save_session": save_session,
    }
