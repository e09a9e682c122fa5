"""Resume-time context assembly: project memory + recent logs + topic matches."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ccsession.archive import document
from ccsession.archive.memory import MemorySnapshot, load_project_memory
from ccsession.archive.models import SearchQuery, SessionLog
from ccsession.archive.root import resolve_project_root
from ccsession.archive.search import TopicMatch, TopicSearchEngine
from ccsession.archive.store import LogStore
from ccsession.config import SessionConfig

logger = logging.getLogger(__name__)

HIGHLIGHT_LIMIT = 5


@dataclass
class LogDigest:
    """One-line view of a log: date, topic, outcome."""

    path: Path
    created_at: datetime
    topic: str
    outcome: str = ""

    @classmethod
    def from_log(cls, log: SessionLog) -> LogDigest:
        return cls(path=log.path, created_at=log.created_at, topic=log.topic, outcome=log.outcome)


@dataclass
class LatestSession(LogDigest):
    """The most recent log, with its Quick Reference and summary highlights."""

    keywords: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)


@dataclass
class RelatedLog(LogDigest):
    reason: str = ""


@dataclass
class SessionReport:
    """Structured retrieval report. Rendering is left to the caller."""

    root: Path
    memory: MemorySnapshot | None
    latest: LatestSession | None = None
    earlier: list[LogDigest] = field(default_factory=list)
    related: list[RelatedLog] | None = None
    topic: str | None = None
    requested: int = 0
    found: int = 0
    archive_size: int = 0
    notes: list[str] = field(default_factory=list)

    @property
    def memory_missing(self) -> bool:
        return self.memory is None

    @property
    def no_history(self) -> bool:
        return self.archive_size == 0


class SessionContextAssembler:
    """Compose a SessionReport from already-gathered pieces."""

    def __init__(self, store: LogStore) -> None:
        self.store = store

    def _load_recent(self, recent_logs: list[SessionLog], notes: list[str]) -> list[SessionLog]:
        loaded: list[SessionLog] = []
        for log in recent_logs:
            if not log.loaded:
                try:
                    self.store.load(log, include_raw=False)
                except OSError as e:
                    logger.warning("Cannot read recent log %s: %s", log.path, e)
                    notes.append(f"{log.filename} could not be read")
                    continue
            loaded.append(log)
        return loaded

    def assemble(
        self,
        memory: MemorySnapshot | None,
        recent_logs: list[SessionLog],
        topic_matches: list[TopicMatch] | None = None,
        query: SearchQuery | None = None,
        archive_size: int | None = None,
    ) -> SessionReport:
        query = query or SearchQuery(recent_count=len(recent_logs))
        if archive_size is None:
            archive_size = self.store.count()

        report = SessionReport(
            root=self.store.root,
            memory=memory,
            topic=query.topic_keyword,
            requested=query.recent_count,
            archive_size=archive_size,
        )
        if memory is None:
            report.notes.append("no project memory found")
        if archive_size == 0:
            report.notes.append("no session history yet")
        if query.capped:
            report.notes.append(f"recent count capped at {query.max_recent}")

        recent = self._load_recent(recent_logs, report.notes)
        report.found = len(recent)
        if recent:
            first = recent[0]
            report.latest = LatestSession(
                path=first.path,
                created_at=first.created_at,
                topic=first.topic,
                outcome=first.outcome,
                keywords=list(first.keywords),
                projects=list(first.projects),
                highlights=document.summary_highlights(first.summary_region or "", HIGHLIGHT_LIMIT),
            )
            report.earlier = [LogDigest.from_log(log) for log in recent[1:]]
        if archive_size and report.found < report.requested:
            report.notes.append(f"found {report.found}, requested {report.requested}")

        if query.topic_keyword is not None:
            recent_paths = {log.path.resolve() for log in recent_logs}
            report.related = [
                RelatedLog(
                    path=m.log.path,
                    created_at=m.log.created_at,
                    topic=m.log.topic,
                    outcome=m.log.outcome,
                    reason=m.reason,
                )
                for m in topic_matches or []
                if m.path.resolve() not in recent_paths
            ]
            if not report.related:
                report.notes.append(f"no other logs matched {query.topic_keyword!r}")
        return report


def build_report(
    start_dir: str | Path,
    query: SearchQuery | None = None,
    config: SessionConfig | None = None,
) -> SessionReport:
    """Full read path: resolve root, load memory, list, search, assemble."""
    config = config or SessionConfig()
    query = query or SearchQuery(
        recent_count=config.query.default_recent, max_recent=config.query.max_recent
    )
    root = resolve_project_root(start_dir, config.archive.root_markers)
    store = LogStore(root, config.archive.dirname)

    memory = load_project_memory(root, config.archive.memory_files)
    logs = store.list()
    recent = logs[: query.recent_count]

    matches: list[TopicMatch] | None = None
    if query.topic_keyword:
        engine = TopicSearchEngine(store, config.search)
        matches = engine.search(query.topic_keyword, [log.path for log in recent])

    return SessionContextAssembler(store).assemble(
        memory, recent, matches, query, archive_size=len(logs)
    )
