"""Keyword topic search over the session log archive.

Small archives are searched by reading each log's summary region. Once the
archive reaches the scan threshold, a line scan over the raw files picks the
candidates first and only the top few are loaded for classification, so the
full set of summaries is never held in memory.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ccsession.archive.models import SessionLog
from ccsession.archive.store import LogStore
from ccsession.config import SearchConfig

logger = logging.getLogger(__name__)

MatchReason = Literal["topic", "keywords", "summary", "raw"]
Strategy = Literal["summary", "scan"]

# Highest priority first
REASON_PRIORITY: tuple[MatchReason, ...] = ("topic", "keywords", "summary", "raw")


@dataclass
class TopicMatch:
    """A log that matched a keyword, with the best field it matched on."""

    log: SessionLog
    reason: MatchReason

    @property
    def path(self) -> Path:
        return self.log.path


def classify(log: SessionLog, keyword: str) -> MatchReason | None:
    """Highest-priority field of a loaded log containing keyword."""
    q = keyword.lower()
    if q in log.topic.lower():
        return "topic"
    if any(q in kw.lower() for kw in log.keywords):
        return "keywords"
    if log.summary_region and q in log.summary_region.lower():
        return "summary"
    return None


def _normalize(paths: Iterable[str | Path]) -> set[Path]:
    return {Path(p).resolve() for p in paths}


class TopicSearchEngine:
    """Find logs matching a keyword, choosing a strategy by archive size."""

    def __init__(self, store: LogStore, config: SearchConfig | None = None) -> None:
        self.store = store
        self.config = config or SearchConfig()
        self.last_strategy: Strategy | None = None
        self.summaries_loaded = 0

    def search(
        self, keyword: str, known_recent_paths: Iterable[str | Path] = ()
    ) -> list[TopicMatch]:
        """Logs matching keyword, newest first, excluding known_recent_paths."""
        self.summaries_loaded = 0
        keyword = (keyword or "").strip()
        if not keyword:
            return []

        known = _normalize(known_recent_paths)
        logs = self.store.list()
        if len(logs) < self.config.scan_threshold:
            self.last_strategy = "summary"
            logger.debug("Summary search for %r over %d logs", keyword, len(logs))
            return self._search_summaries(logs, keyword, known)

        self.last_strategy = "scan"
        logger.debug("Line scan for %r over %d logs", keyword, len(logs))
        return self._search_scan(logs, keyword, known)

    # ── Strategies ────────────────────────────────────────────

    def _load_summary(self, log: SessionLog) -> SessionLog | None:
        try:
            self.store.load(log, include_raw=False)
        except OSError as e:
            logger.warning("Skipping unreadable log %s: %s", log.path, e)
            return None
        self.summaries_loaded += 1
        return log

    def _search_summaries(
        self, logs: list[SessionLog], keyword: str, known: set[Path]
    ) -> list[TopicMatch]:
        matches: list[TopicMatch] = []
        for log in logs:
            if log.path.resolve() in known:
                continue
            if self._load_summary(log) is None:
                continue
            reason = classify(log, keyword)
            if reason:
                matches.append(TopicMatch(log=log, reason=reason))
        return matches

    def _search_scan(
        self, logs: list[SessionLog], keyword: str, known: set[Path]
    ) -> list[TopicMatch]:
        q = keyword.lower()
        hits = [
            log for log in logs if q in log.topic.lower() or self._scan_file(log.path, keyword)
        ]
        candidates = [log for log in hits if log.path.resolve() not in known]
        candidates = candidates[: self.config.scan_limit]

        matches: list[TopicMatch] = []
        for log in candidates:
            if self._load_summary(log) is None:
                continue
            matches.append(TopicMatch(log=log, reason=classify(log, keyword) or "raw"))
        return matches

    @staticmethod
    def _scan_file(path: Path, keyword: str) -> bool:
        """Case-insensitive line scan of a file, like `grep -il`."""
        q = keyword.lower()
        try:
            with path.open("rb") as f:
                for raw_line in f:
                    if q in raw_line.decode("utf-8", errors="replace").lower():
                        return True
        except OSError as e:
            logger.warning("Skipping unreadable log %s: %s", path, e)
        return False
