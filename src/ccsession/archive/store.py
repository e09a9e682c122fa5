"""Write-once session log storage under {project_root}/CC-Session-Logs/.

Filenames are the source of truth for date and topic. Writes go to a temp
file in the archive directory and are published with a hard link, which
fails instead of replacing an existing log; on collision a numeric
disambiguator is appended.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from ccsession.archive import document, naming
from ccsession.archive.models import SessionLog
from ccsession.config import DEFAULT_ARCHIVE_DIRNAME
from ccsession.errors import MalformedNameError, NotFoundError

logger = logging.getLogger(__name__)

_TEMP_PREFIX = ".tmp-"
_MAX_DISAMBIGUATOR = 10_000


class LogStore:
    """Create, list and read session logs for one project root."""

    def __init__(self, root: Path, dirname: str = DEFAULT_ARCHIVE_DIRNAME) -> None:
        self.root = Path(root)
        self.archive_dir = self.root / dirname

    # ── Write ─────────────────────────────────────────────────

    def _ensure_archive_dir(self) -> None:
        """Create the archive directory. Idempotent."""
        self.archive_dir.mkdir(parents=True, exist_ok=True)

    def _candidate_names(self, filename: str):
        yield filename
        for counter in range(2, _MAX_DISAMBIGUATOR):
            yield naming.with_disambiguator(filename, counter)

    def write(self, timestamp: datetime, topic: str, content: str) -> Path:
        """Write a new log and return its path. Never overwrites."""
        self._ensure_archive_dir()
        filename = naming.encode(timestamp, topic)

        fd, temp_path_str = tempfile.mkstemp(
            suffix=".md.part", prefix=_TEMP_PREFIX, dir=str(self.archive_dir)
        )
        temp_path = Path(temp_path_str)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_path, 0o644)
            for name in self._candidate_names(filename):
                target = self.archive_dir / name
                try:
                    os.link(temp_path, target)
                except FileExistsError:
                    logger.debug("Log name taken, trying next: %s", name)
                    continue
                logger.info("Wrote session log %s (%d chars)", target.name, len(content))
                return target
            raise FileExistsError(f"No free name for {filename} in {self.archive_dir}")
        finally:
            temp_path.unlink(missing_ok=True)

    # ── Read ──────────────────────────────────────────────────

    def list(self) -> list[SessionLog]:
        """All well-formed logs, newest first. Content is not loaded."""
        if not self.archive_dir.is_dir():
            return []
        logs: list[SessionLog] = []
        for path in self.archive_dir.glob("*.md"):
            if path.name.startswith(_TEMP_PREFIX) or not path.is_file():
                continue
            try:
                created_at, topic = naming.decode(path.name)
            except MalformedNameError as e:
                logger.warning("Skipping %s", e)
                continue
            logs.append(SessionLog(path=path, created_at=created_at, topic=topic))
        logs.sort(key=lambda log: (log.created_at, log.filename), reverse=True)
        return logs

    def count(self) -> int:
        return len(self.list())

    def recent(self, n: int) -> list[SessionLog]:
        return self.list()[: max(n, 0)]

    def read(self, path: Path) -> str:
        """Full content of a log. Raises NotFoundError if it vanished."""
        try:
            with Path(path).open(encoding="utf-8", errors="replace", newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise NotFoundError(path) from e

    def load(self, log: SessionLog, include_raw: bool = True) -> SessionLog:
        """Populate a listed log's content fields.

        With include_raw=False only the summary region is read from disk.
        """
        if include_raw:
            content = self.read(log.path)
            summary, raw = document.split(content)
        else:
            summary = document.read_summary(log.path)
            content, raw = None, None
        ref = document.parse_quick_reference(summary)
        log.content = content
        log.summary_region = summary
        log.raw_region = raw
        log.keywords = ref.keywords
        log.projects = ref.projects
        log.outcome = ref.outcome
        return log

    def find(self, filename: str) -> SessionLog:
        """Look up a log by filename. Raises NotFoundError if absent."""
        path = self.archive_dir / Path(filename).name
        if not path.is_file():
            raise NotFoundError(path)
        created_at, topic = naming.decode(path.name)
        return SessionLog(path=path, created_at=created_at, topic=topic)
