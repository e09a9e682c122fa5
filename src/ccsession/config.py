"""Configuration loading from environment variables and ccsession.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_CONFIG_FILENAME = "ccsession.toml"

DEFAULT_ARCHIVE_DIRNAME = "CC-Session-Logs"
DEFAULT_MEMORY_FILES = ("CLAUDE.md", ".claude/CLAUDE.md", "claude.md", "CLAUDE.local.md")


def _default_markers() -> list[str]:
    return [*DEFAULT_MEMORY_FILES, DEFAULT_ARCHIVE_DIRNAME, ".git"]


@dataclass
class ArchiveConfig:
    """Where logs and project memory live, relative to the project root."""

    dirname: str = DEFAULT_ARCHIVE_DIRNAME
    memory_files: list[str] = field(default_factory=lambda: list(DEFAULT_MEMORY_FILES))
    root_markers: list[str] = field(default_factory=_default_markers)


@dataclass
class SearchConfig:
    """Topic search tuning.

    Archives with at least ``scan_threshold`` logs switch from per-log summary
    reads to a line scan, and only ``scan_limit`` scan hits are classified.
    """

    scan_threshold: int = 100
    scan_limit: int = 5


@dataclass
class QueryConfig:
    default_recent: int = 3
    max_recent: int = 50


@dataclass
class SessionConfig:
    """Top-level ccsession configuration."""

    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> SessionConfig:
    """Load configuration from environment variables and optional ccsession.toml.

    Priority: environment variables > ccsession.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.ccsession/
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".ccsession" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    archive_data = file_data.get("archive", {})
    search_data = file_data.get("search", {})
    query_data = file_data.get("query", {})

    memory_files = archive_data.get("memory_files", list(DEFAULT_MEMORY_FILES))
    dirname = os.getenv("CCSESSION_ARCHIVE_DIR", archive_data.get("dirname", DEFAULT_ARCHIVE_DIRNAME))
    root_markers = archive_data.get("root_markers", [*memory_files, dirname, ".git"])

    config = SessionConfig(
        archive=ArchiveConfig(
            dirname=dirname,
            memory_files=list(memory_files),
            root_markers=list(root_markers),
        ),
        search=SearchConfig(
            scan_threshold=int(
                os.getenv("CCSESSION_SCAN_THRESHOLD", search_data.get("scan_threshold", 100))
            ),
            scan_limit=int(os.getenv("CCSESSION_SCAN_LIMIT", search_data.get("scan_limit", 5))),
        ),
        query=QueryConfig(
            default_recent=int(os.getenv("CCSESSION_RECENT", query_data.get("default_recent", 3))),
            max_recent=int(query_data.get("max_recent", 50)),
        ),
        log_level=os.getenv("CCSESSION_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
