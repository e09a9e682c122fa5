"""Shared archive types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

MAX_RECENT = 50


@dataclass
class SessionLog:
    """One archived session.

    Listing fills only path/created_at/topic; the remaining fields are set
    when the log is loaded.
    """

    path: Path
    created_at: datetime
    topic: str
    content: str | None = None
    summary_region: str | None = None
    raw_region: str | None = None
    keywords: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    outcome: str = ""

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def loaded(self) -> bool:
        return self.summary_region is not None


@dataclass
class SearchQuery:
    """What a resume caller asks for."""

    recent_count: int = 3
    topic_keyword: str | None = None
    max_recent: int = MAX_RECENT
    capped: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if self.recent_count < 0:
            self.recent_count = 0
        if self.recent_count > self.max_recent:
            self.recent_count = self.max_recent
            self.capped = True
        if self.topic_keyword is not None:
            self.topic_keyword = self.topic_keyword.strip() or None
