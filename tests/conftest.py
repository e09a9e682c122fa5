"""Shared fixtures: a throwaway project with a session log archive."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from ccsession.archive.store import LogStore


def render_log(
    topic: str,
    *,
    keywords: tuple[str, ...] = (),
    projects: tuple[str, ...] = (),
    outcome: str = "",
    body: str = "",
    raw: str | None = "user: hi\nassistant: hello\n",
) -> str:
    content = (
        f"# Session: {topic}\n\n"
        "## Quick Reference\n"
        f"**Confidence keywords:** {', '.join(keywords)}\n"
        f"**Projects:** {', '.join(projects)}\n"
        f"**Outcome:** {outcome}\n\n"
        "## Decisions\n"
        f"{body or '- nothing notable'}\n\n"
    )
    if raw is not None:
        content += f"## Raw Session Log\n\n{raw}"
    return content


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def store(project: Path) -> LogStore:
    return LogStore(project)


@pytest.fixture
def make_log(store: LogStore):
    """Write a log at ts about topic; extra kwargs go to render_log."""

    def _make(ts: datetime, topic: str, **kwargs) -> Path:
        return store.write(ts, topic, render_log(topic, **kwargs))

    return _make
