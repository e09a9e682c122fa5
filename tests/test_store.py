"""Tests for LogStore write/list/read."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

import pytest

from ccsession.archive.store import LogStore
from ccsession.errors import NotFoundError

from conftest import render_log

TS = datetime(2026, 1, 16, 18, 5)


class TestWrite:
    def test_creates_archive_dir(self, store: LogStore, project: Path):
        path = store.write(TS, "fix-auth", "# hello\n")
        assert path == project / "CC-Session-Logs" / "16-01-2026-18_05-fix-auth.md"
        assert path.read_text(encoding="utf-8") == "# hello\n"

    def test_idempotent_dir_create(self, store: LogStore):
        store.archive_dir.mkdir(parents=True)
        store.write(TS, "a", "x")
        store.write(datetime(2026, 1, 17, 9, 0), "b", "y")
        assert len(store.list()) == 2

    def test_collision_gets_disambiguator(self, store: LogStore):
        first = store.write(TS, "fix-auth", "first")
        second = store.write(TS, "fix-auth", "second")
        third = store.write(TS, "fix-auth", "third")
        assert first.name == "16-01-2026-18_05-fix-auth.md"
        assert second.name == "16-01-2026-18_05-fix-auth-2.md"
        assert third.name == "16-01-2026-18_05-fix-auth-3.md"
        assert store.read(first) == "first"
        assert store.read(second) == "second"
        assert store.read(third) == "third"

    def test_no_temp_files_left(self, store: LogStore):
        store.write(TS, "a", "x")
        store.write(TS, "a", "y")
        names = sorted(p.name for p in store.archive_dir.iterdir())
        assert names == ["16-01-2026-18_05-a-2.md", "16-01-2026-18_05-a.md"]

    def test_failed_write_leaves_nothing(self, store: LogStore, monkeypatch):
        def boom(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "link", boom)
        with pytest.raises(OSError):
            store.write(TS, "a", "x")
        assert list(store.archive_dir.iterdir()) == []

    def test_preserves_line_endings(self, store: LogStore):
        path = store.write(TS, "a", "a\r\nb\r\n")
        assert path.read_bytes() == b"a\r\nb\r\n"


class TestList:
    def test_newest_first(self, store: LogStore, make_log):
        make_log(datetime(2026, 1, 10, 9, 0), "a")
        make_log(datetime(2026, 1, 12, 9, 0), "c")
        make_log(datetime(2026, 1, 11, 9, 0), "b")
        assert [log.topic for log in store.list()] == ["c", "b", "a"]

    def test_orders_by_decoded_date_across_years(self, store: LogStore, make_log):
        make_log(datetime(2025, 12, 31, 23, 0), "old-year")
        make_log(datetime(2026, 1, 1, 8, 0), "new-year")
        assert [log.topic for log in store.list()] == ["new-year", "old-year"]

    def test_metadata_only(self, store: LogStore, make_log):
        make_log(TS, "a", outcome="done")
        (log,) = store.list()
        assert log.created_at == TS
        assert log.content is None
        assert log.summary_region is None
        assert not log.loaded

    def test_filename_not_mtime(self, store: LogStore, make_log):
        older = make_log(datetime(2026, 1, 10, 9, 0), "older")
        make_log(datetime(2026, 1, 11, 9, 0), "newer")
        os.utime(older, (2_000_000_000, 2_000_000_000))
        assert store.list()[0].topic == "newer"

    def test_stable(self, store: LogStore, make_log):
        for i in range(5):
            make_log(TS, "same")
        first = [log.path for log in store.list()]
        assert first == [log.path for log in store.list()]

    def test_skips_malformed(self, store: LogStore, make_log, caplog):
        make_log(TS, "good")
        (store.archive_dir / "notes.md").write_text("x", encoding="utf-8")
        (store.archive_dir / "99-99-2026-00_00-bad.md").write_text("x", encoding="utf-8")
        (store.archive_dir / "16-01-2026-18_05-other.txt").write_text("x", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="ccsession.archive.store"):
            logs = store.list()
        assert [log.topic for log in logs] == ["good"]
        assert "notes.md" in caplog.text
        assert "99-99-2026-00_00-bad.md" in caplog.text

    def test_missing_archive(self, store: LogStore):
        assert store.list() == []
        assert store.count() == 0

    def test_recent(self, store: LogStore, make_log):
        for day in (10, 11, 12):
            make_log(datetime(2026, 1, day, 9, 0), f"d{day}")
        assert [log.topic for log in store.recent(2)] == ["d12", "d11"]
        assert store.recent(0) == []
        assert len(store.recent(10)) == 3


class TestRead:
    def test_read_vanished(self, store: LogStore, make_log):
        path = make_log(TS, "a")
        (log,) = store.list()
        path.unlink()
        with pytest.raises(NotFoundError):
            store.read(log.path)
        with pytest.raises(FileNotFoundError):
            store.load(log)

    def test_load_full(self, store: LogStore, make_log):
        make_log(TS, "a", keywords=("jwt",), outcome="done", raw="raw text\n")
        log = store.load(store.list()[0])
        assert log.content == log.summary_region + log.raw_region
        assert log.raw_region.startswith("## Raw Session Log")
        assert log.keywords == ["jwt"]
        assert log.outcome == "done"

    def test_load_summary_only(self, store: LogStore, make_log):
        make_log(TS, "a", raw="secret raw\n")
        log = store.load(store.list()[0], include_raw=False)
        assert log.loaded
        assert log.content is None
        assert log.raw_region is None
        assert "secret raw" not in log.summary_region

    def test_load_without_marker(self, store: LogStore):
        store.write(TS, "minimal", render_log("minimal", raw=None))
        log = store.load(store.list()[0])
        assert log.raw_region is None
        assert log.content == log.summary_region

    def test_crlf_summary_consistent(self, store: LogStore):
        store.write(TS, "win", "# T\r\n**Outcome:** ok\r\n## Raw Session Log\r\nraw\r\n")
        full = store.load(store.list()[0])
        partial = store.load(store.list()[0], include_raw=False)
        assert full.summary_region == partial.summary_region == "# T\r\n**Outcome:** ok\r\n"
        assert full.outcome == "ok"

    def test_find(self, store: LogStore, make_log):
        path = make_log(TS, "a")
        assert store.find(path.name).path == path
        with pytest.raises(NotFoundError):
            store.find("16-01-2026-18_05-missing.md")
