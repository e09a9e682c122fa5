"""Tests for summary/raw splitting and Quick Reference parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from ccsession.archive.document import (
    RAW_MARKER,
    parse_quick_reference,
    read_summary,
    split,
    summary_highlights,
)
from ccsession.errors import NotFoundError

from conftest import render_log


class TestSplit:
    def test_with_marker(self):
        content = "# T\n\nsummary\n## Raw Session Log\nuser: hi\n"
        summary, raw = split(content)
        assert summary == "# T\n\nsummary\n"
        assert raw.startswith(RAW_MARKER)
        assert summary + raw == content

    def test_without_marker(self):
        content = "# T\n\njust a summary\n"
        assert split(content) == (content, None)

    def test_marker_must_start_line(self):
        content = "see ## Raw Session Log for details\n"
        assert split(content) == (content, None)

    def test_longer_heading_is_not_marker(self):
        content = "## Raw Session Logs\nx\n"
        assert split(content) == (content, None)

    def test_first_occurrence_wins(self):
        content = "s\n## Raw Session Log\na\n## Raw Session Log\nb\n"
        summary, raw = split(content)
        assert summary == "s\n"
        assert raw == "## Raw Session Log\na\n## Raw Session Log\nb\n"

    def test_crlf(self):
        content = "s\r\n## Raw Session Log\r\nraw\r\n"
        summary, raw = split(content)
        assert summary == "s\r\n"
        assert summary + raw == content

    def test_marker_on_first_line(self):
        summary, raw = split("## Raw Session Log\nraw")
        assert summary == ""
        assert raw == "## Raw Session Log\nraw"


class TestReadSummary:
    def test_matches_split(self, tmp_path: Path):
        content = render_log("a", keywords=("jwt",), raw="JWT lives here\n")
        path = tmp_path / "log.md"
        path.write_text(content, encoding="utf-8")
        assert read_summary(path) == split(content)[0]
        assert "JWT lives here" not in read_summary(path)

    def test_no_marker_reads_all(self, tmp_path: Path):
        path = tmp_path / "log.md"
        path.write_text("only summary\n", encoding="utf-8")
        assert read_summary(path) == "only summary\n"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(NotFoundError):
            read_summary(tmp_path / "gone.md")


class TestQuickReference:
    def test_parses_labels(self):
        summary = split(
            render_log(
                "fix-auth",
                keywords=("JWT", "refresh token", "auth"),
                projects=("api", "web"),
                outcome="Token refresh fixed",
            )
        )[0]
        ref = parse_quick_reference(summary)
        assert ref.keywords == ["JWT", "refresh token", "auth"]
        assert ref.projects == ["api", "web"]
        assert ref.outcome == "Token refresh fixed"

    def test_bulleted_labels_outside_section(self):
        summary = "# T\n\n- **Outcome:** shipped\n- **Confidence keywords:** a, , b\n"
        ref = parse_quick_reference(summary)
        assert ref.outcome == "shipped"
        assert ref.keywords == ["a", "b"]
        assert ref.projects == []

    def test_prefers_quick_reference_section(self):
        summary = (
            "## Notes\n**Outcome:** wrong one\n\n"
            "## Quick Reference\n**Outcome:** right one\n"
        )
        assert parse_quick_reference(summary).outcome == "right one"

    def test_frontmatter_fills_gaps(self):
        summary = (
            "---\nkeywords: [jwt, auth]\noutcome: done\n---\n"
            "# T\n\n## Quick Reference\n**Projects:** api\n"
        )
        ref = parse_quick_reference(summary)
        assert ref.keywords == ["jwt", "auth"]
        assert ref.projects == ["api"]
        assert ref.outcome == "done"

    def test_broken_frontmatter_ignored(self):
        summary = "---\nkeywords: [unclosed\n---\n**Outcome:** ok\n"
        assert parse_quick_reference(summary).outcome == "ok"

    def test_empty(self):
        ref = parse_quick_reference("")
        assert ref.keywords == [] and ref.projects == [] and ref.outcome == ""


class TestHighlights:
    def test_skips_quick_reference(self):
        summary = split(render_log("a", outcome="x", body="- chose JWT\n- dropped sessions"))[0]
        assert summary_highlights(summary) == ["chose JWT", "dropped sessions"]

    def test_prose_fallback(self):
        assert summary_highlights("# T\n\nWe fixed the bug.\n") == ["We fixed the bug."]

    def test_limit(self):
        summary = "\n".join(f"- item {i}" for i in range(10))
        assert len(summary_highlights(summary, limit=3)) == 3
