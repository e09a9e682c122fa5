"""Command-line front end: argument parsing, commands and report rendering."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

from ccsession.archive.assembler import LogDigest, SessionReport, build_report
from ccsession.archive.models import SearchQuery
from ccsession.archive.root import resolve_project_root
from ccsession.archive.search import TopicSearchEngine
from ccsession.archive.store import LogStore
from ccsession.archive.summarizer import build_compress_prompt, memory_for
from ccsession.config import SessionConfig
from ccsession.errors import MalformedNameError


_DATE_FORMAT = "%d-%m-%Y %H:%M"


# ── Rendering ─────────────────────────────────────────────────


def _digest_line(digest: LogDigest, suffix: str = "") -> str:
    line = f"- {digest.created_at.strftime(_DATE_FORMAT)}  {digest.topic}{suffix}"
    if digest.outcome:
        line += f": {digest.outcome}"
    return line


def render_report(report: SessionReport) -> str:
    """Render a SessionReport as markdown for the assistant to read."""
    parts: list[str] = [f"# Session context ({report.root.name or report.root})"]

    if report.memory is None:
        parts.append("## Project memory\nNo project memory found. Create CLAUDE.md to track status.")
    else:
        parts.append(f"## Project memory ({report.memory.path.name})\n{report.memory.content.strip()}")

    if report.no_history:
        parts.append("## Session history\nNo session history yet.")
    elif report.latest is not None:
        latest = report.latest
        lines = [f"## Last session: {latest.created_at.strftime(_DATE_FORMAT)}, {latest.topic}"]
        if latest.outcome:
            lines.append(f"**Outcome:** {latest.outcome}")
        if latest.keywords:
            lines.append(f"**Keywords:** {', '.join(latest.keywords)}")
        if latest.projects:
            lines.append(f"**Projects:** {', '.join(latest.projects)}")
        if latest.highlights:
            lines.append("")
            lines += [f"- {h}" for h in latest.highlights]
        lines.append(f"\nFull log: {latest.path}")
        parts.append("\n".join(lines))

        if report.earlier:
            parts.append("## Earlier sessions\n" + "\n".join(_digest_line(d) for d in report.earlier))

    if report.related:
        parts.append(
            f'## Related to "{report.topic}"\n'
            + "\n".join(_digest_line(r, f" [{r.reason}]") for r in report.related)
        )

    if report.notes:
        parts.append("\n".join(f"_Note: {note}_" for note in report.notes))
    return "\n\n".join(parts) + "\n"


# ── Commands ──────────────────────────────────────────────────


def _store(args: argparse.Namespace, config: SessionConfig) -> LogStore:
    root = resolve_project_root(args.directory, config.archive.root_markers)
    return LogStore(root, config.archive.dirname)


def _read_input(path: str | None) -> str:
    if path and path != "-":
        return Path(path).read_text(encoding="utf-8")
    return sys.stdin.read()


def cmd_resume(args: argparse.Namespace, config: SessionConfig) -> int:
    n = config.query.default_recent if args.n is None else args.n
    query = SearchQuery(recent_count=n, topic_keyword=args.topic, max_recent=config.query.max_recent)
    print(render_report(build_report(args.directory, query, config)), end="")
    return 0


def cmd_list(args: argparse.Namespace, config: SessionConfig) -> int:
    store = _store(args, config)
    logs = store.list() if args.n is None else store.recent(args.n)
    if not logs:
        print("No session history yet.")
        return 0
    for log in logs:
        print(f"{log.created_at.strftime(_DATE_FORMAT)}  {log.topic:<40}  {log.filename}")
    return 0


def cmd_search(args: argparse.Namespace, config: SessionConfig) -> int:
    matches = TopicSearchEngine(_store(args, config), config.search).search(args.keyword)
    if not matches:
        print(f"No session logs match {args.keyword!r}.")
        return 0
    for m in matches:
        print(f"[{m.reason:<8}] {m.log.filename}  {m.log.outcome}".rstrip())
    return 0


def cmd_show(args: argparse.Namespace, config: SessionConfig) -> int:
    store = _store(args, config)
    try:
        log = store.load(store.find(args.filename), include_raw=args.raw)
    except (OSError, MalformedNameError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(log.content if args.raw else log.summary_region, end="")
    return 0


def cmd_save(args: argparse.Namespace, config: SessionConfig) -> int:
    content = _read_input(args.file)
    if not content.strip():
        print("Error: empty session log", file=sys.stderr)
        return 1
    try:
        path = _store(args, config).write(datetime.now(), args.topic, content)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(path)
    return 0


def cmd_prompt(args: argparse.Namespace, config: SessionConfig) -> int:
    transcript = _read_input(args.file)
    print(build_compress_prompt(transcript, memory_for(args.directory, config)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccsession", description="Archive and resume AI work sessions"
    )
    parser.add_argument("-C", "--directory", default=".", help="Start directory (default: cwd)")
    parser.add_argument("--config", type=Path, default=None, help="Path to ccsession.toml")
    parser.set_defaults(func=cmd_resume, n=None, topic=None)
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("resume", help="Project memory + recent sessions (+ related)")
    p.add_argument("-n", type=int, default=None, help="Number of recent sessions (max 50)")
    p.add_argument("-t", "--topic", default=None, help="Also list logs related to TOPIC")
    p.set_defaults(func=cmd_resume)

    p = sub.add_parser("list", help="List session logs, newest first")
    p.add_argument("-n", type=int, default=None)
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("search", help="Find session logs mentioning KEYWORD")
    p.add_argument("keyword")
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("show", help="Print a session log summary")
    p.add_argument("filename")
    p.add_argument("--raw", action="store_true", help="Include the raw session log")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("save", help="Archive a finished session log document")
    p.add_argument("topic")
    p.add_argument("file", nargs="?", default=None, help="Markdown file (default: stdin)")
    p.set_defaults(func=cmd_save)

    p = sub.add_parser("prompt", help="Print the summarizer prompt for a transcript")
    p.add_argument("file", nargs="?", default=None, help="Transcript file (default: stdin)")
    p.set_defaults(func=cmd_prompt)
    return parser
