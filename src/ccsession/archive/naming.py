"""Canonical log filenames: ``DD-MM-YYYY-HH_MM-{topic-slug}.md``."""

from __future__ import annotations

import re
from datetime import datetime

from ccsession.errors import MalformedNameError

SUFFIX = ".md"
TIMESTAMP_FORMAT = "%d-%m-%Y-%H_%M"

_NAME_RE = re.compile(r"^(\d{2}-\d{2}-\d{4}-\d{2}_\d{2})-(.+)\.md$")
_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated slug. Empty input becomes 'session'."""
    slug = _SLUG_STRIP.sub("-", text.lower()).strip("-")
    return slug or "session"


def encode(timestamp: datetime, topic: str) -> str:
    """Build the filename for a log written at timestamp about topic."""
    return f"{timestamp.strftime(TIMESTAMP_FORMAT)}-{slugify(topic)}{SUFFIX}"


def decode(filename: str) -> tuple[datetime, str]:
    """Split a filename into (timestamp, topic).

    Everything after the fixed date/time prefix is topic, extra hyphens
    included. Raises MalformedNameError if the prefix does not parse.
    """
    match = _NAME_RE.match(filename)
    if not match:
        raise MalformedNameError(filename, "expected DD-MM-YYYY-HH_MM-topic.md")
    stamp, topic = match.groups()
    try:
        ts = datetime.strptime(stamp, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise MalformedNameError(filename, str(e)) from e
    return ts, topic


def with_disambiguator(filename: str, counter: int) -> str:
    """'...-topic.md' -> '...-topic-{counter}.md'."""
    return f"{filename[: -len(SUFFIX)]}-{counter}{SUFFIX}"
