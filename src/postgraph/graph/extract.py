from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from .models import PostNode


@dataclass(frozen=True)
class ContentEntry:
    """One raw post as handed over by the content loader.

    `data` is the (already validated) front matter: title, description,
    pubDate, optional updatedDate, topics, type.
    """

    id: str
    body: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    slug: str | None = None


def estimate_word_count(text: str) -> int:
    # str.split() with no separator already drops empty tokens.
    return len(text.split())


def iso_utc(value: datetime | date | str) -> str:
    """Format a timestamp like JavaScript's toISOString(): 2025-01-01T00:00:00.000Z."""
    dt = _as_datetime(value)
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{dt.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    return _as_datetime(value)


def _as_datetime(value: datetime | date | str) -> datetime:
    if isinstance(value, str):
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        value = datetime.fromisoformat(s)

    if isinstance(value, datetime):
        # Naive timestamps are read as UTC instants.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def to_post_node(entry: ContentEntry) -> PostNode:
    data = entry.data
    description = data.get("description")
    return PostNode(
        id=entry.id,
        slug=entry.slug or entry.id,
        title=str(data.get("title") or ""),
        date=iso_utc(data["pubDate"]),
        topics=[str(t) for t in (data.get("topics") or []) if t is not None],
        type=str(data.get("type") or "note"),
        word_count=estimate_word_count(entry.body or ""),
        excerpt=(str(description) if description is not None else None),
    )
