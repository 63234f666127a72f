"""Read blog posts (Markdown/MDX with YAML front matter) into content entries."""

from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path
from typing import Any, Iterable

import frontmatter

from ..errors import ContentLoadError
from ..graph.extract import ContentEntry, iso_utc
from ..graph.models import POST_TYPES

logger = logging.getLogger(__name__)

SUPPORTED_EXTS = {".md", ".mdx"}


def iter_post_files(root: Path) -> Iterable[Path]:
    # Sorted so ids, hashes and node order are stable across runs.
    for p in sorted(root.rglob("*")):
        if not p.is_file():
            continue
        if p.name.startswith("."):
            continue
        if p.suffix.lower() not in SUPPORTED_EXTS:
            continue
        yield p


def post_id_for(path: Path, root: Path) -> str:
    return path.relative_to(root).with_suffix("").as_posix()


def _check_root(content_dir: str | os.PathLike[str]) -> Path:
    root = Path(content_dir)
    if not root.exists():
        raise ContentLoadError(root, "directory does not exist")
    if not root.is_dir():
        raise ContentLoadError(root, "not a directory")
    return root


def validate_front_matter(path: Path, metadata: dict[str, Any]) -> dict[str, Any]:
    """Apply defaults and reject front matter the graph cannot use."""
    data = dict(metadata)

    if not isinstance(data.get("title"), str) or not data["title"].strip():
        raise ContentLoadError(path, "front matter field 'title' is required")
    if "pubDate" not in data or data["pubDate"] is None:
        raise ContentLoadError(path, "front matter field 'pubDate' is required")

    for key in ("pubDate", "updatedDate"):
        if data.get(key) is None:
            continue
        try:
            iso_utc(data[key])
        except (TypeError, ValueError) as e:
            raise ContentLoadError(path, f"invalid {key}: {data[key]!r}") from e

    topics = data.get("topics")
    if topics is None:
        topics = []
    if not isinstance(topics, list) or not all(isinstance(t, str) for t in topics):
        raise ContentLoadError(path, "front matter field 'topics' must be a list of strings")
    data["topics"] = topics

    data.setdefault("description", "")
    data["type"] = data.get("type") or "note"
    if data["type"] not in POST_TYPES:
        raise ContentLoadError(path, f"type must be one of {', '.join(POST_TYPES)}; got {data['type']!r}")

    data["draft"] = bool(data.get("draft", False))
    return data


def load_entry(path: Path, root: Path) -> ContentEntry:
    try:
        post = frontmatter.load(path)
    except Exception as e:
        raise ContentLoadError(path, f"unparseable front matter ({e})") from e

    data = validate_front_matter(path, dict(post.metadata or {}))
    slug = data.get("slug")
    return ContentEntry(
        id=post_id_for(path, root),
        slug=(str(slug) if slug else None),
        body=post.content or "",
        data=data,
    )


def load_entries(content_dir: str | os.PathLike[str], *, include_drafts: bool = False) -> list[ContentEntry]:
    root = _check_root(content_dir)

    out: list[ContentEntry] = []
    drafts = 0
    for path in iter_post_files(root):
        entry = load_entry(path, root)
        if entry.data.get("draft") and not include_drafts:
            drafts += 1
            continue
        out.append(entry)

    logger.info("Loaded %d posts from %s (%d drafts skipped)", len(out), root, drafts)
    return out


def hash_content(content_dir: str | os.PathLike[str], *, include_drafts: bool = False) -> str:
    """sha256 over every post's relative path and bytes; keys the graph cache.

    The draft setting is part of the key: the same files give a different
    entry set with and without drafts.
    """
    root = _check_root(content_dir)
    h = hashlib.sha256()
    h.update(b"drafts=1\0" if include_drafts else b"drafts=0\0")
    for path in iter_post_files(root):
        h.update(path.relative_to(root).as_posix().encode("utf-8"))
        h.update(b"\0")
        try:
            h.update(path.read_bytes())
        except OSError as e:
            raise ContentLoadError(path, str(e)) from e
        h.update(b"\0")
    return h.hexdigest()
