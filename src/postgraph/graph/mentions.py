"""Unlinked-mention suggestions.

A post's excerpt that spells out a topic another post is tagged with probably
ought to link to that post. Matching is plain case-insensitive substring
search; there is no stemming and no semantic matching.
"""

from __future__ import annotations

import re

from .models import PostNode, UnlinkedMention

MIN_TOPIC_CHARS = 3
DEFAULT_THRESHOLD = 0.6
CONFIDENCE_PER_OCCURRENCE = 0.2
SNIPPET_RADIUS = 80


def find_unlinked_mentions(
    posts: list[PostNode],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[UnlinkedMention]:
    out: list[UnlinkedMention] = []
    seen: set[tuple[str, str, str]] = set()

    for source in posts:
        excerpt = (source.excerpt or "").strip()
        if not excerpt:
            continue
        excerpt_lower = excerpt.lower()

        for target in posts:
            if target.id == source.id:
                continue

            for topic in target.topics:
                if not topic or len(topic) < MIN_TOPIC_CHARS:
                    continue

                topic_lower = topic.lower()
                if topic_lower not in excerpt_lower:
                    continue

                confidence = min(1.0, count_occurrences(excerpt_lower, topic_lower) * CONFIDENCE_PER_OCCURRENCE)
                if confidence < threshold:
                    continue

                key = (source.id, target.id, topic_lower)
                if key in seen:
                    continue
                seen.add(key)

                out.append(
                    UnlinkedMention(
                        source_post_id=source.id,
                        target_post_id=target.id,
                        topic=topic,
                        confidence=confidence,
                        snippet=extract_snippet(excerpt, topic),
                    )
                )

    return out


def count_occurrences(haystack: str, needle: str) -> int:
    # Non-overlapping literal matches.
    return len(re.findall(re.escape(needle), haystack))


def extract_snippet(text: str, topic: str, *, radius: int = SNIPPET_RADIUS) -> str:
    idx = text.lower().find(topic.lower())
    if idx == -1:
        return ""
    start = max(0, idx - radius)
    end = min(len(text), idx + len(topic) + radius)
    return f"…{text[start:end].strip()}…"
