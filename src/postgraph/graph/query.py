from __future__ import annotations

from typing import Any

from ..errors import PostNotFoundError
from .models import KnowledgeGraph


def related_posts(graph: KnowledgeGraph, post_id: str, *, limit: int = 8) -> list[dict[str, Any]]:
    """Neighbours of `post_id`, strongest edge first."""
    by_id = {p.id: p for p in graph.posts}
    if post_id not in by_id:
        raise PostNotFoundError(post_id)

    out = []
    for e in graph.edges:
        # Undirected: the post may sit on either end.
        if e.source == post_id:
            other = e.target
        elif e.target == post_id:
            other = e.source
        else:
            continue
        nb = by_id.get(other)
        if nb is None:
            continue
        out.append({"post": nb.to_dict(), "weight": e.weight, "sharedTopics": list(e.shared_topics)})

    out.sort(key=lambda r: r["weight"], reverse=True)
    return out[: max(0, int(limit))]


def posts_for_topic(graph: KnowledgeGraph, topic: str) -> list[str]:
    return list(graph.topics.get(topic, []))
