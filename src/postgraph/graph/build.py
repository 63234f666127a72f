"""Topic graph over blog posts.

Posts are connected when they share at least one topic. Edge weight is mostly
topical overlap, with a small boost for posts published close together. The
whole graph is rebuilt from the full post list every time; the pairwise scan
is O(n^2), which is fine for a blog-sized corpus.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from itertools import combinations
from typing import Iterable

from .extract import ContentEntry, iso_utc, parse_iso, to_post_node
from .models import GRAPH_VERSION, GraphEdge, GraphStats, KnowledgeGraph, PostNode

TOPIC_FACTOR = 0.7
PROXIMITY_FACTOR = 0.3
PROXIMITY_WINDOW_DAYS = 365.0


def find_shared_topics(a: PostNode, b: PostNode) -> list[str]:
    """Topics of `a` that `b` also carries, in `a`'s order."""
    seen = set(b.topics)
    return [t for t in a.topics if t in seen]


def calculate_edge_weight(a: PostNode, b: PostNode, shared_topics: list[str]) -> float:
    topic_score = len(shared_topics) / max(len(a.topics), len(b.topics), 1)

    delta = parse_iso(a.date) - parse_iso(b.date)
    days_diff = abs(delta.total_seconds()) / 86400.0
    proximity_score = max(0.0, 1.0 - days_diff / PROXIMITY_WINDOW_DAYS)

    return min(1.0, topic_score * TOPIC_FACTOR + proximity_score * PROXIMITY_FACTOR)


def build_edges(posts: list[PostNode]) -> list[GraphEdge]:
    edges: list[GraphEdge] = []
    for a, b in combinations(posts, 2):
        shared = find_shared_topics(a, b)
        if not shared:
            continue
        edges.append(
            GraphEdge(
                source=a.id,
                target=b.id,
                weight=calculate_edge_weight(a, b, shared),
                shared_topics=shared,
                label=f"Shared: {', '.join(shared)}",
            )
        )
    return edges


def build_topic_index(posts: Iterable[PostNode]) -> dict[str, list[str]]:
    # No dedupe: a topic listed twice on a post puts the id in the bucket twice.
    index: dict[str, list[str]] = {}
    for post in posts:
        for topic in post.topics:
            index.setdefault(topic, []).append(post.id)
    return index


def calculate_stats(
    *,
    posts: list[PostNode],
    edges: list[GraphEdge],
    topics: dict[str, list[str]],
) -> GraphStats:
    degree: dict[str, int] = {}
    for e in edges:
        degree[e.source] = degree.get(e.source, 0) + 1
        degree[e.target] = degree.get(e.target, 0) + 1

    total = sum(degree.values())
    avg = total / len(posts) if posts else 0.0

    # sorted() is stable: ties go to whichever post entered the edge list first.
    ranked = sorted(degree.items(), key=lambda kv: kv[1], reverse=True)

    return GraphStats(
        total_posts=len(posts),
        total_edges=len(edges),
        total_topics=len(topics),
        avg_connections_per_post=_round1(avg),
        most_connected_post=(ranked[0][0] if ranked else None),
    )


def _round1(x: float) -> float:
    # Half rounds up (round() would round half to even).
    return math.floor(x * 10 + 0.5) / 10


def build_graph_from_nodes(posts: list[PostNode], *, generated_at: str | None = None) -> KnowledgeGraph:
    edges = build_edges(posts)
    topics = build_topic_index(posts)
    if generated_at is None:
        generated_at = iso_utc(datetime.now(timezone.utc))

    return KnowledgeGraph(
        posts=list(posts),
        edges=edges,
        topics=topics,
        generated_at=generated_at,
        version=GRAPH_VERSION,
        stats=calculate_stats(posts=posts, edges=edges, topics=topics),
    )


def build_graph(entries: Iterable[ContentEntry], *, generated_at: str | None = None) -> KnowledgeGraph:
    """Build the full knowledge graph from raw content entries."""
    return build_graph_from_nodes([to_post_node(e) for e in entries], generated_at=generated_at)
