"""Graph records and their JSON (camelCase) representation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

POST_TYPES = ("note", "essay", "guide", "link")

# Only shared_topic edges are produced; the others are reserved names.
EDGE_TYPES = ("shared_topic", "mentions_topic", "same_series")

GRAPH_VERSION = 1


@dataclass(frozen=True)
class PostNode:
    id: str
    slug: str
    title: str
    date: str  # ISO-8601, UTC ("...Z")
    topics: list[str] = field(default_factory=list)
    type: str = "note"
    word_count: int = 0
    excerpt: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "date": self.date,
            "topics": list(self.topics),
            "type": self.type,
            "wordCount": self.word_count,
        }
        if self.excerpt is not None:
            d["excerpt"] = self.excerpt
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PostNode:
        return cls(
            id=str(d["id"]),
            slug=str(d.get("slug") or d["id"]),
            title=str(d.get("title") or ""),
            date=str(d["date"]),
            topics=[str(t) for t in (d.get("topics") or [])],
            type=str(d.get("type") or "note"),
            word_count=int(d.get("wordCount") or 0),
            excerpt=(str(d["excerpt"]) if d.get("excerpt") is not None else None),
        )


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    weight: float
    shared_topics: list[str] = field(default_factory=list)
    label: str = ""
    type: str = "shared_topic"

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "weight": self.weight,
            "sharedTopics": list(self.shared_topics),
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GraphEdge:
        edge_type = str(d.get("type") or "shared_topic")
        if edge_type not in EDGE_TYPES:
            raise ValueError(f"unknown edge type: {edge_type!r}")
        return cls(
            source=str(d["source"]),
            target=str(d["target"]),
            weight=float(d["weight"]),
            shared_topics=[str(t) for t in (d.get("sharedTopics") or [])],
            label=str(d.get("label") or ""),
            type=edge_type,
        )


@dataclass(frozen=True)
class GraphStats:
    total_posts: int
    total_edges: int
    total_topics: int
    avg_connections_per_post: float
    most_connected_post: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "totalPosts": self.total_posts,
            "totalEdges": self.total_edges,
            "totalTopics": self.total_topics,
            "avgConnectionsPerPost": self.avg_connections_per_post,
        }
        if self.most_connected_post is not None:
            d["mostConnectedPost"] = self.most_connected_post
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GraphStats:
        return cls(
            total_posts=int(d["totalPosts"]),
            total_edges=int(d["totalEdges"]),
            total_topics=int(d["totalTopics"]),
            avg_connections_per_post=float(d["avgConnectionsPerPost"]),
            most_connected_post=d.get("mostConnectedPost"),
        )


@dataclass(frozen=True)
class KnowledgeGraph:
    posts: list[PostNode]
    edges: list[GraphEdge]
    topics: dict[str, list[str]]
    generated_at: str
    stats: GraphStats
    version: int = GRAPH_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "posts": [p.to_dict() for p in self.posts],
            "edges": [e.to_dict() for e in self.edges],
            "topics": {k: list(v) for k, v in self.topics.items()},
            "generatedAt": self.generated_at,
            "version": self.version,
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> KnowledgeGraph:
        return cls(
            posts=[PostNode.from_dict(p) for p in d["posts"]],
            edges=[GraphEdge.from_dict(e) for e in d["edges"]],
            topics={str(k): [str(x) for x in v] for k, v in d["topics"].items()},
            generated_at=str(d["generatedAt"]),
            stats=GraphStats.from_dict(d["stats"]),
            version=int(d.get("version") or GRAPH_VERSION),
        )


@dataclass(frozen=True)
class UnlinkedMention:
    source_post_id: str
    target_post_id: str
    topic: str
    confidence: float
    snippet: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourcePostId": self.source_post_id,
            "targetPostId": self.target_post_id,
            "topic": self.topic,
            "confidence": self.confidence,
            "snippet": self.snippet,
        }
