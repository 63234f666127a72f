from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import Settings
from .graph.cache import CacheHit, GraphCache
from .graph.loader import KnowledgeGraphLoader
from .graph.mentions import find_unlinked_mentions
from .graph.models import KnowledgeGraph, UnlinkedMention
from .ingest.content import hash_content, load_entries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    graph: KnowledgeGraph
    mentions: list[UnlinkedMention]
    from_cache: bool
    content_hash: str
    graph_path: Path
    suggestions_path: Path
    duration_ms: int


def graph_output_path(out_dir: str | Path) -> Path:
    return Path(out_dir) / "data" / "graph.json"


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def run_build(
    *,
    settings: Settings,
    force: bool = False,
    threshold: float | None = None,
    include_drafts: bool = False,
    loader: KnowledgeGraphLoader | None = None,
) -> BuildResult:
    """Produce graph.json and the mention suggestions for one build.

    The cached graph is reused only when its stored hash equals the hash of
    the current content; `force` always rebuilds. Content errors propagate
    and nothing is written.
    """
    t0 = time.monotonic()
    content_dir = settings.content_dir

    if loader is None:
        loader = KnowledgeGraphLoader(
            cache=GraphCache(settings.cache_path),
            entries_provider=lambda: load_entries(content_dir, include_drafts=include_drafts),
        )

    try:
        content_hash = hash_content(content_dir, include_drafts=include_drafts)

        graph = None
        if not force and loader.cache is not None:
            res = loader.cache.read()
            if isinstance(res, CacheHit) and res.matches(content_hash):
                logger.info("Knowledge graph unchanged, using cache")
                graph = res.graph

        from_cache = graph is not None
        if graph is None:
            graph = loader.load(force_rebuild=True, content_hash=content_hash)

        logger.info("Found %d posts for graph generation", len(graph.posts))
        logger.info("Generated %d connections", len(graph.edges))
        logger.info("Indexed %d topics", len(graph.topics))

        mentions = find_unlinked_mentions(
            graph.posts,
            threshold=(settings.mention_threshold if threshold is None else float(threshold)),
        )
        logger.info("Found %d potential unlinked mentions", len(mentions))

        suggestions_path = write_json(Path(settings.suggestions_path), [m.to_dict() for m in mentions])
        graph_path = write_json(graph_output_path(settings.out_dir), graph.to_dict())
        logger.info(
            "Knowledge graph saved to %s (posts=%d, connections=%d, avg/post=%s)",
            graph_path,
            graph.stats.total_posts,
            graph.stats.total_edges,
            graph.stats.avg_connections_per_post,
        )
    finally:
        # One snapshot per build cycle.
        loader.clear()

    return BuildResult(
        graph=graph,
        mentions=mentions,
        from_cache=from_cache,
        content_hash=content_hash,
        graph_path=graph_path,
        suggestions_path=suggestions_path,
        duration_ms=int((time.monotonic() - t0) * 1000),
    )
