"""On-disk graph cache keyed by a hash of the content store."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from .models import KnowledgeGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachePayload:
    """Canonical cache document. `hash` is None for legacy bare-graph files."""

    graph: KnowledgeGraph
    hash: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"graph": self.graph.to_dict()}
        if self.hash is not None:
            d["hash"] = self.hash
        return d


@dataclass(frozen=True)
class CacheHit:
    graph: KnowledgeGraph
    hash: str | None = None

    def matches(self, content_hash: str | None) -> bool:
        return content_hash is not None and self.hash == content_hash


@dataclass(frozen=True)
class CacheMiss:
    reason: str


CacheResult = Union[CacheHit, CacheMiss]


def decode_payload(raw: Any) -> CachePayload:
    """Normalize either cache shape, `{graph, hash}` or a bare graph.

    Raises ValueError, KeyError, TypeError or AttributeError on anything else.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"expected a JSON object, got {type(raw).__name__}")

    if "graph" in raw:
        h = raw.get("hash")
        if h is not None and not isinstance(h, str):
            raise ValueError("hash must be a string")
        return CachePayload(graph=KnowledgeGraph.from_dict(raw["graph"]), hash=h)

    return CachePayload(graph=KnowledgeGraph.from_dict(raw))


class GraphCache:
    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)

    def read(self) -> CacheResult:
        if not self.path.exists():
            logger.debug("No graph cache at %s", self.path)
            return CacheMiss("missing")

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            payload = decode_payload(raw)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable graph cache %s: %s", self.path, e)
            return CacheMiss(f"unreadable: {e}")

        return CacheHit(graph=payload.graph, hash=payload.hash)

    def write(self, graph: KnowledgeGraph, *, hash: str | None = None) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a sibling temp file, then rename over the cache.
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        payload = CachePayload(graph=graph, hash=hash)
        tmp.write_text(json.dumps(payload.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)

        logger.debug("Wrote graph cache to %s", self.path)
        return self.path

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
