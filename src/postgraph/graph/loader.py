from __future__ import annotations

import logging
from typing import Callable, Iterable

from .build import build_graph
from .cache import CacheHit, GraphCache
from .extract import ContentEntry
from .models import KnowledgeGraph

logger = logging.getLogger(__name__)

EntriesProvider = Callable[[], Iterable[ContentEntry]]


class KnowledgeGraphLoader:
    """Memoizing graph loader.

    Holds at most one graph. Lookup order: memo, then cache file, then a fresh
    build from `entries_provider`. Each build process should own its own
    loader (and cache path).
    """

    def __init__(self, *, cache: GraphCache | None = None, entries_provider: EntriesProvider | None = None):
        self.cache = cache
        self.entries_provider = entries_provider
        self._memo: KnowledgeGraph | None = None

    @property
    def memoized(self) -> KnowledgeGraph | None:
        return self._memo

    def load(
        self,
        *,
        force_rebuild: bool = False,
        entries: Iterable[ContentEntry] | None = None,
        skip_cache_write: bool = False,
        content_hash: str | None = None,
    ) -> KnowledgeGraph:
        if self._memo is not None and not force_rebuild:
            return self._memo

        if not force_rebuild and self.cache is not None:
            res = self.cache.read()
            if isinstance(res, CacheHit):
                logger.debug("Graph served from cache %s", self.cache.path)
                self._memo = res.graph
                return res.graph

        graph = self.rebuild(entries=entries)
        if not skip_cache_write and self.cache is not None:
            self.cache.write(graph, hash=content_hash)

        self._memo = graph
        return graph

    def rebuild(self, *, entries: Iterable[ContentEntry] | None = None) -> KnowledgeGraph:
        if entries is None:
            if self.entries_provider is None:
                raise ValueError("No entries given and no entries_provider configured")
            entries = self.entries_provider()
        return build_graph(entries)

    def clear(self) -> None:
        self._memo = None
