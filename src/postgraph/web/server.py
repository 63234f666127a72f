import json
import logging

from ..config import Settings
from ..errors import GraphUnavailableError, PostGraphError, PostNotFoundError
from ..graph.cache import GraphCache
from ..graph.loader import KnowledgeGraphLoader
from ..graph.models import KnowledgeGraph
from ..graph.query import related_posts
from ..ingest.content import load_entries

logger = logging.getLogger(__name__)

GRAPH_CACHE_CONTROL = "public, max-age=3600"


def create_app(*, settings: Settings | None = None, loader: KnowledgeGraphLoader | None = None):
    # Lazy import so core CLI works without web deps.
    from fastapi import FastAPI
    from fastapi.responses import JSONResponse, Response

    from .. import __version__

    settings = settings or Settings()
    if loader is None:
        loader = KnowledgeGraphLoader(
            cache=GraphCache(settings.cache_path),
            entries_provider=lambda: load_entries(settings.content_dir),
        )

    app = FastAPI(title="postgraph", version=__version__)

    def _graph() -> KnowledgeGraph:
        try:
            graph = loader.load()
        except (OSError, ValueError) as e:
            logger.exception("Failed to produce graph")
            raise GraphUnavailableError(f"Graph could not be produced: {e}") from e
        if not graph.posts:
            loader.clear()
            raise GraphUnavailableError("No posts available to build a graph")
        return graph

    def _unavailable(e: PostGraphError) -> JSONResponse:
        logger.warning("Graph unavailable: %s", e)
        return JSONResponse({"ok": False, "error": str(e)}, status_code=503)

    @app.get("/data/graph.json")
    def graph_json():
        try:
            graph = _graph()
        except PostGraphError as e:
            return _unavailable(e)

        return Response(
            content=json.dumps(graph.to_dict(), indent=2, ensure_ascii=False),
            media_type="application/json; charset=utf-8",
            headers={"Cache-Control": GRAPH_CACHE_CONTROL},
        )

    @app.get("/api/graph/stats")
    def graph_stats():
        try:
            graph = _graph()
        except PostGraphError as e:
            return _unavailable(e)
        return {"ok": True, "generatedAt": graph.generated_at, "stats": graph.stats.to_dict()}

    @app.get("/api/graph/related/{post_id:path}")
    def graph_related(post_id: str, limit: int = 8):
        try:
            graph = _graph()
        except PostGraphError as e:
            return _unavailable(e)

        try:
            res = related_posts(graph, post_id, limit=int(limit))
        except PostNotFoundError as e:
            return JSONResponse({"ok": False, "error": str(e)}, status_code=404)
        return {"ok": True, "post": post_id, "related": res}

    return app
