from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from .config import Settings
from .errors import PostGraphError
from .graph.build import build_graph
from .graph.cache import CacheHit, GraphCache
from .graph.mentions import find_unlinked_mentions
from .graph.models import KnowledgeGraph
from .graph.query import posts_for_topic, related_posts
from .ingest.content import hash_content, load_entries
from .pipeline import run_build


app = typer.Typer(add_completion=False, help="Topic graph and unlinked-mention suggestions for a blog.")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _settings(
    content_dir: Path | None = None,
    out_dir: Path | None = None,
    cache_path: Path | None = None,
    suggestions_path: Path | None = None,
) -> Settings:
    base = Settings()
    return Settings(
        content_dir=str(content_dir) if content_dir is not None else base.content_dir,
        out_dir=str(out_dir) if out_dir is not None else base.out_dir,
        cache_path=str(cache_path) if cache_path is not None else base.cache_path,
        suggestions_path=str(suggestions_path) if suggestions_path is not None else base.suggestions_path,
        mention_threshold=base.mention_threshold,
    )


def _load_graph(settings: Settings) -> KnowledgeGraph:
    # Use the cached graph only when it was built from this exact content.
    res = GraphCache(settings.cache_path).read()
    if isinstance(res, CacheHit) and res.matches(hash_content(settings.content_dir)):
        return res.graph
    return build_graph(load_entries(settings.content_dir))


def _fail(e: PostGraphError) -> typer.Exit:
    console.print(str(e), style="red", markup=False)
    return typer.Exit(code=2)


@app.command()
def build(
    content_dir: Path | None = typer.Option(None, "--content-dir", help="Directory of Markdown/MDX posts"),
    out_dir: Path | None = typer.Option(None, "--out-dir", help="Build output root (graph at data/graph.json)"),
    cache_path: Path | None = typer.Option(None, "--cache", help="Graph cache file"),
    suggestions_path: Path | None = typer.Option(None, "--suggestions", help="Where to write mention suggestions JSON"),
    force: bool = typer.Option(False, "--force", help="Ignore the cache and rebuild"),
    threshold: float | None = typer.Option(None, "--threshold", help="Mention confidence threshold (0-1)"),
    include_drafts: bool = typer.Option(False, "--drafts", help="Include draft posts"),
):
    """Build graph.json and the unlinked-mention suggestions."""
    settings = _settings(content_dir, out_dir, cache_path, suggestions_path)
    try:
        res = run_build(settings=settings, force=force, threshold=threshold, include_drafts=include_drafts)
    except PostGraphError as e:
        raise _fail(e)

    source = "cache" if res.from_cache else "fresh build"
    console.print(f"Graph ({source}): {res.graph_path}")
    console.print(f"Suggestions: {res.suggestions_path} ({len(res.mentions)} mentions)")
    console.print(f"Done in {res.duration_ms}ms")


@app.command()
def stats(
    content_dir: Path | None = typer.Option(None, "--content-dir"),
    cache_path: Path | None = typer.Option(None, "--cache"),
):
    """Show graph stats."""
    settings = _settings(content_dir, cache_path=cache_path)
    try:
        graph = _load_graph(settings)
    except PostGraphError as e:
        raise _fail(e)

    s = graph.stats
    table = Table(title="Knowledge Graph Stats")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Posts", str(s.total_posts))
    table.add_row("Connections", str(s.total_edges))
    table.add_row("Topics", str(s.total_topics))
    table.add_row("Avg connections/post", str(s.avg_connections_per_post))
    table.add_row("Most connected", s.most_connected_post or "-")
    console.print(table)


@app.command()
def mentions(
    content_dir: Path | None = typer.Option(None, "--content-dir"),
    cache_path: Path | None = typer.Option(None, "--cache"),
    threshold: float | None = typer.Option(None, "--threshold", help="Confidence threshold (0-1)"),
    limit: int = typer.Option(50, help="Max rows to show"),
):
    """List unlinked-mention suggestions without writing anything."""
    settings = _settings(content_dir, cache_path=cache_path)
    try:
        graph = _load_graph(settings)
    except PostGraphError as e:
        raise _fail(e)

    found = find_unlinked_mentions(
        graph.posts,
        threshold=(settings.mention_threshold if threshold is None else float(threshold)),
    )
    if not found:
        console.print("No unlinked mentions found.", style="yellow")
        return

    table = Table(title=f"Unlinked mentions ({len(found)})")
    table.add_column("source")
    table.add_column("target")
    table.add_column("topic")
    table.add_column("conf", justify="right", width=6)
    table.add_column("snippet")
    for m in found[: int(limit)]:
        table.add_row(
            Text(m.source_post_id),
            Text(m.target_post_id),
            Text(m.topic),
            Text(f"{m.confidence:.1f}"),
            Text(m.snippet),
        )
    console.print(table)


@app.command()
def related(
    post_id: str = typer.Argument(...),
    content_dir: Path | None = typer.Option(None, "--content-dir"),
    cache_path: Path | None = typer.Option(None, "--cache"),
    limit: int = typer.Option(8, help="Max related posts"),
):
    """Show the posts most strongly connected to POST_ID."""
    settings = _settings(content_dir, cache_path=cache_path)
    try:
        graph = _load_graph(settings)
        rows = related_posts(graph, post_id, limit=int(limit))
    except PostGraphError as e:
        raise _fail(e)

    if not rows:
        console.print(f"{post_id} has no connections.", style="yellow", markup=False)
        return
    for r in rows:
        console.print(f"- {r['post']['id']} (w={r['weight']:.3f}) :: {', '.join(r['sharedTopics'])}", markup=False)


@app.command()
def topic(
    name: str = typer.Argument(...),
    content_dir: Path | None = typer.Option(None, "--content-dir"),
    cache_path: Path | None = typer.Option(None, "--cache"),
):
    """List the posts tagged with a topic."""
    settings = _settings(content_dir, cache_path=cache_path)
    try:
        graph = _load_graph(settings)
    except PostGraphError as e:
        raise _fail(e)

    ids = posts_for_topic(graph, name)
    if not ids:
        console.print(f"No posts tagged '{name}'.", style="yellow", markup=False)
        raise typer.Exit(code=1)
    for pid in ids:
        console.print(f"- {pid}", markup=False)


@app.command("clear-cache")
def clear_cache(
    cache_path: Path | None = typer.Option(None, "--cache"),
):
    """Delete the graph cache so the next build starts fresh."""
    settings = _settings(cache_path=cache_path)
    GraphCache(settings.cache_path).clear()
    console.print(f"Cleared {settings.cache_path}", markup=False)


@app.command()
def serve(
    content_dir: Path | None = typer.Option(None, "--content-dir"),
    cache_path: Path | None = typer.Option(None, "--cache"),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Serve graph.json over HTTP (FastAPI)."""
    try:
        import uvicorn
    except ImportError:
        console.print("Missing web dependencies. Install: `pip install -e '.[web]'`", style="red", markup=False)
        raise typer.Exit(code=2)

    from .web.server import create_app

    app_ = create_app(settings=_settings(content_dir, cache_path=cache_path))
    uvicorn.run(app_, host=host, port=int(port))


if __name__ == "__main__":
    app()
