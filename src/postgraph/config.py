from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    # Markdown/MDX posts with front matter.
    content_dir: str = os.getenv("POSTGRAPH_CONTENT_DIR", "./src/content/blog")

    # Build output root; the graph lands at <out_dir>/data/graph.json.
    out_dir: str = os.getenv("POSTGRAPH_OUT_DIR", "./dist")

    # Cache + advisory artifacts
    cache_path: str = os.getenv("POSTGRAPH_CACHE_PATH", "./.postgraph/graph-cache.json")
    suggestions_path: str = os.getenv("POSTGRAPH_SUGGESTIONS_PATH", "./docs/graph-suggestions.json")

    # Mention detection
    mention_threshold: float = float(os.getenv("POSTGRAPH_MENTION_THRESHOLD", "0.6"))
