from postgraph.graph.models import PostNode


def make_node(node_id: str, topics: list[str], *, date: str = "2025-01-01T00:00:00.000Z", excerpt: str = "excerpt") -> PostNode:
    return PostNode(
        id=node_id,
        slug=node_id,
        title=node_id,
        date=date,
        topics=list(topics),
        type="note",
        word_count=100,
        excerpt=excerpt,
    )


def write_post(root, rel: str, *, title: str, description: str, pub_date: str, topics: list[str], body: str = "Body text.", extra: str = "") -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    topic_list = ", ".join(topics)
    path.write_text(
        "---\n"
        f"title: {title}\n"
        f"description: {description}\n"
        f"pubDate: {pub_date}\n"
        f"topics: [{topic_list}]\n"
        f"{extra}"
        "---\n"
        f"{body}\n",
        encoding="utf-8",
    )
