"""Exceptions raised by postgraph."""


class PostGraphError(Exception):
    """Base exception for graph building and serving."""
    pass


class ContentLoadError(PostGraphError):
    """Raised when the content store (or a post in it) cannot be read."""
    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot load content from '{self.path}': {reason}")


class GraphUnavailableError(PostGraphError):
    """Raised when a graph is requested but none can be produced."""
    pass


class PostNotFoundError(PostGraphError):
    """Raised when a post id is not in the graph."""
    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Post '{post_id}' not found in graph")
