"""Knowledge graph builder for a blog's posts."""

__version__ = "0.1.0"
