"""Topic graph utilities.

Builds a weighted, undirected graph of blog posts connected by shared topics,
plus a lexical "unlinked mention" detector over post excerpts. Everything is
rebuilt from the full post list; the only state is an optional JSON cache.
"""
