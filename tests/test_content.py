import tempfile
import unittest
from pathlib import Path

from graph_fixtures import write_post

from postgraph.errors import ContentLoadError
from postgraph.graph.build import build_graph
from postgraph.ingest.content import hash_content, load_entries


class TestContentLoader(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name) / "blog"
        write_post(
            self.root,
            "first.md",
            title="First",
            description="Notes on spaced repetition.",
            pub_date="2025-01-01",
            topics=["learning", "memory"],
            body="One two three four.",
        )
        write_post(
            self.root,
            "guides/second.mdx",
            title="Second",
            description="A guide.",
            pub_date="2025-02-01",
            topics=["memory"],
            extra="type: guide\nslug: second-guide\n",
        )
        write_post(
            self.root,
            "wip.md",
            title="WIP",
            description="Unfinished.",
            pub_date="2025-03-01",
            topics=[],
            extra="draft: true\n",
        )
        (self.root / "notes.txt").write_text("not a post", encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def test_loads_posts_and_skips_drafts(self):
        entries = load_entries(self.root)
        self.assertEqual([e.id for e in entries], ["first", "guides/second"])

        first, second = entries
        self.assertIsNone(first.slug)
        self.assertEqual(first.data["topics"], ["learning", "memory"])
        self.assertEqual(first.data["type"], "note")
        self.assertEqual(second.slug, "second-guide")
        self.assertEqual(second.data["type"], "guide")

    def test_include_drafts(self):
        ids = [e.id for e in load_entries(self.root, include_drafts=True)]
        self.assertIn("wip", ids)

    def test_entries_build_a_graph(self):
        graph = build_graph(load_entries(self.root))
        self.assertEqual(graph.stats.total_posts, 2)
        self.assertEqual(len(graph.edges), 1)
        self.assertEqual(graph.edges[0].shared_topics, ["memory"])
        first = graph.posts[0]
        self.assertEqual(first.date, "2025-01-01T00:00:00.000Z")
        self.assertEqual(first.word_count, 4)
        self.assertEqual(first.excerpt, "Notes on spaced repetition.")
        self.assertEqual(graph.posts[1].slug, "second-guide")

    def test_missing_directory(self):
        with self.assertRaises(ContentLoadError) as ctx:
            load_entries(self.root / "nope")
        self.assertIn("nope", str(ctx.exception))
        with self.assertRaises(ContentLoadError):
            hash_content(self.root / "nope")

    def test_invalid_front_matter(self):
        write_post(self.root, "bad.md", title="Bad", description="x", pub_date="2025-01-01", topics=[], extra="type: podcast\n")
        with self.assertRaises(ContentLoadError):
            load_entries(self.root)

    def test_missing_title(self):
        (self.root / "untitled.md").write_text("---\npubDate: 2025-01-01\n---\nbody\n", encoding="utf-8")
        with self.assertRaises(ContentLoadError):
            load_entries(self.root)

    def test_hash_depends_on_draft_setting(self):
        self.assertNotEqual(hash_content(self.root), hash_content(self.root, include_drafts=True))
        self.assertEqual(hash_content(self.root, include_drafts=True), hash_content(self.root, include_drafts=True))

    def test_hash_changes_with_content(self):
        h1 = hash_content(self.root)
        self.assertEqual(h1, hash_content(self.root))
        (self.root / "first.md").write_text(
            (self.root / "first.md").read_text(encoding="utf-8") + "More words.\n", encoding="utf-8"
        )
        self.assertNotEqual(h1, hash_content(self.root))


if __name__ == "__main__":
    unittest.main()
