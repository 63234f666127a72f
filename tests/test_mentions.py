import unittest

from graph_fixtures import make_node

from postgraph.graph.mentions import count_occurrences, extract_snippet, find_unlinked_mentions


class TestUnlinkedMentions(unittest.TestCase):
    def test_finds_mention_of_another_posts_topic(self):
        posts = [
            make_node(
                "source",
                ["learning"],
                excerpt="This note mentions spaced repetition multiple times. Spaced repetition matters.",
            ),
            make_node("target", ["spaced repetition"], excerpt="Details about spaced repetition."),
            make_node("unrelated", ["ai"], excerpt="Irrelevant"),
        ]
        mentions = find_unlinked_mentions(posts, 0.2)
        self.assertEqual(len(mentions), 1)
        m = mentions[0]
        self.assertEqual(m.source_post_id, "source")
        self.assertEqual(m.target_post_id, "target")
        self.assertEqual(m.topic, "spaced repetition")
        self.assertAlmostEqual(m.confidence, 0.4)
        self.assertIn("Spaced repetition", m.snippet)
        self.assertTrue(m.snippet.startswith("…") and m.snippet.endswith("…"))

    def test_no_overlap_no_mentions(self):
        posts = [
            make_node("a", ["foo"], excerpt="no overlap"),
            make_node("b", ["bar"], excerpt="still nothing"),
        ]
        self.assertEqual(find_unlinked_mentions(posts, 0.2), [])

    def test_default_threshold_needs_three_occurrences(self):
        target = make_node("t", ["python"])
        twice = make_node("s2", [], excerpt="Python here, python there.")
        thrice = make_node("s3", [], excerpt="Python, python and more PYTHON.")

        self.assertEqual(find_unlinked_mentions([twice, target]), [])
        found = find_unlinked_mentions([thrice, target])
        self.assertEqual(len(found), 1)
        self.assertAlmostEqual(found[0].confidence, 0.6)

    def test_confidence_is_capped(self):
        target = make_node("t", ["rust"])
        source = make_node("s", [], excerpt=" ".join(["rust"] * 9))
        found = find_unlinked_mentions([source, target], 0.2)
        self.assertEqual(found[0].confidence, 1.0)

    def test_short_topics_and_self_mentions_are_skipped(self):
        posts = [
            make_node("a", ["ai", "writing"], excerpt="ai ai ai ai ai on writing writing writing"),
            make_node("b", ["ai"], excerpt="nothing"),
        ]
        self.assertEqual(find_unlinked_mentions(posts, 0.2), [])

    def test_dedupes_case_variants_of_a_topic(self):
        posts = [
            make_node("s", [], excerpt="Testing is good. testing helps."),
            make_node("t", ["Testing", "testing"]),
        ]
        found = find_unlinked_mentions(posts, 0.2)
        self.assertEqual(len(found), 1)
        self.assertEqual(found[0].topic, "Testing")

    def test_regex_characters_are_literal(self):
        self.assertEqual(count_occurrences("c++ and c++", "c++"), 2)
        self.assertEqual(count_occurrences("a.b axb", "a.b"), 1)

    def test_blank_excerpt_is_ignored(self):
        posts = [make_node("s", [], excerpt="   "), make_node("t", ["topic"])]
        self.assertEqual(find_unlinked_mentions(posts, 0.0), [])

    def test_snippet_window(self):
        text = ("x" * 200) + "needle" + ("y" * 200)
        snippet = extract_snippet(text, "NEEDLE")
        self.assertEqual(snippet, "…" + "x" * 80 + "needle" + "y" * 80 + "…")
        self.assertEqual(extract_snippet("short needle.", "needle"), "…short needle.…")
        self.assertEqual(extract_snippet("nothing here", "needle"), "")


if __name__ == "__main__":
    unittest.main()
