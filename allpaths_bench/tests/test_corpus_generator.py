"""Unit tests for corpus_generator.py."""

import unittest

import allpaths_bench.corpus_generator as under_test
from allpaths_bench.path_algebra import make_field_name_pool, unique_leaf_paths

# pylint: disable=missing-docstring


def leaf_path_signature(document):
    """Return the top level field and the set of leaf names of a unique leaf document."""
    (top, leaves), = document.items()
    return top, frozenset(leaves)


class TestUniqueLeafCorpus(unittest.TestCase):
    def setUp(self):
        self.pool = make_field_name_pool(200)

    def test_first_documents(self):
        corpus = under_test.unique_leaf_corpus(self.pool, 2)

        self.assertEqual([
            {"field-0": {"field-1": 0, "field-2": 0}},
            {"field-1": {"field-2": 1, "field-3": 1}},
        ], corpus)

    def test_default_size(self):
        self.assertEqual(4800, len(under_test.unique_leaf_corpus(self.pool)))

    def test_no_two_documents_share_a_leaf_path(self):
        corpus = under_test.unique_leaf_corpus(self.pool, 4800)

        signatures = {leaf_path_signature(document) for document in corpus}

        self.assertEqual(len(corpus), len(signatures))

    def test_no_two_documents_share_a_leaf_path_within_a_full_cycle(self):
        pool = make_field_name_pool(5)
        corpus = under_test.unique_leaf_corpus(pool, len(pool) * len(pool))

        signatures = {leaf_path_signature(document) for document in corpus}

        self.assertEqual(len(corpus), len(signatures))

    def test_leaf_paths_can_be_computed(self):
        corpus = under_test.unique_leaf_corpus(self.pool, 3112)

        for index in (0, 199, 200, 3111):
            for path in unique_leaf_paths(self.pool, index):
                top, leaf = path.split(".")
                self.assertEqual(index, corpus[index][top][leaf])


class TestDeeplyNestedCorpus(unittest.TestCase):
    def setUp(self):
        self.pool = make_field_name_pool(200)

    def test_every_document_has_the_same_depth(self):
        corpus = under_test.deeply_nested_corpus(self.pool, count=250, depth=15, n=16)

        for value, document in enumerate(corpus):
            node = document
            for _ in range(15):
                self.assertEqual(1, len(node))
                (node, ) = node.values()
                self.assertIsInstance(node, dict)
            self.assertEqual(16, len(node))
            self.assertEqual({value}, set(node.values()))

    def test_neighbours_share_most_of_their_path(self):
        first, second = under_test.deeply_nested_corpus(self.pool, count=2, depth=2, n=1)

        self.assertEqual({"field-0": {"field-1": {"field-2": 0}}}, first)
        self.assertEqual({"field-1": {"field-2": {"field-3": 1}}}, second)

    def test_is_deterministic(self):
        self.assertEqual(
            under_test.deeply_nested_corpus(self.pool, count=20),
            under_test.deeply_nested_corpus(self.pool, count=20))


class TestTopLevelFieldsDoc(unittest.TestCase):
    def test_all_fields_hold_the_seed(self):
        generator = under_test.top_level_fields_doc(["a", "b", "c"])

        self.assertEqual({"a": 5, "b": 5, "c": 5}, generator(5))

    def test_every_call_returns_a_new_document(self):
        generator = under_test.top_level_fields_doc(["a"])

        self.assertIsNot(generator(1), generator(1))

    def test_no_fields(self):
        self.assertEqual({}, under_test.top_level_fields_doc([])(3))
