"""Unit tests for index_setup.py."""

import unittest
from unittest.mock import MagicMock

from pymongo.errors import OperationFailure

import allpaths_bench.index_setup as under_test
from allpaths_bench.corpus_generator import (deeply_nested_corpus, top_level_fields_doc,
                                             unique_leaf_corpus)
from allpaths_bench.database_instance import SetupError
from allpaths_bench.path_algebra import get_n_field_names, make_field_name_pool, unique_leaf_paths

# pylint: disable=missing-docstring


def make_collection(index_names=None):
    collection = MagicMock()
    collection.name = "test"
    collection.insert_many.return_value.acknowledged = True
    collection.create_indexes.return_value = index_names if index_names is not None else ["idx"]
    return collection


class TestIndexSpecs(unittest.TestCase):
    def test_broad_without_fields(self):
        specs = under_test.broad_index_specs()

        self.assertEqual(1, len(specs))
        self.assertTrue(specs[0].is_wildcard)
        model = specs[0].to_index_model()
        self.assertEqual({"$**": 1}, dict(model.document["key"]))
        self.assertNotIn("wildcardProjection", model.document)

    def test_broad_with_fields(self):
        (spec, ) = under_test.broad_index_specs(["a", "b.c"])

        model = spec.to_index_model()
        self.assertEqual({"a": 1, "b.c": 1}, model.document["wildcardProjection"])

    def test_targeted(self):
        specs = under_test.targeted_index_specs(["a", "b.c"])

        self.assertEqual(2, len(specs))
        self.assertFalse(any(spec.is_wildcard for spec in specs))
        documents = [spec.to_index_model().document for spec in specs]
        self.assertEqual([{"a": 1}, {"b.c": 1}], [dict(doc["key"]) for doc in documents])
        self.assertTrue(all(doc["sparse"] for doc in documents))


class TestMakeSetup(unittest.TestCase):
    def test_drop_then_insert_then_index(self):
        collection = make_collection(["$**_1"])
        documents = [{"a": i} for i in range(5)]
        setup = under_test.make_setup(under_test.broad_index_specs(), lambda: documents,
                                      batch_size=2)

        setup(collection)

        self.assertEqual(["drop", "insert_many", "insert_many", "insert_many", "create_indexes"],
                         [call[0] for call in collection.method_calls])
        batches = [call.args[0] for call in collection.insert_many.call_args_list]
        self.assertEqual([2, 2, 1], [len(batch) for batch in batches])
        for call in collection.insert_many.call_args_list:
            self.assertFalse(call.kwargs["ordered"])

    def test_corpus_is_generated_when_setup_runs(self):
        corpus_factory = MagicMock(return_value=[{"a": 1}])

        setup = under_test.make_setup(under_test.broad_index_specs(), corpus_factory)
        corpus_factory.assert_not_called()

        setup(make_collection())
        corpus_factory.assert_called_once_with()

    def test_without_corpus_nothing_is_inserted(self):
        collection = make_collection(["a_1", "b_1"])

        under_test.targeted_setup(["a", "b"])(collection)

        collection.drop.assert_called_once()
        collection.insert_many.assert_not_called()
        models = collection.create_indexes.call_args.args[0]
        self.assertEqual(2, len(models))

    def test_broad_setup_creates_projected_index(self):
        collection = make_collection(["$**_1"])

        under_test.broad_setup(["nonexistent"])(collection)

        (model, ) = collection.create_indexes.call_args.args[0]
        self.assertEqual({"nonexistent": 1}, model.document["wildcardProjection"])

    def test_unacknowledged_insert_fails_setup(self):
        collection = make_collection()
        collection.insert_many.return_value.acknowledged = False
        setup = under_test.make_setup(under_test.broad_index_specs(), lambda: [{"a": 1}])

        with self.assertRaises(SetupError):
            setup(collection)

        collection.create_indexes.assert_not_called()

    def test_missing_index_fails_setup(self):
        collection = make_collection(["a_1"])

        with self.assertRaises(SetupError):
            under_test.targeted_setup(["a", "b"])(collection)

    def test_server_errors_propagate(self):
        collection = make_collection()
        collection.create_indexes.side_effect = OperationFailure("bad index")

        with self.assertRaises(OperationFailure):
            under_test.broad_setup()(collection)


class TestCountIndexEntries(unittest.TestCase):
    def setUp(self):
        self.pool = make_field_name_pool(200)

    def test_broad_and_targeted_have_the_same_entries_on_flat_documents(self):
        generator = top_level_fields_doc(get_n_field_names(4))
        documents = [generator(i) for i in range(10)] + [{"other": 1}]
        fields = get_n_field_names(2)

        broad = under_test.count_index_entries(under_test.broad_index_specs(fields), documents)
        targeted = under_test.count_index_entries(under_test.targeted_index_specs(fields),
                                                  documents)

        self.assertEqual(20, broad)
        self.assertEqual(broad, targeted)

    def test_broad_and_targeted_have_the_same_entries_on_unique_leaves(self):
        documents = unique_leaf_corpus(self.pool, 50)
        fields = [path for i in range(50) for path in unique_leaf_paths(self.pool, i)]

        broad = under_test.count_index_entries(under_test.broad_index_specs(fields), documents)
        targeted = under_test.count_index_entries(under_test.targeted_index_specs(fields),
                                                  documents)

        self.assertEqual(100, broad)
        self.assertEqual(broad, targeted)

    def test_unprojected_index_covers_every_leaf(self):
        documents = deeply_nested_corpus(self.pool, count=3)

        self.assertEqual(
            48, under_test.count_index_entries(under_test.broad_index_specs(), documents))

    def test_projection_excluding_every_field(self):
        generator = top_level_fields_doc(get_n_field_names(16))
        documents = [generator(i) for i in range(3)]

        self.assertEqual(
            0,
            under_test.count_index_entries(under_test.broad_index_specs(["nonexistent"]),
                                           documents))

    def test_id_is_not_indexed_by_all_paths_index(self):
        self.assertEqual(
            1, under_test.count_index_entries(under_test.broad_index_specs(), [{"_id": 1, "a": 2}]))

    def test_exclusion_projection(self):
        spec = under_test.IndexSpec(keys=(("$**", 1), ), options={"wildcardProjection": {"a": 0}})

        self.assertEqual(1, under_test.count_index_entries([spec], [{"a": 1, "b": {"c": 1}}]))

    def test_projection_on_a_prefix(self):
        documents = [{"a": {"b": 1, "c": 2}, "ab": 3}]

        self.assertEqual(
            2, under_test.count_index_entries(under_test.broad_index_specs(["a"]), documents))

    def test_non_sparse_index_has_an_entry_per_document(self):
        spec = under_test.IndexSpec(keys=(("a", 1), ))

        self.assertEqual(2, under_test.count_index_entries([spec], [{"a": 1}, {"b": 1}]))
