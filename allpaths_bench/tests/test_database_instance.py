"""Unit tests for database_instance.py."""

import unittest
from unittest.mock import call, patch

import allpaths_bench.database_instance as under_test
from allpaths_bench.config import DatabaseConfig

# pylint: disable=missing-docstring


def ns(name):
    return f"allpaths_bench.database_instance.{name}"


class TestDatabaseInstance(unittest.TestCase):
    def setUp(self):
        self.config = DatabaseConfig(connection_string="mongodb://host:27017",
                                     database_name="bench", collection_name="coll",
                                     server_parameters={"flag": True})
        patcher = patch(ns("MongoClient"))
        self.mock_client_class = patcher.start()
        self.addCleanup(patcher.stop)
        self.client = self.mock_client_class.return_value

    def test_collection(self):
        database = under_test.DatabaseInstance(self.config)

        self.mock_client_class.assert_called_once_with("mongodb://host:27017")
        self.client.__getitem__.assert_called_once_with("bench")
        self.assertIs(self.client["bench"]["coll"], database.collection)

    def test_client_is_closed_on_exit(self):
        with under_test.DatabaseInstance(self.config):
            self.client.close.assert_not_called()

        self.client.close.assert_called_once()

    def test_set_parameter(self):
        under_test.DatabaseInstance(self.config).set_parameter("flag", True)

        self.client.admin.command.assert_called_once_with({"setParameter": 1, "flag": True})

    def test_get_parameter(self):
        self.client.admin.command.return_value = {"flag": False, "ok": 1}

        self.assertFalse(under_test.DatabaseInstance(self.config).get_parameter("flag"))
        self.client.admin.command.assert_called_once_with({"getParameter": 1, "flag": 1})


class TestServerParameters(unittest.TestCase):
    def setUp(self):
        patcher = patch(ns("MongoClient"))
        self.addCleanup(patcher.stop)
        self.client = patcher.start().return_value
        self.client.admin.command.side_effect = (
            lambda cmd: {"flag": "original", "ok": 1} if "getParameter" in cmd else {"ok": 1})
        self.database = under_test.DatabaseInstance(
            DatabaseConfig(connection_string="mongodb://localhost", database_name="bench",
                           collection_name="coll"))

    def test_parameters_are_restored(self):
        with under_test.get_server_parameters(self.database, {"flag": "new"}):
            pass

        self.assertEqual([
            call({"getParameter": 1, "flag": 1}),
            call({"setParameter": 1, "flag": "new"}),
            call({"setParameter": 1, "flag": "original"}),
        ], self.client.admin.command.call_args_list)

    def test_parameters_are_restored_on_error(self):
        with self.assertRaises(RuntimeError):
            with under_test.get_server_parameters(self.database, {"flag": "new"}):
                raise RuntimeError("setup failed")

        self.assertEqual(call({"setParameter": 1, "flag": "original"}),
                         self.client.admin.command.call_args)

    def test_no_parameters(self):
        with under_test.get_server_parameters(self.database, {}):
            pass

        self.client.admin.command.assert_not_called()

    def test_restore_without_remember(self):
        param = under_test.ServerParameter(self.database, "flag")

        with self.assertRaises(ValueError):
            param.restore()
