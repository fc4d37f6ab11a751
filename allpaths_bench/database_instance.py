# Copyright (C) 2024-present MongoDB, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the Server Side Public License, version 1,
# as published by MongoDB, Inc.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# Server Side Public License for more details.
#
# You should have received a copy of the Server Side Public License
# along with this program. If not, see
# <http://www.mongodb.com/licensing/server-side-public-license>.
#
# As a special exception, the copyright holders give permission to link the
# code of portions of this program with the OpenSSL library under certain
# conditions as described in each individual source file and distribute
# linked combinations including the program with the OpenSSL library. You
# must comply with the Server Side Public License in all respects for
# all of the code used other than as permitted herein. If you modify file(s)
# with this exception, you may extend this exception to your version of the
# file(s), but you are not obligated to do so. If you do not wish to do so,
# delete this exception statement from your version. If you delete this
# exception statement from all source files in the program, then also delete
# it in the license file.
#
"""A wrapper with useful methods over MongoDB database."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping

import structlog
from pymongo import MongoClient
from pymongo.collection import Collection

from allpaths_bench.config import DatabaseConfig

__all__ = ["DatabaseInstance", "SetupError", "get_server_parameters"]

LOGGER = structlog.get_logger(__name__)


class SetupError(Exception):
    """Raised when the server did not acknowledge a step of a benchmark setup."""


class DatabaseInstance:
    """MongoDB Database wrapper."""

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize wrapper."""
        self.config = config
        self.client = MongoClient(config.connection_string)
        self.database = self.client[config.database_name]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.client.close()

    @property
    def collection(self) -> Collection:
        """Return the collection benchmark cases are set up on."""
        return self.database[self.config.collection_name]

    def set_parameter(self, name: str, value: Any) -> None:
        """Set MongoDB Parameter. Throw pymongo.errors.OperationFailure in case of failure."""
        self.client.admin.command({"setParameter": 1, name: value})

    def get_parameter(self, name: str) -> Any:
        """Get the current value of MongoDB Parameter."""
        return self.client.admin.command({"getParameter": 1, name: 1})[name]


class ServerParameter:
    """A utility class to work with MongoDB parameters."""

    def __init__(self, database: DatabaseInstance, parameter_name: str) -> None:
        """Initialize the class."""
        self.database = database
        self.parameter_name = parameter_name
        self.original_value = None

    def set(self, value: Any) -> None:
        """Set the parameter's value."""
        self.database.set_parameter(self.parameter_name, value)

    def remember(self) -> None:
        """Store the current value of the parameter so it can be restored lately."""
        self.original_value = self.database.get_parameter(self.parameter_name)

    def restore(self) -> None:
        """Restore the remembered value of the parameter."""
        if self.original_value is None:
            raise ValueError(f'The parameter "{self.parameter_name}" has not been remembered.')
        self.set(self.original_value)


@contextmanager
def get_server_parameters(database: DatabaseInstance,
                          parameters: Mapping[str, Any]) -> Iterator[None]:
    """Set the given server parameters and restore their original values on teardown."""
    applied = []
    try:
        for name, value in parameters.items():
            param = ServerParameter(database, name)
            param.remember()
            param.set(value)
            applied.append(param)
            LOGGER.info("Set server parameter", name=name, value=value,
                        original_value=param.original_value)
        yield
    finally:
        for param in reversed(applied):
            param.restore()
