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
"""Configuration of the all paths index workload."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence


@dataclass
class Config:
    """Main configuration class."""

    database: DatabaseConfig
    workload: WorkloadConfig


@dataclass
class DatabaseConfig:
    """Database configuration."""

    connection_string: str
    database_name: str
    collection_name: str
    # Server parameters set for the duration of a setup run, e.g. feature flags.
    server_parameters: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class WorkloadConfig:
    """Parameters of the generated documents and benchmark cases."""

    # Size of the field name pool every generated document draws from.
    field_name_count: int
    # Number of documents the unique leaf and deeply nested collections are populated with.
    corpus_size: int
    # Document whose fields the standard cases write to.
    index_for_queries: int
    # Width of the query range; the deeply nested documents are one level shallower.
    number_for_range: int
    deeply_nested_lower_range: int
    # Number of insert operations of a batch insert case.
    insert_batch_count: int
    # Number of top level fields inserted by the case whose index excludes them all.
    excluded_field_count: int
    top_level_field_counts: Sequence[int]
    # Number of documents per insert_many() call while populating a collection.
    write_batch_size: int
