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
"""Index arithmetic used to pick field names for generated documents.

Documents draw their field names from a fixed pool addressed modulo its size. The helpers here
are exposed so that callers can recompute, after the fact, which fields a document builder call
wrote to, e.g. to point an insert or a query at exactly those fields.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

__all__ = [
    "PATH_SEPARATOR", "FieldNamePool", "get_n_field_names", "make_field_name_pool", "field_name",
    "next_free_index", "unique_skip", "nested_path", "nested_leaf_path", "nested_leaf_paths",
    "unique_leaf_paths"
]

PATH_SEPARATOR = "."

FieldNamePool = Tuple[str, ...]


def get_n_field_names(n: int) -> List[str]:
    """Return the field names 'field-0' .. 'field-{n-1}'."""
    return [f"field-{i}" for i in range(n)]


def make_field_name_pool(count: int = 200) -> FieldNamePool:
    """Create an immutable pool of 'count' distinct field names."""
    return tuple(get_n_field_names(count))


def field_name(pool: Sequence[str], index: int) -> str:
    """Return the pool entry for 'index', wrapping around the end of the pool."""
    return pool[index % len(pool)]


def next_free_index(offset: int, depth: int, n: int, skip: int) -> int:
    """Return the first pool index not consumed by a nested build.

    A nested build starting at 'offset' names its levels 'offset + d * skip'. Once 'depth' levels
    were named, (depth - 1) * skip is the index of the last level relative to 'offset', and
    n * (skip - 1) is the position of the last field written by the previous build that shared
    the same path when skip grows by one per wraparound of the pool. One past that is free.
    """
    return offset + (depth - 1) * skip + n * (skip - 1) + 1


def unique_skip(index: int, pool_size: int) -> int:
    """Return the stride that keeps the leaves of document 'index' apart from its neighbours.

    The stride grows by one every time 'index' wraps around the pool, so documents sharing a top
    level field name get their leaves from a different part of the pool. Once the index exceeds
    pool_size * pool_size the strides repeat and paths may collide again.
    """
    return index // pool_size + 1


def _path_segments(pool: Sequence[str], offset: int, max_depth: int, skip: int,
                   current_depth: int) -> List[str]:
    return [field_name(pool, offset + depth * skip) for depth in range(current_depth, max_depth)]


def nested_path(pool: Sequence[str], offset: int, max_depth: int, skip: int = 1,
                current_depth: int = 0) -> str:
    """Return the dotted path of the object a nested build writes its leaves into."""
    return PATH_SEPARATOR.join(_path_segments(pool, offset, max_depth, skip, current_depth))


def nested_leaf_path(pool: Sequence[str], offset: int, max_depth: int, j: int, n: int = 1,
                     skip: int = 1, current_depth: int = 0) -> str:
    """Return the dotted path of the j-th leaf field written by a nested build.

    The arguments mirror the ones given to build_nested_with_skip().
    """
    terminal_depth = max(current_depth, max_depth)
    leaf = field_name(pool, next_free_index(offset, terminal_depth, n, skip) + j)
    return PATH_SEPARATOR.join(_path_segments(pool, offset, max_depth, skip, current_depth) +
                               [leaf])


def nested_leaf_paths(pool: Sequence[str], offset: int, max_depth: int, n: int, skip: int = 1,
                      current_depth: int = 0) -> List[str]:
    """Return the dotted paths of all 'n' leaf fields written by a nested build."""
    return [
        nested_leaf_path(pool, offset, max_depth, j, n=n, skip=skip, current_depth=current_depth)
        for j in range(n)
    ]


def unique_leaf_paths(pool: Sequence[str], index: int) -> Tuple[str, str]:
    """Return the two leaf paths that document 'index' of the unique leaf corpus holds."""
    skip = unique_skip(index, len(pool))
    first, second = nested_leaf_paths(pool, index, 1, 2, skip=skip)
    return first, second
