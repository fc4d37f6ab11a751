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
"""Build flat and nested documents out of a field name pool.

A document node is either an interior mapping (a dict) or a leaf value (anything else). Writes
that need to descend through a leaf replace it with an empty mapping first, so later writes
always win.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from allpaths_bench.path_algebra import PATH_SEPARATOR, field_name, next_free_index

__all__ = [
    "Document", "is_interior", "descend", "set_field", "set_many_fields",
    "build_nested_with_skip", "build_nested"
]

Document = Dict[str, Any]


def is_interior(node: Any) -> bool:
    """Return True if 'node' is a mapping that can hold nested fields."""
    return isinstance(node, dict)


def descend(document: Document, name: str) -> Document:
    """Return the mapping stored under 'name', replacing a leaf (or nothing) with {}."""
    child = document.get(name)
    if not is_interior(child):
        child = {}
        document[name] = child
    return child


def set_field(document: Document, path: Optional[str], value: Any) -> Document:
    """Set 'value' at the dotted 'path' inside 'document' and return the document.

    Intermediate leaf values along the path are overwritten with empty mappings.
    """
    if path is None:
        return document

    head, sep, rest = path.partition(PATH_SEPARATOR)
    if not sep:
        document[path] = value
    else:
        set_field(descend(document, head), rest, value)
    return document


def set_many_fields(document: Document, pool: Sequence[str], offset: int, values: Sequence[Any],
                    n: int) -> Document:
    """Add 'n' fields named from 'pool' starting at 'offset', cycling through 'values'."""
    for i in range(n):
        document[field_name(pool, offset + i)] = values[i % len(values)]
    return document


def build_nested_with_skip(document: Document, pool: Sequence[str], offset: int, max_depth: int,
                           current_depth: int, values: Sequence[Any], n: int,
                           skip: int) -> Document:
    """Write 'n' leaf fields below a chain of nested objects.

    The chain is document[pool[offset + current_depth * skip]]...[pool[offset + (max_depth - 1) *
    skip]], created as needed. Leaf values already sitting on the chain are replaced.
    """
    node = document
    for depth in range(current_depth, max_depth):
        node = descend(node, field_name(pool, offset + depth * skip))

    terminal_depth = max(current_depth, max_depth)
    set_many_fields(node, pool, next_free_index(offset, terminal_depth, n, skip), values, n)
    return document


def build_nested(document: Document, pool: Sequence[str], offset: int, max_depth: int,
                 current_depth: int, values: Sequence[Any], n: int) -> Document:
    """Same as build_nested_with_skip() with consecutive field names along the chain."""
    return build_nested_with_skip(document, pool, offset, max_depth, current_depth, values, n, 1)
