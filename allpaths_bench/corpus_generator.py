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
"""Generate the document batches each benchmark scenario is set up with."""

from __future__ import annotations

from typing import Callable, List, Sequence

from allpaths_bench.document_builder import (Document, build_nested, build_nested_with_skip,
                                             set_many_fields)
from allpaths_bench.path_algebra import unique_skip

__all__ = ["unique_leaf_corpus", "deeply_nested_corpus", "top_level_fields_doc"]


def unique_leaf_corpus(pool: Sequence[str], count: int = 4800) -> List[Document]:
    """Generate documents where none of the documents share a path to a value.

    Every document has one top level object holding two leaf fields.
    """
    return [
        build_nested_with_skip({}, pool, i, 1, 0, [i], 2, unique_skip(i, len(pool)))
        for i in range(count)
    ]


def deeply_nested_corpus(pool: Sequence[str], count: int = 4800, depth: int = 15,
                         n: int = 16) -> List[Document]:
    """Generate documents holding 'n' values 'depth' objects deep.

    Each document starts its chain one pool entry further along, so neighbouring documents share
    most of their path.
    """
    return [build_nested({}, pool, i, depth, 0, [i], n) for i in range(count)]


def top_level_fields_doc(field_names: Sequence[str]) -> Callable[[int], Document]:
    """Return a function producing a flat document with every one of 'field_names' set to seed."""

    def generate(seed: int) -> Document:
        return set_many_fields({}, field_names, 0, [seed], len(field_names))

    return generate
