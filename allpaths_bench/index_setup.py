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
"""Set up a collection with either one all paths index or one index per field.

Both strategies are meant to be compared against each other, so for the same set of fields they
produce the same number of index entries: the all paths index is scoped with a projection and
the single field indexes are sparse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, Tuple

import pymongo
import structlog
from pymongo import IndexModel
from pymongo.collection import Collection

from allpaths_bench.database_instance import SetupError
from allpaths_bench.document_builder import Document, is_interior
from allpaths_bench.path_algebra import PATH_SEPARATOR

__all__ = [
    "WILDCARD_KEY", "IndexSpec", "SetupProc", "CorpusFactory", "broad_index_specs",
    "targeted_index_specs", "make_setup", "broad_setup", "targeted_setup", "populate_collection",
    "create_indexes", "count_index_entries"
]

LOGGER = structlog.get_logger(__name__)

WILDCARD_KEY = "$**"

SetupProc = Callable[[Collection], None]
CorpusFactory = Callable[[], Sequence[Document]]

_MISSING = object()


@dataclass(frozen=True)
class IndexSpec:
    """Key pattern and creation options of one index."""

    keys: Tuple[Tuple[str, int], ...]
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_wildcard(self) -> bool:
        """Return True for an all paths index."""
        return any(key == WILDCARD_KEY for key, _ in self.keys)

    def to_index_model(self) -> IndexModel:
        """Return the pymongo representation of the index."""
        return IndexModel(list(self.keys), **self.options)


def broad_index_specs(fields: Optional[Sequence[str]] = None) -> Sequence[IndexSpec]:
    """Return a single all paths index, restricted to 'fields' when they are given."""
    options = {}
    if fields is not None:
        options["wildcardProjection"] = {path: 1 for path in fields}
    return [IndexSpec(keys=((WILDCARD_KEY, pymongo.ASCENDING), ), options=options)]


def targeted_index_specs(fields: Sequence[str]) -> Sequence[IndexSpec]:
    """Return one sparse single field index per entry of 'fields'."""
    # Sparse, so that documents without the field do not add entries the all paths index would
    # not have either.
    return [
        IndexSpec(keys=((path, pymongo.ASCENDING), ), options={"sparse": True}) for path in fields
    ]


def populate_collection(collection: Collection, documents: Sequence[Document],
                        batch_size: int) -> None:
    """Insert the documents in unordered batches of 'batch_size'."""
    for start in range(0, len(documents), batch_size):
        result = collection.insert_many(documents[start:start + batch_size], ordered=False)
        if not result.acknowledged:
            raise SetupError(f"Insert into {collection.name} was not acknowledged")

    LOGGER.info("Populated collection", collection=collection.name, documents=len(documents))


def create_indexes(collection: Collection, specs: Sequence[IndexSpec]) -> None:
    """Create the given indexes on the collection."""
    if not specs:
        return

    names = collection.create_indexes([spec.to_index_model() for spec in specs])
    if len(names) != len(specs):
        raise SetupError(
            f"Created {len(names)} of {len(specs)} indexes on {collection.name}: {names}")

    LOGGER.info("Created indexes", collection=collection.name, indexes=names)


def make_setup(specs: Sequence[IndexSpec], corpus_factory: Optional[CorpusFactory] = None,
               batch_size: int = 1000) -> SetupProc:
    """Return a setup procedure that recreates the collection with the corpus and indexes.

    The corpus is generated when the procedure runs, not when it is made.
    """

    def setup(collection: Collection) -> None:
        collection.drop()
        if corpus_factory is not None:
            populate_collection(collection, corpus_factory(), batch_size)
        create_indexes(collection, specs)

    return setup


def broad_setup(fields: Optional[Sequence[str]] = None,
                corpus_factory: Optional[CorpusFactory] = None,
                batch_size: int = 1000) -> SetupProc:
    """Return a setup procedure creating one all paths index."""
    return make_setup(broad_index_specs(fields), corpus_factory, batch_size)


def targeted_setup(fields: Sequence[str], corpus_factory: Optional[CorpusFactory] = None,
                   batch_size: int = 1000) -> SetupProc:
    """Return a setup procedure creating one sparse index per field."""
    return make_setup(targeted_index_specs(fields), corpus_factory, batch_size)


def _leaf_paths(document: Document, prefix: str = "") -> Iterator[str]:
    for name, value in document.items():
        path = prefix + name
        if is_interior(value) and value:
            yield from _leaf_paths(value, path + PATH_SEPARATOR)
        else:
            yield path


def _is_projected(path: str, projection: Mapping[str, Any]) -> bool:
    if not projection:
        return True

    def matches(prefix: str) -> bool:
        return path == prefix or path.startswith(prefix + PATH_SEPARATOR)

    included = [prefix for prefix, value in projection.items() if value]
    if included:
        return any(matches(prefix) for prefix in included)
    return not any(matches(prefix) for prefix in projection)


def _resolve(document: Document, path: str) -> Any:
    node: Any = document
    for segment in path.split(PATH_SEPARATOR):
        if not is_interior(node) or segment not in node:
            return _MISSING
        node = node[segment]
    return node


def count_index_entries(specs: Sequence[IndexSpec], documents: Sequence[Document]) -> int:
    """Return the number of index keys the given indexes would hold for the documents.

    An all paths index holds one key per leaf path allowed by its projection ('_id' excluded). A
    regular index holds one key per document, or only per document containing one of its fields
    when it is sparse. Arrays are counted as a single value.
    """
    total = 0
    for spec in specs:
        if spec.is_wildcard:
            projection = spec.options.get("wildcardProjection", {})
            for document in documents:
                total += sum(1 for path in _leaf_paths(document)
                             if path != "_id" and _is_projected(path, projection))
            continue

        if spec.options.get("sparse"):
            total += sum(1 for document in documents
                         if any(_resolve(document, key) is not _MISSING for key, _ in spec.keys))
        else:
            total += len(documents)
    return total
