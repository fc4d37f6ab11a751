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
"""Registry of the benchmark cases handed over to the benchmark harness."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import (Any, Callable, FrozenSet, Iterable, Iterator, List, Mapping, Optional,
                    Sequence, Tuple)

import structlog

from allpaths_bench.document_builder import Document, set_field
from allpaths_bench.index_setup import SetupProc, broad_setup, targeted_setup

__all__ = ["BASE_TAGS", "INSERT_TAGS", "BenchmarkCase", "QueryTargets", "CaseRegistry"]

LOGGER = structlog.get_logger(__name__)

BASE_TAGS = frozenset(["all_paths", "regression", "indexed"])
INSERT_TAGS = frozenset(["insert"])

Operation = Mapping[str, Any]
DocumentGenerator = Callable[[int], Document]


@dataclass(frozen=True)
class BenchmarkCase:
    """A named setup procedure and the operations to measure after it ran."""

    name: str
    tags: FrozenSet[str]
    setup: SetupProc
    operations: Tuple[Operation, ...]


@dataclass(frozen=True)
class QueryTargets:
    """Fields of one generated document the standard cases are aimed at.

    The range is (lower_range, upper_range].
    """

    primary_field: str
    secondary_field: str
    lower_range: int
    upper_range: int


def insert_operation(document: Document) -> Operation:
    """Return the descriptor of an insert of 'document'."""
    return {"op": "insert", "doc": document}


class CaseRegistry:
    """Append-only list of benchmark cases."""

    def __init__(self) -> None:
        self._cases: List[BenchmarkCase] = []
        self._lock = threading.Lock()

    def __iter__(self) -> Iterator[BenchmarkCase]:
        return iter(self.cases)

    def __len__(self) -> int:
        return len(self._cases)

    @property
    def cases(self) -> Tuple[BenchmarkCase, ...]:
        """Return the cases in registration order."""
        with self._lock:
            return tuple(self._cases)

    def names(self) -> List[str]:
        return [case.name for case in self.cases]

    def find(self, name: str) -> Optional[BenchmarkCase]:
        """Return the last case registered under 'name', if any."""
        for case in reversed(self.cases):
            if case.name == name:
                return case
        return None

    def filter_by_tag(self, tag: str) -> List[BenchmarkCase]:
        return [case for case in self.cases if tag in case.tags]

    def register(self, type_tag: str, case_name: str, setup: SetupProc,
                 operations: Sequence[Operation], extra_tags: Iterable[str] = ()) -> BenchmarkCase:
        """
        Add a benchmark case named '{type_tag}.AllPathsIndex.{case_name}'.

        The "all_paths", "regression" and "indexed" tags are added to 'extra_tags'. Names are not
        checked for duplicates.

        :param type_tag: The type of the case, prepended to the name.
        :param case_name: The name of the case.
        :param setup: Procedure preparing the collection the operations run against.
        :param operations: The operations to perform.
        :param extra_tags: Additional tags describing the case.
        :return: the registered case.
        """
        case = BenchmarkCase(
            name=f"{type_tag}.AllPathsIndex.{case_name}",
            tags=BASE_TAGS | frozenset(extra_tags),
            setup=setup,
            operations=tuple(operations),
        )
        with self._lock:
            self._cases.append(case)
        LOGGER.debug("Registered benchmark case", name=case.name, operations=len(operations))
        return case

    def register_insert(self, name: str, setup: SetupProc, document: Document) -> BenchmarkCase:
        """Register a case inserting the single 'document'."""
        return self.register("Insert", f"{name}.InsertDoc", setup, [insert_operation(document)],
                             INSERT_TAGS)

    def register_insert_batch(self, name: str, setup: SetupProc,
                              doc_generator: DocumentGenerator, count: int = 1000) -> BenchmarkCase:
        """Register a case inserting doc_generator(i) for i in [0, count)."""
        operations = [insert_operation(doc_generator(i)) for i in range(count)]
        return self.register("Insert", f"{name}.InsertDoc", setup, operations, INSERT_TAGS)

    def register_standard_cases(self, name: str, setup: SetupProc,
                                targets: QueryTargets) -> List[BenchmarkCase]:
        """Register the standard set of cases run against a collection of some document shape.

        Only the insert of the primary field is registered so far, the secondary field and the
        lower end of the range are kept for compound and range queries.
        """
        document = set_field({}, targets.primary_field, targets.upper_range)
        return [self.register_insert(name, setup, document)]

    def register_comparison_cases(self, name: str, fields: Sequence[str],
                                  doc_generator: DocumentGenerator,
                                  count: int = 1000) -> List[BenchmarkCase]:
        """Register insert cases comparing an all paths index with one index per field.

        Both setups start from an empty collection and index 'fields' only, so both produce the
        same number of index entries.
        """
        return [
            self.register_insert_batch(f"{name}.AllPathsIndex", broad_setup(fields),
                                       doc_generator, count),
            self.register_insert_batch(f"{name}.StandardIndex", targeted_setup(fields),
                                       doc_generator, count),
        ]
