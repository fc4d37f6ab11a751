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
"""Benchmark cases for inserts into collections with an all paths index."""

from __future__ import annotations

import functools
from typing import Sequence

import structlog

from allpaths_bench.config import WorkloadConfig
from allpaths_bench.corpus_generator import (deeply_nested_corpus, top_level_fields_doc,
                                             unique_leaf_corpus)
from allpaths_bench.index_setup import broad_setup
from allpaths_bench.path_algebra import (get_n_field_names, make_field_name_pool,
                                         nested_leaf_path, unique_leaf_paths)
from allpaths_bench.registry import CaseRegistry, QueryTargets

__all__ = ["build_cases", "all_diff_fields_targets", "deeply_nested_targets"]

LOGGER = structlog.get_logger(__name__)


def all_diff_fields_targets(pool: Sequence[str], workload: WorkloadConfig) -> QueryTargets:
    """Return the two leaves of the unique leaf document holding 'index_for_queries'."""
    primary, secondary = unique_leaf_paths(pool, workload.index_for_queries)
    return QueryTargets(
        primary_field=primary,
        secondary_field=secondary,
        lower_range=workload.index_for_queries - workload.number_for_range,
        upper_range=workload.index_for_queries,
    )


def deeply_nested_targets(pool: Sequence[str], workload: WorkloadConfig) -> QueryTargets:
    """Return the first two leaves of the deeply nested document holding 'index_for_queries'."""
    depth = workload.number_for_range - 1
    primary, secondary = [
        nested_leaf_path(pool, workload.index_for_queries, depth, j, n=workload.number_for_range)
        for j in (0, 1)
    ]
    return QueryTargets(
        primary_field=primary,
        secondary_field=secondary,
        lower_range=workload.deeply_nested_lower_range,
        upper_range=workload.index_for_queries,
    )


def _top_level_case_name(field_count: int) -> str:
    return f"TopLevelField{'s' if field_count > 1 else ''}-{field_count}"


def build_cases(workload: WorkloadConfig) -> CaseRegistry:
    """Create every all paths index benchmark case and return them in a new registry."""
    pool = make_field_name_pool(workload.field_name_count)
    registry = CaseRegistry()

    # None of the inserted fields is covered by the index projection.
    registry.register_insert_batch(
        "MultipleFieldsAllExcluded", broad_setup(["nonexistent"]),
        top_level_fields_doc(get_n_field_names(workload.excluded_field_count)),
        workload.insert_batch_count)

    unique_leaves = functools.partial(unique_leaf_corpus, pool, workload.corpus_size)
    registry.register_standard_cases(
        "AllDiffFields",
        broad_setup(corpus_factory=unique_leaves, batch_size=workload.write_batch_size),
        all_diff_fields_targets(pool, workload))

    deeply_nested = functools.partial(deeply_nested_corpus, pool, workload.corpus_size,
                                      workload.number_for_range - 1, workload.number_for_range)
    registry.register_standard_cases(
        "DeeplyNested",
        broad_setup(corpus_factory=deeply_nested, batch_size=workload.write_batch_size),
        deeply_nested_targets(pool, workload))

    # Comparison cases which use a standard index.
    for field_count in workload.top_level_field_counts:
        field_names = get_n_field_names(field_count)
        registry.register_comparison_cases(_top_level_case_name(field_count), field_names,
                                           top_level_fields_doc(field_names),
                                           workload.insert_batch_count)

    LOGGER.info("Registered benchmark cases", count=len(registry))
    return registry
