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
"""Command line access to the all paths index benchmark cases."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Sequence

import click
import structlog
from bson import json_util

from allpaths_bench.all_paths_index import build_cases
from allpaths_bench.benchmark_settings import load_config
from allpaths_bench.cmdutils import enable_logging
from allpaths_bench.config import Config
from allpaths_bench.database_instance import DatabaseInstance, get_server_parameters
from allpaths_bench.registry import BenchmarkCase, CaseRegistry

LOGGER = structlog.get_logger(__name__)


def _select_cases(registry: CaseRegistry, tag: Optional[str]) -> Sequence[BenchmarkCase]:
    if tag is None:
        return registry.cases
    return registry.filter_by_tag(tag)


def case_to_dict(case: BenchmarkCase) -> Dict[str, Any]:
    """Return the part of a case the benchmark harness needs besides its setup procedure."""
    return {"name": case.name, "tags": sorted(case.tags), "ops": list(case.operations)}


def write_cases(path: str, cases: Sequence[BenchmarkCase]) -> None:
    """Write the cases to 'path' as MongoDB Extended JSON."""
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    with open(path, "w") as file_handle:
        file_handle.write(json_util.dumps([case_to_dict(case) for case in cases], indent=2))


@click.group()
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="YAML file overriding the default database and workload settings.")
@click.option("--connection-string", help="MongoDB connection string.")
@click.option("--database", "database_name", help="Database the cases are set up in.")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_file: Optional[str], connection_string: Optional[str],
         database_name: Optional[str], verbose: bool) -> None:
    """Generate benchmark cases for inserts into collections with all paths indexes."""
    enable_logging(verbose)
    ctx.obj = load_config(config_file, connection_string=connection_string,
                          database_name=database_name)


@main.command("list")
@click.option("--tag", help="Only list the cases carrying this tag.")
@click.pass_obj
def list_cases(config: Config, tag: Optional[str]) -> None:
    """Print the names of the registered cases."""
    for case in _select_cases(build_cases(config.workload), tag):
        click.echo(case.name)


@main.command("export")
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--tag", help="Only export the cases carrying this tag.")
@click.pass_obj
def export_cases(config: Config, output: str, tag: Optional[str]) -> None:
    """Write the registered cases and their operations to OUTPUT."""
    cases = _select_cases(build_cases(config.workload), tag)
    write_cases(output, cases)
    LOGGER.info("Exported benchmark cases", path=output, count=len(cases))


@main.command("setup")
@click.argument("case_names", nargs=-1, required=True)
@click.pass_obj
def setup_cases(config: Config, case_names: List[str]) -> None:
    """Run the setup of the named cases against the configured server, one after another."""
    registry = build_cases(config.workload)
    cases = []
    for name in case_names:
        case = registry.find(name)
        if case is None:
            raise click.BadParameter(f"Unknown benchmark case: {name}", param_hint="CASE_NAMES")
        cases.append(case)

    with DatabaseInstance(config.database) as database:
        with get_server_parameters(database, config.database.server_parameters):
            for case in cases:
                LOGGER.info("Running setup", case=case.name,
                            collection=database.collection.full_name)
                case.setup(database.collection)


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
