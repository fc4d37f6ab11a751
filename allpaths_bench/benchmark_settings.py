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
"""Default settings of the all paths index workload and loading of overrides."""

from __future__ import annotations

import dataclasses
from typing import Any, Mapping, Optional

import yaml

from allpaths_bench import config

__all__ = ["main_config", "get_config_value", "read_config_file", "load_config"]

database = config.DatabaseConfig(
    connection_string="mongodb://localhost",
    database_name="allpaths_bench",
    collection_name="test",
    server_parameters={},
)

workload = config.WorkloadConfig(
    field_name_count=200,
    corpus_size=4800,
    index_for_queries=3111,
    number_for_range=16,
    deeply_nested_lower_range=110,
    insert_batch_count=1000,
    excluded_field_count=16,
    top_level_field_counts=(1, 2, 4, 8, 16),
    write_batch_size=1000,
)

main_config = config.Config(database=database, workload=workload)


def get_config_value(attrib: str, cmd_line_options: Mapping[str, Any],
                     config_file_data: Mapping[str, Any], default: Any = None) -> Any:
    """
    Get the configuration value to use.

    First use command line options, then config file option, then the default.

    :param attrib: Attribute to search for.
    :param cmd_line_options: Command line options, None meaning not given.
    :param config_file_data: Config file data.
    :param default: Default value if option is not found.
    :return: value to use for this option.
    """
    value = cmd_line_options.get(attrib)
    if value is not None:
        return value

    if attrib in config_file_data:
        return config_file_data[attrib]

    return default


def read_config_file(config_file: Optional[str]) -> Mapping[str, Any]:
    """
    Read the yaml config file specified.

    :param config_file: path to config file.
    :return: Object representing contents of config file.
    """
    config_file_data = {}
    if config_file:
        with open(config_file) as file_handle:
            config_file_data = yaml.safe_load(file_handle) or {}

    return config_file_data


def _merge_section(defaults: Any, section_name: str, cmd_line_options: Mapping[str, Any],
                   config_file_data: Mapping[str, Any]) -> Any:
    section = config_file_data.get(section_name) or {}
    known = {f.name for f in dataclasses.fields(defaults)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown {section_name} options: {', '.join(sorted(unknown))}")

    values = {
        name: get_config_value(name, cmd_line_options, section, getattr(defaults, name))
        for name in known
    }
    return dataclasses.replace(defaults, **values)


def load_config(config_file: Optional[str] = None, **cmd_line_options: Any) -> config.Config:
    """
    Build the configuration from the defaults, a yaml file and command line options.

    The yaml file may hold a 'database' and a 'workload' section whose keys are the field names of
    DatabaseConfig and WorkloadConfig.

    :param config_file: path to config file.
    :param cmd_line_options: Overrides keyed by field name, None values are ignored.
    :return: the resulting configuration.
    """
    config_file_data = read_config_file(config_file)
    unknown = set(config_file_data) - {"database", "workload"}
    if unknown:
        raise ValueError(f"Unknown config sections: {', '.join(sorted(unknown))}")

    return config.Config(
        database=_merge_section(main_config.database, "database", cmd_line_options,
                                config_file_data),
        workload=_merge_section(main_config.workload, "workload", cmd_line_options,
                                config_file_data),
    )
