# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for wasmplay."""

from wasmplay.config.settings import (
    CONFIG_FILE_NAME,
    ConfigError,
    PlaygroundConfig,
    find_config,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "PlaygroundConfig",
    "find_config",
    "load_config",
    "parse_config",
]
