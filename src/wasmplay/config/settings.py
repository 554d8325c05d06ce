# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML loader for the ``.wasmplay.yaml`` configuration file."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wasmplay.packaging.archive import DEFAULT_ARCHIVE_NAME

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".wasmplay.yaml"


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


class PlaygroundConfig(BaseModel):
    """Settings that shape how modules are run and packaged.

    Attributes:
        fuel: Optional execution budget; a module that exhausts it traps.
        archive_name: File name of the package written by ``wasmplay package``.
        output_directory: Directory (relative to the config file) for outputs.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    fuel: int | None = Field(default=None, gt=0)
    archive_name: str = Field(alias="archive-name", default=DEFAULT_ARCHIVE_NAME, min_length=1)
    output_directory: str = Field(alias="output-directory", default=".")


def load_config(path: Path) -> PlaygroundConfig:
    """Load and validate a configuration file.

    An empty file yields the defaults.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or does not
            match the expected schema.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return parse_config(text, source_label=str(path))


def find_config(directory: Path) -> PlaygroundConfig:
    """Load ``.wasmplay.yaml`` from *directory*, or return defaults if absent."""
    candidate = directory / CONFIG_FILE_NAME
    if not candidate.exists():
        return PlaygroundConfig()
    return load_config(candidate)


def parse_config(text: str, source_label: str = "<string>") -> PlaygroundConfig:
    """Parse configuration YAML *text*.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages.

    Raises:
        ConfigError: If the YAML is invalid or fails validation.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    try:
        return PlaygroundConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {source_label}: {exc}") from exc
