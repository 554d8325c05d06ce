# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Core value types passed between the compiler, sandbox, and packager."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############

# Mapping from recognised export name to the value it returned.
ExecutionResult = dict[str, int | float | None]


class LogKind(Enum):
    """Severity class of a captured log entry."""

    INFO = "info"
    ERROR = "error"
    SUCCESS = "success"


class LogEntry(BaseModel):
    """One captured diagnostic line."""

    model_config = ConfigDict(frozen=True)

    kind: LogKind
    message: str


class CompiledArtifact(BaseModel):
    """The result of one successful compile.

    ``module`` is the engine's loaded module handle and ``binary`` the bytes it
    was loaded from. Both, together with ``source``, always stem from the same
    compile call; a newer compile produces a new artifact instead of mutating
    this one.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    module: Any
    binary: bytes
    source: str


class Example(BaseModel):
    """A canonical source text shipped with the playground."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    source: str
