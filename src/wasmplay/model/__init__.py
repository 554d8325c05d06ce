# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and error taxonomy for the wasmplay pipeline."""

from wasmplay.model.entities import CompiledArtifact, Example, ExecutionResult, LogEntry, LogKind
from wasmplay.model.errors import (
    CompileError,
    NoArtifactError,
    PackagingError,
    PipelineError,
    WasmRuntimeError,
)

__all__ = [
    # Values
    "CompiledArtifact",
    "Example",
    "ExecutionResult",
    "LogEntry",
    "LogKind",
    # Errors
    "PipelineError",
    "CompileError",
    "WasmRuntimeError",
    "PackagingError",
    "NoArtifactError",
]
