# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Execution engine and sandbox."""

from wasmplay.runtime.engine import (
    Engine,
    HostFunction,
    ImportTable,
    WasmtimeEngine,
    WasmtimeInstance,
    default_engine,
)
from wasmplay.runtime.sandbox import (
    ENTRY_POINT,
    LOG_PREFIX,
    default_imports,
    format_results,
    merge_imports,
    run_module,
)

__all__ = [
    "Engine",
    "WasmtimeEngine",
    "WasmtimeInstance",
    "default_engine",
    "HostFunction",
    "ImportTable",
    "ENTRY_POINT",
    "LOG_PREFIX",
    "default_imports",
    "merge_imports",
    "run_module",
    "format_results",
]
