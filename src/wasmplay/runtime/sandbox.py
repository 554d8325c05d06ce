# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sandboxed execution of compiled modules.

A module is instantiated against a merged import table: the engine defaults
(namespace ``env``) overlaid with any caller-supplied namespaces, where caller
functions take precedence.  If the instance exports a zero-argument ``main``
it is invoked and its return value becomes the ``"main"`` entry of the
:data:`~wasmplay.model.entities.ExecutionResult`.  A module without ``main``
runs successfully and yields an empty result.

The instance and its store live only for the duration of :func:`run_module`.
"""

from __future__ import annotations

import logging
from typing import Any

from wasmplay.model.entities import CompiledArtifact, ExecutionResult
from wasmplay.model.errors import WasmRuntimeError
from wasmplay.runtime.engine import Engine, HostFunction, ImportTable, default_engine

# ###############
# Public Interface
# ###############

ENTRY_POINT = "main"
LOG_PREFIX = "WASM log: "


def default_imports(logger: logging.Logger | logging.LoggerAdapter | None = None) -> dict[str, dict[str, Any]]:
    """Return the default ``env`` namespace bound to *logger*.

    ``env.log(i32) -> i32`` logs the value and returns it unchanged.
    ``env.log_string(ptr, len)`` logs ``len`` UTF-8 bytes read from the
    calling instance's exported ``memory`` starting at ``ptr``.
    A range that does not fit in that memory traps.
    """
    log = logger if logger is not None else _logger

    def log_value(value: int) -> int:
        log.info("%s%s", LOG_PREFIX, value)
        return value

    def log_string(caller: Any, ptr: int, length: int) -> None:
        memory = caller.get("memory")
        if memory is None:
            raise WasmRuntimeError("log_string requires the module to export its memory as 'memory'")
        start = ptr & 0xFFFFFFFF
        stop = start + (length & 0xFFFFFFFF)
        # wasmtime clamps reads to the memory size; out-of-bounds must trap.
        if stop > memory.data_len(caller):
            raise WasmRuntimeError(f"log_string range [{start}, {stop}) is outside linear memory")
        data = memory.read(caller, start, stop)
        log.info("%s%s", LOG_PREFIX, bytes(data).decode("utf-8", errors="replace"))

    return {
        "env": {
            "log": HostFunction(log_value),
            "log_string": HostFunction(log_string, access_caller=True),
        }
    }


def merge_imports(defaults: ImportTable, overrides: ImportTable | None) -> dict[str, dict[str, Any]]:
    """Overlay *overrides* on *defaults*, one namespace at a time."""
    merged: dict[str, dict[str, Any]] = {ns: dict(funcs) for ns, funcs in defaults.items()}
    for ns, funcs in (overrides or {}).items():
        merged.setdefault(ns, {}).update(funcs)
    return merged


def run_module(
    target: CompiledArtifact | Any,
    imports: ImportTable | None = None,
    *,
    engine: Engine | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> ExecutionResult:
    """Instantiate a compiled module and invoke its entry point.

    Args:
        target: A :class:`CompiledArtifact` or a bare module handle produced by
            the same *engine*.
        imports: Optional caller import table (``{namespace: {name: fn}}``).
            Values are plain callables or :class:`HostFunction` wrappers.
        engine: The engine that loaded the module.  Defaults to
            :func:`default_engine`, which is also what the compiler uses.
        logger: Channel the default host functions write to.

    Returns:
        ``{"main": value}`` when the module exports a zero-argument ``main``,
        otherwise an empty mapping.

    Raises:
        WasmRuntimeError: If linking fails or a trap occurs during
            instantiation or invocation.
    """
    engine = engine if engine is not None else default_engine()
    log = logger if logger is not None else _logger
    module = target.module if isinstance(target, CompiledArtifact) else target

    table = merge_imports(default_imports(log), imports)
    instance = engine.instantiate(module, table)

    results: ExecutionResult = {}
    if engine.has_entry(instance, ENTRY_POINT):
        results[ENTRY_POINT] = engine.invoke(instance, ENTRY_POINT)
    else:
        log.debug("Module exports no zero-argument '%s'; nothing to invoke", ENTRY_POINT)
    return results


def format_results(results: ExecutionResult) -> str:
    """Render a result mapping as ``key: value`` lines."""
    if not results:
        return "No results returned"
    return "\n".join(f"{key}: {value}" for key, value in results.items())


# ################
# Implementation
# ################

_logger = logging.getLogger(__name__)
