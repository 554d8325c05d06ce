# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for sandboxed module execution."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from wasmplay.compiler import compile_wat
from wasmplay.logs import LogBook, LogInterceptor
from wasmplay.model import LogKind, WasmRuntimeError
from wasmplay.runtime import (
    HostFunction,
    WasmtimeEngine,
    default_imports,
    format_results,
    merge_imports,
    run_module,
)

# ###############
# Test modules
# ###############

_LOG_TWICE = """\
(module
  (import "env" "log" (func $log (param i32) (result i32)))
  (func $main (result i32)
    (drop (call $log (i32.const 7)))
    (call $log (i32.const 8)))
  (export "main" (func $main)))"""

_LOG_STRING = """\
(module
  (import "env" "log_string" (func $log_string (param i32 i32)))
  (memory (export "memory") 1)
  (data (i32.const 16) "hello wasm")
  (func $main (result i32)
    (call $log_string (i32.const 16) (i32.const 10))
    (i32.const 0))
  (export "main" (func $main)))"""

_LOG_STRING_OUT_OF_BOUNDS = """\
(module
  (import "env" "log_string" (func $log_string (param i32 i32)))
  (memory (export "memory") 1)
  (data (i32.const 65530) "abcdef")
  (func $main (result i32)
    (call $log_string (i32.const 65530) (i32.const 100))
    (i32.const 1))
  (export "main" (func $main)))"""

_LOG_WITHOUT_RESULT = """\
(module
  (import "env" "log" (func $log (param i32)))
  (func $main (result i32)
    (call $log (i32.const 3))
    (i32.const 1))
  (export "main" (func $main)))"""

_DUPLICATE_IMPORT = """\
(module
  (import "env" "log" (func $log_a (param i32) (result i32)))
  (import "env" "log" (func $log_b (param i32) (result i32)))
  (func $main (result i32)
    (drop (call $log_a (i32.const 1)))
    (call $log_b (i32.const 2)))
  (export "main" (func $main)))"""

_LOG_STRING_NO_MEMORY = """\
(module
  (import "env" "log_string" (func $log_string (param i32 i32)))
  (func $main (result i32)
    (call $log_string (i32.const 0) (i32.const 0))
    (i32.const 0))
  (export "main" (func $main)))"""

_NO_MAIN = """\
(module
  (func $helper (result i32)
    i32.const 1)
  (export "helper" (func $helper)))"""

_MAIN_WITH_PARAM = """\
(module
  (func $main (param $x i32) (result i32)
    local.get $x)
  (export "main" (func $main)))"""

_TRAP_IN_MAIN = """\
(module
  (func $main (result i32)
    unreachable)
  (export "main" (func $main)))"""

_TRAP_IN_START = """\
(module
  (func $start
    unreachable)
  (start $start))"""

_UNKNOWN_IMPORT = """\
(module
  (import "host" "missing" (func $missing))
  (func $main (result i32)
    i32.const 1)
  (export "main" (func $main)))"""

_DIVIDE_BY_ZERO = """\
(module
  (func $main (result i32)
    (i32.div_s (i32.const 1) (i32.const 0)))
  (export "main" (func $main)))"""

_SPIN = """\
(module
  (func $main (result i32)
    (loop $forever
      (br $forever))
    (i32.const 0))
  (export "main" (func $main)))"""


def _capture(fn: Any) -> tuple[Any, LogBook]:
    book = LogBook()
    with LogInterceptor(book):
        result = fn()
    return result, book


# ###############
# Entry point
# ###############


class TestEntryPoint:
    def test_constant_main(self) -> None:
        artifact = compile_wat('(module (func (export "main") (result i32) i32.const 42))')
        assert run_module(artifact) == {"main": 42}

    def test_negative_result(self) -> None:
        artifact = compile_wat('(module (func (export "main") (result i32) i32.const -5))')
        assert run_module(artifact) == {"main": -5}

    def test_no_main_is_empty_result(self) -> None:
        assert run_module(compile_wat(_NO_MAIN)) == {}

    def test_main_with_parameters_is_not_invoked(self) -> None:
        assert run_module(compile_wat(_MAIN_WITH_PARAM)) == {}

    def test_accepts_bare_module_handle(self) -> None:
        artifact = compile_wat(_NO_MAIN)
        assert run_module(artifact.module) == {}

    def test_runs_are_independent(self) -> None:
        artifact = compile_wat(_LOG_TWICE)
        assert run_module(artifact) == run_module(artifact) == {"main": 8}


# ###############
# Default imports
# ###############


class TestDefaultImports:
    def test_log_records_each_call_in_order(self) -> None:
        artifact = compile_wat(_LOG_TWICE)
        result, book = _capture(lambda: run_module(artifact))
        assert result == {"main": 8}
        assert book.messages() == ["WASM log: 7", "WASM log: 8"]
        assert all(e.kind is LogKind.INFO for e in book)

    def test_log_string_reads_memory(self) -> None:
        artifact = compile_wat(_LOG_STRING)
        result, book = _capture(lambda: run_module(artifact))
        assert result == {"main": 0}
        assert book.messages() == ["WASM log: hello wasm"]

    def test_log_string_without_memory_traps(self) -> None:
        artifact = compile_wat(_LOG_STRING_NO_MEMORY)
        with pytest.raises(WasmRuntimeError):
            run_module(artifact)

    def test_log_string_out_of_bounds_traps(self) -> None:
        """A range running past the end of memory traps instead of being truncated."""
        artifact = compile_wat(_LOG_STRING_OUT_OF_BOUNDS)
        book = LogBook()
        with LogInterceptor(book), pytest.raises(WasmRuntimeError):
            run_module(artifact)
        assert book.messages() == []

    def test_log_declared_without_result(self) -> None:
        """The returned value is dropped when the import has no result."""
        artifact = compile_wat(_LOG_WITHOUT_RESULT)
        result, book = _capture(lambda: run_module(artifact))
        assert result == {"main": 1}
        assert book.messages() == ["WASM log: 3"]

    def test_same_import_declared_twice(self) -> None:
        artifact = compile_wat(_DUPLICATE_IMPORT)
        result, book = _capture(lambda: run_module(artifact))
        assert result == {"main": 2}
        assert book.messages() == ["WASM log: 1", "WASM log: 2"]

    def test_log_writes_to_injected_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("wasmplay.tests.injected")
        artifact = compile_wat(_LOG_TWICE)
        with caplog.at_level(logging.INFO, logger="wasmplay.tests.injected"):
            run_module(artifact, logger=logger)
        assert [r.getMessage() for r in caplog.records if r.name == logger.name] == [
            "WASM log: 7",
            "WASM log: 8",
        ]

    def test_default_table_shape(self) -> None:
        table = default_imports()
        assert set(table) == {"env"}
        assert set(table["env"]) == {"log", "log_string"}
        assert table["env"]["log_string"].access_caller


# ###############
# Caller imports
# ###############


class TestCallerImports:
    def test_caller_function_overrides_default(self) -> None:
        calls: list[int] = []

        def doubling_log(value: int) -> int:
            calls.append(value)
            return value * 2

        artifact = compile_wat(_LOG_TWICE)
        result, book = _capture(lambda: run_module(artifact, {"env": {"log": doubling_log}}))
        assert result == {"main": 16}
        assert calls == [7, 8]
        assert book.messages() == []

    def test_caller_namespace_is_added(self) -> None:
        artifact = compile_wat(_UNKNOWN_IMPORT)
        hits: list[str] = []
        result = run_module(artifact, {"host": {"missing": lambda: hits.append("called")}})
        assert result == {"main": 1}
        assert hits == []

    def test_host_function_with_caller(self) -> None:
        seen: list[bytes] = []

        def grab(caller: Any, ptr: int, length: int) -> None:
            seen.append(bytes(caller.get("memory").read(caller, ptr, ptr + length)))

        artifact = compile_wat(_LOG_STRING)
        run_module(artifact, {"env": {"log_string": HostFunction(grab, access_caller=True)}})
        assert seen == [b"hello wasm"]

    def test_failing_host_function_becomes_runtime_error(self) -> None:
        def broken(value: int) -> int:
            raise ValueError("boom")

        artifact = compile_wat(_LOG_TWICE)
        with pytest.raises(WasmRuntimeError):
            run_module(artifact, {"env": {"log": broken}})

    def test_merge_keeps_other_defaults(self) -> None:
        merged = merge_imports({"env": {"log": 1, "log_string": 2}}, {"env": {"log": 3}, "x": {"y": 4}})
        assert merged == {"env": {"log": 3, "log_string": 2}, "x": {"y": 4}}

    def test_merge_does_not_mutate_defaults(self) -> None:
        defaults = {"env": {"log": 1}}
        merge_imports(defaults, {"env": {"log": 2}})
        assert defaults == {"env": {"log": 1}}


# ###############
# Traps
# ###############


class TestTraps:
    def test_unknown_import(self) -> None:
        with pytest.raises(WasmRuntimeError, match="unknown import: host.missing"):
            run_module(compile_wat(_UNKNOWN_IMPORT))

    def test_non_callable_import_is_rejected(self) -> None:
        with pytest.raises(WasmRuntimeError, match="not callable"):
            run_module(compile_wat(_LOG_TWICE), {"env": {"log": 5}})

    def test_trap_during_instantiation(self) -> None:
        with pytest.raises(WasmRuntimeError):
            run_module(compile_wat(_TRAP_IN_START))

    def test_trap_during_invocation(self) -> None:
        with pytest.raises(WasmRuntimeError) as exc_info:
            run_module(compile_wat(_TRAP_IN_MAIN))
        assert exc_info.value.kind == "runtime"

    def test_integer_divide_by_zero(self) -> None:
        with pytest.raises(WasmRuntimeError):
            run_module(compile_wat(_DIVIDE_BY_ZERO))

    def test_artifact_still_runnable_after_trap(self) -> None:
        artifact = compile_wat(_TRAP_IN_MAIN)
        with pytest.raises(WasmRuntimeError):
            run_module(artifact)
        with pytest.raises(WasmRuntimeError):
            run_module(artifact)

    def test_fuel_exhaustion_traps(self) -> None:
        engine = WasmtimeEngine(fuel=10_000)
        artifact = compile_wat(_SPIN, engine=engine)
        with pytest.raises(WasmRuntimeError):
            run_module(artifact, engine=engine)

    def test_fuel_is_per_run(self) -> None:
        engine = WasmtimeEngine(fuel=100_000)
        artifact = compile_wat('(module (func (export "main") (result i32) i32.const 3))', engine=engine)
        for _ in range(3):
            assert run_module(artifact, engine=engine) == {"main": 3}


# ###############
# Formatting
# ###############


class TestFormatResults:
    def test_empty(self) -> None:
        assert format_results({}) == "No results returned"

    def test_main(self) -> None:
        assert format_results({"main": 42}) == "main: 42"
