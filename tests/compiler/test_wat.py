# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the WAT compiler adapter."""

from __future__ import annotations

from pathlib import Path

import pytest

from wasmplay.catalog import get_example
from wasmplay.compiler import WASM_MAGIC, CompileError, compile_wat, compile_wat_file, load_wasm
from wasmplay.model import CompiledArtifact
from wasmplay.runtime import WasmtimeEngine, run_module

# ###############
# Helpers
# ###############

_HELLO = get_example("hello").source
_UNBALANCED = "(module (func $main (result i32) i32.const 42)"
_TYPE_ERROR = """\
(module
  (func $main (result i32)
    f32.const 1.5)
  (export "main" (func $main)))"""


# ###############
# Successful compilation
# ###############


class TestCompile:
    def test_returns_artifact(self) -> None:
        artifact = compile_wat(_HELLO)
        assert isinstance(artifact, CompiledArtifact)
        assert artifact.source == _HELLO

    def test_binary_has_magic_and_version(self) -> None:
        artifact = compile_wat(_HELLO)
        assert artifact.binary[:4] == WASM_MAGIC
        assert artifact.binary[4:8] == b"\x01\x00\x00\x00"

    def test_compiling_twice_is_byte_identical(self) -> None:
        first = compile_wat(_HELLO)
        second = compile_wat(_HELLO)
        assert first.binary == second.binary
        assert first.module is not second.module

    def test_handle_and_binary_from_same_call(self) -> None:
        artifact = compile_wat(get_example("factorial").source)
        assert run_module(artifact) == {"main": 120}
        reloaded = load_wasm(artifact.binary)
        assert run_module(reloaded) == {"main": 120}

    def test_injected_engine_is_used(self) -> None:
        engine = WasmtimeEngine()
        artifact = compile_wat(_HELLO, engine=engine)
        assert run_module(artifact, engine=engine) == {"main": 42}


# ###############
# Failures
# ###############


class TestCompileErrors:
    def test_unbalanced_parentheses(self) -> None:
        with pytest.raises(CompileError) as exc_info:
            compile_wat(_UNBALANCED)
        assert exc_info.value.message

    def test_type_error_fails_validation(self) -> None:
        with pytest.raises(CompileError):
            compile_wat(_TYPE_ERROR)

    @pytest.mark.parametrize("source", ["", "   \n\t"])
    def test_empty_source(self, source: str) -> None:
        with pytest.raises(CompileError, match="source is empty"):
            compile_wat(source)

    def test_unencodable_source(self) -> None:
        with pytest.raises(CompileError):
            compile_wat("(module) ;; \ud800")

    def test_engine_diagnostic_passed_through(self) -> None:
        engine = WasmtimeEngine()
        with pytest.raises(CompileError) as direct:
            engine.compile(_UNBALANCED)
        with pytest.raises(CompileError) as adapted:
            compile_wat(_UNBALANCED, engine=engine)
        assert adapted.value.message == direct.value.message


# ###############
# Binary loading
# ###############


class TestLoadWasm:
    def test_rejects_non_wasm_bytes(self) -> None:
        with pytest.raises(CompileError, match="not a WebAssembly binary"):
            load_wasm(b"hello world")

    def test_rejects_truncated_binary(self) -> None:
        binary = compile_wat(_HELLO).binary
        with pytest.raises(CompileError):
            load_wasm(binary[:-3])


# ###############
# Files
# ###############


class TestCompileFile:
    def test_compiles_wat_file(self, tmp_path: Path) -> None:
        path = tmp_path / "hello.wat"
        path.write_text(_HELLO, encoding="utf-8")
        assert run_module(compile_wat_file(path)) == {"main": 42}

    def test_loads_wasm_file(self, tmp_path: Path) -> None:
        path = tmp_path / "hello.wasm"
        path.write_bytes(compile_wat(_HELLO).binary)
        artifact = compile_wat_file(path)
        assert artifact.source == ""
        assert run_module(artifact) == {"main": 42}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CompileError, match="Cannot read source file"):
            compile_wat_file(tmp_path / "missing.wat")

    def test_non_utf8_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.wat"
        path.write_bytes(b"\xff\xfe(module)")
        with pytest.raises(CompileError, match="not valid UTF-8"):
            compile_wat_file(path)
