# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler adapter: WebAssembly text to loaded binary modules."""

from wasmplay.compiler.wat import WASM_MAGIC, WASM_SUFFIX, WAT_SUFFIX, compile_wat, compile_wat_file, load_wasm
from wasmplay.model.errors import CompileError

__all__ = [
    "compile_wat",
    "compile_wat_file",
    "load_wasm",
    "CompileError",
    "WASM_MAGIC",
    "WAT_SUFFIX",
    "WASM_SUFFIX",
]
