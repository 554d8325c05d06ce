# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Translation of WebAssembly text format into loaded binary modules.

Parsing and validation are delegated to the execution engine; this module
only sequences the two engine steps (text to binary, binary to module) and
packs their outputs into one immutable :class:`CompiledArtifact`.  If either
step fails nothing is returned, so callers never observe a handle and bytes
from different compile calls.
"""

from __future__ import annotations

import logging
from pathlib import Path

from wasmplay.model.entities import CompiledArtifact
from wasmplay.model.errors import CompileError
from wasmplay.runtime.engine import Engine, default_engine

# ###############
# Public Interface
# ###############

WASM_MAGIC = b"\x00asm"
WAT_SUFFIX = ".wat"
WASM_SUFFIX = ".wasm"


def compile_wat(
    source: str,
    *,
    engine: Engine | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> CompiledArtifact:
    """Compile WAT *source* into a :class:`CompiledArtifact`.

    Compilation is deterministic: the same source always yields the same bytes.

    Raises:
        CompileError: If the source is empty, malformed, or fails validation.
            The message carries the engine's diagnostic unchanged.
    """
    engine = engine if engine is not None else default_engine()
    log = logger if logger is not None else _logger

    if not source.strip():
        raise CompileError("source is empty")

    binary = engine.compile(source)
    module = engine.load(binary)
    log.debug("Compiled %d characters of WAT into %d bytes", len(source), len(binary))
    return CompiledArtifact(module=module, binary=binary, source=source)


def load_wasm(
    binary: bytes,
    *,
    source: str = "",
    engine: Engine | None = None,
) -> CompiledArtifact:
    """Wrap an existing binary module in a :class:`CompiledArtifact`.

    Raises:
        CompileError: If *binary* is not a valid module.
    """
    engine = engine if engine is not None else default_engine()
    if not binary.startswith(WASM_MAGIC):
        raise CompileError("input is not a WebAssembly binary (missing '\\0asm' header)")
    return CompiledArtifact(module=engine.load(binary), binary=bytes(binary), source=source)


def compile_wat_file(
    path: Path,
    *,
    engine: Engine | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> CompiledArtifact:
    """Compile a ``.wat`` file, or load a ``.wasm`` file as-is.

    Raises:
        CompileError: If the file cannot be read or does not compile.
    """
    try:
        if path.suffix == WASM_SUFFIX:
            return load_wasm(path.read_bytes(), engine=engine)
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CompileError(f"Cannot read source file '{path}': {exc}") from exc
    except UnicodeDecodeError as exc:
        raise CompileError(f"Source file '{path}' is not valid UTF-8: {exc}") from exc
    return compile_wat(source, engine=engine, logger=logger)


# ################
# Implementation
# ################

_logger = logging.getLogger(__name__)
