# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""The compile → run → package pipeline behind one playground session.

A :class:`Pipeline` owns a single current-artifact slot and a single
:class:`~wasmplay.logs.interceptor.LogBook`.  Every operation runs inside a
:class:`~wasmplay.logs.interceptor.LogInterceptor` over the pipeline's logging
channel, so output of the compiler, the sandbox and the host functions is
captured uniformly together with the pipeline's own progress messages.

State transitions::

    IDLE ──compile──▶ COMPILED ──run──▶ RAN
      ▲                  │                 │
      └─(CompileError)───┘                 └─(WasmRuntimeError)──▶ RUN_FAILED

* ``compile`` is allowed from any state.  On success it replaces the artifact
  and clears the log, which then holds only that compile's entries.  On
  failure the previous state and artifact are kept and the compile's entries,
  including exactly one ``error`` entry, are appended to the existing log.
  Either way the output of the previous run is discarded.
* ``run`` needs an artifact and never changes it.
* ``package`` needs an artifact and never changes state.

Failures are recovered at this boundary in the sense that the state is
restored and an ``error`` entry is logged; the structured error is then
re-raised for the caller.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path

from wasmplay.catalog.examples import get_example
from wasmplay.compiler.wat import compile_wat
from wasmplay.logs.interceptor import CHANNEL_NAME, LogBook, LogInterceptor, log_kind_extra
from wasmplay.model.entities import CompiledArtifact, ExecutionResult, LogEntry, LogKind
from wasmplay.model.errors import CompileError, NoArtifactError, PackagingError, WasmRuntimeError
from wasmplay.packaging.archive import package_artifact, write_archive
from wasmplay.runtime.engine import Engine, ImportTable, WasmtimeEngine, default_engine
from wasmplay.runtime.sandbox import format_results, run_module

# ###############
# Public Interface
# ###############

MSG_COMPILING = "Compiling WebAssembly Text Format (WAT) to WASM..."
MSG_COMPILED = "Successfully compiled WAT to WASM!"
MSG_RUNNING = "Running WebAssembly module..."
MSG_RAN = "WebAssembly execution completed!"
MSG_PACKAGED = "Successfully created the WASM package!"
MSG_NO_MODULE = "No compiled WASM module available. Please compile first."
MSG_NO_PACKAGE = "Please compile the code first before downloading."


class PipelineState(Enum):
    """Lifecycle state of a :class:`Pipeline`."""

    IDLE = "idle"
    COMPILING = "compiling"
    COMPILED = "compiled"
    RUNNING = "running"
    RAN = "ran"
    RUN_FAILED = "run_failed"


class Pipeline:
    """One playground session: current artifact, log, and last output.

    Args:
        engine: Execution backend.  Defaults to the shared wasmtime engine, or
            to a dedicated one when *fuel* is given.
        channel: Logging channel every component writes to.  Pipelines used
            concurrently in one process must be given distinct channels.
        fuel: Optional execution budget applied to every run.
    """

    def __init__(
        self,
        *,
        engine: Engine | None = None,
        channel: logging.Logger | None = None,
        fuel: int | None = None,
    ) -> None:
        if engine is None:
            engine = WasmtimeEngine(fuel=fuel) if fuel is not None else default_engine()
        self.engine = engine
        self.channel = channel if channel is not None else logging.getLogger(CHANNEL_NAME)
        self.logbook = LogBook()
        self.state = PipelineState.IDLE
        self.output = ""
        self.last_result: ExecutionResult | None = None
        self._artifact: CompiledArtifact | None = None
        self._lock = threading.RLock()

    @property
    def artifact(self) -> CompiledArtifact | None:
        """The most recent successfully compiled artifact, if any."""
        return self._artifact

    @property
    def logs(self) -> list[LogEntry]:
        return self.logbook.entries

    def compile(self, source: str) -> CompiledArtifact:
        """Compile *source* and make it the current artifact.

        Raises:
            CompileError: If the source does not compile.  The previous
                artifact stays current.
        """
        with self._lock:
            prior_state = self.state
            self.state = PipelineState.COMPILING
            self.output = ""
            self.last_result = None
            scratch = LogBook()
            try:
                with LogInterceptor(scratch, self.channel):
                    self._emit(LogKind.INFO, MSG_COMPILING)
                    try:
                        artifact = compile_wat(source, engine=self.engine, logger=self.channel)
                    except CompileError as exc:
                        self._emit(LogKind.ERROR, f"Compilation error: {exc.message}")
                        raise
                    self._emit(LogKind.SUCCESS, MSG_COMPILED)
            except CompileError:
                self.state = prior_state
                self.logbook.extend(scratch.entries)
                raise

            self._artifact = artifact
            self.logbook.replace(scratch.entries)
            self.state = PipelineState.COMPILED
            return artifact

    def run(self, imports: ImportTable | None = None) -> ExecutionResult:
        """Execute the current artifact.

        Raises:
            NoArtifactError: If nothing has been compiled yet.
            WasmRuntimeError: If linking, instantiation or invocation fails.
        """
        with self._lock:
            artifact = self._require_artifact(MSG_NO_MODULE)
            self.state = PipelineState.RUNNING
            with LogInterceptor(self.logbook, self.channel):
                self._emit(LogKind.INFO, MSG_RUNNING)
                try:
                    results = run_module(artifact, imports, engine=self.engine, logger=self.channel)
                except Exception as exc:
                    self.state = PipelineState.RUN_FAILED
                    error = exc if isinstance(exc, WasmRuntimeError) else WasmRuntimeError(str(exc))
                    self._emit(LogKind.ERROR, f"Runtime error: {error.message}")
                    if error is exc:
                        raise
                    raise error from exc
                self.last_result = results
                self.output = format_results(results)
                self._emit(LogKind.SUCCESS, MSG_RAN)
            self.state = PipelineState.RAN
            return results

    def compile_and_run(self, source: str, imports: ImportTable | None = None) -> ExecutionResult:
        """Compile *source* and, if that succeeds, run it."""
        with self._lock:
            self.compile(source)
            return self.run(imports)

    def package(self, path: Path | None = None) -> bytes:
        """Build the distributable archive for the current artifact.

        Args:
            path: When given, the archive is also written there atomically.

        Raises:
            NoArtifactError: If nothing has been compiled yet.
            PackagingError: If the archive cannot be built or written.
        """
        with self._lock:
            artifact = self._require_artifact(MSG_NO_PACKAGE)
            with LogInterceptor(self.logbook, self.channel):
                try:
                    data = package_artifact(artifact, logger=self.channel)
                    if path is not None:
                        write_archive(data, path)
                except PackagingError as exc:
                    self._emit(LogKind.ERROR, f"Failed to create download package: {exc.message}")
                    raise
                self._emit(LogKind.SUCCESS, MSG_PACKAGED)
            return data

    def load_example(self, key: str) -> str:
        """Return the source of example *key* and note it in the log.

        Raises:
            KeyError: If *key* is not in the catalog.
        """
        example = get_example(key)
        with self._lock, LogInterceptor(self.logbook, self.channel):
            self._emit(LogKind.INFO, f"Loaded {key} example")
        return example.source

    def clear_logs(self) -> None:
        """Empty the log and the last rendered output."""
        with self._lock:
            self.logbook.clear()
            self.output = ""

    def _require_artifact(self, message: str) -> CompiledArtifact:
        artifact = self._artifact
        if artifact is None:
            with LogInterceptor(self.logbook, self.channel):
                self._emit(LogKind.ERROR, message)
            raise NoArtifactError(message)
        return artifact

    def _emit(self, kind: LogKind, message: str) -> None:
        level = logging.ERROR if kind is LogKind.ERROR else logging.INFO
        self.channel.log(level, message, extra=log_kind_extra(kind))
