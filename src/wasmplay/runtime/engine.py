# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Execution engine capability and its wasmtime implementation.

The pipeline never talks to a WebAssembly runtime directly.  It goes through an
:class:`Engine`, which exposes the four operations the pipeline needs:

* ``compile(text) -> binary``: translate WAT into the binary encoding,
* ``load(binary) -> module``: validate and load a binary into a module handle,
* ``instantiate(module, imports) -> instance``: link and instantiate,
* ``invoke(instance, name) -> value``: call an exported function.

Engine-specific failures are translated at this seam into
:class:`~wasmplay.model.errors.CompileError` and
:class:`~wasmplay.model.errors.WasmRuntimeError`.
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import wasmtime

from wasmplay.model.errors import CompileError, WasmRuntimeError

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class HostFunction:
    """A Python callable exposed to a module as an imported function.

    When *access_caller* is true the callable receives the engine's caller
    context as its first argument, which gives it access to the calling
    instance's exports (for example its linear memory).
    """

    fn: Callable[..., Any]
    access_caller: bool = False


# namespace -> function name -> host function
ImportTable = Mapping[str, Mapping[str, HostFunction | Callable[..., Any]]]


class Engine(ABC):
    """Abstract WebAssembly execution backend."""

    @abstractmethod
    def compile(self, text: str) -> bytes:
        """Translate WAT *text* into a binary module.

        Raises:
            CompileError: If the text does not parse or validate.
        """
        ...

    @abstractmethod
    def load(self, binary: bytes) -> Any:
        """Validate *binary* and return an executable module handle.

        Raises:
            CompileError: If the binary is not a valid module.
        """
        ...

    @abstractmethod
    def instantiate(self, module: Any, imports: ImportTable) -> Any:
        """Link *module* against *imports* and return a fresh instance.

        Raises:
            WasmRuntimeError: If an import is missing or instantiation traps.
        """
        ...

    @abstractmethod
    def has_entry(self, instance: Any, name: str) -> bool:
        """Return True if *instance* exports a zero-argument function *name*."""
        ...

    @abstractmethod
    def invoke(self, instance: Any, name: str) -> Any:
        """Call the zero-argument export *name* of *instance*.

        Raises:
            WasmRuntimeError: If the call traps.
        """
        ...


@dataclass
class WasmtimeInstance:
    """A wasmtime instance together with the store that owns it."""

    store: wasmtime.Store
    instance: wasmtime.Instance


class WasmtimeEngine(Engine):
    """:class:`Engine` backed by the ``wasmtime`` runtime.

    Args:
        fuel: Optional instruction budget per instantiation.  When set, a module
            that exhausts it traps instead of running forever.
    """

    def __init__(self, fuel: int | None = None) -> None:
        config = wasmtime.Config()
        if fuel is not None:
            config.consume_fuel = True
        self.fuel = fuel
        self.engine = wasmtime.Engine(config)

    def compile(self, text: str) -> bytes:
        try:
            return bytes(wasmtime.wat2wasm(text))
        except (wasmtime.WasmtimeError, UnicodeError) as exc:
            raise CompileError(str(exc)) from exc

    def load(self, binary: bytes) -> wasmtime.Module:
        try:
            return wasmtime.Module(self.engine, binary)
        except wasmtime.WasmtimeError as exc:
            raise CompileError(str(exc)) from exc

    def instantiate(self, module: wasmtime.Module, imports: ImportTable) -> WasmtimeInstance:
        store = wasmtime.Store(self.engine)
        if self.fuel is not None:
            store.set_fuel(self.fuel)

        linker = wasmtime.Linker(self.engine)
        defined: set[tuple[str, str]] = set()
        for imp in module.imports:
            name = imp.name or ""
            label = f"{imp.module}.{name}"
            host = imports.get(imp.module, {}).get(name)
            if host is None:
                raise WasmRuntimeError(f"unknown import: {label}")
            if not isinstance(imp.type, wasmtime.FuncType):
                raise WasmRuntimeError(f"unsupported import kind for {label}: only functions can be imported")
            if not isinstance(host, HostFunction):
                host = HostFunction(host)
            if not callable(host.fn):
                raise WasmRuntimeError(f"import {label} is not callable")
            # A module may import the same name more than once; the linker
            # holds one definition per name.
            if (imp.module, name) in defined:
                continue
            try:
                linker.define_func(
                    imp.module,
                    name,
                    imp.type,
                    _trap_on_error(host.fn, label, returns=bool(imp.type.results)),
                    access_caller=host.access_caller,
                )
            except wasmtime.WasmtimeError as exc:
                raise WasmRuntimeError(str(exc)) from exc
            defined.add((imp.module, name))

        try:
            instance = linker.instantiate(store, module)
        except (wasmtime.Trap, wasmtime.WasmtimeError) as exc:
            raise WasmRuntimeError(str(exc)) from exc
        return WasmtimeInstance(store=store, instance=instance)

    def has_entry(self, instance: WasmtimeInstance, name: str) -> bool:
        func = _export(instance, name)
        if not isinstance(func, wasmtime.Func):
            return False
        return len(func.type(instance.store).params) == 0

    def invoke(self, instance: WasmtimeInstance, name: str) -> Any:
        func = _export(instance, name)
        if not isinstance(func, wasmtime.Func):
            raise WasmRuntimeError(f"export '{name}' is not a function")
        try:
            return func(instance.store)
        except (wasmtime.Trap, wasmtime.WasmtimeError) as exc:
            raise WasmRuntimeError(str(exc)) from exc


@functools.lru_cache(maxsize=1)
def default_engine() -> WasmtimeEngine:
    """Return the process-wide engine used when no engine is injected."""
    return WasmtimeEngine()


# ################
# Implementation
# ################


def _export(instance: WasmtimeInstance, name: str) -> Any:
    try:
        return instance.instance.exports(instance.store)[name]
    except KeyError:
        return None


def _trap_on_error(fn: Callable[..., Any], label: str, *, returns: bool = True) -> Callable[..., Any]:
    """Wrap a host function so that Python errors surface as wasm traps.

    When the import is declared without results, whatever *fn* returns is
    dropped, as a JavaScript host would.
    """

    def call(*args: Any) -> Any:
        try:
            value = fn(*args)
        except wasmtime.Trap:
            raise
        except Exception as exc:
            raise wasmtime.Trap(f"host function {label} failed: {exc}") from exc
        return value if returns else None

    return call
