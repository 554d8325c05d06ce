# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Capture of diagnostic output emitted on the ``wasmplay`` logging channel.

Every component writes diagnostics through a :class:`logging.Logger` that is
injected by the caller (defaulting to a child of ``wasmplay``).  A
:class:`LogInterceptor` attaches a handler to that channel for the duration of
a ``with`` block and copies each record into a :class:`LogBook`.  Existing
handlers and propagation are left untouched, so normal log delivery continues
while the interceptor is active, and removing the handler on exit restores the
channel exactly as it was.  If the channel has to be lowered to ``INFO`` for
capture, a filter keeps the records it would otherwise have dropped away from
its other handlers.

The kind of an entry is taken from the ``log_kind`` attribute of the record,
set through ``extra={"log_kind": LogKind.SUCCESS}``.  Records without it are
classified by level: ``ERROR`` and above become ``error``, the rest ``info``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from types import TracebackType

from wasmplay.model.entities import LogEntry, LogKind

# ###############
# Public Interface
# ###############

CHANNEL_NAME = "wasmplay"


class LogInterceptorError(Exception):
    """Raised when a second interceptor is attached to an already captured channel."""


class LogBook:
    """Ordered, append-only sequence of captured :class:`LogEntry` values."""

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []
        self._lock = threading.Lock()

    def append(self, kind: LogKind, message: str) -> LogEntry:
        entry = LogEntry(kind=kind, message=message)
        with self._lock:
            self._entries.append(entry)
        return entry

    def extend(self, entries: list[LogEntry]) -> None:
        with self._lock:
            self._entries.extend(entries)

    def replace(self, entries: list[LogEntry]) -> None:
        """Drop all current entries and continue with *entries*."""
        with self._lock:
            self._entries = list(entries)

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    @property
    def entries(self) -> list[LogEntry]:
        """A snapshot of the entries in emission order."""
        with self._lock:
            return list(self._entries)

    def messages(self, kind: LogKind | None = None) -> list[str]:
        """Return entry messages, optionally restricted to one *kind*."""
        return [e.message for e in self.entries if kind is None or e.kind is kind]

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class LogInterceptor:
    """Scoped capture of a logging channel into a :class:`LogBook`.

    Usage::

        book = LogBook()
        with LogInterceptor(book):
            compile_wat(source)
        book.messages()

    Only one interceptor may be active on a given channel at a time; entering a
    second one raises :class:`LogInterceptorError`.
    """

    def __init__(self, logbook: LogBook, channel: logging.Logger | None = None) -> None:
        self.logbook = logbook
        self.channel = channel if channel is not None else logging.getLogger(CHANNEL_NAME)
        self._handler: _LogBookHandler | None = None
        self._saved_level: int | None = None
        self._filter: _BelowThresholdFilter | None = None

    @property
    def active(self) -> bool:
        return self._handler is not None

    def __enter__(self) -> LogBook:
        with _registry_lock:
            if self.channel.name in _active_channels:
                raise LogInterceptorError(f"Log channel '{self.channel.name}' is already being intercepted")
            _active_channels.add(self.channel.name)

        self._handler = _LogBookHandler(self.logbook)
        # An unconfigured channel inherits WARNING from the root logger and
        # would drop the INFO records we are here to collect.
        self._saved_level = self.channel.level
        threshold = self.channel.getEffectiveLevel()
        if threshold > logging.INFO:
            self._filter = _BelowThresholdFilter(threshold, self._handler)
            self.channel.addFilter(self._filter)
            self.channel.setLevel(logging.INFO)
        self.channel.addHandler(self._handler)
        return self.logbook

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._handler is not None:
            self.channel.removeHandler(self._handler)
            self._handler = None
        if self._filter is not None:
            self.channel.removeFilter(self._filter)
            self._filter = None
        if self._saved_level is not None:
            self.channel.setLevel(self._saved_level)
            self._saved_level = None
        with _registry_lock:
            _active_channels.discard(self.channel.name)


def log_kind_extra(kind: LogKind) -> dict[str, LogKind]:
    """Return the ``extra`` mapping that tags a record with *kind*."""
    return {"log_kind": kind}


# ################
# Implementation
# ################

_registry_lock = threading.Lock()
_active_channels: set[str] = set()


class _LogBookHandler(logging.Handler):
    def __init__(self, logbook: LogBook) -> None:
        super().__init__(level=logging.INFO)
        self._logbook = logbook

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        self._logbook.append(_kind_of(record), message)


class _BelowThresholdFilter(logging.Filter):
    """Hands records below the channel's original level to the capture handler only.

    Records logged on descendant loggers reach ancestor handlers without
    passing this filter.
    """

    def __init__(self, threshold: int, handler: logging.Handler) -> None:
        super().__init__()
        self._threshold = threshold
        self._handler = handler

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= self._threshold:
            return True
        self._handler.handle(record)
        return False


def _kind_of(record: logging.LogRecord) -> LogKind:
    kind = getattr(record, "log_kind", None)
    if isinstance(kind, LogKind):
        return kind
    if isinstance(kind, str):
        try:
            return LogKind(kind)
        except ValueError:
            pass
    return LogKind.ERROR if record.levelno >= logging.ERROR else LogKind.INFO
