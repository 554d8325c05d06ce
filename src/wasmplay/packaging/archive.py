# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assembly of the distributable zip archive for a compiled module.

The archive always holds exactly four entries, in this order:

1. ``module.wasm``: the binary module,
2. ``source.wat``: the source text it was compiled from,
3. ``index.html``: a standalone runner page,
4. ``README.md``: usage notes for serving the files locally.

Archives are reproducible: every entry carries the same fixed timestamp and
permission bits and is deflated with a fixed level, so identical inputs give
byte-identical output.  The archive is assembled in memory and returned only
once complete; :func:`write_archive` publishes it with an atomic rename.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
import zipfile
from pathlib import Path

from wasmplay.model.entities import CompiledArtifact
from wasmplay.model.errors import PackagingError
from wasmplay.packaging.runner import (
    BINARY_NAME,
    README_NAME,
    RUNNER_NAME,
    SOURCE_NAME,
    render_readme,
    render_runner_page,
)

# ###############
# Public Interface
# ###############

DEFAULT_ARCHIVE_NAME = "wasm-module.zip"
ARCHIVE_ENTRIES = (BINARY_NAME, SOURCE_NAME, RUNNER_NAME, README_NAME)


def build_archive(
    binary: bytes,
    source: str,
    *,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> bytes:
    """Bundle *binary* and *source* with a runner page and usage notes.

    Returns:
        The complete zip archive as bytes.

    Raises:
        PackagingError: If any entry cannot be encoded or written.
    """
    log = logger if logger is not None else _logger
    try:
        blobs = (
            (BINARY_NAME, bytes(binary)),
            (SOURCE_NAME, source.encode("utf-8")),
            (RUNNER_NAME, render_runner_page().encode("utf-8")),
            (README_NAME, render_readme().encode("utf-8")),
        )
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, mode="w") as zf:
            for name, data in blobs:
                zf.writestr(_entry_info(name), data, compress_type=zipfile.ZIP_DEFLATED, compresslevel=9)
    except (UnicodeError, ValueError, TypeError, zipfile.BadZipFile, OSError) as exc:
        raise PackagingError(str(exc)) from exc

    data = buffer.getvalue()
    log.debug("Packaged %d entries into %d bytes", len(ARCHIVE_ENTRIES), len(data))
    return data


def package_artifact(
    artifact: CompiledArtifact,
    *,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> bytes:
    """Build the archive for a :class:`CompiledArtifact`."""
    return build_archive(artifact.binary, artifact.source, logger=logger)


def write_archive(data: bytes, path: Path) -> None:
    """Write archive *data* to *path* without ever exposing a partial file.

    The bytes go to a temporary sibling first and are moved into place with
    :func:`os.replace`.

    Raises:
        PackagingError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise PackagingError(f"Cannot write archive '{path}': {exc}") from exc
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise PackagingError(f"Cannot write archive '{path}': {exc}") from exc


def read_archive(data: bytes) -> dict[str, bytes]:
    """Return the entries of an archive produced by :func:`build_archive`, in order."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


# ################
# Implementation
# ################

_logger = logging.getLogger(__name__)

# Earliest timestamp the zip format can represent.
_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_FILE_MODE = 0o644


def _entry_info(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(filename=name, date_time=_FIXED_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.create_system = 3
    info.external_attr = (0o100000 | _FILE_MODE) << 16
    return info
