# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Packaging of compiled modules for offline redistribution."""

from wasmplay.model.errors import PackagingError
from wasmplay.packaging.archive import (
    ARCHIVE_ENTRIES,
    DEFAULT_ARCHIVE_NAME,
    build_archive,
    package_artifact,
    read_archive,
    write_archive,
)
from wasmplay.packaging.runner import (
    BINARY_NAME,
    README_NAME,
    RUNNER_NAME,
    SOURCE_NAME,
    render_readme,
    render_runner_page,
)

__all__ = [
    "ARCHIVE_ENTRIES",
    "DEFAULT_ARCHIVE_NAME",
    "BINARY_NAME",
    "SOURCE_NAME",
    "RUNNER_NAME",
    "README_NAME",
    "PackagingError",
    "build_archive",
    "package_artifact",
    "read_archive",
    "write_archive",
    "render_readme",
    "render_runner_page",
]
