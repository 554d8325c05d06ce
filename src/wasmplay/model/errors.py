# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy shared by every stage of the playground pipeline.

Each error carries a short ``kind`` tag and the human-readable ``message`` so
that hosts can render failures as structured values instead of tracebacks.
"""

from __future__ import annotations

# ###############
# Public Interface
# ###############


class PipelineError(Exception):
    """Base class for all recoverable pipeline failures."""

    kind = "pipeline"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Return the ``{kind, message}`` form of this error."""
        return {"kind": self.kind, "message": self.message}


class CompileError(PipelineError):
    """Raised when source text fails to parse or validate.

    The message is the compiler diagnostic, passed through verbatim.
    """

    kind = "compile"


class WasmRuntimeError(PipelineError):
    """Raised when a trap occurs while instantiating or invoking a module."""

    kind = "runtime"


class PackagingError(PipelineError):
    """Raised when the distributable archive cannot be assembled or written."""

    kind = "packaging"


class NoArtifactError(PipelineError):
    """Raised when an operation needs a compiled module and none is available."""

    kind = "state"
