# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Session-level orchestration of compile, run, and package."""

from wasmplay.pipeline.session import Pipeline, PipelineState

__all__ = [
    "Pipeline",
    "PipelineState",
]
