# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Diagnostic capture for the pipeline."""

from wasmplay.logs.interceptor import (
    CHANNEL_NAME,
    LogBook,
    LogInterceptor,
    LogInterceptorError,
    log_kind_extra,
)

__all__ = [
    "CHANNEL_NAME",
    "LogBook",
    "LogInterceptor",
    "LogInterceptorError",
    "log_kind_extra",
]
