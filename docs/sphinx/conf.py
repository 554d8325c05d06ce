# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for wasmplay documentation."""

project = "wasmplay"
author = "wasmplay Contributors"
release = "0.1.0"

extensions: list[str] = []

html_theme = "alabaster"
