# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Built-in example modules."""

from wasmplay.catalog.examples import DEFAULT_EXAMPLE, EXAMPLES, example_keys, get_example

__all__ = [
    "DEFAULT_EXAMPLE",
    "EXAMPLES",
    "example_keys",
    "get_example",
]
