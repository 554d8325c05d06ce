# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the built-in example catalog."""

import pytest

from wasmplay.catalog import DEFAULT_EXAMPLE, EXAMPLES, example_keys, get_example
from wasmplay.compiler import compile_wat
from wasmplay.runtime import run_module

# ###############
# Catalog contents
# ###############


def test_required_examples_present() -> None:
    """The catalog covers constant, arithmetic, recursive, and loop modules."""
    assert example_keys() == ["hello", "addition", "factorial", "fibonacci"]


def test_default_example_is_in_catalog() -> None:
    assert DEFAULT_EXAMPLE in EXAMPLES


def test_get_example_returns_matching_key() -> None:
    assert get_example("factorial").key == "factorial"
    assert get_example("factorial").title == "Factorial"


def test_unknown_key_raises_key_error() -> None:
    with pytest.raises(KeyError):
        get_example("does-not-exist")


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        EXAMPLES["new"] = get_example("hello")  # type: ignore[index]


# ###############
# Examples compile and run
# ###############


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("hello", 42),
        ("addition", 42),
        ("factorial", 120),
        ("fibonacci", 55),
    ],
)
def test_example_main_result(key: str, expected: int) -> None:
    artifact = compile_wat(get_example(key).source)
    assert run_module(artifact) == {"main": expected}
