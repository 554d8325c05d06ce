# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Canonical WAT example modules shipped with the playground.

The catalog is built once at import time and exposed as a read-only mapping.
Every example exports a zero-argument ``main`` returning ``i32``:

* ``hello``: constant return (42)
* ``addition``: arithmetic through a helper function (5 + 37 = 42)
* ``factorial``: recursion (5! = 120)
* ``fibonacci``: an iterative loop (10th term = 55)
"""

from __future__ import annotations

from types import MappingProxyType

from wasmplay.model.entities import Example

# ###############
# Public Interface
# ###############

DEFAULT_EXAMPLE = "hello"


def get_example(key: str) -> Example:
    """Return the example registered under *key*.

    Raises:
        KeyError: If *key* is not a known example.
    """
    return EXAMPLES[key]


def example_keys() -> list[str]:
    """Return all example keys in catalog order."""
    return list(EXAMPLES)


# ################
# Implementation
# ################

_HELLO = """\
(module
  (func $main (result i32)
    i32.const 42)
  (export "main" (func $main)))"""

_ADDITION = """\
(module
  (func $add (param $a i32) (param $b i32) (result i32)
    (i32.add (local.get $a) (local.get $b)))
  (func $main (result i32)
    (call $add (i32.const 5) (i32.const 37)))
  (export "main" (func $main))
  (export "add" (func $add)))"""

_FACTORIAL = """\
(module
  (func $factorial (param $n i32) (result i32)
    (local $result i32)
    (local.set $result (i32.const 1))
    (block $done
      (br_if $done
        (i32.lt_s
          (local.get $n)
          (i32.const 2)))
      (local.set $result
        (i32.mul
          (local.get $n)
          (call $factorial
            (i32.sub
              (local.get $n)
              (i32.const 1))))))
    (local.get $result))
  (func $main (result i32)
    (call $factorial (i32.const 5)))
  (export "main" (func $main))
  (export "factorial" (func $factorial)))"""

_FIBONACCI = """\
(module
  (func $fibonacci (param $n i32) (result i32)
    (local $i i32)
    (local $a i32)
    (local $b i32)
    (local $temp i32)
    (local.set $i (i32.const 1))
    (local.set $a (i32.const 0))
    (local.set $b (i32.const 1))
    (if (i32.le_s (local.get $n) (i32.const 0))
      (then
        (return (i32.const 0))))
    (if (i32.eq (local.get $n) (i32.const 1))
      (then
        (return (i32.const 1))))
    (loop $fib_loop
      (if (i32.lt_s (local.get $i) (local.get $n))
        (then
          (local.set $temp (i32.add (local.get $a) (local.get $b)))
          (local.set $a (local.get $b))
          (local.set $b (local.get $temp))
          (local.set $i (i32.add (local.get $i) (i32.const 1)))
          (br $fib_loop))))
    (local.get $b))
  (func $main (result i32)
    (call $fibonacci (i32.const 10)))
  (export "main" (func $main))
  (export "fibonacci" (func $fibonacci)))"""

EXAMPLES = MappingProxyType(
    {
        ex.key: ex
        for ex in (
            Example(key="hello", title="Hello", source=_HELLO),
            Example(key="addition", title="Addition", source=_ADDITION),
            Example(key="factorial", title="Factorial", source=_FACTORIAL),
            Example(key="fibonacci", title="Fibonacci", source=_FIBONACCI),
        )
    }
)
