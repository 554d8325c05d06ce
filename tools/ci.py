#!/usr/bin/env python3
# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, tests, an end-to-end smoke run, and build."""

import pathlib
import subprocess
import sys
import tempfile
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############


def steps(scratch: pathlib.Path) -> list[tuple[str, list[str]]]:
    """Return the CI steps, writing smoke-test outputs into *scratch*."""
    return [
        ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
        ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
        ("Type check", ["uv", "run", "ty", "check", "src/"]),
        ("Tests", ["uv", "run", "pytest", "--cov=wasmplay", "--cov-report=term-missing"]),
        ("Smoke: run factorial", ["uv", "run", "wasmplay", "run", "example:factorial"]),
        (
            "Smoke: package fibonacci",
            ["uv", "run", "wasmplay", "package", "example:fibonacci", "-o", str(scratch / "fib.zip")],
        ),
        ("Build", ["uv", "build"]),
    ]


def main() -> int:
    """Run all CI steps and report a coloured summary."""
    results: list[tuple[str, bool, float]] = []

    with tempfile.TemporaryDirectory(prefix="wasmplay-ci-") as scratch:
        for name, cmd in steps(pathlib.Path(scratch)):
            _banner(name)
            start = time.monotonic()
            proc = subprocess.run(cmd, cwd=_repo_root())
            results.append((name, proc.returncode == 0, time.monotonic() - start))

    _banner("Summary")
    failed = [name for name, passed, _ in results if not passed]
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))

    print()
    if failed:
        print(chalk.red(f"{len(failed)} of {len(results)} step(s) failed."))
        return 1
    return 0


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(f"  {title}"))
    print(sep)


def _repo_root() -> str:
    return str(pathlib.Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
