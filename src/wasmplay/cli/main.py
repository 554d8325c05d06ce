# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the wasmplay command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from yachalk import chalk

from wasmplay.catalog.examples import EXAMPLES, get_example
from wasmplay.compiler.wat import WASM_SUFFIX
from wasmplay.config.settings import ConfigError, PlaygroundConfig, find_config, load_config
from wasmplay.model.entities import LogEntry, LogKind
from wasmplay.model.errors import PipelineError
from wasmplay.pipeline.session import Pipeline

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the wasmplay CLI."""
    parser = argparse.ArgumentParser(
        prog="wasmplay",
        description="wasmplay: compile, run, and package WebAssembly text modules",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a configuration file (default: ./.wasmplay.yaml if present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Also print debug diagnostics to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # examples subcommand
    examples_parser = subparsers.add_parser(
        "examples",
        help="List the built-in examples or print one of them",
        description="List the built-in example modules, or print the source of one example.",
    )
    examples_parser.add_argument("key", nargs="?", default=None, help="Example to print")

    # compile subcommand
    compile_parser = subparsers.add_parser(
        "compile",
        help="Compile a WAT source to a .wasm binary",
        description="Compile WebAssembly Text Format source into its binary encoding.",
    )
    compile_parser.add_argument("source", help=_SOURCE_HELP)
    compile_parser.add_argument("-o", "--output", default=None, help="Output path (default: <name>.wasm)")

    # run subcommand
    run_parser = subparsers.add_parser(
        "run",
        help="Compile and run a module",
        description="Compile a module, invoke its 'main' export, and print logs and results.",
    )
    run_parser.add_argument("source", help=_SOURCE_HELP)

    # package subcommand
    package_parser = subparsers.add_parser(
        "package",
        help="Bundle a compiled module for offline use",
        description="Compile a module and write a zip with the binary, source, runner page, and README.",
    )
    package_parser.add_argument("source", help=_SOURCE_HELP)
    package_parser.add_argument("-o", "--output", default=None, help="Archive path (default: from config)")

    # serve subcommand
    serve_parser = subparsers.add_parser(
        "serve",
        help="Launch the interactive playground",
        description="Launch a web-based playground for editing, running, and packaging modules.",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8050,
        help="Port to run the server on (default: 8050)",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_EXAMPLE_PREFIX = "example:"
_SOURCE_HELP = f"Path to a .wat file, or '{_EXAMPLE_PREFIX}<key>' for a built-in example"


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "examples":
        return _cmd_examples(args)

    try:
        config = _load_config(args)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.command == "compile":
        return _cmd_compile(args, config)
    if args.command == "run":
        return _cmd_run(args, config)
    if args.command == "package":
        return _cmd_package(args, config)
    if args.command == "serve":
        return _cmd_serve(args, config)
    return 0


def _load_config(args: argparse.Namespace) -> PlaygroundConfig:
    if args.config is not None:
        return load_config(Path(args.config))
    return find_config(Path.cwd())


def _cmd_examples(args: argparse.Namespace) -> int:
    """Handle the examples subcommand."""
    if args.key is None:
        for key, example in EXAMPLES.items():
            print(f"{key:<12} {example.title}")
        return 0
    if args.key not in EXAMPLES:
        print(f"Error: unknown example '{args.key}'. Available: {', '.join(EXAMPLES)}", file=sys.stderr)
        return 1
    print(get_example(args.key).source)
    return 0


def _cmd_compile(args: argparse.Namespace, config: PlaygroundConfig) -> int:
    """Handle the compile subcommand."""
    pipeline = Pipeline(fuel=config.fuel)
    try:
        name, source = _read_source(args.source)
        artifact = pipeline.compile(source)
    except (OSError, UnicodeDecodeError, PipelineError) as exc:
        _print_logs(pipeline.logs)
        return _fail(exc)

    output = Path(args.output) if args.output else Path(config.output_directory) / f"{name}{WASM_SUFFIX}"
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(artifact.binary)
    except OSError as exc:
        return _fail(exc)

    _print_logs(pipeline.logs)
    print(f"Wrote {len(artifact.binary)} bytes to '{output}'.")
    return 0


def _cmd_run(args: argparse.Namespace, config: PlaygroundConfig) -> int:
    """Handle the run subcommand."""
    pipeline = Pipeline(fuel=config.fuel)
    try:
        _, source = _read_source(args.source)
        pipeline.compile_and_run(source)
    except (OSError, UnicodeDecodeError, PipelineError) as exc:
        _print_logs(pipeline.logs)
        return _fail(exc)

    _print_logs(pipeline.logs)
    print(pipeline.output)
    return 0


def _cmd_package(args: argparse.Namespace, config: PlaygroundConfig) -> int:
    """Handle the package subcommand."""
    pipeline = Pipeline(fuel=config.fuel)
    output = Path(args.output) if args.output else Path(config.output_directory) / config.archive_name
    try:
        _, source = _read_source(args.source)
        pipeline.compile(source)
        pipeline.package(output)
    except (OSError, UnicodeDecodeError, PipelineError) as exc:
        _print_logs(pipeline.logs)
        return _fail(exc)

    _print_logs(pipeline.logs)
    print(f"Wrote package to '{output}'.")
    return 0


def _cmd_serve(args: argparse.Namespace, config: PlaygroundConfig) -> int:
    """Handle the serve subcommand."""
    from wasmplay.webui.app import create_app

    print(f"Serving playground at http://{args.host}:{args.port}/")
    app = create_app(pipeline=Pipeline(fuel=config.fuel), archive_name=config.archive_name)
    app.run(host=args.host, port=args.port, debug=False)
    return 0


def _read_source(spec: str) -> tuple[str, str]:
    """Resolve a SOURCE argument to ``(name, text)``.

    Raises:
        OSError: If the file cannot be read or the example does not exist.
    """
    if spec.startswith(_EXAMPLE_PREFIX):
        key = spec[len(_EXAMPLE_PREFIX) :]
        if key not in EXAMPLES:
            raise FileNotFoundError(f"unknown example '{key}'. Available: {', '.join(EXAMPLES)}")
        return key, get_example(key).source
    path = Path(spec)
    return path.stem, path.read_text(encoding="utf-8")


def _print_logs(entries: list[LogEntry]) -> None:
    for entry in entries:
        print(_STYLES[entry.kind](entry.message))


def _fail(exc: Exception) -> int:
    message = exc.message if isinstance(exc, PipelineError) else str(exc)
    print(chalk.red(f"Error: {message}"), file=sys.stderr)
    return 1


_STYLES = {
    LogKind.INFO: chalk.white,
    LogKind.ERROR: chalk.red,
    LogKind.SUCCESS: chalk.green,
}
