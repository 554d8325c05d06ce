# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dash-based web playground on top of a single :class:`Pipeline`.

The callbacks are thin: each one forwards to a ``handle_*`` function that
drives the pipeline and returns plain values, which keeps the behaviour
testable without a browser.
"""

from __future__ import annotations

from typing import Any

import dash
from dash import ALL, Input, Output, State, ctx, dcc, html
from dash.exceptions import PreventUpdate

from wasmplay.catalog.examples import DEFAULT_EXAMPLE, EXAMPLES, get_example
from wasmplay.model.entities import LogEntry
from wasmplay.model.errors import PipelineError
from wasmplay.packaging.archive import DEFAULT_ARCHIVE_NAME
from wasmplay.pipeline.session import Pipeline

# ###############
# Public Interface
# ###############

APP_TITLE = "WebAssembly Playground"
NO_OUTPUT = "No output yet. Compile and run your code to see results."
NO_LOGS = "No logs yet."

ACTION_COMPILE = "compile-button"
ACTION_RUN = "run-button"
ACTION_COMPILE_RUN = "compile-run-button"
ACTION_CLEAR = "clear-button"


def create_app(pipeline: Pipeline | None = None, archive_name: str = DEFAULT_ARCHIVE_NAME) -> dash.Dash:
    """Create and configure the playground application."""
    pipeline = pipeline if pipeline is not None else Pipeline()
    app = dash.Dash(
        __name__,
        title=APP_TITLE,
    )
    app.layout = _build_layout()
    _register_callbacks(app, pipeline, archive_name)
    return app


def handle_action(pipeline: Pipeline, action: str, source: str) -> tuple[str, list[html.Div] | str]:
    """Apply a toolbar *action* and return the rendered (output, logs) pair."""
    try:
        if action == ACTION_COMPILE:
            pipeline.compile(source)
        elif action == ACTION_RUN:
            pipeline.run()
        elif action == ACTION_COMPILE_RUN:
            pipeline.compile_and_run(source)
        elif action == ACTION_CLEAR:
            pipeline.clear_logs()
    except PipelineError:
        # Already recorded as an error entry in the pipeline log.
        pass
    return pipeline.output or NO_OUTPUT, render_logs(pipeline.logs)


def handle_example(pipeline: Pipeline, key: str) -> tuple[str, list[html.Div] | str]:
    """Load example *key* and return the (editor text, logs) pair."""
    source = pipeline.load_example(key)
    return source, render_logs(pipeline.logs)


def handle_download(pipeline: Pipeline, archive_name: str) -> tuple[dict[str, Any] | None, list[html.Div] | str]:
    """Package the current artifact and return the (download payload, logs) pair."""
    try:
        data = pipeline.package()
    except PipelineError:
        return None, render_logs(pipeline.logs)
    return dcc.send_bytes(data, archive_name), render_logs(pipeline.logs)


def render_logs(entries: list[LogEntry]) -> list[html.Div] | str:
    """Render log entries as one ``div`` per line, classed by kind."""
    if not entries:
        return NO_LOGS
    return [html.Div(entry.message, className=entry.kind.value) for entry in entries]


# ################
# Implementation
# ################

_MONO = {"fontFamily": "monospace", "whiteSpace": "pre-wrap"}


def _build_layout() -> html.Div:
    """Build the application layout."""
    return html.Div(
        [
            html.H1(APP_TITLE),
            html.P("Write, compile, and run WebAssembly Text Format (WAT) code."),
            html.Div(
                [
                    html.Button("Compile WAT to WASM", id=ACTION_COMPILE),
                    html.Button("Run WASM", id=ACTION_RUN),
                    html.Button("Compile & Run", id=ACTION_COMPILE_RUN),
                    html.Button("Download", id="download-button"),
                    html.Button("Clear Logs", id=ACTION_CLEAR),
                ],
                className="control-panel",
            ),
            html.Div(
                [html.Span("Examples: ")]
                + [html.Button(ex.title, id={"type": "example", "index": key}) for key, ex in EXAMPLES.items()],
                className="examples",
            ),
            dcc.Textarea(
                id="source",
                value=get_example(DEFAULT_EXAMPLE).source,
                style={"width": "100%", "height": "400px", **_MONO},
            ),
            html.H2("Output"),
            html.Div(NO_OUTPUT, id="output", style=_MONO),
            html.H2("Logs"),
            html.Div(NO_LOGS, id="logs", style=_MONO),
            dcc.Download(id="download"),
        ],
        style={"fontFamily": "sans-serif", "padding": "2rem"},
    )


def _register_callbacks(app: dash.Dash, pipeline: Pipeline, archive_name: str) -> None:
    @app.callback(
        Output("output", "children"),
        Output("logs", "children"),
        Input(ACTION_COMPILE, "n_clicks"),
        Input(ACTION_RUN, "n_clicks"),
        Input(ACTION_COMPILE_RUN, "n_clicks"),
        Input(ACTION_CLEAR, "n_clicks"),
        State("source", "value"),
        prevent_initial_call=True,
    )
    def _on_action(_compile: int, _run: int, _compile_run: int, _clear: int, source: str | None) -> Any:
        return handle_action(pipeline, str(ctx.triggered_id), source or "")

    @app.callback(
        Output("source", "value"),
        Output("logs", "children", allow_duplicate=True),
        Input({"type": "example", "index": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def _on_example(clicks: list[int | None]) -> Any:
        triggered = ctx.triggered_id
        if not triggered or not any(clicks):
            raise PreventUpdate
        return handle_example(pipeline, triggered["index"])

    @app.callback(
        Output("download", "data"),
        Output("logs", "children", allow_duplicate=True),
        Input("download-button", "n_clicks"),
        prevent_initial_call=True,
    )
    def _on_download(_clicks: int) -> Any:
        return handle_download(pipeline, archive_name)
