# Copyright 2026 wasmplay Contributors
# SPDX-License-Identifier: Apache-2.0

"""Static documents bundled next to a packaged module."""

from __future__ import annotations

# ###############
# Public Interface
# ###############

BINARY_NAME = "module.wasm"
SOURCE_NAME = "source.wat"
RUNNER_NAME = "index.html"
README_NAME = "README.md"


def render_runner_page(binary_name: str = BINARY_NAME) -> str:
    """Return a standalone HTML page that fetches and runs *binary_name*.

    The page provides the same ``env.log`` / ``env.log_string`` imports as the
    sandbox, calls ``main`` when it is exported, and prints either
    ``Result: <value>`` or an error line.
    """
    return _RUNNER_TEMPLATE.replace("__BINARY_NAME__", binary_name)


def render_readme(
    binary_name: str = BINARY_NAME,
    source_name: str = SOURCE_NAME,
    runner_name: str = RUNNER_NAME,
) -> str:
    """Return usage notes for the archive, including local-serving commands."""
    return _README_TEMPLATE.format(binary=binary_name, source=source_name, runner=runner_name)


# ################
# Implementation
# ################

_README_TEMPLATE = """\
# WebAssembly Module

This package contains:
- `{binary}`: The compiled WebAssembly binary
- `{source}`: The original WebAssembly Text Format source code
- `{runner}`: A web page to run the WebAssembly module

## Usage
1. Serve these files through a web server (WebAssembly can't be loaded from file://)
2. Open {runner} in your browser
3. Click "Run WASM" to execute the module

You can use a simple local server like:
- Python: `python -m http.server`
- Node.js: `npx serve`
"""

_RUNNER_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>WebAssembly Runner</title>
    <style>
        body {
            font-family: system-ui, -apple-system, sans-serif;
            max-width: 800px;
            margin: 0 auto;
            padding: 2rem;
            background: #1a1a1a;
            color: #eee;
        }
        .container {
            display: flex;
            flex-direction: column;
            gap: 1rem;
        }
        .output-panel {
            background: #111;
            border: 1px solid #333;
            border-radius: 4px;
            padding: 1rem;
            min-height: 100px;
            font-family: monospace;
            white-space: pre-wrap;
        }
        button {
            background: #646cff;
            color: white;
            border: none;
            padding: 8px 16px;
            border-radius: 4px;
            cursor: pointer;
            font-size: 15px;
        }
        button:hover {
            background: #747bff;
        }
        .success { color: #55ff55; }
        .error { color: #ff5555; }
    </style>
</head>
<body>
    <div class="container">
        <h1>WebAssembly Runner</h1>
        <button onclick="runWasm()">Run WASM</button>
        <div id="output" class="output-panel">Click "Run WASM" to execute the module...</div>
    </div>
    <script>
        function appendLine(outputDiv, text, cls) {
            const line = document.createElement('div');
            if (cls) {
                line.className = cls;
            }
            line.textContent = text;
            outputDiv.appendChild(line);
        }

        async function runWasm() {
            const outputDiv = document.getElementById('output');
            outputDiv.textContent = '';
            let instance = null;
            try {
                const response = await fetch('__BINARY_NAME__');
                const wasmBuffer = await response.arrayBuffer();
                const wasmModule = await WebAssembly.compile(wasmBuffer);

                const imports = {
                    env: {
                        log: (value) => {
                            console.log(`WASM log: ${value}`);
                            appendLine(outputDiv, `WASM log: ${value}`);
                            return value;
                        },
                        log_string: (ptr, len) => {
                            const memory = instance.exports.memory;
                            const bytes = new Uint8Array(memory.buffer, ptr >>> 0, len >>> 0);
                            const text = new TextDecoder().decode(bytes);
                            console.log(`WASM log: ${text}`);
                            appendLine(outputDiv, `WASM log: ${text}`);
                        }
                    }
                };

                instance = await WebAssembly.instantiate(wasmModule, imports);

                const main = instance.exports.main;
                if (typeof main === 'function' && main.length === 0) {
                    const result = main();
                    appendLine(outputDiv, `Result: ${result}`, 'success');
                } else {
                    appendLine(outputDiv, 'No main function found in the WASM module', 'error');
                }
            } catch (error) {
                console.error('Error running WASM:', error);
                outputDiv.textContent = '';
                appendLine(outputDiv, `Error: ${error.message}`, 'error');
            }
        }
    </script>
</body>
</html>
"""
