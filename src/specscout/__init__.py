"""specscout -- query endpoint details across OpenAPI/Swagger YAML documents.

Given a path (and optionally an HTTP method), specscout scans every YAML
document in a document store -- a local directory or an S3-compatible
bucket -- and reports the matching operations' summaries, descriptions,
parameters, request bodies and responses.

It runs either as a Model Context Protocol server over stdio::

    specscout --bucket api-docs serve

or as a plain command-line tool::

    specscout --dir ./specs endpoint /cards --method get

Modules:
    app: Typer application and CLI entry point.
    engine: Indentation-driven endpoint extraction engine.
    search: Multi-document endpoint search.
    sources: Local-directory and bucket document stores.
    server: MCP JSON-RPC server over stdio.
    models: Pydantic models shared across the package.
    config: Layered configuration resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "1.0.0"
