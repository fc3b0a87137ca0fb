"""Serve command -- run the MCP server over stdio."""

from __future__ import annotations

import logging

import typer

from specscout.commands import fail, resolve_from_context
from specscout.exceptions import SpecscoutError
from specscout.output import configure_logging

logger = logging.getLogger(__name__)


def serve_command(ctx: typer.Context) -> None:
    """Run the MCP server on stdin/stdout.

    stdout carries JSON-RPC messages only; logs go to stderr at the
    configured level (``LOG_LEVEL``, or debug with ``--verbose``). The
    document store is checked before the first message is read.

    Example::

        S3_BUCKET=api-docs specscout serve
        specscout --dir ./specs serve
    """
    from specscout.server import MCPServer
    from specscout.sources import create_source

    config = resolve_from_context(ctx)
    configure_logging(config.logging.level)

    try:
        with create_source(config.source) as source:
            MCPServer(source, config.scan).serve()
    except SpecscoutError as exc:
        logger.error("Server stopped: %s", exc)
        raise fail(exc) from None
