"""Query commands -- endpoint details and document listings.

Provides the read-only ``specscout endpoint``, ``specscout files`` and
``specscout search`` commands. Each resolves the configured document
source, runs the query and prints the result to stdout.
"""

from __future__ import annotations

from typing import Optional

import typer

from specscout.commands import fail, resolve_from_context
from specscout.engine.matcher import is_http_method
from specscout.exceptions import SpecscoutError
from specscout.models import DocumentInfo
from specscout.output import configure_logging, debug, get_output, info, warning


def endpoint_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="API path or fragment, e.g. '/cards'."),
    method: Optional[str] = typer.Option(
        None, "--method", "-m", help="HTTP method filter (GET, POST, ...)."
    ),
) -> None:
    """Show details for every endpoint matching PATH.

    Scans all YAML documents in the configured store and prints the
    summary, description, parameters, request body and responses of each
    matching operation.

    Example::

        specscout endpoint /cards
        specscout --bucket api-docs endpoint /users --method post
    """
    from specscout.search import build_query, search_endpoints
    from specscout.sources import create_source

    config = resolve_from_context(ctx)
    configure_logging(config.logging.level)
    if method and not is_http_method(method):
        warning(f"'{method}' is not an HTTP method; no endpoint will match it")
    try:
        query = build_query(path, method)
        with create_source(config.source) as source:
            debug(f"Searching {source.description}")
            report = search_endpoints(source, query, config.scan)
    except SpecscoutError as exc:
        raise fail(exc) from None

    get_output().print_report(report, path=query.path, method=query.method)


def _rows(docs: list[DocumentInfo]) -> list[list[str]]:
    return [[doc.key, str(doc.size), doc.last_modified] for doc in docs]


def files_command(
    ctx: typer.Context,
    prefix: str = typer.Option("", "--prefix", help="Only list keys starting with this prefix."),
) -> None:
    """List YAML documents in the configured store.

    Example::

        specscout files
        specscout files --prefix payments/
    """
    from specscout.sources import create_source

    config = resolve_from_context(ctx)
    configure_logging(config.logging.level)
    try:
        with create_source(config.source) as source:
            docs = source.list_documents(prefix)
    except SpecscoutError as exc:
        raise fail(exc) from None

    if not docs:
        info("No YAML files found.")
        return
    get_output().print_table(
        ["Key", "Size", "Modified"], _rows(docs), title=f"YAML files ({len(docs)})"
    )


def search_command(
    ctx: typer.Context,
    pattern: str = typer.Argument(help="Case-insensitive fragment of a file name or key."),
) -> None:
    """Find YAML documents whose name or key contains PATTERN."""
    from specscout.sources import create_source

    config = resolve_from_context(ctx)
    configure_logging(config.logging.level)
    try:
        with create_source(config.source) as source:
            docs = source.search_documents(pattern)
    except SpecscoutError as exc:
        raise fail(exc) from None

    if not docs:
        info(f"No YAML files matching '{pattern}'.")
        return
    get_output().print_table(
        ["Key", "Size", "Modified"], _rows(docs), title=f"Matches for '{pattern}' ({len(docs)})"
    )
