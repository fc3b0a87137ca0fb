"""Tool catalogue and tool implementations exposed over MCP.

Each tool takes the raw ``arguments`` mapping from ``tools/call`` and
returns display text. Argument problems raise
:class:`~specscout.exceptions.InvalidUsageError`; store failures propagate
as :class:`~specscout.exceptions.DocumentSourceError`.
"""

from __future__ import annotations

from typing import Any, Callable

from specscout.exceptions import InvalidUsageError
from specscout.models import DocumentInfo, ScanConfig
from specscout.search import build_query, search_endpoints
from specscout.server.protocol import Tool
from specscout.sources import DocumentSource

FILE_ICON = "\U0001f4c4"

TOOLS = [
    Tool(
        name="search_yaml_files",
        description="Search for YAML files by name or content pattern",
        inputSchema={
            "type": "object",
            "properties": {
                "pattern": {
                    "type": "string",
                    "description": "Search pattern for file names",
                },
            },
            "required": ["pattern"],
        },
    ),
    Tool(
        name="list_yaml_files",
        description="List all YAML files in the S3 bucket with optional prefix filter",
        inputSchema={
            "type": "object",
            "properties": {
                "prefix": {
                    "type": "string",
                    "description": "Optional prefix to filter files",
                },
            },
        },
    ),
    Tool(
        name="get_endpoint_details",
        description=(
            "Get detailed information about a specific API endpoint including "
            "request/response schemas"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "API endpoint path (e.g., '/users', '/cards/{id}')",
                },
                "method": {
                    "type": "string",
                    "description": "HTTP method (optional: GET, POST, PUT, DELETE, PATCH)",
                },
            },
            "required": ["path"],
        },
    ),
]


def format_file_list(header: str, docs: list[DocumentInfo], source: DocumentSource) -> str:
    """Render a document listing the way the file tools return it."""
    out = [f"{header}\n\n"]
    for doc in docs:
        out.append(f"{FILE_ICON} **{doc.name}**\n")
        out.append(f"   - Key: {doc.key}\n")
        out.append(f"   - Size: {doc.size} bytes\n")
        out.append(f"   - Modified: {doc.last_modified}\n")
        out.append(f"   - URI: {source.uri_for(doc.key)}\n\n")
    return "".join(out)


def search_yaml_files(source: DocumentSource, args: dict[str, Any], scan: ScanConfig) -> str:
    pattern = args.get("pattern")
    if not isinstance(pattern, str):
        raise InvalidUsageError("Pattern parameter is required and must be a string")
    docs = source.search_documents(pattern)
    return format_file_list(
        f"Found {len(docs)} YAML files matching pattern '{pattern}':", docs, source
    )


def list_yaml_files(source: DocumentSource, args: dict[str, Any], scan: ScanConfig) -> str:
    prefix = args.get("prefix")
    if not isinstance(prefix, str):
        prefix = ""
    docs = source.list_documents(prefix)
    if prefix:
        header = f"Found {len(docs)} YAML files with prefix '{prefix}':"
    else:
        header = f"Found {len(docs)} YAML files:"
    return format_file_list(header, docs, source)


def get_endpoint_details(source: DocumentSource, args: dict[str, Any], scan: ScanConfig) -> str:
    method = args.get("method")
    if not isinstance(method, str):
        method = None
    query = build_query(args.get("path"), method)
    return search_endpoints(source, query, scan)


ToolHandler = Callable[[DocumentSource, dict[str, Any], ScanConfig], str]

HANDLERS: dict[str, ToolHandler] = {
    "search_yaml_files": search_yaml_files,
    "list_yaml_files": list_yaml_files,
    "get_endpoint_details": get_endpoint_details,
}
