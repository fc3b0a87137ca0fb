"""MCP server speaking newline-delimited JSON-RPC 2.0 over stdio.

:class:`MCPServer` reads one message per line from its input stream,
dispatches on the ``method`` field and writes one response per line to its
output stream. Notifications get no response. A malformed line is answered
with a ``-32700`` error and the loop carries on; end of input stops the
server cleanly.

Diagnostics never go to the output stream -- it carries protocol traffic
only -- they are logged through :mod:`logging` (stderr).
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Optional, TextIO

from specscout import __version__
from specscout.exceptions import (
    DocumentSourceError,
    InvalidUsageError,
    NotFoundError,
    ProtocolError,
)
from specscout.models import ScanConfig
from specscout.server.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    YAML_MIME_TYPE,
    CallToolParams,
    InitializeResult,
    ListResourcesResult,
    ListToolsResult,
    ReadResourceParams,
    ReadResourceResult,
    RequestMessage,
    Resource,
    ResourceCapabilities,
    ResourceContent,
    ServerCapabilities,
    ServerInfo,
    ToolCapabilities,
    ToolResult,
    decode_request,
    encode_message,
    error_message,
    parse_params,
    response_message,
)
from specscout.server.tools import HANDLERS, TOOLS
from specscout.sources import DocumentSource

logger = logging.getLogger(__name__)

SERVER_NAME = "s3-yaml-mcp-server"

_NOTIFICATIONS = frozenset({"initialized", "notifications/initialized"})


class MCPServer:
    """Stdio MCP server exposing YAML documents as resources and tools.

    Args:
        source: Document store backing resources and tools.
        scan: Engine settings used by ``get_endpoint_details``.
        reader: Input stream (defaults to ``sys.stdin``).
        writer: Output stream (defaults to ``sys.stdout``).

    Example::

        with create_source(config.source) as source:
            MCPServer(source, config.scan).serve()
    """

    def __init__(
        self,
        source: DocumentSource,
        scan: Optional[ScanConfig] = None,
        reader: Optional[TextIO] = None,
        writer: Optional[TextIO] = None,
    ) -> None:
        self._source = source
        self._scan = scan or ScanConfig()
        self._reader = reader if reader is not None else sys.stdin
        self._writer = writer if writer is not None else sys.stdout
        self._methods: dict[str, Callable[[RequestMessage], Optional[dict[str, Any]]]] = {
            "initialize": self._handle_initialize,
            "resources/list": self._handle_list_resources,
            "resources/read": self._handle_read_resource,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
        }

    # ------------------------------------------------------------------ #
    # Main loop
    # ------------------------------------------------------------------ #

    def serve(self) -> None:
        """Check the store, then process messages until end of input.

        Raises:
            DocumentSourceError: If the store connection test fails.
        """
        logger.info("Starting MCP server - %s", self._source.description)
        self._source.test_connection()
        logger.info("Document store reachable")
        logger.info("Server ready - listening for MCP messages...")

        for line in self._reader:
            self.process_line(line)
        logger.info("Client disconnected")

    def process_line(self, line: str) -> Optional[dict[str, Any]]:
        """Handle one raw input line and write the response, if any.

        Returns:
            The response envelope written, or ``None`` for blank lines and
            notifications.
        """
        line = line.strip()
        if not line:
            return None

        try:
            request = decode_request(line)
        except ProtocolError as exc:
            logger.warning("Rejected message: %s", exc)
            return self._send(error_message(None, PARSE_ERROR, "Parse error"))

        response = self.handle_request(request)
        if response is not None:
            self._send(response)
        return response

    def handle_request(self, request: RequestMessage) -> Optional[dict[str, Any]]:
        """Dispatch *request* and return its response envelope.

        Notifications return ``None``. Handler failures are mapped to
        JSON-RPC error codes rather than raised.
        """
        if request.method in _NOTIFICATIONS:
            logger.info("Client initialized")
            return None

        handler = self._methods.get(request.method)
        if handler is None:
            if request.is_notification:
                logger.debug("Ignoring notification %s", request.method)
                return None
            return error_message(
                request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}"
            )

        try:
            return handler(request)
        except ProtocolError as exc:
            logger.debug("Invalid params for %s: %s", request.method, exc)
            return error_message(request.id, INVALID_PARAMS, "Invalid params")
        except InvalidUsageError as exc:
            return error_message(request.id, INVALID_PARAMS, str(exc))
        except (DocumentSourceError, NotFoundError) as exc:
            logger.error("%s failed: %s", request.method, exc)
            return error_message(request.id, INTERNAL_ERROR, str(exc))
        except Exception as exc:
            logger.exception("Unexpected error handling %s", request.method)
            return error_message(request.id, INTERNAL_ERROR, f"Internal error: {exc}")

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #

    def _handle_initialize(self, request: RequestMessage) -> dict[str, Any]:
        result = InitializeResult(
            capabilities=ServerCapabilities(
                resources=ResourceCapabilities(),
                tools=ToolCapabilities(),
            ),
            serverInfo=ServerInfo(name=SERVER_NAME, version=__version__),
        )
        return response_message(request.id, result)

    def _handle_list_resources(self, request: RequestMessage) -> dict[str, Any]:
        try:
            docs = self._source.list_documents()
        except (DocumentSourceError, NotFoundError) as exc:
            return error_message(
                request.id, INTERNAL_ERROR, f"Failed to list YAML files: {exc}"
            )

        resources = [
            Resource(
                uri=self._source.uri_for(doc.key),
                name=doc.name,
                description=(
                    "Swagger/OpenAPI YAML documentation "
                    f"(Size: {doc.size} bytes, Modified: {doc.last_modified})"
                ),
                mimeType=YAML_MIME_TYPE,
            )
            for doc in docs
        ]
        return response_message(request.id, ListResourcesResult(resources=resources))

    def _handle_read_resource(self, request: RequestMessage) -> dict[str, Any]:
        params: ReadResourceParams = parse_params(request.params, ReadResourceParams)

        key = self._source.key_from_uri(params.uri)
        if not key:
            return error_message(request.id, INVALID_PARAMS, "Invalid resource URI")

        try:
            document = self._source.get_document(key)
        except (DocumentSourceError, NotFoundError) as exc:
            return error_message(request.id, INTERNAL_ERROR, f"Failed to read file: {exc}")

        result = ReadResourceResult(
            contents=[
                ResourceContent(uri=params.uri, mimeType=YAML_MIME_TYPE, text=document.content)
            ]
        )
        return response_message(request.id, result)

    def _handle_list_tools(self, request: RequestMessage) -> dict[str, Any]:
        return response_message(request.id, ListToolsResult(tools=TOOLS))

    def _handle_call_tool(self, request: RequestMessage) -> dict[str, Any]:
        params: CallToolParams = parse_params(request.params, CallToolParams)

        handler = HANDLERS.get(params.name)
        if handler is None:
            return error_message(request.id, METHOD_NOT_FOUND, f"Unknown tool: {params.name}")

        logger.debug("Calling tool %s with %s", params.name, params.arguments)
        text = handler(self._source, params.arguments, self._scan)
        return response_message(request.id, ToolResult.text(text))

    # ------------------------------------------------------------------ #
    # Output
    # ------------------------------------------------------------------ #

    def _send(self, message: dict[str, Any]) -> dict[str, Any]:
        self._writer.write(encode_message(message) + "\n")
        self._writer.flush()
        return message
