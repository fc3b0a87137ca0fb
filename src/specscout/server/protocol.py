"""Pydantic models for the MCP JSON-RPC 2.0 messages specscout exchanges.

Only the subset of the Model Context Protocol used by the stdio server is
modelled: initialisation, resource listing/reading and tool listing/calling.
Field names follow the protocol's camelCase through aliases; build
responses with :func:`response_message` / :func:`error_message` and
serialise with :func:`encode_message`.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from specscout.exceptions import ProtocolError

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
YAML_MIME_TYPE = "application/x-yaml"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = Union[str, int, None]


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RequestMessage(_Model):
    """An incoming request or notification (a request without ``id``)."""

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    method: str
    params: Optional[dict[str, Any]] = None

    @property
    def is_notification(self) -> bool:
        """True when the message carried no ``id`` member at all."""
        return "id" not in self.model_fields_set


class ErrorObject(_Model):
    code: int
    message: str
    data: Any = None


# --- initialize ---


class ResourceCapabilities(_Model):
    subscribe: bool = False
    list_changed: bool = Field(default=False, alias="listChanged")


class ToolCapabilities(_Model):
    list_changed: bool = Field(default=False, alias="listChanged")


class ServerCapabilities(_Model):
    resources: Optional[ResourceCapabilities] = None
    tools: Optional[ToolCapabilities] = None


class ServerInfo(_Model):
    name: str
    version: str


class InitializeResult(_Model):
    protocol_version: str = Field(default=PROTOCOL_VERSION, alias="protocolVersion")
    capabilities: ServerCapabilities
    server_info: ServerInfo = Field(alias="serverInfo")


# --- resources ---


class Resource(_Model):
    uri: str
    name: str
    description: Optional[str] = None
    mime_type: Optional[str] = Field(default=None, alias="mimeType")


class ListResourcesResult(_Model):
    resources: list[Resource] = Field(default_factory=list)


class ReadResourceParams(_Model):
    uri: str


class ResourceContent(_Model):
    uri: str
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    text: Optional[str] = None


class ReadResourceResult(_Model):
    contents: list[ResourceContent] = Field(default_factory=list)


# --- tools ---


class Tool(_Model):
    name: str
    description: Optional[str] = None
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class ListToolsResult(_Model):
    tools: list[Tool] = Field(default_factory=list)


class CallToolParams(_Model):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolContent(_Model):
    type: str = "text"
    text: str


class ToolResult(_Model):
    content: list[ToolContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def text(cls, text: str) -> ToolResult:
        return cls(content=[ToolContent(text=text)])


# --- encoding ---


def decode_request(line: str) -> RequestMessage:
    """Parse one line of input into a :class:`RequestMessage`.

    Raises:
        ProtocolError: If the line is not a JSON object with a ``method``.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ProtocolError("Message must be a JSON object")
    try:
        return RequestMessage.model_validate(data)
    except ValidationError as exc:
        raise ProtocolError(f"Invalid request: {exc}") from exc


def parse_params(params: Optional[dict[str, Any]], model: type[_Model]) -> Any:
    """Validate request params against *model*.

    Raises:
        ProtocolError: If the params do not fit the model.
    """
    try:
        return model.model_validate(params or {})
    except ValidationError as exc:
        raise ProtocolError(f"Invalid params: {exc}") from exc


def response_message(request_id: RequestId, result: BaseModel | dict[str, Any]) -> dict[str, Any]:
    """Build a success response envelope."""
    if isinstance(result, BaseModel):
        result = result.model_dump(by_alias=True, exclude_none=True)
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_message(request_id: RequestId, code: int, message: str) -> dict[str, Any]:
    """Build an error response envelope."""
    error = ErrorObject(code=code, message=message).model_dump(exclude_none=True)
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def encode_message(message: dict[str, Any]) -> str:
    """Serialise an envelope as a single JSON line (no trailing newline)."""
    return json.dumps(message, ensure_ascii=False, separators=(",", ":"))
