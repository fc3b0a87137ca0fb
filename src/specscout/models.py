"""Canonical Pydantic models shared across all specscout modules.

The models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config
directory or a project-local ``specscout.json``:
    :class:`SourceConfig`, :class:`ScanConfig`, :class:`LoggingConfig`
    and :class:`GlobalConfig`.

**Document models** -- produced by the document sources:
    :class:`DocumentInfo` and :class:`Document`.

**Query models** -- input and output of the endpoint engine:
    :class:`EndpointQuery` and :class:`EndpointMatch`.

MCP wire messages live in :mod:`specscout.server.protocol`.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Configuration ---


class SourceType(str, enum.Enum):
    """Kinds of document store specscout can read from."""

    LOCAL = "local"
    S3 = "s3"


class SourceConfig(BaseModel):
    """Where YAML documents are listed and fetched from.

    ``type`` selects the store. A ``local`` source walks ``root``
    recursively; an ``s3`` source talks to an S3-compatible HTTP endpoint
    (AWS, MinIO, LocalStack) for ``bucket``.

    Example::

        SourceConfig(type="s3", bucket="api-docs", endpoint="http://localhost:9000")
    """

    type: SourceType = Field(default=SourceType.LOCAL, description="Store type: local or s3")
    root: str = Field(default=".", description="Directory scanned by the local source")
    bucket: Optional[str] = Field(default=None, description="Bucket name for the s3 source")
    region: str = Field(default="us-east-1", description="Bucket region")
    endpoint: Optional[str] = Field(
        default=None,
        description="Custom S3-compatible endpoint URL (path-style addressing)",
    )
    access_key_id: Optional[str] = Field(
        default=None, description="AWS access key id; requests are signed when set"
    )
    secret_access_key: Optional[str] = Field(
        default=None, description="AWS secret access key paired with access_key_id"
    )
    session_token: Optional[str] = Field(
        default=None, description="Session token for temporary credentials"
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(default=3, description="Max retry attempts")


class ScanConfig(BaseModel):
    """Tuning knobs for the endpoint extraction engine."""

    sensitive_marker: str = Field(
        default="blocked_reason",
        description="Substring collected from any block and flagged in Responses",
    )
    responses_lookahead: int = Field(
        default=19,
        description="Lines captured verbatim after a responses: line",
    )

    @field_validator("responses_lookahead")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("responses_lookahead must be >= 0")
        return value


class LoggingConfig(BaseModel):
    """Diagnostic logging settings."""

    level: str = Field(default="info", description="debug, info, warning or error")


class GlobalConfig(BaseModel):
    """Effective configuration after precedence resolution.

    Persisted at ``~/.config/specscout/config.json`` and optionally
    overlaid by ``./specscout.json``, environment variables and CLI flags.
    See :func:`~specscout.config.resolve_config` for the full chain.
    """

    source: SourceConfig = Field(default_factory=SourceConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# --- Documents ---


class DocumentInfo(BaseModel):
    """Listing metadata for one YAML document in a store."""

    key: str = Field(description="Store-relative key, e.g. 'team/cards.yaml'")
    name: str = Field(description="Base file name")
    size: int = 0
    last_modified: str = Field(default="", description="YYYY-MM-DD HH:MM:SS")


class Document(BaseModel):
    """A fetched YAML document: metadata plus full text."""

    info: DocumentInfo
    content: str


# --- Engine ---


class EndpointQuery(BaseModel):
    """What the caller is looking for.

    ``method`` of ``None`` (or empty) matches every HTTP verb under a
    matching path. The path is matched as a raw substring; see
    :func:`~specscout.engine.matcher.path_matches`.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: Optional[str] = None

    @field_validator("method")
    @classmethod
    def _normalise_method(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        return value.upper()


class EndpointMatch(BaseModel):
    """A finalized method block that satisfied both the path and method predicates.

    ``lines`` holds the raw (untrimmed) document lines collected for the
    block, in document order.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    lines: tuple[str, ...] = ()
    document: str = ""
