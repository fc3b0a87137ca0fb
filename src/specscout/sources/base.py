"""Abstract document source interface.

A document source lists the OpenAPI YAML documents in some store and
fetches their text on demand. Concrete implementations live in
:mod:`~specscout.sources.local` and :mod:`~specscout.sources.bucket`.

Only ``.yaml`` / ``.yml`` keys (any case) are treated as documents; other
objects in the store are ignored by listings and rejected by
:meth:`DocumentSource.get_document`.
"""

from __future__ import annotations

import posixpath
from abc import ABC, abstractmethod
from datetime import datetime

from specscout.models import Document, DocumentInfo

YAML_EXTENSIONS = (".yaml", ".yml")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def is_yaml_file(key: str) -> bool:
    """Return whether *key* names a YAML document, judging by its extension."""
    return posixpath.splitext(key)[1].lower() in YAML_EXTENSIONS


def extract_file_name(key: str) -> str:
    """Return the last path component of a store key."""
    return posixpath.basename(key)


def format_timestamp(value: datetime) -> str:
    """Format a modification time the way listings display it."""
    return value.strftime(TIMESTAMP_FORMAT)


class DocumentSource(ABC):
    """Base class for YAML document stores.

    Subclasses implement listing, fetching, URI mapping and a connectivity
    check. :meth:`search_documents` is provided on top of
    :meth:`list_documents`.
    """

    @property
    @abstractmethod
    def description(self) -> str:
        """Short human-readable description of the store (for logs)."""

    @abstractmethod
    def list_documents(self, prefix: str = "") -> list[DocumentInfo]:
        """List YAML documents whose key starts with *prefix*.

        Raises:
            DocumentSourceError: If the store cannot be listed.
        """

    @abstractmethod
    def get_document(self, key: str) -> Document:
        """Fetch one document's metadata and full text.

        Raises:
            DocumentSourceError: If *key* is not a YAML document or cannot
                be read.
        """

    @abstractmethod
    def test_connection(self) -> None:
        """Check that the store is reachable.

        Raises:
            DocumentSourceError: If it is not.
        """

    @abstractmethod
    def uri_for(self, key: str) -> str:
        """Return the resource URI advertised for *key*."""

    @abstractmethod
    def key_from_uri(self, uri: str) -> str:
        """Inverse of :meth:`uri_for`; returns ``""`` for foreign URIs."""

    def search_documents(self, pattern: str) -> list[DocumentInfo]:
        """Return documents whose name or key contains *pattern*, ignoring case."""
        needle = pattern.lower()
        return [
            doc
            for doc in self.list_documents()
            if needle in doc.name.lower() or needle in doc.key.lower()
        ]
