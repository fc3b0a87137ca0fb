"""Document source backed by a local directory tree."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from urllib.parse import unquote

from specscout.exceptions import DocumentSourceError
from specscout.models import Document, DocumentInfo
from specscout.sources.base import (
    DocumentSource,
    extract_file_name,
    format_timestamp,
    is_yaml_file,
)

logger = logging.getLogger(__name__)


class LocalDirectorySource(DocumentSource):
    """Serve YAML documents found anywhere beneath *root*.

    Keys are POSIX-style paths relative to *root*, e.g. ``team/cards.yaml``,
    and resource URIs are ``file://`` URIs of the resolved files.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).expanduser().resolve()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def description(self) -> str:
        return f"directory {self._root}"

    def list_documents(self, prefix: str = "") -> list[DocumentInfo]:
        if not self._root.is_dir():
            raise DocumentSourceError(f"Document directory not found: {self._root}")

        docs: list[DocumentInfo] = []
        for path in sorted(self._root.rglob("*")):
            if not path.is_file():
                continue
            key = path.relative_to(self._root).as_posix()
            if not key.startswith(prefix) or not is_yaml_file(key):
                continue
            docs.append(self._info(path, key))
        logger.debug("Listed %d YAML documents under %s", len(docs), self._root)
        return docs

    def get_document(self, key: str) -> Document:
        if not is_yaml_file(key):
            raise DocumentSourceError(f"File {key} is not a YAML file")

        path = (self._root / key).resolve()
        if not path.is_relative_to(self._root):
            raise DocumentSourceError(f"Key escapes the document directory: {key}")
        if not path.is_file():
            raise DocumentSourceError(f"Document not found: {key}")

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentSourceError(f"Failed to read {key}: {exc}") from exc

        return Document(info=self._info(path, key), content=content)

    def test_connection(self) -> None:
        if not self._root.is_dir():
            raise DocumentSourceError(f"Document directory not found: {self._root}")

    def uri_for(self, key: str) -> str:
        return (self._root / key).as_uri()

    def key_from_uri(self, uri: str) -> str:
        prefix = self._root.as_uri() + "/"
        if uri.startswith(prefix):
            return unquote(uri[len(prefix):])
        return ""

    @staticmethod
    def _info(path: Path, key: str) -> DocumentInfo:
        stat = path.stat()
        return DocumentInfo(
            key=key,
            name=extract_file_name(key),
            size=stat.st_size,
            last_modified=format_timestamp(datetime.fromtimestamp(stat.st_mtime)),
        )
