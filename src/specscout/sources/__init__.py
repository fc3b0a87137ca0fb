"""Document sources -- list and fetch OpenAPI YAML documents from a store.

Typical usage::

    from specscout.sources import create_source

    with create_source(config.source) as source:
        for doc in source.list_documents():
            text = source.get_document(doc.key).content

Sub-modules:

* :mod:`~specscout.sources.base` -- :class:`DocumentSource` interface and
  key helpers.
* :mod:`~specscout.sources.local` -- local directory tree.
* :mod:`~specscout.sources.bucket` -- S3-compatible bucket over HTTP.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from specscout.models import SourceConfig, SourceType
from specscout.sources.base import DocumentSource, extract_file_name, is_yaml_file
from specscout.sources.bucket import BucketSource
from specscout.sources.local import LocalDirectorySource


@contextmanager
def create_source(config: SourceConfig) -> Iterator[DocumentSource]:
    """Build the document source described by *config* and close it afterwards.

    Raises:
        DocumentSourceError: If an ``s3`` source has no bucket.
    """
    if config.type == SourceType.S3:
        with BucketSource(config) as source:
            yield source
    else:
        yield LocalDirectorySource(config.root)


__all__ = [
    "BucketSource",
    "DocumentSource",
    "LocalDirectorySource",
    "create_source",
    "extract_file_name",
    "is_yaml_file",
]
