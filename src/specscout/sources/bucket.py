"""Document source backed by an S3-compatible bucket over plain HTTP.

:class:`BucketSource` talks to the S3 REST API with :mod:`httpx` using
path-style addressing (``<endpoint>/<bucket>/<key>``), which AWS, MinIO and
LocalStack all accept:

- **Listing** -- ``ListObjectsV2`` (``?list-type=2``), following
  continuation tokens until the listing is exhausted.
- **Fetching** -- ``GET`` on the object; size and modification time come
  from the response headers.
- **Connectivity** -- ``HEAD`` on the bucket.
- **Retry with backoff** -- 5xx responses and network errors are retried
  with exponential delay (1 s, 2 s, 4 s, ...).

When the source config carries an access key pair, every request is signed
with AWS Signature Version 4 (:class:`~specscout.sources.signing.SigV4Auth`).
Without one, requests go out unsigned and only buckets that allow anonymous
read and list access can be used.
"""

from __future__ import annotations

import logging
import time
import xml.etree.ElementTree as ET
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any, Optional
from urllib.parse import quote

import httpx

from specscout.exceptions import DocumentSourceError, NotFoundError
from specscout.models import Document, DocumentInfo, SourceConfig
from specscout.sources.base import (
    DocumentSource,
    extract_file_name,
    format_timestamp,
    is_yaml_file,
)
from specscout.sources.signing import SigV4Auth

logger = logging.getLogger(__name__)

_S3_NS = {"s3": "http://s3.amazonaws.com/doc/2006-03-01/"}


def default_endpoint(region: str) -> str:
    """Return the regional AWS S3 endpoint for *region*."""
    return f"https://s3.{region}.amazonaws.com"


class BucketSource(DocumentSource):
    """Serve YAML documents stored in an S3-compatible bucket.

    Must be used as a context manager (or closed with :meth:`close`) so the
    underlying :class:`httpx.Client` is released.

    Args:
        config: Source settings; ``bucket`` is required.
        transport: Optional httpx transport, mainly for tests
            (``httpx.MockTransport``).

    Example::

        with BucketSource(SourceConfig(type="s3", bucket="api-docs")) as source:
            for doc in source.list_documents():
                print(doc.key)
    """

    def __init__(
        self,
        config: SourceConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not config.bucket:
            raise DocumentSourceError("An S3 bucket name is required")
        self._config = config
        self._bucket = config.bucket
        self._endpoint = (config.endpoint or default_endpoint(config.region)).rstrip("/")
        self._client = httpx.Client(
            base_url=self._endpoint,
            timeout=config.timeout,
            follow_redirects=True,
            transport=transport,
            auth=_auth_for(config),
        )

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> BucketSource:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------ #
    # DocumentSource
    # ------------------------------------------------------------------ #

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def description(self) -> str:
        return f"bucket {self._bucket} at {self._endpoint}"

    def list_documents(self, prefix: str = "") -> list[DocumentInfo]:
        docs: list[DocumentInfo] = []
        token: Optional[str] = None

        while True:
            params: dict[str, Any] = {"list-type": "2", "prefix": prefix}
            if token:
                params["continuation-token"] = token

            response = self._request("GET", f"/{self._bucket}", params=params)
            root = self._parse_xml(response.text)

            for item in root.findall("s3:Contents", _S3_NS):
                key = _text(item, "Key")
                if not key or not is_yaml_file(key):
                    continue
                docs.append(
                    DocumentInfo(
                        key=key,
                        name=extract_file_name(key),
                        size=int(_text(item, "Size") or 0),
                        last_modified=_iso_to_display(_text(item, "LastModified")),
                    )
                )

            if _text(root, "IsTruncated") != "true":
                break
            token = _text(root, "NextContinuationToken")
            if not token:
                break

        logger.debug("Listed %d YAML documents in bucket %s", len(docs), self._bucket)
        return docs

    def get_document(self, key: str) -> Document:
        if not is_yaml_file(key):
            raise DocumentSourceError(f"File {key} is not a YAML file")

        response = self._request("GET", self._object_path(key))
        size = int(response.headers.get("content-length") or len(response.content))
        info = DocumentInfo(
            key=key,
            name=extract_file_name(key),
            size=size,
            last_modified=_http_date_to_display(response.headers.get("last-modified")),
        )
        return Document(info=info, content=response.text)

    def test_connection(self) -> None:
        try:
            self._request("HEAD", f"/{self._bucket}")
        except (DocumentSourceError, NotFoundError) as exc:
            raise DocumentSourceError(
                f"Failed to access bucket {self._bucket}: {exc}"
            ) from exc

    def uri_for(self, key: str) -> str:
        return f"s3://{self._bucket}/{key}"

    def key_from_uri(self, uri: str) -> str:
        prefix = f"s3://{self._bucket}/"
        if uri.startswith(prefix):
            return uri[len(prefix):]
        return ""

    # ------------------------------------------------------------------ #
    # HTTP helpers
    # ------------------------------------------------------------------ #

    def _object_path(self, key: str) -> str:
        return f"/{self._bucket}/{quote(key, safe='/')}"

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send a request with retry and map failures to specscout exceptions.

        Raises:
            NotFoundError: On 404.
            DocumentSourceError: On any other 4xx/5xx after retries, or on
                network errors after retries.
        """
        max_retries = self._config.max_retries
        response: Optional[httpx.Response] = None

        for attempt in range(max_retries + 1):
            try:
                response = self._client.request(method, path, params=params)
            except httpx.TransportError as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    logger.debug(
                        "Connection error: %s, retrying in %ss (attempt %d/%d)",
                        exc, delay, attempt + 1, max_retries,
                    )
                    time.sleep(delay)
                    continue
                raise DocumentSourceError(
                    f"Connection to {self._endpoint} failed after "
                    f"{max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                logger.debug(
                    "Server error %d, retrying in %ss (attempt %d/%d)",
                    response.status_code, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                continue
            break

        assert response is not None
        status = response.status_code
        if status == 404:
            raise NotFoundError(f"{method} {path}: not found (HTTP 404)")
        if status >= 400:
            raise DocumentSourceError(
                f"{method} {path} failed with HTTP {status}{_error_detail(response)}"
            )
        return response

    @staticmethod
    def _parse_xml(text: str) -> ET.Element:
        try:
            return ET.fromstring(text)
        except ET.ParseError as exc:
            raise DocumentSourceError(f"Malformed bucket listing: {exc}") from exc


def _auth_for(config: SourceConfig) -> Optional[SigV4Auth]:
    """Signing auth when both halves of the access key pair are configured."""
    if not (config.access_key_id and config.secret_access_key):
        return None
    return SigV4Auth(
        config.access_key_id,
        config.secret_access_key,
        config.region,
        session_token=config.session_token,
    )


def _text(element: ET.Element, tag: str) -> str:
    found = element.find(f"s3:{tag}", _S3_NS)
    if found is None or found.text is None:
        return ""
    return found.text


def _iso_to_display(value: str) -> str:
    """Convert an S3 ``LastModified`` (ISO 8601) to listing format."""
    if not value:
        return ""
    try:
        return format_timestamp(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return value


def _http_date_to_display(value: Optional[str]) -> str:
    """Convert an RFC 7231 ``Last-Modified`` header to listing format."""
    if not value:
        return ""
    try:
        return format_timestamp(parsedate_to_datetime(value))
    except (TypeError, ValueError):
        return value


def _error_detail(response: httpx.Response) -> str:
    """Extract the ``<Message>`` of an S3 XML error body, if any."""
    if not response.content:
        return ""
    try:
        root = ET.fromstring(response.text)
    except ET.ParseError:
        return ""
    message = root.findtext("Message")
    return f": {message}" if message else ""
