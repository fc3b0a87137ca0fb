"""AWS Signature Version 4 request signing for the bucket source.

:class:`SigV4Auth` plugs into :class:`httpx.Client` as its ``auth`` and
signs every outgoing request for the ``s3`` service with static
credentials (access key, secret key and an optional session token).
Request bodies are hashed into ``x-amz-content-sha256``; the bucket source
only sends ``GET`` and ``HEAD``, so the hash is normally that of an empty
payload.
"""

from __future__ import annotations

import hashlib
import hmac
from datetime import datetime, timezone
from typing import Callable, Generator, Optional
from urllib.parse import quote

import httpx

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"

_UNRESERVED = "-_.~"


def _sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _hmac(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def signing_key(secret_key: str, date_stamp: str, region: str, service: str = SERVICE) -> bytes:
    """Derive the per-day, per-region signing key from *secret_key*."""
    key = _hmac(f"AWS4{secret_key}".encode("utf-8"), date_stamp)
    key = _hmac(key, region)
    key = _hmac(key, service)
    return _hmac(key, "aws4_request")


def canonical_query(url: httpx.URL) -> str:
    pairs = sorted(
        (quote(name, safe=_UNRESERVED), quote(value, safe=_UNRESERVED))
        for name, value in url.params.multi_items()
    )
    return "&".join(f"{name}={value}" for name, value in pairs)


class SigV4Auth(httpx.Auth):
    """Sign requests with AWS Signature Version 4.

    Args:
        access_key_id: AWS access key id.
        secret_access_key: Matching secret key.
        region: Region the bucket lives in; part of the credential scope.
        session_token: Temporary-credential token, sent as
            ``x-amz-security-token`` when given.
        clock: Returns the signing time; tests pin it.

    Example::

        auth = SigV4Auth("AKID", "secret", "eu-west-1")
        client = httpx.Client(base_url="https://s3.eu-west-1.amazonaws.com", auth=auth)
    """

    requires_request_body = True

    def __init__(
        self,
        access_key_id: str,
        secret_access_key: str,
        region: str,
        session_token: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._region = region
        self._session_token = session_token
        self._clock = clock

    @property
    def scope_suffix(self) -> str:
        return f"{self._region}/{SERVICE}/aws4_request"

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        self.sign(request)
        yield request

    def sign(self, request: httpx.Request) -> None:
        """Add the ``x-amz-*`` and ``Authorization`` headers to *request*."""
        now = self._clock().astimezone(timezone.utc)
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        date_stamp = now.strftime("%Y%m%d")
        payload_hash = _sha256(request.content)

        request.headers["x-amz-date"] = amz_date
        request.headers["x-amz-content-sha256"] = payload_hash
        if self._session_token:
            request.headers["x-amz-security-token"] = self._session_token

        signed = sorted(
            name for name in (key.lower() for key in request.headers.keys())
            if name == "host" or name.startswith("x-amz-")
        )
        canonical_headers = "".join(
            f"{name}:{request.headers[name].strip()}\n" for name in signed
        )
        signed_headers = ";".join(signed)

        canonical_request = "\n".join([
            request.method.upper(),
            quote(request.url.path or "/", safe="/" + _UNRESERVED),
            canonical_query(request.url),
            canonical_headers,
            signed_headers,
            payload_hash,
        ])

        scope = f"{date_stamp}/{self.scope_suffix}"
        string_to_sign = "\n".join([
            ALGORITHM,
            amz_date,
            scope,
            _sha256(canonical_request.encode("utf-8")),
        ])
        key = signing_key(self._secret_access_key, date_stamp, self._region)
        signature = hmac.new(key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

        request.headers["Authorization"] = (
            f"{ALGORITHM} Credential={self._access_key_id}/{scope}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        )
