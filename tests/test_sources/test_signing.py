"""Tests for specscout.sources.signing -- AWS Signature Version 4."""

from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone

import httpx

from specscout.sources.signing import SigV4Auth, canonical_query, signing_key

FIXED = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)
EMPTY_SHA256 = hashlib.sha256(b"").hexdigest()


def _auth(**overrides) -> SigV4Auth:
    options = {"clock": lambda: FIXED}
    options.update(overrides)
    return SigV4Auth("AKIDEXAMPLE", "secret", "us-east-1", **options)


def _signed(request: httpx.Request, auth: SigV4Auth) -> httpx.Request:
    auth.sign(request)
    return request


class TestSigningKey:
    def test_matches_published_derivation_example(self) -> None:
        key = signing_key(
            "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY", "20120215", "us-east-1", "iam"
        )
        assert key.hex() == "f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d"


class TestCanonicalQuery:
    def test_sorted_and_encoded(self) -> None:
        url = httpx.URL("http://s3.test/b", params={"prefix": "team/a b", "list-type": "2"})
        assert canonical_query(url) == "list-type=2&prefix=team%2Fa%20b"

    def test_empty(self) -> None:
        assert canonical_query(httpx.URL("http://s3.test/b")) == ""


class TestSign:
    def test_headers(self) -> None:
        request = _signed(httpx.Request("GET", "http://s3.test/api-docs/a.yaml"), _auth())

        assert request.headers["x-amz-date"] == "20240501T123000Z"
        assert request.headers["x-amz-content-sha256"] == EMPTY_SHA256
        assert "x-amz-security-token" not in request.headers

        match = re.fullmatch(
            r"AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20240501/us-east-1/s3/aws4_request, "
            r"SignedHeaders=host;x-amz-content-sha256;x-amz-date, Signature=([0-9a-f]{64})",
            request.headers["authorization"],
        )
        assert match is not None

    def test_session_token_is_signed(self) -> None:
        request = _signed(
            httpx.Request("HEAD", "http://s3.test/api-docs"), _auth(session_token="tok")
        )
        assert request.headers["x-amz-security-token"] == "tok"
        assert "x-amz-security-token" in request.headers["authorization"]

    def test_deterministic_for_fixed_time(self) -> None:
        first = _signed(httpx.Request("GET", "http://s3.test/api-docs?list-type=2"), _auth())
        second = _signed(httpx.Request("GET", "http://s3.test/api-docs?list-type=2"), _auth())
        assert first.headers["authorization"] == second.headers["authorization"]

    def test_signature_depends_on_path(self) -> None:
        first = _signed(httpx.Request("GET", "http://s3.test/api-docs/a.yaml"), _auth())
        second = _signed(httpx.Request("GET", "http://s3.test/api-docs/b.yaml"), _auth())
        assert first.headers["authorization"] != second.headers["authorization"]
