"""Pytest configuration and shared fixtures."""

import asyncio
import json
from typing import Optional
from urllib.parse import unquote

import httpx
import pytest

from mediarelay.core.config import Settings

DOWNLOAD_URL = "https://f000.backblazeb2.com"
API_URL = "https://api000.backblazeb2.com"


class FakeB2:
    """In-process stand-in for the B2 native API.

    Every authorization issues a new session token and every upload URL a
    new upload token, so tests can check that tokens are never shared.
    Responses can be overridden per step with (status_code, json_body) or
    an exception to raise.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.auth_response = None
        self.upload_url_response = None
        self.upload_response = None
        self.stored_file_name: Optional[str] = None
        self.uploads: list[dict] = []
        self._sessions = 0
        self._upload_urls = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    @staticmethod
    def _override(override, request):
        if isinstance(override, Exception):
            raise override
        status_code, body = override
        return httpx.Response(status_code, json=body)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # Yield so concurrent uploads interleave
        await asyncio.sleep(0)
        path = request.url.path

        if path.endswith("/b2_authorize_account"):
            if self.auth_response is not None:
                return self._override(self.auth_response, request)
            self._sessions += 1
            return httpx.Response(
                200,
                json={
                    "accountId": "account",
                    "apiUrl": API_URL,
                    "authorizationToken": f"session-{self._sessions}",
                    "downloadUrl": DOWNLOAD_URL,
                    "recommendedPartSize": 100000000,
                    "absoluteMinimumPartSize": 5000000,
                },
            )

        if path.endswith("/b2_get_upload_url"):
            if self.upload_url_response is not None:
                return self._override(self.upload_url_response, request)
            session = request.headers["Authorization"].removeprefix("session-")
            self._upload_urls += 1
            return httpx.Response(
                200,
                json={
                    "bucketId": json.loads(request.content)["bucketId"],
                    "uploadUrl": f"https://pod-000.backblaze.com/b2api/v1/b2_upload_file/{session}",
                    "authorizationToken": f"upload-{session}",
                },
            )

        if "/b2_upload_file/" in path:
            if self.upload_response is not None:
                return self._override(self.upload_response, request)
            session = path.rsplit("/", 1)[-1]
            if request.headers["Authorization"] != f"upload-{session}":
                return httpx.Response(
                    401,
                    json={"status": 401, "code": "bad_auth_token", "message": "Invalid upload token"},
                )
            file_name = self.stored_file_name or unquote(request.headers["X-Bz-File-Name"])
            self.uploads.append(
                {
                    "token": request.headers["Authorization"],
                    "file_name": file_name,
                    "content": request.content,
                }
            )
            return httpx.Response(
                200,
                json={
                    "fileId": f"file-{session}",
                    "fileName": file_name,
                    "contentLength": len(request.content),
                    "contentSha1": request.headers["X-Bz-Content-Sha1"],
                    "contentType": "application/epub+zip",
                },
            )

        return httpx.Response(404, json={"status": 404, "code": "not_found", "message": path})


@pytest.fixture
def fake_b2():
    """Fresh fake B2 backend."""
    return FakeB2()


@pytest.fixture
def b2_settings():
    """Settings with B2 credentials filled in, ignoring any .env file."""
    return Settings(
        _env_file=None,
        ENV="local",
        AUTH_KEY="secret-key",
        B2_APP_KEY_ID="key-id",
        B2_APP_KEY="app-key",
        B2_BUCKET_ID="bucket-id",
        B2_BUCKET_NAME="my-bucket",
    )
