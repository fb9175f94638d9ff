"""Upload orchestration: title and bytes in, public B2 URL out."""

import logging
from typing import Optional

import httpx

from mediarelay.core.config import Settings, settings as default_settings
from mediarelay.core.logging import object_key_context
from mediarelay.models.media import UploadRequest
from mediarelay.storage.b2 import authorize_account, get_upload_url, upload_file
from mediarelay.storage.exceptions import MediaUploadError
from mediarelay.storage.hashing import content_sha1
from mediarelay.storage.naming import build_object_key, sanitize

logger = logging.getLogger(__name__)


class MediaUrlResolver:
    """Relays one file at a time to B2 and builds its public URL.

    Holds only read-only configuration. Every resolve() call authorizes,
    negotiates and uploads from scratch with its own HTTP client, so
    concurrent calls never share a session or upload token.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the resolver.

        Args:
            config: Settings to use, defaults to the process settings
            transport: Optional httpx transport, used by tests to stand in
                for the B2 API

        Raises:
            ValueError: If any B2 setting is empty
        """
        self._settings = config or default_settings
        self._transport = transport

        missing = self._settings.missing_b2_settings()
        if missing:
            raise ValueError(f"B2 storage not configured, missing: {', '.join(missing)}")

    def public_url(self, download_url: str, file_name: str) -> str:
        """Public download URL of a stored file."""
        return f"{download_url}/file/{self._settings.B2_BUCKET_NAME}/{file_name}"

    async def resolve(
        self,
        display_name: str,
        extension: str,
        payload: bytes,
        folder: Optional[str] = None,
    ) -> str:
        """Upload a file under its sanitized name and return its public URL.

        Args:
            display_name: Human-readable title of the record
            extension: File extension without the dot, may be empty
            payload: File content
            folder: Object key prefix, defaults to UPLOAD_FOLDER

        Returns:
            Public download URL

        Raises:
            ValueError: If the title sanitizes to an empty name
            AuthError: If account authorization fails
            NegotiationError: If getting the upload URL fails
            UploadError: If the file transfer fails
        """
        name = sanitize(display_name)
        if not name:
            raise ValueError(f"Name {display_name!r} has no characters usable in a file name")

        if folder is None:
            folder = self._settings.UPLOAD_FOLDER
        object_key = build_object_key(folder, name, extension)
        token = object_key_context.set(object_key)

        try:
            logger.info(
                "Relaying file to B2",
                extra={"object_key": object_key, "size_bytes": len(payload)},
            )

            async with httpx.AsyncClient(
                timeout=self._settings.REQUEST_TIMEOUT, transport=self._transport
            ) as client:
                session = await authorize_account(
                    client,
                    self._settings.B2_APP_KEY_ID,
                    self._settings.B2_APP_KEY.get_secret_value(),
                    api_url=self._settings.b2_api_url,
                )
                target = await get_upload_url(client, session, self._settings.B2_BUCKET_ID)
                result = await upload_file(
                    client,
                    target,
                    object_key,
                    payload,
                    content_sha1=content_sha1(payload),
                    author=self._settings.UPLOAD_AUTHOR,
                )

            url = self.public_url(target.download_url, result.file_name)

            logger.info(
                "File relayed to B2",
                extra={"object_key": object_key, "file_name": result.file_name},
            )

            return url

        except MediaUploadError as e:
            logger.error(
                "Media upload failed",
                extra={
                    "object_key": object_key,
                    "error_type": type(e).__name__,
                    "status": e.status,
                    "code": e.code,
                },
            )
            raise type(e)(
                f"Resolving media URL for {object_key}: {e}",
                status=e.status,
                code=e.code,
                backend_message=e.backend_message,
            ) from e
        finally:
            object_key_context.reset(token)

    async def resolve_request(self, request: UploadRequest) -> str:
        """Resolve an UploadRequest handed over by the HTTP layer."""
        return await self.resolve(
            request.display_name,
            request.extension,
            request.payload,
            folder=request.folder,
        )


async def get_media_url(name: str, ext: str, data: bytes, folder: Optional[str] = None) -> str:
    """Upload a file with the process settings and return its public URL."""
    return await MediaUrlResolver().resolve(name, ext, data, folder=folder)
