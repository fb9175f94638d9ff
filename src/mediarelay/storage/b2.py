"""
Backblaze B2 native API calls used by the upload pipeline.

Each call is a single attempt with no retry. Tokens and application keys
are never logged or put into exception messages.

docs: https://www.backblaze.com/apidocs/introduction-to-the-b2-native-api
"""

import base64
import logging
from typing import Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from mediarelay.models.media import (
    B2AuthorizeAccountResponse,
    B2ErrorBody,
    B2UploadFileResponse,
    B2UploadUrlResponse,
    SessionContext,
    UploadResult,
    UploadTarget,
)
from mediarelay.storage.exceptions import (
    AuthError,
    MediaUploadError,
    NegotiationError,
    TransportError,
    UploadError,
)
from mediarelay.storage.hashing import content_sha1 as compute_sha1

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.backblazeb2.com"
AUTHORIZE_ACCOUNT_PATH = "/b2api/v2/b2_authorize_account"
GET_UPLOAD_URL_PATH = "/b2api/v1/b2_get_upload_url"

# Lets B2 pick the content type from the file name extension
AUTO_CONTENT_TYPE = "b2/x-auto"
DEFAULT_AUTHOR = "gh-action"

ModelT = TypeVar("ModelT", bound=BaseModel)


async def _send(client: httpx.AsyncClient, method: str, url: str, **kwargs) -> httpx.Response:
    """Issue one request, turning network failures into TransportError."""
    try:
        return await client.request(method, url, **kwargs)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportError(f"{type(e).__name__}: {e}") from e


def _backend_error(
    error_cls: Type[MediaUploadError], context: str, response: httpx.Response
) -> MediaUploadError:
    """Build a typed error from a B2 error body ({code, message, status})."""
    try:
        body = B2ErrorBody.model_validate(response.json())
    except ValueError:
        body = B2ErrorBody()

    status = body.status or response.status_code
    detail = body.message or body.code or response.reason_phrase
    return error_cls(
        f"{context}: {status}: {detail}",
        status=status,
        code=body.code,
        backend_message=body.message,
    )


def _parse(
    model: Type[ModelT],
    response: httpx.Response,
    error_cls: Type[MediaUploadError],
    context: str,
) -> ModelT:
    """Validate a success body, naming only the offending fields on failure."""
    try:
        data = response.json()
    except ValueError as e:
        raise error_cls(f"{context}: malformed response: {e}") from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        # The validation error echoes the input, which holds tokens
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "body" for err in e.errors()
        )
        raise error_cls(f"{context}: malformed response: invalid fields {fields}") from None


async def authorize_account(
    client: httpx.AsyncClient,
    key_id: str,
    app_key: str,
    api_url: str = DEFAULT_API_URL,
) -> SessionContext:
    """Authorize the account and open a session for one upload.

    docs: https://www.backblaze.com/apidocs/b2-authorize-account

    Args:
        client: HTTP client for the call
        key_id: Application key id
        app_key: Application key
        api_url: B2 authorization host

    Returns:
        Session with API URL, session token and download URL

    Raises:
        AuthError: If B2 rejects the credentials, the call fails or the
            response is malformed
    """
    context = "Getting B2 authentication keys"
    token = base64.b64encode(f"{key_id}:{app_key}".encode("utf-8")).decode("ascii")

    try:
        response = await _send(
            client,
            "GET",
            f"{api_url.rstrip('/')}{AUTHORIZE_ACCOUNT_PATH}",
            headers={"Authorization": f"Basic {token}"},
        )
    except TransportError as e:
        logger.error("B2 account authorization failed", extra={"step": "authorize", "error": str(e)})
        raise AuthError(f"{context}: {e}") from e

    if response.status_code != 200:
        error = _backend_error(AuthError, context, response)
        logger.error(
            "B2 account authorization rejected",
            extra={"step": "authorize", "status": error.status, "code": error.code},
        )
        raise error

    results = _parse(B2AuthorizeAccountResponse, response, AuthError, context)

    logger.debug("B2 account authorized", extra={"api_url": results.apiUrl})

    return SessionContext(
        api_url=results.apiUrl,
        authorization_token=results.authorizationToken,
        download_url=results.downloadUrl,
        recommended_part_size=results.recommendedPartSize,
    )


async def get_upload_url(
    client: httpx.AsyncClient,
    session: SessionContext,
    bucket_id: str,
) -> UploadTarget:
    """Get a one-time upload endpoint for the bucket.

    docs: https://www.backblaze.com/apidocs/b2-get-upload-url

    Raises:
        NegotiationError: If B2 rejects the session or bucket, the call
            fails or the response is malformed
    """
    context = "Getting B2 upload URL"

    try:
        response = await _send(
            client,
            "POST",
            f"{session.api_url.rstrip('/')}{GET_UPLOAD_URL_PATH}",
            headers={"Authorization": session.authorization_token},
            json={"bucketId": bucket_id},
        )
    except TransportError as e:
        logger.error("B2 upload URL request failed", extra={"step": "negotiate", "error": str(e)})
        raise NegotiationError(f"{context}: {e}") from e

    if response.status_code != 200:
        error = _backend_error(NegotiationError, context, response)
        logger.error(
            "B2 upload URL request rejected",
            extra={"step": "negotiate", "status": error.status, "code": error.code},
        )
        raise error

    results = _parse(B2UploadUrlResponse, response, NegotiationError, context)

    return UploadTarget(
        upload_url=results.uploadUrl,
        authorization_token=results.authorizationToken,
        download_url=session.download_url,
    )


async def upload_file(
    client: httpx.AsyncClient,
    target: UploadTarget,
    object_key: str,
    payload: bytes,
    content_type: Optional[str] = None,
    content_sha1: Optional[str] = None,
    author: str = DEFAULT_AUTHOR,
) -> UploadResult:
    """Upload a file to the negotiated endpoint.

    docs: https://www.backblaze.com/apidocs/b2-upload-file

    Args:
        client: HTTP client for the call
        target: Upload endpoint and token from get_upload_url
        object_key: Name to store the file under
        payload: Exact bytes to store
        content_type: MIME type, B2 detects it from the name when omitted
        content_sha1: Precomputed digest of payload, computed when omitted
        author: Value for the X-Bz-Info-Author header

    Returns:
        Upload result; file_name may differ from object_key

    Raises:
        UploadError: If B2 rejects the file, the call fails or the response
            is malformed
    """
    context = f"Uploading file to B2 - {object_key}"
    digest = content_sha1 or compute_sha1(payload)

    headers = {
        "Authorization": target.authorization_token,
        "X-Bz-File-Name": quote(object_key, safe="/"),
        "Content-Type": content_type or AUTO_CONTENT_TYPE,
        "Content-Length": str(len(payload)),
        "X-Bz-Content-Sha1": digest,
        "X-Bz-Info-Author": quote(author),
    }

    try:
        response = await _send(client, "POST", target.upload_url, headers=headers, content=payload)
    except TransportError as e:
        logger.error(
            "B2 file upload failed",
            extra={"step": "upload", "object_key": object_key, "error": str(e)},
        )
        raise UploadError(f"{context}: {e}") from e

    if response.status_code != 200:
        error = _backend_error(UploadError, context, response)
        logger.error(
            "B2 file upload rejected",
            extra={
                "step": "upload",
                "object_key": object_key,
                "status": error.status,
                "code": error.code,
            },
        )
        raise error

    results = _parse(B2UploadFileResponse, response, UploadError, context)

    logger.info(
        "Uploaded file to B2",
        extra={
            "object_key": object_key,
            "file_name": results.fileName,
            "size_bytes": len(payload),
        },
    )

    return UploadResult(
        file_name=results.fileName,
        file_id=results.fileId,
        content_length=results.contentLength,
        content_sha1=results.contentSha1,
        content_type=results.contentType,
    )
