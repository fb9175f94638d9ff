"""Media upload API routes."""

import logging
import secrets

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.datastructures import UploadFile

from mediarelay.core.config import settings
from mediarelay.models.media import UploadRequest
from mediarelay.storage.exceptions import MediaUploadError
from mediarelay.storage.resolver import MediaUrlResolver

router = APIRouter(prefix="/api/v1", tags=["media"])
root_router = APIRouter()
logger = logging.getLogger(__name__)


def _error(status_code: int, error) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error})


async def _handle_upload(request: Request) -> Response:
    """Validate a multipart upload and relay it to B2."""
    content_type = request.headers.get("content-type")
    if not content_type:
        return _error(400, "Please provide 'content-type' header.")

    if "multipart/form-data" not in content_type:
        return Response(status_code=415)

    form = await request.form()
    key = form.get("key")
    name = form.get("name")
    ext = form.get("ext")
    file = form.get("file")
    folder = form.get("folder")

    if not name or not isinstance(name, str):
        return _error(400, "Missing 'name' parameter.")
    if not ext or not isinstance(ext, str):
        return _error(400, "Missing 'ext' parameter.")
    if not isinstance(file, UploadFile):
        return _error(400, "Missing 'file' parameter.")
    if not key or not isinstance(key, str):
        return _error(401, "Missing 'key' parameter.")
    if not secrets.compare_digest(key.encode(), settings.AUTH_KEY.get_secret_value().encode()):
        return _error(401, "You're not authorized to access this API.")

    data = await file.read()
    if len(data) > settings.max_upload_bytes:
        return _error(400, f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_MB}MB")

    try:
        resolver = MediaUrlResolver()
    except ValueError as e:
        logger.error(f"Storage backend configuration error: {e}")
        return _error(500, "Storage configuration error")

    upload = UploadRequest(
        display_name=name,
        extension=ext,
        payload=data,
        folder=folder if isinstance(folder, str) and folder else None,
    )

    try:
        url = await resolver.resolve_request(upload)
    except ValueError as e:
        return _error(400, str(e))
    except MediaUploadError as e:
        logger.error(f"Failed to relay file: {e}", exc_info=True)
        return _error(500, e.to_dict())

    logger.info(f"Upload completed: name={name!r}, size={len(data)}, url={url}")

    return PlainTextResponse(url)


@router.post("/media")
async def upload_media(request: Request) -> Response:
    """Upload a file and return its public URL."""
    return await _handle_upload(request)


@root_router.post("/")
async def upload_media_root(request: Request) -> Response:
    """Same as POST /api/v1/media, for callers posting to the service root."""
    return await _handle_upload(request)
