"""B2 upload pipeline.

Sanitizes record titles into object keys, relays files to Backblaze B2
through its authorize / get upload URL / upload handshake and builds the
public download URL.
"""

from mediarelay.storage.exceptions import (
    AuthError,
    MediaUploadError,
    NegotiationError,
    TransportError,
    UploadError,
)
from mediarelay.storage.naming import build_object_key, sanitize
from mediarelay.storage.resolver import MediaUrlResolver, get_media_url

__all__ = [
    "AuthError",
    "MediaUploadError",
    "NegotiationError",
    "TransportError",
    "UploadError",
    "build_object_key",
    "sanitize",
    "MediaUrlResolver",
    "get_media_url",
]
