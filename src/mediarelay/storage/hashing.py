"""Content digests for upload integrity checks."""

import hashlib


def content_sha1(payload: bytes) -> str:
    """SHA-1 of the exact bytes to be uploaded, as lowercase hex.

    B2 compares this against the bytes it receives and rejects the upload
    on mismatch, so it must be computed over the final payload.
    """
    return hashlib.sha1(payload).hexdigest()
