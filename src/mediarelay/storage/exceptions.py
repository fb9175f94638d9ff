"""Custom exceptions for the B2 upload pipeline."""

from typing import Optional


class MediaUploadError(Exception):
    """Base exception for the upload pipeline.

    Carries the backend's reported HTTP status, error code and message when
    the failure came from a B2 error body; all three are None for transport
    or parsing failures.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        backend_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.code = code
        self.backend_message = backend_message

    def to_dict(self) -> dict:
        """Serializable form used for HTTP error bodies."""
        return {
            "type": type(self).__name__,
            "message": str(self),
            "status": self.status,
            "code": self.code,
        }


class AuthError(MediaUploadError):
    """Exception raised when account authorization fails."""
    pass


class NegotiationError(MediaUploadError):
    """Exception raised when getting an upload URL fails."""
    pass


class UploadError(MediaUploadError):
    """Exception raised when the file transfer fails."""
    pass


class TransportError(MediaUploadError):
    """Network-level failure, raised as the cause of a step error."""
    pass
