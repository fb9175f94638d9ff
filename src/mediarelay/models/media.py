"""
Media upload data models.

Wire models mirror the JSON bodies of the Backblaze B2 native API.
See: https://www.backblaze.com/apidocs/introduction-to-the-b2-native-api
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class B2ErrorBody(BaseModel):
    """Error body returned by every B2 call on a non-200 status."""

    model_config = ConfigDict(extra="ignore")

    status: Optional[int] = Field(None, description="HTTP status reported by B2")
    code: Optional[str] = Field(None, description="Machine-readable error code")
    message: Optional[str] = Field(None, description="Human-readable error message")


class B2AuthorizeAccountResponse(BaseModel):
    """Fields of b2_authorize_account used by the upload pipeline."""

    model_config = ConfigDict(extra="ignore")

    apiUrl: str = Field(..., description="Base URL for all subsequent API calls")
    authorizationToken: str = Field(..., description="Session token for API calls")
    downloadUrl: str = Field(..., description="Base URL for downloading files")
    recommendedPartSize: int = Field(..., description="Recommended large-file part size in bytes")


class B2UploadUrlResponse(BaseModel):
    """Response of b2_get_upload_url."""

    model_config = ConfigDict(extra="ignore")

    uploadUrl: str = Field(..., description="One-time endpoint for b2_upload_file")
    authorizationToken: str = Field(..., description="Token for the upload endpoint")
    bucketId: Optional[str] = Field(None, description="Bucket the URL is scoped to")


class B2UploadFileResponse(BaseModel):
    """Response of b2_upload_file."""

    model_config = ConfigDict(extra="ignore")

    fileName: str = Field(..., description="Name the file was stored under")
    fileId: Optional[str] = Field(None, description="Unique id of the stored file version")
    contentLength: Optional[int] = Field(None, description="Stored size in bytes")
    contentSha1: Optional[str] = Field(None, description="SHA-1 the backend verified")
    contentType: Optional[str] = Field(None, description="Stored MIME type")


@dataclass(frozen=True)
class UploadRequest:
    """A file handed over by the HTTP layer for relaying."""

    display_name: str
    extension: str
    payload: bytes = field(repr=False)
    folder: Optional[str] = None


@dataclass(frozen=True)
class SessionContext:
    """Account authorization for exactly one upload."""

    api_url: str
    authorization_token: str = field(repr=False)
    download_url: str
    recommended_part_size: int


@dataclass(frozen=True)
class UploadTarget:
    """Single-use upload endpoint and token."""

    upload_url: str
    authorization_token: str = field(repr=False)
    download_url: str


@dataclass(frozen=True)
class UploadResult:
    """What B2 reported after storing the file."""

    file_name: str
    file_id: Optional[str] = None
    content_length: Optional[int] = None
    content_sha1: Optional[str] = None
    content_type: Optional[str] = None
