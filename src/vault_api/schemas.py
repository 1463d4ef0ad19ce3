####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class FileDescriptor(BaseModel):
    """Record of one stored file, produced when its write completes."""
    stored_name: str = Field(
        description="Name of the file inside the storage directory.",
        json_schema_extra={"example": "1718000000000-9f1c2ab43d7e5f60-report.pdf"},
    )
    original_name: str = Field(description="File name as sent by the client.")
    size_bytes: int = Field(ge=0, description="The size of the file in bytes.")
    content_type: str = Field(DEFAULT_CONTENT_TYPE, description="MIME type declared by the client.")
    url: str = Field(description="Where the stored bytes can be fetched.")
    uploaded_at: datetime = Field(description="When the write completed (UTC).")

    model_config = ConfigDict(frozen=True)


class UploadResponse(BaseModel):
    """Response model for `POST /api/upload`."""
    message: str = Field(description="A message about the operation.")
    file: FileDescriptor
    url: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "File uploaded successfully",
                "file": {
                    "stored_name": "1718000000000-9f1c2ab43d7e5f60-report.pdf",
                    "original_name": "report.pdf",
                    "size_bytes": 512,
                    "content_type": "application/pdf",
                    "url": "http://localhost:3000/uploads/1718000000000-9f1c2ab43d7e5f60-report.pdf",
                    "uploaded_at": "2024-06-10T06:13:20Z",
                },
                "url": "http://localhost:3000/uploads/1718000000000-9f1c2ab43d7e5f60-report.pdf",
            }
        }
    )


class CatalogEntry(BaseModel):
    """One file in the catalog listing."""
    name: str = Field(description="Stored name of the file.")
    url: str


class GetFilesResponse(BaseModel):
    """Response model for `GET /api/files`."""
    files: List[CatalogEntry]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "files": [
                    {
                        "name": "1718000000000-9f1c2ab43d7e5f60-report.pdf",
                        "url": "http://localhost:3000/uploads/1718000000000-9f1c2ab43d7e5f60-report.pdf",
                    }
                ]
            }
        }
    )


class HealthResponse(BaseModel):
    """Response model for `GET /health`."""
    status: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = Field(None, description="Internal detail, development mode only.")
