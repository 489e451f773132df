"""
Artifact type definitions for genstudio.

These Pydantic models represent uploaded inputs and generated content
that flow between the backend, the job tracker and the message timeline.
"""

import base64

from pydantic import BaseModel, Field


def inline_data_part(data: bytes, mime_type: str) -> dict[str, dict[str, str]]:
    """Encode bytes as an inline data part for generateContent requests."""
    return {
        "inline_data": {
            "mime_type": mime_type,
            "data": base64.b64encode(data).decode("ascii"),
        }
    }


class UploadedFile(BaseModel):
    """A file supplied by the user alongside a prompt."""

    name: str = Field(description="Original file name")
    data: bytes = Field(description="Raw file content")
    mime_type: str = Field(description="MIME type reported for the file")

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class DigitalArtifact(BaseModel):
    """Represents generated content held in the blob store."""

    ref: str = Field(description="Blob reference the content can be read back from")
    content_type: str = Field(description="MIME type of the stored bytes")
    size: int = Field(0, description="Size of the stored content in bytes")


class VideoArtifact(DigitalArtifact):
    """Represents a generated video."""

    source_uri: str = Field(description="Remote URI the video was downloaded from")
    format: str = Field("mp4", description="Container format")
