"""
Backend interface consumed by the job tracker and the chat session.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class BackendError(Exception):
    """A backend call returned an error or could not be completed."""

    def __init__(self, message: str, status_code: int | None = None, status_text: str = ""):
        self.status_code = status_code
        self.status_text = status_text
        super().__init__(message)


class OperationSnapshot(BaseModel):
    """State of a long-running remote operation as of one status check."""

    name: str
    done: bool = False
    artifact_uri: str | None = None
    error: str | None = None


@runtime_checkable
class GenerationBackend(Protocol):
    """Typed protocol for the remote generation service.

    Every method raises BackendError when the service rejects the call or
    answers with a non-success status.
    """

    async def submit_video(
        self,
        model: str,
        prompt: str,
        image_bytes: bytes | None = None,
        mime_type: str | None = None,
        video_count: int = 1,
    ) -> str:
        """Start a video generation and return the operation name."""
        ...

    async def check_video_status(self, handle: str) -> OperationSnapshot:
        """Fetch the current state of a video operation."""
        ...

    async def download(self, uri: str) -> bytes:
        """Fetch a finished artifact, adding the access credential."""
        ...

    async def generate_text(self, prompt: str) -> str:
        """Generate text for a prompt."""
        ...

    async def describe_image(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        """Answer a prompt about an image."""
        ...
