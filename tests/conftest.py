"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from genstudio.backends.base import BackendError, OperationSnapshot
from genstudio.config import Settings
from genstudio.storage import BlobStore

VIDEO_URI = "http://x/video"
VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42fake-video"


class ScriptedBackend:
    """
    Test double for GenerationBackend.

    Status checks report ``done=False`` for the first ``pending_polls`` calls
    on a handle and ``done=True`` afterwards. Failures can be injected per
    call type.
    """

    def __init__(
        self,
        pending_polls: int = 2,
        artifact_uri: str | None = VIDEO_URI,
        video_bytes: bytes = VIDEO_BYTES,
        submit_error: Exception | None = None,
        poll_error_at: int | None = None,
        download_status: int = 200,
        download_reason: str = "OK",
        operation_error: str | None = None,
        text: str = "generated text",
        pending_by_handle: dict[str, int] | None = None,
        download_error: Exception | None = None,
    ) -> None:
        self.pending_polls = pending_polls
        self.pending_by_handle = pending_by_handle or {}
        self.artifact_uri = artifact_uri
        self.video_bytes = video_bytes
        self.submit_error = submit_error
        self.poll_error_at = poll_error_at
        self.download_status = download_status
        self.download_reason = download_reason
        self.download_error = download_error
        self.operation_error = operation_error
        self.text = text

        self.submit_calls: list[dict[str, Any]] = []
        self.status_calls: list[str] = []
        self.download_calls: list[str] = []
        self.text_calls: list[str] = []
        self.describe_calls: list[tuple[str, bytes, str]] = []

    async def submit_video(
        self,
        model: str,
        prompt: str,
        image_bytes: bytes | None = None,
        mime_type: str | None = None,
        video_count: int = 1,
    ) -> str:
        self.submit_calls.append(
            {
                "model": model,
                "prompt": prompt,
                "image_bytes": image_bytes,
                "mime_type": mime_type,
                "video_count": video_count,
            }
        )
        if self.submit_error is not None:
            raise self.submit_error
        return f"models/{model}/operations/op-{len(self.submit_calls)}"

    async def check_video_status(self, handle: str) -> OperationSnapshot:
        self.status_calls.append(handle)
        count = self.status_calls.count(handle)
        if self.poll_error_at is not None and count == self.poll_error_at:
            raise BackendError("Gemini API request failed: 503 unavailable", status_code=503)
        if count <= self.pending_by_handle.get(handle, self.pending_polls):
            return OperationSnapshot(name=handle, done=False)
        return OperationSnapshot(
            name=handle,
            done=True,
            artifact_uri=self.artifact_uri,
            error=self.operation_error,
        )

    async def download(self, uri: str) -> bytes:
        self.download_calls.append(uri)
        if self.download_error is not None:
            raise self.download_error
        if self.download_status != 200:
            raise BackendError(
                f"Download failed: {self.download_status} {self.download_reason}",
                status_code=self.download_status,
                status_text=self.download_reason,
            )
        return self.video_bytes

    async def generate_text(self, prompt: str) -> str:
        self.text_calls.append(prompt)
        return self.text

    async def describe_image(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        self.describe_calls.append((prompt, image_bytes, mime_type))
        return self.text


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a fake key and no wait between polls."""
    return Settings(api_key="test-key", poll_interval=0.0)


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend()


@pytest.fixture
def blob_store() -> BlobStore:
    return BlobStore()


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
