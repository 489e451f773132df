"""
Chat session: turns user prompts into timeline messages and generation requests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import partial
from typing import Literal

from .artifacts import UploadedFile
from .backends.base import GenerationBackend
from .config import Settings, settings as default_settings
from .jobs.errors import GenerationError, GenerationFailed, InvalidRequest
from .jobs.tracker import VideoJobTracker
from .logging import get_logger, job_context
from .progress.models import GenerationStatus
from .progress.observer import StatusCallback
from .storage import BlobStore
from .timeline.models import Message, MessageKind, ProgressInfo, Role
from .timeline.reconciler import MessageTimeline

logger = get_logger(__name__)

THINKING_MESSAGE = "Thinking..."
DEFAULT_DESCRIBE_PROMPT = "Describe this image"
UPLOAD_REQUIRED_MESSAGE = "Please upload an image"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
UNKNOWN_MODE_MESSAGE = "Unknown generation mode"


class GenerationMode(str, Enum):
    TEXT = "text"
    TEXT_TO_VIDEO = "text_to_video"
    IMAGE_TO_VIDEO = "image_to_video"
    IMAGE_TO_TEXT = "image_to_text"


class ChatSession:
    """One conversation: a timeline plus the flows that fill it.

    Every prompt appends a user message and a loading placeholder. The
    placeholder's id is the correlation id the outcome is written back to,
    whether the flow succeeds or fails.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        timeline: MessageTimeline | None = None,
        blob_store: BlobStore | None = None,
        settings: Settings | None = None,
        poll_interval: float | None = None,
        progress_routing: Literal["id", "positional"] | None = None,
    ) -> None:
        self.backend = backend
        self.settings = settings or default_settings
        self.timeline = timeline or MessageTimeline()
        self.blob_store = blob_store or BlobStore()
        self.progress_routing = progress_routing or self.settings.progress_routing
        self.tracker = VideoJobTracker(
            backend, self.blob_store, self.settings, poll_interval=poll_interval
        )

    async def handle_prompt(
        self,
        prompt: str,
        mode: GenerationMode | str,
        file: UploadedFile | None = None,
        cancel: asyncio.Event | None = None,
        on_status: StatusCallback | None = None,
    ) -> Message:
        """Run one prompt through the requested flow and return its final message.

        For video modes, ``on_status`` receives every job status after the
        timeline has been updated with it.
        """
        mode_name = mode.value if isinstance(mode, GenerationMode) else mode

        user_message = Message(
            id=self.timeline.next_id(),
            role=Role.USER,
            kind=MessageKind.TEXT,
            content=prompt or (f"Uploaded file: {file.name}" if file else ""),
            file_preview=self.blob_store.put(file.data, file.mime_type) if file else None,
        )
        self.timeline.append(user_message)

        loading_id = self.timeline.next_id()
        self.timeline.append(
            Message(id=loading_id, role=Role.MODEL, kind=MessageKind.LOADING, content=THINKING_MESSAGE)
        )

        with job_context(message_id=loading_id):
            logger.info("Handling prompt", mode=mode_name, has_file=file is not None)
            try:
                kind, content = await self._dispatch(
                    prompt, mode, file, loading_id, cancel, on_status
                )
                result = Message(id=loading_id, role=Role.MODEL, kind=kind, content=content)
            except GenerationError as e:
                logger.warning("Prompt failed", mode=mode_name, error=str(e))
                result = Message(id=loading_id, role=Role.MODEL, kind=MessageKind.ERROR, content=str(e))
            except Exception as e:
                logger.error("Unexpected error handling prompt", mode=mode_name, error=str(e))
                result = Message(
                    id=loading_id,
                    role=Role.MODEL,
                    kind=MessageKind.ERROR,
                    content=UNEXPECTED_ERROR_MESSAGE,
                )

        self.timeline.replace(loading_id, result)
        return result

    async def _dispatch(
        self,
        prompt: str,
        mode: GenerationMode | str,
        file: UploadedFile | None,
        loading_id: int,
        cancel: asyncio.Event | None,
        on_status: StatusCallback | None,
    ) -> tuple[MessageKind, str]:
        mode = _parse_mode(mode)

        if mode is GenerationMode.TEXT:
            if not prompt.strip():
                raise InvalidRequest("Please enter a prompt")
            text = await self._call_text(
                partial(self.backend.generate_text, prompt), "Could not generate text"
            )
            return MessageKind.TEXT, text

        if mode is GenerationMode.IMAGE_TO_TEXT:
            image = self._require_image(file)
            text = await self._call_text(
                partial(
                    self.backend.describe_image,
                    prompt or DEFAULT_DESCRIBE_PROMPT,
                    image.data,
                    image.mime_type,
                ),
                "Could not analyze the image",
            )
            return MessageKind.TEXT, text

        image = self._require_image(file) if mode is GenerationMode.IMAGE_TO_VIDEO else None
        artifact = await self.tracker.generate_video(
            prompt,
            file_bytes=image.data if image else None,
            mime_type=image.mime_type if image else None,
            on_status=self._progress_router(loading_id, on_status),
            cancel=cancel,
        )
        return MessageKind.VIDEO, artifact.ref

    async def _call_text(self, call: Callable[[], Awaitable[str]], failure_message: str) -> str:
        try:
            return await call()
        except Exception as e:
            logger.error(failure_message, error=str(e))
            raise GenerationFailed(failure_message, cause=e) from e

    def _require_image(self, file: UploadedFile | None) -> UploadedFile:
        if file is None or not file.is_image:
            raise InvalidRequest(UPLOAD_REQUIRED_MESSAGE)
        return file

    def _progress_router(
        self, loading_id: int, on_status: StatusCallback | None = None
    ) -> StatusCallback:
        def route(status: GenerationStatus) -> None:
            if status.phase == "processing":
                info = ProgressInfo(message=status.message, progress=status.progress or 0)
                if self.progress_routing == "positional":
                    self.timeline.update_first_loading(info)
                else:
                    self.timeline.update_progress(loading_id, info)
            if on_status is not None:
                on_status(status)

        return route


def _parse_mode(mode: GenerationMode | str) -> GenerationMode:
    try:
        return GenerationMode(mode)
    except ValueError as e:
        raise InvalidRequest(f"{UNKNOWN_MODE_MESSAGE}: {mode}") from e
