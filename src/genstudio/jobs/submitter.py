"""Submission of video generation jobs."""

from __future__ import annotations

from ..backends.base import GenerationBackend
from ..config import Settings, settings as default_settings
from ..logging import get_logger, set_job_context
from .errors import InvalidRequest, SubmissionFailed
from .models import Job

logger = get_logger(__name__)


class JobSubmitter:
    def __init__(self, backend: GenerationBackend, settings: Settings | None = None) -> None:
        self.backend = backend
        self.settings = settings or default_settings

    async def submit(
        self,
        prompt: str,
        file_bytes: bytes | None = None,
        mime_type: str | None = None,
    ) -> Job:
        """Start a video generation and return the job tracking it.

        Raises:
            InvalidRequest: If neither a prompt nor file bytes were given
            SubmissionFailed: If the backend rejected or could not take the request
        """
        prompt = prompt or ""
        if not prompt.strip() and file_bytes is None:
            raise InvalidRequest("A prompt or an image is required")

        model = self.settings.video_model
        logger.info(
            "Submitting video job",
            model=model,
            prompt_length=len(prompt),
            has_image=file_bytes is not None,
        )

        try:
            handle = await self.backend.submit_video(
                model,
                prompt,
                image_bytes=file_bytes,
                mime_type=mime_type if file_bytes is not None else None,
                video_count=1,
            )
        except Exception as e:
            logger.error("Video job submission failed", model=model, error=str(e))
            raise SubmissionFailed(f"Could not start video generation: {e}") from e

        set_job_context(job_handle=handle)
        logger.info("Video job accepted", job_handle=handle)
        return Job(handle=handle, model=model, prompt=prompt, has_image=file_bytes is not None)
