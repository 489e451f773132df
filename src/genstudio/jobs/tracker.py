"""Orchestration of one video job from submission to materialized artifact."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import aclosing

from ..artifacts import VideoArtifact
from ..backends.base import GenerationBackend
from ..config import Settings, settings as default_settings
from ..logging import get_logger
from ..progress import estimator as messages
from ..progress.estimator import ProgressEstimator
from ..progress.models import GenerationStatus
from ..progress.observer import StatusCallback, StatusSlot
from ..storage import BlobStore
from .errors import GenerationError, GenerationFailed, JobCancelled
from .materializer import ResultMaterializer
from .poller import JobPoller
from .submitter import JobSubmitter

logger = get_logger(__name__)


class VideoJobTracker:
    """Submit, poll and materialize video jobs.

    Each call owns its status stream; nothing is shared between concurrent
    jobs except the backend and the blob store.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        blob_store: BlobStore | None = None,
        settings: Settings | None = None,
        poll_interval: float | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.blob_store = blob_store or BlobStore()
        self.submitter = JobSubmitter(backend, self.settings)
        self.poller = JobPoller(backend, self.settings, poll_interval=poll_interval)
        self.materializer = ResultMaterializer(backend, self.blob_store)

    async def stream(
        self,
        prompt: str,
        file_bytes: bytes | None = None,
        mime_type: str | None = None,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[GenerationStatus]:
        """Yield every status of one video job, ending with exactly one terminal status.

        Raises:
            GenerationFailed: After the terminal status if the job did not succeed.
                Submission failures raise before any status is yielded.
        """
        async for status, _ in self._run(prompt, file_bytes, mime_type, cancel):
            yield status

    async def generate_video(
        self,
        prompt: str,
        file_bytes: bytes | None = None,
        mime_type: str | None = None,
        on_status: StatusCallback | None = None,
        slot: StatusSlot | None = None,
        cancel: asyncio.Event | None = None,
    ) -> VideoArtifact:
        """Run a video job to completion and return the materialized artifact.

        Statuses are written to ``slot`` (a fresh one if not given) and passed
        to ``on_status`` as they happen.
        """
        slot = slot or StatusSlot()
        unsubscribe = slot.subscribe(on_status) if on_status else None
        try:
            async with aclosing(self._run(prompt, file_bytes, mime_type, cancel)) as run:
                async for status, artifact in run:
                    slot.set(status)
                    if artifact is not None:
                        return artifact
        finally:
            if unsubscribe:
                unsubscribe()

        # _run always ends with an artifact or an exception
        raise GenerationFailed("Video generation ended without a result")

    async def _run(
        self,
        prompt: str,
        file_bytes: bytes | None,
        mime_type: str | None,
        cancel: asyncio.Event | None,
    ) -> AsyncIterator[tuple[GenerationStatus, VideoArtifact | None]]:
        try:
            job = await self.submitter.submit(prompt, file_bytes, mime_type)
        except GenerationError as e:
            raise GenerationFailed(str(e), cause=e) from e

        estimator = ProgressEstimator.from_settings(self.settings)
        yield (
            GenerationStatus(
                phase="processing",
                message=messages.STARTING_MESSAGE,
                progress=estimator.initial,
                job_handle=job.handle,
            ),
            None,
        )

        try:
            async for status in self.poller.poll(job, estimator=estimator, cancel=cancel):
                yield status, None
            artifact = await self.materializer.materialize(job)
        except JobCancelled as e:
            yield (
                GenerationStatus(
                    phase="cancelled",
                    message=messages.CANCELLED_MESSAGE,
                    job_handle=job.handle,
                ),
                None,
            )
            raise GenerationFailed(str(e), cause=e) from e
        except GenerationError as e:
            logger.error("Video generation failed", job_handle=job.handle, error=str(e))
            yield (
                GenerationStatus(
                    phase="error",
                    message=messages.error_message(str(e)),
                    job_handle=job.handle,
                ),
                None,
            )
            raise GenerationFailed(f"Could not generate the video: {e}", cause=e) from e

        logger.info(
            "Video generation completed",
            job_handle=job.handle,
            polls=job.status_checks,
            ref=artifact.ref,
        )
        yield (
            GenerationStatus(
                phase="done",
                message=messages.SUCCESS_MESSAGE,
                progress=100,
                artifact_ref=artifact.ref,
                job_handle=job.handle,
            ),
            artifact,
        )
