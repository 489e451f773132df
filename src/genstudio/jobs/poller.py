"""Status polling for submitted video jobs."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from ..backends.base import GenerationBackend
from ..config import Settings, settings as default_settings
from ..logging import get_logger
from ..progress import estimator as messages
from ..progress.estimator import ProgressEstimator
from ..progress.models import GenerationStatus
from .errors import JobCancelled, PollFailed
from .models import Job

logger = get_logger(__name__)


class JobPoller:
    """Drive a job to completion, yielding a status after every step.

    The sequence starts with the "accepted" status, adds one status per
    unfinished status check and ends with the "finishing" status once the
    job is done. Materializing the result is left to the caller.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        settings: Settings | None = None,
        poll_interval: float | None = None,
    ) -> None:
        self.backend = backend
        self.settings = settings or default_settings
        self.poll_interval = (
            self.settings.poll_interval if poll_interval is None else poll_interval
        )

    async def poll(
        self,
        job: Job,
        estimator: ProgressEstimator | None = None,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[GenerationStatus]:
        """Yield processing statuses until the job is done.

        Raises:
            PollFailed: If a status check fails; the job is then considered failed
            JobCancelled: If the cancel event is set before the job finishes
        """
        estimator = estimator or ProgressEstimator.from_settings(self.settings)

        yield GenerationStatus(
            phase="processing",
            message=messages.ACCEPTED_MESSAGE,
            progress=estimator.current,
            job_handle=job.handle,
        )

        while not job.done:
            if await self._wait(cancel):
                logger.info("Polling cancelled", job_handle=job.handle, polls=job.status_checks)
                raise JobCancelled("Video generation was cancelled")

            try:
                snapshot = await self.backend.check_video_status(job.handle)
            except Exception as e:
                logger.error(
                    "Status check failed",
                    job_handle=job.handle,
                    polls=job.status_checks,
                    error=str(e),
                )
                raise PollFailed(f"Status check failed: {e}") from e

            job.apply(snapshot)
            progress = estimator.advance()
            logger.debug(
                "Polled video job",
                job_handle=job.handle,
                done=job.done,
                polls=job.status_checks,
                progress=progress,
            )
            yield GenerationStatus(
                phase="processing",
                message=messages.GENERATING_MESSAGE,
                progress=progress,
                job_handle=job.handle,
            )

        yield GenerationStatus(
            phase="processing",
            message=messages.FINISHING_MESSAGE,
            progress=estimator.finishing,
            job_handle=job.handle,
        )

    async def _wait(self, cancel: asyncio.Event | None) -> bool:
        """Sleep one poll interval. Returns True if cancelled in the meantime."""
        if cancel is None:
            await asyncio.sleep(self.poll_interval)
            return False
        if cancel.is_set():
            return True
        try:
            await asyncio.wait_for(cancel.wait(), timeout=self.poll_interval)
        except TimeoutError:
            return False
        return True
