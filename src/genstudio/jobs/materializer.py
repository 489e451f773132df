"""Turn a finished job into a locally addressable video artifact."""

from __future__ import annotations

from ..artifacts import VideoArtifact
from ..backends.base import BackendError, GenerationBackend
from ..logging import get_logger
from ..storage import BlobStore
from .errors import DownloadFailed, JobNotFinished, MissingArtifact
from .models import Job

logger = get_logger(__name__)


class ResultMaterializer:
    def __init__(self, backend: GenerationBackend, blob_store: BlobStore) -> None:
        self.backend = backend
        self.blob_store = blob_store

    async def materialize(self, job: Job) -> VideoArtifact:
        """Download the job's video and store it in the blob store.

        Raises:
            JobNotFinished: If the job has not finished
            MissingArtifact: If the finished job carries no video URI
            DownloadFailed: If fetching the video fails for any reason
        """
        if not job.done:
            raise JobNotFinished(f"Job {job.handle} has not finished")

        uri = job.result.artifact_uri if job.result else None
        if not uri:
            detail = f": {job.error}" if job.error else ""
            raise MissingArtifact(f"No video link found in the result{detail}")

        try:
            content = await self.backend.download(uri)
        except BackendError as e:
            logger.error(
                "Video download failed",
                job_handle=job.handle,
                status_code=e.status_code,
                error=str(e),
            )
            raise DownloadFailed(e.status_text or str(e)) from e
        except Exception as e:
            logger.error("Video download failed", job_handle=job.handle, error=str(e))
            raise DownloadFailed(str(e)) from e

        ref = self.blob_store.put(content, "video/mp4")
        logger.info("Video materialized", job_handle=job.handle, ref=ref, size_bytes=len(content))
        return VideoArtifact(ref=ref, content_type="video/mp4", size=len(content), source_uri=uri)
