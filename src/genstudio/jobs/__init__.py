"""Long-running video job tracking."""

from .errors import (
    DownloadFailed,
    GenerationError,
    GenerationFailed,
    InvalidRequest,
    JobCancelled,
    JobNotFinished,
    MissingArtifact,
    PollFailed,
    SubmissionFailed,
)
from .materializer import ResultMaterializer
from .models import Job, JobResult
from .poller import JobPoller
from .submitter import JobSubmitter
from .tracker import VideoJobTracker

__all__ = [
    "DownloadFailed",
    "GenerationError",
    "GenerationFailed",
    "InvalidRequest",
    "Job",
    "JobCancelled",
    "JobNotFinished",
    "JobPoller",
    "JobResult",
    "JobSubmitter",
    "MissingArtifact",
    "PollFailed",
    "ResultMaterializer",
    "SubmissionFailed",
    "VideoJobTracker",
]
