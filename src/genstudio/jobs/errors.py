"""Exception taxonomy for generation jobs."""


class GenerationError(Exception):
    """Base exception for generation requests."""

    pass


class InvalidRequest(GenerationError):
    """The request was rejected before any remote call was made."""

    pass


class SubmissionFailed(GenerationError):
    """The backend did not accept the job submission."""

    pass


class PollFailed(GenerationError):
    """A status check against a submitted job failed."""

    pass


class JobNotFinished(GenerationError):
    """The job was handed on before its operation reported done."""

    pass


class MissingArtifact(GenerationError):
    """A finished job carried no artifact reference."""

    pass


class DownloadFailed(GenerationError):
    """Fetching the finished artifact returned a non-success response."""

    def __init__(self, status_text: str):
        self.status_text = status_text
        super().__init__(f"Error downloading video: {status_text}")


class JobCancelled(GenerationError):
    """Polling was stopped through the job's cancel token."""

    pass


class GenerationFailed(GenerationError):
    """Umbrella failure surfaced to the message timeline."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)
