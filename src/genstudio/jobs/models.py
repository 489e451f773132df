"""Job state for long-running video generations."""

from __future__ import annotations

from pydantic import BaseModel, PrivateAttr

from ..backends.base import OperationSnapshot


class JobResult(BaseModel):
    artifact_uri: str | None = None


class Job(BaseModel):
    """A submitted remote operation tracked by its opaque handle.

    ``done`` becomes true exactly once and never reverts; ``result`` is set
    only alongside it.
    """

    handle: str
    model: str
    prompt: str
    has_image: bool = False
    done: bool = False
    result: JobResult | None = None
    error: str | None = None

    _status_checks: int = PrivateAttr(default=0)

    @property
    def status_checks(self) -> int:
        return self._status_checks

    def apply(self, snapshot: OperationSnapshot) -> None:
        """Fold a status check into the job."""
        self._status_checks += 1
        if self.done:
            return
        if snapshot.done:
            self.done = True
            self.error = snapshot.error
            if snapshot.artifact_uri:
                self.result = JobResult(artifact_uri=snapshot.artifact_uri)
