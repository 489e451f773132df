"""Pydantic models for video job status updates."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

StatusPhase = Literal["processing", "done", "error", "cancelled"]

TERMINAL_PHASES: frozenset[str] = frozenset({"done", "error", "cancelled"})


class GenerationStatus(BaseModel):
    """Externally observable progress snapshot of one video job."""

    phase: StatusPhase
    message: str
    progress: int | None = Field(default=None, ge=0, le=100)
    artifact_ref: str | None = None
    job_handle: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES
