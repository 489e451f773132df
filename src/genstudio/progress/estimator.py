"""Poll-count based progress estimation for video jobs."""

from __future__ import annotations

from ..config import Settings, settings as default_settings

# User-visible status text. Presentation content only, safe to localize.
STARTING_MESSAGE = "Starting video generation..."
ACCEPTED_MESSAGE = "Request accepted, processing..."
GENERATING_MESSAGE = "Generating your video, this may take a while..."
FINISHING_MESSAGE = "Finishing up..."
SUCCESS_MESSAGE = "Video generated successfully!"
CANCELLED_MESSAGE = "Video generation cancelled."


def error_message(detail: str) -> str:
    return f"Error: {detail}"


class ProgressEstimator:
    """Map poll iterations to a bounded, non-decreasing progress value.

    The backend reports no progress of its own, so every poll that comes back
    unfinished moves the estimate forward by a fixed step, never past the
    ceiling. The value only reaches 100 once the artifact is materialized.
    """

    def __init__(
        self,
        initial: int = 0,
        accepted: int = 25,
        step: int = 10,
        ceiling: int = 90,
        finishing: int = 95,
    ) -> None:
        if not 0 <= initial <= accepted <= ceiling <= finishing < 100:
            raise ValueError(
                "Progress milestones must satisfy "
                "0 <= initial <= accepted <= ceiling <= finishing < 100"
            )
        if step < 0:
            raise ValueError("Progress step must not be negative")
        self.initial = initial
        self.accepted = accepted
        self.step = step
        self.ceiling = ceiling
        self.finishing = finishing
        self._current = accepted

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ProgressEstimator:
        settings = settings or default_settings
        return cls(
            initial=settings.initial_progress,
            accepted=settings.accepted_progress,
            step=settings.progress_step,
            ceiling=settings.progress_ceiling,
            finishing=settings.finishing_progress,
        )

    @property
    def current(self) -> int:
        return self._current

    def advance(self) -> int:
        """Record one unfinished poll and return the new estimate."""
        self._current = min(self._current + self.step, self.ceiling)
        return self._current
