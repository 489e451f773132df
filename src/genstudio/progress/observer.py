"""Current-value slot for video job status updates."""

from __future__ import annotations

from collections.abc import Callable

from ..logging import get_logger
from .models import GenerationStatus

logger = get_logger(__name__)

StatusCallback = Callable[[GenerationStatus], None]


class StatusSlot:
    """Holds the latest status of one job invocation.

    Observers either read ``current`` or subscribe to be called on every
    write. No history is kept: a late subscriber only sees what comes next.
    """

    def __init__(self) -> None:
        self._current: GenerationStatus | None = None
        self._subscribers: list[StatusCallback] = []

    @property
    def current(self) -> GenerationStatus | None:
        return self._current

    def set(self, status: GenerationStatus) -> None:
        self._current = status
        logger.debug(
            "Status updated",
            phase=status.phase,
            progress=status.progress,
            subscribers=len(self._subscribers),
        )
        for callback in list(self._subscribers):
            callback(status)

    def subscribe(self, callback: StatusCallback) -> Callable[[], None]:
        """Register a callback and return a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
