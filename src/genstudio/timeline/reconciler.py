"""Ordered message timeline with point updates by correlation id."""

from __future__ import annotations

import itertools
from collections.abc import Iterator

from ..logging import get_logger
from .models import Message, MessageKind, ProgressInfo

logger = get_logger(__name__)


class MessageTimeline:
    """Insertion-ordered list of messages.

    Messages are only ever appended or replaced in place; the order is never
    changed. Updates addressed to an id that is not present are ignored.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        """Allocate the next correlation id."""
        return next(self._ids)

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def replace(self, message_id: int, new_message: Message) -> None:
        """Substitute the message with ``message_id`` wholesale, keeping its id."""
        index = self._index_of(message_id)
        if index is None:
            logger.debug("Replace ignored for unknown message", target_id=message_id)
            return
        self._messages[index] = new_message.model_copy(update={"id": message_id})

    def update_progress(self, message_id: int, info: ProgressInfo) -> None:
        """Set progress on the loading message with ``message_id``."""
        index = self._index_of(message_id)
        if index is None or self._messages[index].kind is not MessageKind.LOADING:
            logger.debug("Progress update ignored", target_id=message_id)
            return
        self._set_progress(index, info)

    def update_first_loading(self, info: ProgressInfo) -> None:
        """Set progress on the first loading message, whichever job it belongs to."""
        for index, message in enumerate(self._messages):
            if message.kind is MessageKind.LOADING:
                self._set_progress(index, info)
                return

    def get(self, message_id: int) -> Message | None:
        index = self._index_of(message_id)
        return None if index is None else self._messages[index]

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def _index_of(self, message_id: int) -> int | None:
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                return index
        return None

    def _set_progress(self, index: int, info: ProgressInfo) -> None:
        self._messages[index] = self._messages[index].model_copy(update={"progress_info": info})
