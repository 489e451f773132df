"""Pydantic models for the conversation timeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class MessageKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    LOADING = "loading"
    ERROR = "error"


class ProgressInfo(BaseModel):
    message: str
    progress: int = Field(0, ge=0, le=100)


class Message(BaseModel):
    """One entry of the conversation timeline, keyed by ``id``."""

    id: int
    role: Role
    kind: MessageKind
    content: str
    file_preview: str | None = None
    progress_info: ProgressInfo | None = None
