from .base import BackendError, GenerationBackend, OperationSnapshot
from .gemini import GeminiBackend

__all__ = ["BackendError", "GeminiBackend", "GenerationBackend", "OperationSnapshot"]
