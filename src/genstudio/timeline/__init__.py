from .models import Message, MessageKind, ProgressInfo, Role
from .reconciler import MessageTimeline

__all__ = ["Message", "MessageKind", "MessageTimeline", "ProgressInfo", "Role"]
