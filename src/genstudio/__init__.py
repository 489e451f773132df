"""
genstudio
Prompt-driven text, image description and video generation with tracked video jobs
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
