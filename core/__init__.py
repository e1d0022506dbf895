"""Core module - configuration, logging and exceptions."""

from .config import StudyBuddyConfig
from .exceptions import (
    GenerationFailed,
    NotFoundError,
    SpookyError,
    StorageError,
    UpstreamServiceError,
    ValidationError,
)
from .logger import configure_logging, get_logger

__all__ = [
    "StudyBuddyConfig",
    "SpookyError",
    "ValidationError",
    "NotFoundError",
    "GenerationFailed",
    "UpstreamServiceError",
    "StorageError",
    "configure_logging",
    "get_logger",
]
