"""Routers module for Spooky Study Buddy."""

from .progress import router as progress_router
from .quizzes import router as quizzes_router
from .stories import router as stories_router

__all__ = [
    "progress_router",
    "quizzes_router",
    "stories_router",
]
