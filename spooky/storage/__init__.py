"""Storage Module - JSON-file repositories and domain stores."""

from .progress_store import ProgressStore
from .quiz_store import QuizStore, result_key
from .repository import JsonDocumentRepository, JsonFileRepository, Repository
from .story_store import StoryIndexEntry, StoryStore

__all__ = [
    "Repository",
    "JsonFileRepository",
    "JsonDocumentRepository",
    "StoryStore",
    "StoryIndexEntry",
    "QuizStore",
    "result_key",
    "ProgressStore",
]
