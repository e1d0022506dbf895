"""Story Store - Stories, shareable links and expiry."""

import secrets
import string
from datetime import datetime, timedelta
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from core.exceptions import StorageError
from core.logger import get_logger

from ..models.schemas import CamelModel, SpookyStory, utc_now
from .repository import Repository

logger = get_logger("story_store")

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 12


class StoryIndexEntry(CamelModel):
    """Metadata kept in ``stories/index.json`` for each story."""

    id: str
    title: str
    original_topic: str
    created_at: datetime
    file_path: str
    shareable_link: str
    expires_at: datetime


def new_share_token() -> str:
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


class StoryStore:
    """Persists stories as one file each plus a metadata index.

    Structure:
        - stories/<id>.json -> full story
        - stories/index.json -> id -> StoryIndexEntry

    Expired stories are deleted when they are looked up or listed, and by
    ``cleanup_expired``.
    """

    def __init__(
        self,
        stories: Repository,
        index: Repository,
        ttl_days: int = 30,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.stories = stories
        self.index = index
        self.ttl = timedelta(days=ttl_days)
        self.clock = clock

    def _is_expired(self, entry: StoryIndexEntry) -> bool:
        return entry.expires_at < self.clock()

    async def _entries(self) -> list[StoryIndexEntry]:
        entries = []
        for raw in await self.index.list():
            try:
                entries.append(StoryIndexEntry.model_validate(raw))
            except PydanticValidationError as e:
                logger.warning("Skipping invalid index entry", entry=raw.get("id"), error=str(e))
        return entries

    async def _load(self, story_id: str) -> Optional[SpookyStory]:
        raw = await self.stories.get(story_id)
        if raw is None:
            return None
        try:
            return SpookyStory.model_validate(raw)
        except PydanticValidationError as e:
            raise StorageError(f"Stored story {story_id} is invalid") from e

    async def save(self, story: SpookyStory) -> SpookyStory:
        """Store a story and return it with its shareable link set."""
        stored = story.model_copy(update={"shareable_link": f"{story.id}-{new_share_token()}"})
        await self.stories.put(stored.id, stored.model_dump(mode="json", by_alias=True))

        entry = StoryIndexEntry(
            id=stored.id,
            title=stored.title,
            original_topic=stored.original_topic,
            created_at=stored.created_at,
            file_path=f"stories/{stored.id}.json",
            shareable_link=stored.shareable_link,
            expires_at=self.clock() + self.ttl,
        )
        await self.index.put(stored.id, entry.model_dump(mode="json", by_alias=True))

        logger.info("Story saved", story_id=stored.id, shareable_link=stored.shareable_link)
        return stored

    async def get(self, id_or_link: str) -> Optional[SpookyStory]:
        """Find a story by id or shareable link. Expired stories are removed."""
        entry = None
        raw = await self.index.get(id_or_link)
        if raw is not None:
            entry = StoryIndexEntry.model_validate(raw)
        else:
            entry = next((e for e in await self._entries() if e.shareable_link == id_or_link), None)

        if entry is None:
            return None
        if self._is_expired(entry):
            await self.delete(entry.id)
            logger.info("Expired story removed on access", story_id=entry.id)
            return None
        return await self._load(entry.id)

    async def list(self, limit: int = 20) -> list[SpookyStory]:
        """Stories newest first, skipping (and deleting) expired ones."""
        entries = sorted(await self._entries(), key=lambda e: e.created_at, reverse=True)

        stories: list[SpookyStory] = []
        for entry in entries:
            if len(stories) >= limit:
                break
            if self._is_expired(entry):
                await self.delete(entry.id)
                continue
            story = await self._load(entry.id)
            if story is not None:
                stories.append(story)
        return stories

    async def delete(self, story_id: str) -> bool:
        removed_file = await self.stories.delete(story_id)
        removed_entry = await self.index.delete(story_id)
        return removed_file or removed_entry

    async def cleanup_expired(self) -> int:
        """Delete every expired story. Returns how many were removed."""
        removed = 0
        for entry in await self._entries():
            if self._is_expired(entry):
                await self.delete(entry.id)
                removed += 1
        if removed:
            logger.info("Expired stories cleaned up", removed=removed)
        return removed
