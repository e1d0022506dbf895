"""Progress Store - One progress record per user in a single JSON map."""

from typing import Callable

from pydantic import ValidationError as PydanticValidationError

from core.exceptions import StorageError
from core.logger import get_logger

from ..models.schemas import UserProgress
from .repository import Repository

logger = get_logger("progress_store")


class ProgressStore:
    """Loads and saves ``UserProgress`` records.

    Unknown users get a fresh record from ``factory`` (the progress engine's
    ``new_progress``); it is only written once the caller saves it.
    """

    def __init__(self, repository: Repository, factory: Callable[[str], UserProgress]):
        self.repository = repository
        self.factory = factory

    async def get(self, user_id: str) -> UserProgress:
        raw = await self.repository.get(user_id)
        if raw is None:
            logger.debug("New progress record", user_id=user_id)
            return self.factory(user_id)
        try:
            return UserProgress.model_validate(raw)
        except PydanticValidationError as e:
            raise StorageError(f"Stored progress for {user_id} is invalid") from e

    async def save(self, progress: UserProgress) -> None:
        await self.repository.put(progress.user_id, progress.model_dump(mode="json", by_alias=True))

    async def list_all(self) -> list[UserProgress]:
        records = []
        for raw in await self.repository.list():
            try:
                records.append(UserProgress.model_validate(raw))
            except PydanticValidationError as e:
                logger.warning("Skipping invalid progress record", user_id=raw.get("userId"), error=str(e))
        return records
