"""Repositories - Narrow key/document storage over JSON files.

Stores only see ``get``/``put``/``list``/``delete`` keyed by string ids, so
the JSON files can be swapped for a real document store without touching
business logic. Blocking file I/O runs in a worker thread.
"""

import asyncio
import json
import re
from pathlib import Path
from typing import Any, Optional, Protocol

from core.exceptions import StorageError
from core.logger import get_logger

logger = get_logger("repository")

Document = dict[str, Any]

_SAFE_KEY = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_+-]*$")


def check_key(key: str) -> str:
    """Reject keys that could escape the storage directory."""
    if not _SAFE_KEY.match(key):
        raise StorageError(f"Invalid storage key: {key!r}")
    return key


class Repository(Protocol):
    async def get(self, key: str) -> Optional[Document]: ...

    async def put(self, key: str, document: Document) -> None: ...

    async def list(self) -> list[Document]: ...

    async def delete(self, key: str) -> bool: ...


class JsonFileRepository:
    """One pretty-printed JSON file per key inside a directory.

    Example:
        >>> repo = JsonFileRepository(Path("data/quizzes"))
        >>> await repo.put("quiz-abc", {"id": "quiz-abc"})
        >>> await repo.get("quiz-abc")
        {'id': 'quiz-abc'}
    """

    def __init__(self, directory: Path, exclude: tuple[str, ...] = ()):
        self.directory = Path(directory)
        self.exclude = set(exclude)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{check_key(key)}.json"

    def _read(self, path: Path) -> Optional[Document]:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupted data file: {path.name}", details={"path": str(path)}) from e
        except OSError as e:
            raise StorageError(f"Could not read {path.name}", details={"path": str(path)}) from e

    def _write(self, path: Path, document: Document) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write {path.name}", details={"path": str(path)}) from e

    def _list(self) -> list[Document]:
        if not self.directory.exists():
            return []
        documents = []
        for path in sorted(self.directory.glob("*.json")):
            if path.stem in self.exclude:
                continue
            try:
                document = self._read(path)
            except StorageError as e:
                logger.warning("Skipping unreadable file", path=str(path), error=str(e))
                continue
            if document is not None:
                documents.append(document)
        return documents

    def _delete(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Could not delete {path.name}", details={"path": str(path)}) from e

    async def get(self, key: str) -> Optional[Document]:
        return await asyncio.to_thread(self._read, self.path_for(key))

    async def put(self, key: str, document: Document) -> None:
        await asyncio.to_thread(self._write, self.path_for(key), document)

    async def list(self) -> list[Document]:
        return await asyncio.to_thread(self._list)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, self.path_for(key))


class JsonDocumentRepository:
    """A single JSON file holding a ``key -> document`` map.

    Every write is read-modify-write of the whole file; the last writer wins.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> dict[str, Document]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupted data file: {self.path.name}", details={"path": str(self.path)}) from e
        except OSError as e:
            raise StorageError(f"Could not read {self.path.name}", details={"path": str(self.path)}) from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {self.path.name}", details={"path": str(self.path)})
        return data

    def _save(self, data: dict[str, Document]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write {self.path.name}", details={"path": str(self.path)}) from e

    def _put(self, key: str, document: Document) -> None:
        data = self._load()
        data[key] = document
        self._save(data)

    def _delete(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return False
        del data[key]
        self._save(data)
        return True

    async def get(self, key: str) -> Optional[Document]:
        data = await asyncio.to_thread(self._load)
        return data.get(key)

    async def put(self, key: str, document: Document) -> None:
        await asyncio.to_thread(self._put, key, document)

    async def list(self) -> list[Document]:
        data = await asyncio.to_thread(self._load)
        return list(data.values())

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, key)
