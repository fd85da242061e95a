"""Key/value stores holding serialized sessions between stages."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class SessionStore(ABC):
    """Keeps serialized session JSON under a key. One key per participant device."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored JSON, or None if the key is unknown."""

    @abstractmethod
    def put(self, key: str, data: str) -> None:
        """Store JSON under a key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Forget a key. Unknown keys are ignored."""


class InMemorySessionStore(SessionStore):
    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, data: str) -> None:
        self._data[key] = data

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileSessionStore(SessionStore):
    """Stores each session as <directory>/<key>.json."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in key)
        return self.directory / f"{safe}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def put(self, key: str, data: str) -> None:
        self._path(key).write_text(data, encoding="utf-8")

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
