"""CartLift — Key-Value Store Capability.

Persistence is injected, never global: collaborators receive any object with
``get`` / ``set`` / ``delete`` keyed by string.
"""

from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from sqlmodel import Session

from cartlift.core.logging import get_logger
from cartlift.models.storage_models import KeyValueEntry

logger = get_logger("storage.kv")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and single-process use."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SqlKeyValueStore:
    """Store backed by the ``key_value_entries`` table.

    Each ``set`` / ``delete`` commits immediately.
    """

    def __init__(self, session: Session):
        self.session = session

    def get(self, key: str) -> Optional[str]:
        entry = self.session.get(KeyValueEntry, key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        entry = self.session.get(KeyValueEntry, key)
        if entry is None:
            entry = KeyValueEntry(key=key, value=value)
        else:
            entry.value = value
            entry.updated_at = datetime.now(timezone.utc)
        self.session.add(entry)
        self.session.commit()
        logger.debug(f"Stored key {key}")

    def delete(self, key: str) -> None:
        entry = self.session.get(KeyValueEntry, key)
        if entry is not None:
            self.session.delete(entry)
            self.session.commit()
