"""In-memory key-value store, used by tests and when no data file is configured."""

from typing import Optional

from stone_ledger.services.storage.interface import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def __contains__(self, key: str) -> bool:
        return key in self._data
