"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on disk, mapping keys to string
values, plays the role a browser's localStorage played for the old web
page. It is:
1. Human-readable and easy to back up
2. Written atomically (temp file + rename), so a crash mid-write never
   leaves a half-written ledger behind
3. Retried on transient OS errors before giving up

TRADEOFFS:
- The whole file is rewritten on every set (fine for a few thousand records)
- Last writer wins if two processes share the file
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from stone_ledger.errors import PersistenceFailure
from stone_ledger.services.storage.interface import KeyValueStore


logger = structlog.get_logger(__name__)


class JsonFileStore(KeyValueStore):
    """
    File-backed key-value store.

    The file holds `{"<key>": "<value string>", ...}`. It is created on the
    first write; a missing file reads as an empty store.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _read_file(self) -> Optional[str]:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write_file(self, content: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load(self) -> dict:
        try:
            raw = self._read_file()
        except OSError as e:
            raise PersistenceFailure(f"Failed to read {self._path}: {e}") from e
        except UnicodeDecodeError as e:
            logger.warning("store_file_corrupt", path=str(self._path), error=str(e))
            return {}

        if raw is None or not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("store_file_corrupt", path=str(self._path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "store_file_corrupt",
                path=str(self._path),
                error=f"expected a JSON object, got {type(data).__name__}",
            )
            return {}
        return data

    def _dump(self, data: dict) -> None:
        content = json.dumps(data, ensure_ascii=False, indent=2)
        try:
            self._write_file(content)
        except OSError as e:
            raise PersistenceFailure(f"Failed to write {self._path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        if value is None or isinstance(value, str):
            return value
        # Hand-edited files may hold the array itself rather than its JSON text
        return json.dumps(value, ensure_ascii=False)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return False
        del data[key]
        self._dump(data)
        return True
