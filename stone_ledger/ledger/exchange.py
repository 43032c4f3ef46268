"""
JSON export and import of the ledger.

The export file is the same JSON array the ledger persists, pretty-printed.
Importing parses it and hands the list to WorkerLedger.replace_all, which
does all record-level validation.
"""

import json
from typing import Iterable, Union

from stone_ledger.errors import InvalidFormatError
from stone_ledger.ledger.worker_ledger import WorkerLedger
from stone_ledger.models.worker import WorkerRecord


EXPORT_MIME_TYPE = "application/json"


def export_records(records: Iterable[WorkerRecord]) -> str:
    """Serialize records as a pretty-printed JSON array."""
    return json.dumps([r.to_wire() for r in records], ensure_ascii=False, indent=2)


def export_ledger(ledger: WorkerLedger) -> str:
    return export_records(ledger.snapshot())


def parse_import(payload: Union[str, bytes]) -> list:
    """
    Decode an uploaded export file.

    Raises:
        InvalidFormatError: If the payload is not UTF-8, not JSON, or not
            a JSON array
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise InvalidFormatError(f"Import file is not UTF-8 text: {e}") from e

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise InvalidFormatError(f"Import file is not valid JSON: {e.msg} (line {e.lineno})") from e

    if not isinstance(data, list):
        raise InvalidFormatError(
            f"Import file must contain a JSON array, got {type(data).__name__}"
        )
    return data


def import_into(ledger: WorkerLedger, payload: Union[str, bytes]) -> int:
    """
    Parse an export file and replace the ledger with its records.

    Returns:
        The new record count
    """
    return ledger.replace_all(parse_import(payload))
