"""
Worker Ledger

The one component that owns the list of worker records.

GUARANTEES:
- Every record satisfies payment == round2(stones_broken * rate) at all
  times. The payment is computed here on add, update, import and load,
  and is never taken from input.
- Record ids are unique within the ledger.
- A rejected mutation changes nothing.
- A mutation is persisted before it becomes visible. If the store fails,
  PersistenceFailure is raised and the in-memory records still match
  what is stored.

Lifecycle: construct with a store, call `load()` once, then use the
operations. Readers get immutable snapshots, never the live list.
"""

import json
import time
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence, Union

from stone_ledger.activity import ActivityLogger, get_activity_logger
from stone_ledger.config import get_settings
from stone_ledger.errors import (
    InvalidFormatError,
    NotFoundError,
    PersistenceFailure,
)
from stone_ledger.models.worker import (
    LedgerStats,
    WorkerRecord,
    calculate_payment,
    format_display_date,
    round2,
)
from stone_ledger.services.storage import KeyValueStore
from stone_ledger.validation import (
    validate_import_payload,
    validate_name,
    validate_weight,
)


class WorkerLedger:
    """
    Ordered collection of worker records, oldest first.

    Args:
        store: Key-value store the record list is persisted in
        rate_per_kg: Wage per kilogram (defaults to settings)
        storage_key: Key the list is stored under (defaults to settings)
        today: Callable returning the current date, used for dateAdded
        activity_logger: Where mutation events are logged
    """

    def __init__(
        self,
        store: KeyValueStore,
        rate_per_kg: Optional[Union[Decimal, int, float, str]] = None,
        storage_key: Optional[str] = None,
        today: Optional[Callable[[], date]] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        if rate_per_kg is None or storage_key is None or today is None:
            settings = get_settings().ledger
            if rate_per_kg is None:
                rate_per_kg = settings.rate_per_kg
            if storage_key is None:
                storage_key = settings.storage_key
            if today is None:
                tz = settings.tzinfo

                def today() -> date:
                    return datetime.now(tz).date()

        self._store = store
        self._rate = Decimal(str(rate_per_kg))
        self._key = storage_key
        self._today = today
        self._activity = activity_logger or get_activity_logger()

        self._records: list[WorkerRecord] = []
        self._last_id = 0

    @property
    def rate_per_kg(self) -> Decimal:
        return self._rate

    @property
    def storage_key(self) -> str:
        return self._key

    def __len__(self) -> int:
        return len(self._records)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def load(self) -> int:
        """
        Replace the in-memory records with what the store holds.

        An absent key, malformed JSON, a non-array value or any invalid
        record all load as an empty ledger. Only a failing store raises.

        Returns:
            Number of records loaded

        Raises:
            PersistenceFailure: If the store cannot be read
        """
        raw = self._store.get(self._key)

        records: list[WorkerRecord] = []
        if raw is not None:
            try:
                records = self._decode(raw)
            except ValueError as e:
                # JSONDecodeError and pydantic's ValidationError are both ValueErrors
                self._activity.log_load_failed(self._key, str(e))
                records = []

        self._records = records
        self._last_id = max((r.id for r in records), default=0)
        self._activity.log_ledger_loaded(len(records), self._key)
        return len(records)

    def save(self) -> None:
        """
        Write the current records to the store.

        Raises:
            PersistenceFailure: If the store cannot be written
        """
        self._persist(self._records, "save")

    def _decode(self, raw: str) -> list[WorkerRecord]:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")

        records = []
        seen = set()
        for item in data:
            record = WorkerRecord.model_validate(item)
            if record.id in seen:
                raise ValueError(f"duplicate record id {record.id}")
            seen.add(record.id)

            payment = self._pay(record.stones_broken)
            if payment != record.payment:
                self._activity.log_payment_recomputed(record.id, record.payment, payment)
                record = record.model_copy(update={"payment": payment})
            records.append(record)
        return records

    def _persist(self, records: Sequence[WorkerRecord], operation: str) -> None:
        payload = json.dumps([r.to_wire() for r in records], ensure_ascii=False)
        try:
            self._store.set(self._key, payload)
        except PersistenceFailure as e:
            self._activity.log_persistence_failed(operation, str(e))
            raise

    def _commit(self, records: list[WorkerRecord], operation: str) -> None:
        self._persist(records, operation)
        self._records = records
        self._last_id = max(self._last_id, max((r.id for r in records), default=0))

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _pay(self, stones_broken: float) -> float:
        return calculate_payment(stones_broken, self._rate)

    def _next_id(self) -> int:
        # Millisecond timestamps, bumped past the last id when the clock
        # has not moved on
        candidate = int(time.time() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def _index_of(self, record_id: int) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    # =========================================================================
    # READS
    # =========================================================================

    def snapshot(self) -> tuple[WorkerRecord, ...]:
        """Immutable copy of the records in insertion order."""
        return tuple(self._records)

    def get(self, record_id: int) -> WorkerRecord:
        """
        Look up a single record.

        Raises:
            NotFoundError: If no record has this id
        """
        index = self._index_of(record_id)
        if index is None:
            raise NotFoundError(record_id)
        return self._records[index]

    def stats(self) -> LedgerStats:
        """Count, total kilograms and total payment of the current records."""
        return LedgerStats(
            count=len(self._records),
            total_stones=sum(r.stones_broken for r in self._records),
            total_payment=round2(sum((Decimal(str(r.payment)) for r in self._records), Decimal("0"))),
        )

    def preview_payment(self, stones_broken: float) -> float:
        """
        Payment the rule gives for a weight, without recording anything.

        Raises:
            InvalidInputError: If the weight is negative or not a number
        """
        return self._pay(validate_weight(stones_broken))

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add(self, name: str, stones_broken: float) -> WorkerRecord:
        """
        Append a new record.

        Args:
            name: Worker name, stripped; must not be empty
            stones_broken: Weight in kilograms, >= 0

        Returns:
            The created record

        Raises:
            InvalidInputError: If the name or weight is invalid
            PersistenceFailure: If the store cannot be written
        """
        clean_name = validate_name(name)
        stones = validate_weight(stones_broken)

        record = WorkerRecord(
            id=self._next_id(),
            name=clean_name,
            stones_broken=stones,
            payment=self._pay(stones),
            date_added=format_display_date(self._today()),
        )
        self._commit([*self._records, record], "add")

        self._activity.log_worker_added(record.id, record.name, record.stones_broken, record.payment)
        return record

    def update(self, record_id: int, new_stones_broken: float) -> WorkerRecord:
        """
        Change the weight of a record and recompute its payment.

        Returns:
            The updated record (same id, name and dateAdded)

        Raises:
            NotFoundError: If no record has this id
            InvalidInputError: If the new weight is invalid
            PersistenceFailure: If the store cannot be written
        """
        index = self._index_of(record_id)
        if index is None:
            raise NotFoundError(record_id)
        stones = validate_weight(new_stones_broken)

        current = self._records[index]
        updated = current.model_copy(update={
            "stones_broken": stones,
            "payment": self._pay(stones),
        })

        records = list(self._records)
        records[index] = updated
        self._commit(records, "update")

        self._activity.log_worker_updated(record_id, current.stones_broken, stones, updated.payment)
        return updated

    def remove(self, record_id: int) -> bool:
        """
        Remove a record if present.

        Returns:
            True if a record was removed, False if the id was unknown
        """
        index = self._index_of(record_id)
        if index is None:
            return False

        removed = self._records[index]
        self._commit(self._records[:index] + self._records[index + 1:], "remove")

        self._activity.log_worker_removed(removed.id, removed.name)
        return True

    def clear(self) -> int:
        """
        Drop every record and persist the empty ledger.

        Returns:
            How many records were dropped (0 when already empty)
        """
        removed = len(self._records)
        self._commit([], "clear")

        self._activity.log_ledger_cleared(removed)
        return removed

    def replace_all(self, records: Sequence) -> int:
        """
        Replace the whole ledger, typically with imported data.

        Each item may be a WorkerRecord or a mapping with the wire field
        names. `payment` is always recomputed. A missing `id` gets a fresh
        one and a missing `dateAdded` gets today's date.

        Returns:
            The new record count

        Raises:
            InvalidFormatError: If the input is not a list/tuple, or any
                item is invalid, or two items share an id
            PersistenceFailure: If the store cannot be written
        """
        if isinstance(records, (str, bytes, bytearray, Mapping)) or not isinstance(records, (list, tuple)):
            reason = f"expected a list of worker records, got {type(records).__name__}"
            self._activity.log_import_rejected(reason)
            raise InvalidFormatError(f"Invalid import: {reason}")

        cleaned, issues = validate_import_payload(list(records))
        if issues:
            reason = "; ".join(str(issue) for issue in issues)
            self._activity.log_import_rejected(reason, len(issues))
            raise InvalidFormatError(f"Invalid import: {reason}", issues=issues)

        # Fresh ids must not collide with ids supplied in the payload
        supplied_ids = [entry["id"] for entry in cleaned if entry["id"] is not None]
        self._last_id = max([self._last_id, *supplied_ids])

        new_records = []
        mismatches = []
        for entry in cleaned:
            record_id = entry["id"] if entry["id"] is not None else self._next_id()
            payment = self._pay(entry["stonesBroken"])
            if entry["payment"] is not None and entry["payment"] != payment:
                mismatches.append((record_id, entry["payment"], payment))

            new_records.append(WorkerRecord(
                id=record_id,
                name=entry["name"],
                stones_broken=entry["stonesBroken"],
                payment=payment,
                date_added=entry["dateAdded"] or format_display_date(self._today()),
            ))

        self._commit(new_records, "import")

        for record_id, supplied, computed in mismatches:
            self._activity.log_payment_recomputed(record_id, supplied, computed)
        self._activity.log_ledger_imported(len(new_records), len(mismatches))
        return len(new_records)
