"""Tests for WorkerLedger."""

import json
from decimal import Decimal
from typing import Optional

import pytest

from stone_ledger.errors import (
    InvalidFormatError,
    InvalidInputError,
    NotFoundError,
    PersistenceFailure,
)
from stone_ledger.ledger import WorkerLedger
from stone_ledger.models.worker import WorkerRecord, calculate_payment
from stone_ledger.services.storage import InMemoryStore


class FailingStore(InMemoryStore):
    """In-memory store whose writes can be switched off."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_writes = False

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceFailure("disk full")
        super().set(key, value)


class BrokenReadStore(InMemoryStore):
    def get(self, key: str) -> Optional[str]:
        raise PersistenceFailure("cannot read")


def stored(store, key="stoneWorkers"):
    return json.loads(store.get(key))


class TestAdd:
    """Tests for WorkerLedger.add."""

    def test_add_computes_payment(self, ledger):
        record = ledger.add("Asha", 10)
        assert record.name == "Asha"
        assert record.stones_broken == 10.0
        assert record.payment == 50.0

    def test_add_stamps_date(self, ledger):
        assert ledger.add("Asha", 1).date_added == "5/3/2026"

    def test_add_strips_name(self, ledger):
        assert ledger.add("  Ravi ", 2).name == "Ravi"

    def test_add_appends_in_order(self, ledger):
        first = ledger.add("A", 1)
        second = ledger.add("B", 2)
        assert [r.id for r in ledger.snapshot()] == [first.id, second.id]

    def test_add_assigns_unique_increasing_ids(self, ledger):
        ids = [ledger.add(f"W{i}", i).id for i in range(50)]
        assert len(set(ids)) == 50
        assert ids == sorted(ids)

    def test_add_persists(self, ledger, store):
        record = ledger.add("Asha", 10)
        assert stored(store) == [record.to_wire()]

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_add_rejects_bad_name(self, ledger, store, name):
        with pytest.raises(InvalidInputError):
            ledger.add(name, 10)
        assert len(ledger) == 0
        assert store.get("stoneWorkers") is None

    @pytest.mark.parametrize("stones", [-1, -0.01, "10", None, True, float("nan"), float("inf"), 10**400])
    def test_add_rejects_bad_weight(self, ledger, stones):
        with pytest.raises(InvalidInputError):
            ledger.add("Asha", stones)
        assert len(ledger) == 0

    def test_add_zero_weight(self, ledger):
        assert ledger.add("Asha", 0).payment == 0.0

    def test_add_accepts_long_name(self, ledger, store):
        name = "A" * 201
        assert ledger.add(name, 10).name == name
        assert stored(store)[0]["name"] == name

    def test_huge_int_weight_is_invalid_input(self, ledger):
        record = ledger.add("Asha", 1)
        with pytest.raises(InvalidInputError):
            ledger.update(record.id, 10**400)
        with pytest.raises(InvalidInputError):
            ledger.preview_payment(10**400)
        assert ledger.get(record.id).stones_broken == 1.0

    def test_add_uses_configured_rate(self, make_ledger):
        ledger = make_ledger(rate_per_kg=Decimal("2.5"))
        assert ledger.add("Asha", 3).payment == 7.5


class TestUpdate:
    """Tests for WorkerLedger.update."""

    def test_update_recomputes_payment(self, ledger):
        record = ledger.add("Asha", 10)
        updated = ledger.update(record.id, 7.5)
        assert updated.stones_broken == 7.5
        assert updated.payment == 37.5

    def test_update_keeps_identity(self, ledger):
        record = ledger.add("Asha", 10)
        updated = ledger.update(record.id, 3)
        assert updated.id == record.id
        assert updated.name == record.name
        assert updated.date_added == record.date_added

    def test_update_leaves_other_records(self, ledger):
        a = ledger.add("A", 1)
        b = ledger.add("B", 2)
        c = ledger.add("C", 3)
        ledger.update(b.id, 20)
        records = ledger.snapshot()
        assert records[0] == a
        assert records[2] == c
        assert records[1].payment == 100.0

    def test_update_persists(self, ledger, store):
        record = ledger.add("Asha", 10)
        ledger.update(record.id, 4)
        assert stored(store)[0]["payment"] == 20.0

    def test_update_unknown_id(self, ledger):
        ledger.add("Asha", 10)
        with pytest.raises(NotFoundError) as exc_info:
            ledger.update(12345, 1)
        assert exc_info.value.record_id == 12345

    def test_update_invalid_weight_leaves_record(self, ledger, store):
        record = ledger.add("Asha", 10)
        before = store.get("stoneWorkers")
        with pytest.raises(InvalidInputError):
            ledger.update(record.id, -5)
        assert ledger.get(record.id) == record
        assert store.get("stoneWorkers") == before

    def test_snapshot_is_not_affected_by_update(self, ledger):
        record = ledger.add("Asha", 10)
        snapshot = ledger.snapshot()
        ledger.update(record.id, 1)
        assert snapshot[0].stones_broken == 10.0


class TestRemoveAndClear:
    """Tests for remove and clear."""

    def test_remove(self, ledger, store):
        a = ledger.add("A", 1)
        b = ledger.add("B", 2)
        assert ledger.remove(a.id) is True
        assert ledger.snapshot() == (b,)
        assert [r["id"] for r in stored(store)] == [b.id]

    def test_remove_twice_is_noop(self, ledger):
        a = ledger.add("A", 1)
        ledger.add("B", 2)
        assert ledger.remove(a.id) is True
        before = ledger.snapshot()
        assert ledger.remove(a.id) is False
        assert ledger.snapshot() == before

    def test_remove_unknown_does_not_persist(self, ledger, store):
        assert ledger.remove(1) is False
        assert store.get("stoneWorkers") is None

    def test_clear(self, ledger, store):
        ledger.add("A", 1)
        ledger.add("B", 2)
        assert ledger.clear() == 2
        assert len(ledger) == 0
        assert stored(store) == []

    def test_clear_empty_is_noop(self, ledger):
        assert ledger.clear() == 0
        assert ledger.stats().count == 0
        assert ledger.clear() == 0


class TestStats:
    """Tests for stats and snapshot."""

    def test_scenario_add_then_update(self, ledger):
        record = ledger.add("Asha", 10)
        assert record.payment == 50.0
        assert ledger.update(record.id, 7.5).payment == 37.5

        stats = ledger.stats()
        assert stats.count == 1
        assert stats.total_stones == 7.5
        assert stats.total_payment == 37.5

    def test_empty(self, ledger):
        stats = ledger.stats()
        assert stats.count == 0
        assert stats.total_stones == 0
        assert stats.total_payment == 0.0

    def test_total_payment_matches_snapshot(self, ledger):
        for i, kg in enumerate([0.1, 0.2, 1.333, 2.675, 10]):
            ledger.add(f"W{i}", kg)
        expected = round(sum(r.payment for r in ledger.snapshot()), 2)
        assert ledger.stats().total_payment == pytest.approx(expected, abs=0.005)

    def test_same_person_many_records(self, ledger):
        ledger.add("Asha", 1)
        ledger.add("Asha", 2)
        assert ledger.stats().count == 2
        assert ledger.stats().total_stones == 3.0

    def test_snapshot_is_tuple(self, ledger):
        ledger.add("Asha", 1)
        assert isinstance(ledger.snapshot(), tuple)

    def test_get_unknown(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.get(99)

    def test_preview_payment_has_no_side_effects(self, ledger, store):
        assert ledger.preview_payment(3) == 15.0
        assert len(ledger) == 0
        assert store.get("stoneWorkers") is None


class TestReplaceAll:
    """Tests for bulk replacement (import)."""

    def test_replace(self, ledger):
        ledger.add("Old", 1)
        count = ledger.replace_all([
            {"id": 1, "name": "X", "stonesBroken": 2, "payment": 10, "dateAdded": "1/1/2026"},
            {"id": 2, "name": "Y", "stonesBroken": 4, "payment": 20, "dateAdded": "2/1/2026"},
        ])
        assert count == 2
        assert [r.name for r in ledger.snapshot()] == ["X", "Y"]

    def test_payment_is_recomputed(self, ledger):
        ledger.replace_all([
            {"id": 1, "name": "X", "stonesBroken": 2, "payment": 99999, "dateAdded": "1/1/2026"},
        ])
        assert ledger.snapshot()[0].payment == 10.0

    def test_missing_optional_fields_are_filled(self, ledger):
        ledger.replace_all([{"name": "X", "stonesBroken": 3}])
        record = ledger.snapshot()[0]
        assert record.payment == 15.0
        assert record.date_added == "5/3/2026"
        assert record.id > 0

    def test_fresh_ids_do_not_collide_with_supplied(self, ledger):
        big = 10 ** 15
        ledger.replace_all([
            {"id": big, "name": "X", "stonesBroken": 1},
            {"name": "Y", "stonesBroken": 1},
        ])
        ids = [r.id for r in ledger.snapshot()]
        assert ids[0] == big
        assert ids[1] > big
        assert ledger.add("Z", 1).id > ids[1]

    def test_float_ids_from_json(self, ledger):
        ledger.replace_all([{"id": 1.7e12, "name": "X", "stonesBroken": 1}])
        assert ledger.snapshot()[0].id == 1700000000000

    def test_accepts_worker_records(self, ledger):
        record = WorkerRecord(id=5, name="X", stones_broken=2, payment=0, date_added="1/1/2026")
        ledger.replace_all((record,))
        assert ledger.snapshot()[0].payment == 10.0

    def test_empty_list(self, ledger):
        ledger.add("A", 1)
        assert ledger.replace_all([]) == 0
        assert len(ledger) == 0

    @pytest.mark.parametrize("payload", [{"name": "X"}, "[]", b"[]", 42, None])
    def test_rejects_non_sequence(self, ledger, payload):
        ledger.add("A", 1)
        before = ledger.snapshot()
        with pytest.raises(InvalidFormatError):
            ledger.replace_all(payload)
        assert ledger.snapshot() == before

    def test_rejects_negative_weight(self, ledger, store):
        ledger.add("A", 1)
        before = ledger.snapshot()
        persisted = store.get("stoneWorkers")
        with pytest.raises(InvalidFormatError) as exc_info:
            ledger.replace_all([
                {"id": 1, "name": "X", "stonesBroken": -1, "payment": -5, "dateAdded": "1/1/2026"},
            ])
        assert ledger.snapshot() == before
        assert store.get("stoneWorkers") == persisted
        assert exc_info.value.issues[0].field == "stonesBroken"

    def test_collects_all_issues(self, ledger):
        with pytest.raises(InvalidFormatError) as exc_info:
            ledger.replace_all([
                {"name": "", "stonesBroken": 1},
                {"name": "ok", "stonesBroken": 1},
                "not a record",
            ])
        indexes = [issue.index for issue in exc_info.value.issues]
        assert indexes == [0, 2]

    def test_rejects_duplicate_ids(self, ledger):
        with pytest.raises(InvalidFormatError) as exc_info:
            ledger.replace_all([
                {"id": 1, "name": "X", "stonesBroken": 1},
                {"id": 1, "name": "Y", "stonesBroken": 2},
            ])
        assert exc_info.value.issues[0].index == 1

    def test_rejects_non_integer_id(self, ledger):
        with pytest.raises(InvalidFormatError):
            ledger.replace_all([{"id": "abc", "name": "X", "stonesBroken": 1}])


class TestLifecycle:
    """Tests for load/save and persistence failures."""

    def test_reload_sees_same_records(self, ledger, make_ledger):
        ledger.add("A", 1)
        ledger.add("B", 2.5)
        reloaded = make_ledger()
        assert reloaded.snapshot() == ledger.snapshot()

    def test_absent_key_loads_empty(self, make_ledger):
        assert len(make_ledger()) == 0

    @pytest.mark.parametrize("raw", [
        "not json",
        '{"id": 1}',
        '[{"id": 1, "name": "", "stonesBroken": 1, "payment": 5, "dateAdded": "x"}]',
        '[1, 2, 3]',
    ])
    def test_malformed_storage_loads_empty(self, make_ledger, raw):
        store = InMemoryStore({"stoneWorkers": raw})
        assert len(make_ledger(backing_store=store)) == 0

    def test_load_recomputes_stale_payment(self, make_ledger):
        raw = json.dumps([
            {"id": 1, "name": "A", "stonesBroken": 2, "payment": 1, "dateAdded": "1/1/2026"},
        ])
        ledger = make_ledger(backing_store=InMemoryStore({"stoneWorkers": raw}))
        assert ledger.snapshot()[0].payment == 10.0

    def test_long_names_survive_reload(self, make_ledger):
        raw = json.dumps([
            {"id": 1, "name": "A", "stonesBroken": 1, "payment": 5, "dateAdded": "1/1/2026"},
            {"id": 2, "name": "B" * 201, "stonesBroken": 2, "payment": 10, "dateAdded": "1/1/2026"},
        ])
        ledger = make_ledger(backing_store=InMemoryStore({"stoneWorkers": raw}))
        assert [r.id for r in ledger.snapshot()] == [1, 2]

    def test_load_read_failure_propagates(self):
        ledger = WorkerLedger(
            BrokenReadStore(), rate_per_kg=5, storage_key="k", today=lambda: None
        )
        with pytest.raises(PersistenceFailure):
            ledger.load()

    def test_new_ids_exceed_loaded_ids(self, make_ledger):
        big = 10 ** 15
        raw = json.dumps([
            {"id": big, "name": "A", "stonesBroken": 1, "payment": 5, "dateAdded": "1/1/2026"},
        ])
        ledger = make_ledger(backing_store=InMemoryStore({"stoneWorkers": raw}))
        assert ledger.add("B", 1).id > big

    def test_write_failure_leaves_state_unchanged(self, make_ledger):
        store = FailingStore()
        ledger = make_ledger(backing_store=store)
        record = ledger.add("A", 1)
        store.fail_writes = True

        with pytest.raises(PersistenceFailure):
            ledger.add("B", 2)
        with pytest.raises(PersistenceFailure):
            ledger.update(record.id, 5)
        with pytest.raises(PersistenceFailure):
            ledger.remove(record.id)
        with pytest.raises(PersistenceFailure):
            ledger.clear()
        with pytest.raises(PersistenceFailure):
            ledger.replace_all([])

        assert ledger.snapshot() == (record,)
        assert json.loads(store.get("stoneWorkers")) == [record.to_wire()]

    def test_save_writes_current_state(self, ledger, store):
        ledger.add("A", 1)
        store.delete("stoneWorkers")
        ledger.save()
        assert len(stored(store)) == 1

    def test_custom_storage_key(self, make_ledger, store):
        ledger = make_ledger(storage_key="other")
        ledger.add("A", 1)
        assert store.get("other") is not None
        assert store.get("stoneWorkers") is None


class TestPaymentInvariant:
    """The payment rule holds after any sequence of operations."""

    def test_invariant_after_mixed_operations(self, ledger):
        weights = [0, 0.5, 1.005, 3.333, 12.25, 100]
        records = [ledger.add(f"W{i}", w) for i, w in enumerate(weights)]
        ledger.update(records[1].id, 2.675)
        ledger.remove(records[2].id)
        ledger.update(records[5].id, 0.015)

        for record in ledger.snapshot():
            assert record.payment == calculate_payment(record.stones_broken, Decimal("5"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
