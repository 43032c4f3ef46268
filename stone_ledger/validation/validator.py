"""
Input Validation

DESIGN DECISION: Validation happens at the ledger's mutation boundary,
before any state changes. Two kinds of input arrive there:

1. DIRECT INPUT - a name and a weight from the entry form or the edit
   prompt. A bad value raises InvalidInputError straight away.

2. IMPORTED RECORDS - a list of record-shaped objects from a JSON file.
   Every record is checked and all problems are collected, so the user
   sees the full list instead of fixing one line at a time.

IMPORTANT: Validation never silently fixes a value. The one field that is
replaced rather than checked is `payment`, because it is derived.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from stone_ledger.errors import InvalidInputError
from stone_ledger.models.worker import WorkerRecord, is_finite_number


class ValidationIssue(BaseModel):
    """A single problem found in an imported record."""

    index: int = Field(
        ...,
        ge=0,
        description="Position of the record in the imported list"
    )
    field: str = Field(
        ...,
        description="Field with the issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )

    def __str__(self) -> str:
        return f"record {self.index + 1}: {self.field}: {self.message}"


# =============================================================================
# DIRECT INPUT
# =============================================================================

def validate_name(value: Any) -> str:
    """Return the stripped name, or raise InvalidInputError if it is empty."""
    if not isinstance(value, str):
        raise InvalidInputError("Worker name must be text")
    name = value.strip()
    if not name:
        raise InvalidInputError("Worker name cannot be empty")
    return name


def validate_weight(value: Any) -> float:
    """Return the weight as a float, or raise InvalidInputError."""
    if not is_finite_number(value):
        raise InvalidInputError(f"Weight must be a number, got {value!r}")
    if value < 0:
        raise InvalidInputError(f"Weight cannot be negative, got {value}")
    return float(value)


def parse_weight(text: Optional[str]) -> float:
    """
    Parse a weight typed by the user.

    Accepts plain decimal text ("12", " 7.5 "). Rejects empty text,
    anything that is not a number, NaN/infinity and negative values.
    """
    if text is None or not str(text).strip():
        raise InvalidInputError("Please enter a weight")
    try:
        value = float(str(text).strip())
    except ValueError:
        raise InvalidInputError(f"Not a valid weight: {text!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"Not a valid weight: {text!r}")
    return validate_weight(value)


# =============================================================================
# IMPORTED RECORDS
# =============================================================================

_WIRE_FIELDS = {
    "id": "id",
    "name": "name",
    "stones_broken": "stonesBroken",
    "payment": "payment",
    "date_added": "dateAdded",
}


def _issues_from_error(index: int, error: ValidationError) -> list[ValidationIssue]:
    issues = []
    for err in error.errors():
        loc = err.get("loc") or ("record",)
        field = _WIRE_FIELDS.get(str(loc[0]), str(loc[0]))
        issues.append(ValidationIssue(index=index, field=field, message=err["msg"]))
    return issues


def validate_import_payload(
    items: list,
) -> tuple[list[dict], list[ValidationIssue]]:
    """
    Check every imported item.

    Only `name` and `stonesBroken` are required. `id` and `dateAdded` are
    optional (the ledger fills them in), and `payment` is optional and
    not validated because it is always recomputed.

    Returns:
        (cleaned_items, issues). cleaned_items are wire-format dicts with
        the original `payment` (if any) kept under `payment` for logging.
        The caller must treat a non-empty issue list as a rejection.
    """
    cleaned: list[dict] = []
    origins: list[int] = []
    issues: list[ValidationIssue] = []

    for index, item in enumerate(items):
        if isinstance(item, WorkerRecord):
            item = item.to_wire()
        if not isinstance(item, Mapping):
            issues.append(ValidationIssue(
                index=index,
                field="record",
                message=f"expected an object, got {type(item).__name__}",
            ))
            continue

        probe = {
            "id": 0 if item.get("id") is None else item.get("id"),
            "name": item.get("name"),
            "stonesBroken": item.get("stonesBroken"),
            "payment": 0,
            "dateAdded": item.get("dateAdded") or "-",
        }
        try:
            WorkerRecord.model_validate(probe)
        except ValidationError as e:
            issues.extend(_issues_from_error(index, e))
            continue

        record_id = item.get("id")
        if record_id is not None and (isinstance(record_id, bool) or not isinstance(record_id, int)):
            # JSON numbers like 1.7e12 arrive as floats
            if isinstance(record_id, float) and record_id.is_integer():
                record_id = int(record_id)
            else:
                issues.append(ValidationIssue(index=index, field="id", message="must be an integer"))
                continue

        cleaned.append({
            "id": record_id,
            "name": item["name"].strip(),
            "stonesBroken": float(item["stonesBroken"]),
            "payment": item.get("payment"),
            "dateAdded": item.get("dateAdded"),
        })
        origins.append(index)

    seen: dict[int, int] = {}
    for entry, index in zip(cleaned, origins):
        record_id = entry["id"]
        if record_id is None:
            continue
        if record_id in seen:
            issues.append(ValidationIssue(
                index=index,
                field="id",
                message=f"duplicate id {record_id} (also used by record {seen[record_id] + 1})",
            ))
        else:
            seen[record_id] = index

    return cleaned, issues
