"""Input validation package."""

from stone_ledger.validation.validator import (
    ValidationIssue,
    parse_weight,
    validate_import_payload,
    validate_name,
    validate_weight,
)

__all__ = [
    "ValidationIssue",
    "parse_weight",
    "validate_import_payload",
    "validate_name",
    "validate_weight",
]
