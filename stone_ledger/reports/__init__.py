"""Formatting and printable reports."""

from stone_ledger.reports.payment_report import (
    build_payment_report,
    format_currency,
    format_kg,
    format_weight,
)

__all__ = [
    "build_payment_report",
    "format_currency",
    "format_kg",
    "format_weight",
]
