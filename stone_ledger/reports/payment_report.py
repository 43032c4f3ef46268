"""
Display formatting and the printable payment report.

Display convention is fixed: payments as ₹ with two decimals, total
kilograms with one decimal, dates as d/m/yyyy.
"""

from datetime import date
from decimal import Decimal
from html import escape
from typing import Iterable, Union

from stone_ledger.models.worker import (
    LedgerStats,
    WorkerRecord,
    format_display_date,
    round2,
)


Number = Union[float, int, Decimal]


def format_currency(amount: Number, symbol: str = "₹") -> str:
    """₹1,234.50"""
    return f"{symbol}{round2(amount):,.2f}"


def format_weight(kilograms: Number) -> str:
    """One decimal place, used for the total-stones figure."""
    return f"{float(kilograms):.1f}"


def format_kg(kilograms: Number) -> str:
    """A record's own weight, shown as entered (10 -> "10", 7.5 -> "7.5")."""
    value = float(kilograms)
    return str(int(value)) if value.is_integer() else repr(value)


_REPORT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
        body {{ font-family: 'Noto Sans Gujarati', sans-serif; padding: 20px; }}
        table {{ width: 100%; border-collapse: collapse; margin-top: 20px; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background-color: #f2f2f2; }}
    </style>
</head>
<body>
    <h1>{title}</h1>
    <p>Date: {report_date}</p>
    <table>
        <thead>
            <tr>
                <th>No.</th>
                <th>Worker name</th>
                <th>Stones (kg)</th>
                <th>Payment ({symbol})</th>
            </tr>
        </thead>
        <tbody>
{rows}
        </tbody>
    </table>
    <p><strong>Total payment: {total}</strong></p>
</body>
</html>
"""

_ROW_TEMPLATE = """            <tr>
                <td>{serial}</td>
                <td>{name}</td>
                <td>{kg}</td>
                <td>{payment}</td>
            </tr>"""

_EMPTY_ROW = """            <tr><td colspan="4" style="text-align: center;">No data</td></tr>"""


def build_payment_report(
    records: Iterable[WorkerRecord],
    report_date: date,
    stats: LedgerStats,
    symbol: str = "₹",
    title: str = "Stone Breaking Wage Report",
) -> str:
    """
    Render the printable wage report as a standalone HTML page.

    Rows are numbered from 1 in ledger order. Worker names are escaped.
    """
    rows = [
        _ROW_TEMPLATE.format(
            serial=serial,
            name=escape(record.name),
            kg=format_kg(record.stones_broken),
            payment=format_currency(record.payment, symbol),
        )
        for serial, record in enumerate(records, start=1)
    ]

    return _REPORT_TEMPLATE.format(
        title=escape(title),
        report_date=format_display_date(report_date),
        symbol=escape(symbol),
        rows="\n".join(rows) if rows else _EMPTY_ROW,
        total=format_currency(stats.total_payment, symbol),
    )
