"""
Core Data Models for Stone Ledger

A WorkerRecord is one logged submission of broken stone, not one person:
the same worker can appear many times.

DESIGN DECISION: Records are frozen Pydantic models. The ledger hands out
snapshots of them, so nothing outside the ledger can mutate a record in
place and break the payment rule.

Field names are snake_case in Python and camelCase on the wire
(`stonesBroken`, `dateAdded`) so persisted and exported JSON keeps the
layout older data files already use.
"""

import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# PAYMENT RULE
# =============================================================================

RATE_PER_KG = Decimal("5")

_CENT = Decimal("0.01")


def round2(value: Union[float, int, Decimal]) -> float:
    """Round half-up to two decimal places."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def calculate_payment(
    stones_broken: Union[float, int, Decimal],
    rate_per_kg: Decimal = RATE_PER_KG,
) -> float:
    """
    Wage for a given weight of broken stone.

    The product is computed in decimal arithmetic, so 1.005 kg at a rate
    of 1 is 1.01 and not 1.0 as binary floats would give.
    """
    return round2(Decimal(str(stones_broken)) * Decimal(str(rate_per_kg)))


def format_display_date(day: date) -> str:
    """Render a date as d/m/yyyy without zero padding (e.g. 5/3/2026)."""
    return f"{day.day}/{day.month}/{day.year}"


# =============================================================================
# WORKER RECORD
# =============================================================================

class WorkerRecord(BaseModel):
    """
    One entry of stone-breaking work and the wage it earned.

    `payment` is derived from `stones_broken`. The model does not enforce
    that itself (the rate lives in the ledger); WorkerLedger is the only
    place that builds records and always computes it.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    id: int = Field(
        ...,
        ge=0,
        description="Unique record id, time-derived"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Worker display name"
    )
    stones_broken: float = Field(
        ...,
        alias="stonesBroken",
        ge=0,
        allow_inf_nan=False,
        description="Weight of stone broken, in kilograms"
    )
    payment: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Wage in currency units (derived)"
    )
    date_added: str = Field(
        ...,
        alias="dateAdded",
        min_length=1,
        description="Creation date, d/m/yyyy"
    )

    @field_validator('stones_broken', 'payment', mode='before')
    @classmethod
    def reject_non_numbers(cls, v):
        """Weights and payments must be real numbers, not text or booleans."""
        if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
            raise ValueError("must be a number")
        return v

    def to_wire(self) -> dict:
        """Dictionary with the persisted/exported field names."""
        return self.model_dump(by_alias=True)


class LedgerStats(BaseModel):
    """Aggregates over the current record set."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    count: int = Field(default=0, ge=0)
    total_stones: float = Field(default=0.0, alias="totalStones")
    total_payment: float = Field(default=0.0, alias="totalPayment")

    @property
    def is_empty(self) -> bool:
        return self.count == 0


def is_finite_number(value) -> bool:
    """True for ints/floats that are neither NaN nor infinite (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False
