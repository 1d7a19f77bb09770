"""Price tier schemas."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class PayoutEntry(BaseModel):
    amount: Decimal
    probability: float
    message: str


class TierResponse(BaseModel):
    value: Decimal
    label: str
    max_prize: Decimal
    payout_table: list[PayoutEntry]
    return_to_player: float
    hit_rate: float
