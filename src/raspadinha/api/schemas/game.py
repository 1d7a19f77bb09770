"""Game session schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from raspadinha.services.sessions import GameState


class PurchaseRequest(BaseModel):
    """Start buying a ticket of the given tier."""

    tier_value: Decimal = Field(gt=0)


class PaymentConfirmRequest(BaseModel):
    """Simulated payment details for the pending purchase."""

    method: str = Field(pattern=r"^(card|pix)$")
    amount: Decimal | None = Field(default=None, gt=0)


class RevealProgressRequest(BaseModel):
    percent: float = Field(ge=0, le=100)


class PrizeOutcomeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    amount: Decimal
    probability: float
    message: str
    is_win: bool


class TicketResponse(BaseModel):
    """A ticket as shown to the player. The prize stays hidden until revealed."""

    model_config = ConfigDict(from_attributes=True)

    hide_unrevealed_prize: ClassVar[bool] = True

    id: str
    short_id: str
    tier_value: Decimal
    purchased_at: datetime
    prize: PrizeOutcomeResponse | None = None
    revealed: bool
    state: GameState

    @model_validator(mode="after")
    def hide_prize_until_revealed(self) -> TicketResponse:
        if self.hide_unrevealed_prize and not self.revealed:
            self.prize = None
        return self


class IssuedTicketResponse(TicketResponse):
    """Ticket returned at purchase. Carries the prize for the scratch surface."""

    hide_unrevealed_prize: ClassVar[bool] = False


class PaymentReceiptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_id: str
    method: str
    method_name: str
    amount: Decimal
    paid_at: datetime


class ConfirmResponse(BaseModel):
    ticket: IssuedTicketResponse
    payment: PaymentReceiptResponse


class StatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_tickets: int
    total_winnings: Decimal
    last_win: PrizeOutcomeResponse | None = None


class RevealResponse(BaseModel):
    state: GameState
    reveal_progress: float
    ticket: TicketResponse


class SessionResponse(BaseModel):
    state: GameState
    selected_tier: Decimal | None = None
    active_ticket: TicketResponse | None = None
    reveal_progress: float
    reveal_threshold: float
    stats: StatsResponse


class HistoryResponse(BaseModel):
    items: list[TicketResponse]
    total: int
