"""Game session routes — /api/v1/game.

Thin adapter between the presentation layer and :class:`TicketSession`.
Game errors become HTTP errors through their ``status_code`` hint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from raspadinha.api.deps import get_engine, get_payments, get_session
from raspadinha.api.schemas.game import (
    ConfirmResponse,
    HistoryResponse,
    IssuedTicketResponse,
    PaymentConfirmRequest,
    PaymentReceiptResponse,
    PurchaseRequest,
    RevealProgressRequest,
    RevealResponse,
    SessionResponse,
    StatsResponse,
    TicketResponse,
)
from raspadinha.core.errors import GameError
from raspadinha.services.payments import PaymentSimulator
from raspadinha.services.prize_engine import PrizeEngine
from raspadinha.services.sessions import TicketSession

router = APIRouter(prefix="/api/v1/game", tags=["game"])


def _session_response(session: TicketSession) -> SessionResponse:
    snap = session.snapshot()
    tier = snap["selected_tier"]
    ticket = snap["active_ticket"]
    return SessionResponse(
        state=snap["state"],
        selected_tier=tier.value if tier is not None else None,
        active_ticket=TicketResponse.model_validate(ticket) if ticket is not None else None,
        reveal_progress=snap["reveal_progress"],
        reveal_threshold=snap["reveal_threshold"],
        stats=StatsResponse.model_validate(snap["stats"]),
    )


@router.get("")
def get_game(session: TicketSession = Depends(get_session)) -> SessionResponse:
    """Current session state, active ticket and stats."""
    return _session_response(session)


@router.post("/purchase")
def request_purchase(
    body: PurchaseRequest,
    session: TicketSession = Depends(get_session),
    engine: PrizeEngine = Depends(get_engine),
) -> SessionResponse:
    """Select a tier and wait for payment."""
    try:
        tier = engine.get_tier(body.tier_value)
        session.request_purchase(tier)
    except GameError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e
    return _session_response(session)


@router.post("/confirm", status_code=201)
def confirm_payment(
    body: PaymentConfirmRequest,
    session: TicketSession = Depends(get_session),
    payments: PaymentSimulator = Depends(get_payments),
) -> ConfirmResponse:
    """Charge the pending purchase and issue the ticket.

    A rejected payment cancels the purchase, returning the session to idle.
    """
    try:
        ticket, receipt = session.pay_and_confirm(
            lambda tier: payments.charge(tier, body.method, body.amount)
        )
    except GameError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e

    return ConfirmResponse(
        ticket=IssuedTicketResponse.model_validate(ticket),
        payment=PaymentReceiptResponse.model_validate(receipt),
    )


@router.post("/cancel")
def cancel_purchase(session: TicketSession = Depends(get_session)) -> SessionResponse:
    try:
        session.cancel_purchase()
    except GameError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e
    return _session_response(session)


@router.post("/reveal")
def report_reveal_progress(
    body: RevealProgressRequest,
    session: TicketSession = Depends(get_session),
) -> RevealResponse:
    """Report how much of the ticket has been scratched off."""
    try:
        state = session.report_reveal_progress(body.percent)
    except GameError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e

    snap = session.snapshot()
    return RevealResponse(
        state=state,
        reveal_progress=snap["reveal_progress"],
        ticket=TicketResponse.model_validate(snap["active_ticket"]),
    )


@router.post("/new")
def start_new_game(session: TicketSession = Depends(get_session)) -> SessionResponse:
    try:
        session.start_new_game()
    except GameError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e
    return _session_response(session)


@router.get("/stats")
def get_stats(session: TicketSession = Depends(get_session)) -> StatsResponse:
    return StatsResponse.model_validate(session.get_stats())


@router.get("/history")
def get_history(session: TicketSession = Depends(get_session)) -> HistoryResponse:
    """Every ticket bought in this process, oldest first."""
    items = [TicketResponse.model_validate(t) for t in session.get_history()]
    return HistoryResponse(items=items, total=len(items))
