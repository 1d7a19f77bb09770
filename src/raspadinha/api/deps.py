"""FastAPI dependencies — game objects held on application state."""

from __future__ import annotations

from fastapi import Request

from raspadinha.services.payments import PaymentSimulator
from raspadinha.services.prize_engine import PrizeEngine
from raspadinha.services.sessions import TicketSession


def get_session(request: Request) -> TicketSession:
    """The process-wide ticket session."""
    session: TicketSession = request.app.state.ticket_session
    return session


def get_engine(request: Request) -> PrizeEngine:
    engine: PrizeEngine = request.app.state.prize_engine
    return engine


def get_payments(request: Request) -> PaymentSimulator:
    payments: PaymentSimulator = request.app.state.payments
    return payments
