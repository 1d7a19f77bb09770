"""Hypothesis stateful tests: any call sequence keeps the session consistent."""

from __future__ import annotations

import random
from decimal import Decimal

from hypothesis import settings
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, invariant, rule

from raspadinha.core.errors import InvalidStateTransition
from raspadinha.services.prize_engine import PrizeOutcome
from raspadinha.services.sessions import GameState, TicketSession
from raspadinha.services.tiers import build_prize_engine

ENGINE = build_prize_engine()


class TicketSessionMachine(RuleBasedStateMachine):
    def __init__(self) -> None:
        super().__init__()
        self.session = TicketSession(ENGINE, rng=random.Random(7).random)
        self.prizes: dict[str, PrizeOutcome] = {}
        self.stats_updates = 0

    def _call(self, fn, *args):  # type: ignore[no-untyped-def]
        state = self.session.state
        stats = self.session.get_stats()
        history = self.session.get_history()
        try:
            return fn(*args)
        except InvalidStateTransition:
            assert self.session.state is state
            assert self.session.get_stats() is stats
            assert self.session.get_history() == history
            return None

    @rule(tier=st.sampled_from(ENGINE.tiers))
    def request_purchase(self, tier) -> None:  # type: ignore[no-untyped-def]
        self._call(self.session.request_purchase, tier)

    @rule()
    def cancel_purchase(self) -> None:
        self._call(self.session.cancel_purchase)

    @rule()
    def confirm_payment(self) -> None:
        ticket = self._call(self.session.confirm_payment)
        if ticket is not None:
            self.prizes[ticket.id] = ticket.prize

    @rule(percent=st.floats(min_value=0, max_value=100, allow_nan=False))
    def report_progress(self, percent: float) -> None:
        before = self.session.get_stats()
        state = self._call(self.session.report_reveal_progress, percent)
        if state is None:
            return
        if state is GameState.FINALIZED:
            self.stats_updates += 1
        elif self.session.get_stats() is not before:
            raise AssertionError("stats changed below the reveal threshold")

    @rule()
    def start_new_game(self) -> None:
        self._call(self.session.start_new_game)

    @invariant()
    def prizes_never_change(self) -> None:
        for ticket in self.session.get_history():
            assert ticket.prize is self.prizes[ticket.id]

    @invariant()
    def stats_match_history(self) -> None:
        history = self.session.get_history()
        stats = self.session.get_stats()
        assert stats.total_tickets == len(history)
        revealed = [t for t in history if t.revealed]
        assert len(revealed) == self.stats_updates
        assert stats.total_winnings == sum((t.prize.amount for t in revealed), Decimal(0))
        wins = [t.prize for t in revealed if t.prize.is_win]
        assert stats.last_win == (wins[-1] if wins else None)

    @invariant()
    def only_latest_ticket_can_be_open(self) -> None:
        history = self.session.get_history()
        assert all(t.revealed for t in history[:-1])

    @invariant()
    def progress_bounded(self) -> None:
        assert 0 <= self.session.reveal_progress <= 100


TicketSessionMachine.TestCase.settings = settings(max_examples=100, stateful_step_count=40)
TestTicketSessionMachine = TicketSessionMachine.TestCase
