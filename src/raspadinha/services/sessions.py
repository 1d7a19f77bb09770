"""Ticket session — lifecycle state machine and running statistics.

Lifecycle: idle → awaiting_payment → revealable → revealing → finalized → idle.
The prize is drawn exactly once, when payment is confirmed, and is frozen on
the ticket before any reveal interaction happens. Statistics change on
purchase (ticket count) and on finalization (winnings), each in a single
step under the session lock.
"""

from __future__ import annotations

import logging
import math
import secrets
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from raspadinha.core.constants import (
    REVEAL_PERCENT_MAX,
    REVEAL_PERCENT_MIN,
    REVEAL_THRESHOLD_PERCENT,
)
from raspadinha.core.errors import InvalidStateTransition, OutOfRangeInput, PaymentError
from raspadinha.services.prize_engine import PriceTier, PrizeEngine, PrizeOutcome, validate_tier

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]
Clock = Callable[[], datetime]
R = TypeVar("R")


class GameState(str, Enum):
    IDLE = "idle"
    AWAITING_PAYMENT = "awaiting_payment"
    REVEALABLE = "revealable"
    REVEALING = "revealing"
    FINALIZED = "finalized"


# ── Valid state transitions ─────────────────────────────────────────

VALID_TRANSITIONS: dict[GameState, list[GameState]] = {
    GameState.IDLE: [GameState.AWAITING_PAYMENT],
    GameState.AWAITING_PAYMENT: [GameState.REVEALABLE, GameState.IDLE],
    GameState.REVEALABLE: [GameState.REVEALING],
    GameState.REVEALING: [GameState.REVEALING, GameState.FINALIZED],
    GameState.FINALIZED: [GameState.IDLE],
}


@dataclass(frozen=True)
class Ticket:
    """A purchased ticket. ``prize`` is fixed at creation."""

    id: str
    tier_value: Decimal
    purchased_at: datetime
    prize: PrizeOutcome
    revealed: bool = False
    state: GameState = GameState.REVEALABLE

    @property
    def short_id(self) -> str:
        return self.id[-4:]


@dataclass(frozen=True)
class SessionStats:
    total_tickets: int = 0
    total_winnings: Decimal = Decimal(0)
    last_win: PrizeOutcome | None = None


_system_random = secrets.SystemRandom()
_UNSET: Any = object()


def system_random_unit() -> float:
    """CSPRNG sample in ``[0, 1)``."""
    return _system_random.random()


class TicketSession:
    """Single-player session: one active ticket at a time plus history.

    Every mutating operation takes the session lock, checks the current
    state, computes the new values, and only then assigns them together.
    A rejected call leaves the session exactly as it was.
    """

    def __init__(
        self,
        engine: PrizeEngine,
        *,
        rng: RandomSource | None = None,
        reveal_threshold: float = REVEAL_THRESHOLD_PERCENT,
        clock: Clock | None = None,
    ) -> None:
        if not REVEAL_PERCENT_MIN < reveal_threshold <= REVEAL_PERCENT_MAX:
            raise OutOfRangeInput(
                f"reveal_threshold must be in (0, 100], got {reveal_threshold}"
            )

        self._engine = engine
        self._rng = rng or system_random_unit
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._threshold = float(reveal_threshold)
        self._lock = threading.RLock()

        self._state = GameState.IDLE
        self._tier: PriceTier | None = None
        self._ticket: Ticket | None = None
        self._progress = 0.0
        self._history: list[Ticket] = []
        self._stats = SessionStats()

    # ── Read-only accessors ─────────────────────────────────────────

    @property
    def engine(self) -> PrizeEngine:
        return self._engine

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def reveal_threshold(self) -> float:
        return self._threshold

    @property
    def selected_tier(self) -> PriceTier | None:
        return self._tier

    @property
    def active_ticket(self) -> Ticket | None:
        return self._ticket

    @property
    def reveal_progress(self) -> float:
        """Highest percent reported for the active ticket."""
        return self._progress

    def get_stats(self) -> SessionStats:
        return self._stats

    def get_history(self) -> list[Ticket]:
        """Tickets in purchase order."""
        with self._lock:
            return list(self._history)

    def snapshot(self) -> dict[str, Any]:
        """Consistent view of the whole session for display."""
        with self._lock:
            return {
                "state": self._state,
                "selected_tier": self._tier,
                "active_ticket": self._ticket,
                "reveal_progress": self._progress,
                "reveal_threshold": self._threshold,
                "stats": self._stats,
            }

    # ── Lifecycle operations ────────────────────────────────────────

    def request_purchase(self, tier: PriceTier) -> None:
        """Start buying a ticket of *tier*. Valid only when idle."""
        with self._lock:
            self._require("request purchase", GameState.IDLE)
            validate_tier(tier)
            self._commit(GameState.AWAITING_PAYMENT, tier=tier)
            logger.info("Purchase requested for tier %s", tier.label)

    def cancel_purchase(self) -> None:
        """Abandon a pending purchase after payment was cancelled or failed."""
        with self._lock:
            self._require("cancel purchase", GameState.AWAITING_PAYMENT)
            label = self._tier.label if self._tier else "?"
            self._commit(GameState.IDLE, tier=None)
            logger.info("Purchase for tier %s cancelled", label)

    def confirm_payment(self) -> Ticket:
        """Create the ticket and draw its prize, once.

        Returns:
            The new ticket, in ``revealable`` state.

        Raises:
            InvalidStateTransition: If no purchase is awaiting payment.
        """
        with self._lock:
            self._require("confirm payment", GameState.AWAITING_PAYMENT)
            tier = self._tier
            assert tier is not None

            prize = self._engine.draw(tier, self._rng())
            ticket = Ticket(
                id=uuid.uuid4().hex,
                tier_value=tier.value,
                purchased_at=self._clock(),
                prize=prize,
            )
            stats = replace(self._stats, total_tickets=self._stats.total_tickets + 1)

            self._commit(GameState.REVEALABLE, ticket=ticket, stats=stats, progress=0.0)

            logger.info("Ticket %s issued for tier %s", ticket.short_id, tier.label)
            logger.debug("Ticket %s prize amount %s", ticket.short_id, prize.amount)
            return ticket

    def pay_and_confirm(self, charge: Callable[[PriceTier], R]) -> tuple[Ticket, R]:
        """Charge the selected tier and issue its ticket in one locked step.

        ``charge`` receives the tier awaiting payment and runs while the
        session lock is held, so no other caller can change the selection
        between the charge and the draw.

        Returns:
            The new ticket and whatever ``charge`` returned (the receipt).

        Raises:
            InvalidStateTransition: If no purchase is awaiting payment, or
                the selection changed while charging.
            PaymentError: From ``charge``; the purchase is cancelled first.
        """
        with self._lock:
            self._require("confirm payment", GameState.AWAITING_PAYMENT)
            tier = self._tier
            assert tier is not None

            try:
                receipt = charge(tier)
            except PaymentError:
                if self._state is GameState.AWAITING_PAYMENT:
                    self._commit(GameState.IDLE, tier=None)
                    logger.info("Purchase for tier %s cancelled: payment rejected", tier.label)
                raise

            if self._state is not GameState.AWAITING_PAYMENT or self._tier is not tier:
                logger.warning("Selection changed while charging tier %s", tier.label)
                raise InvalidStateTransition(self._state.value, "confirm payment")

            return self.confirm_payment(), receipt

    def report_reveal_progress(self, percent: float) -> GameState:
        """Apply a reveal-progress report from the rendering layer.

        The first report moves the ticket to ``revealing``. A report at or
        above the reveal threshold finalizes it: the ticket is marked
        revealed and winnings are added to the stats. Lower re-reports are
        accepted but never lower the displayed progress.

        Raises:
            InvalidStateTransition: If no ticket is being revealed.
            OutOfRangeInput: If *percent* is outside ``[0, 100]``.
        """
        with self._lock:
            self._require("report reveal progress", GameState.REVEALABLE, GameState.REVEALING)
            percent = _check_percent(percent)

            ticket = self._ticket
            assert ticket is not None
            progress = max(self._progress, percent)

            if self._state is GameState.REVEALABLE:
                ticket = replace(ticket, state=GameState.REVEALING)
            self._commit(GameState.REVEALING, ticket=ticket, progress=progress)

            if percent < self._threshold:
                return self._state

            prize = ticket.prize
            stats = SessionStats(
                total_tickets=self._stats.total_tickets,
                total_winnings=self._stats.total_winnings + prize.amount,
                last_win=prize if prize.is_win else self._stats.last_win,
            )
            ticket = replace(ticket, revealed=True, state=GameState.FINALIZED)
            self._commit(GameState.FINALIZED, ticket=ticket, stats=stats)

            logger.info(
                "Ticket %s revealed at %.1f%%: %s (%s)",
                ticket.short_id,
                percent,
                prize.amount,
                prize.message,
            )
            return self._state

    def start_new_game(self) -> None:
        """Clear the finalized ticket and return to idle. History and stats stay."""
        with self._lock:
            self._require("start new game", GameState.FINALIZED)
            self._commit(GameState.IDLE, tier=None, ticket=None, progress=0.0)

    # ── Internals ───────────────────────────────────────────────────

    def _require(self, operation: str, *allowed: GameState) -> None:
        if self._state not in allowed:
            logger.info("Rejected %r in state %s", operation, self._state.value)
            raise InvalidStateTransition(self._state.value, operation)

    def _commit(
        self,
        new_state: GameState,
        *,
        tier: Any = _UNSET,
        ticket: Any = _UNSET,
        stats: Any = _UNSET,
        progress: Any = _UNSET,
    ) -> None:
        """Assign the new state and any changed fields together.

        A ticket is appended to history when new, otherwise it replaces the
        latest entry (the active ticket is always the most recent one).
        """
        if new_state not in VALID_TRANSITIONS[self._state]:
            raise InvalidStateTransition(self._state.value, f"move to {new_state.value}")

        self._state = new_state
        if tier is not _UNSET:
            self._tier = tier
        if ticket is not _UNSET:
            self._ticket = ticket
            if ticket is not None:
                if self._history and self._history[-1].id == ticket.id:
                    self._history[-1] = ticket
                else:
                    self._history.append(ticket)
        if stats is not _UNSET:
            self._stats = stats
        if progress is not _UNSET:
            self._progress = progress


def _check_percent(percent: float) -> float:
    try:
        value = float(percent)
    except (TypeError, ValueError) as exc:
        raise OutOfRangeInput(f"percent must be a number, got {percent!r}") from exc
    if math.isnan(value) or not REVEAL_PERCENT_MIN <= value <= REVEAL_PERCENT_MAX:
        raise OutOfRangeInput(f"percent must be in [0, 100], got {percent}")
    return value
