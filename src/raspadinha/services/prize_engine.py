"""Prize engine — weighted-random prize selection per price tier.

Each tier carries an ordered payout table. A draw walks the table
accumulating probabilities and returns the first outcome whose running
total reaches the supplied random unit (inverse-CDF sampling over a
discrete distribution). The random unit always comes from the caller, so
the engine itself holds no random state.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from raspadinha.core.constants import PROBABILITY_EPSILON
from raspadinha.core.errors import InvalidConfiguration, OutOfRangeInput, UnknownTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrizeOutcome:
    """One possible result of a draw."""

    amount: Decimal
    probability: float
    message: str

    @property
    def is_win(self) -> bool:
        return self.amount > 0


@dataclass(frozen=True)
class PriceTier:
    """A ticket price with its payout table, in draw order."""

    value: Decimal
    label: str
    payout_table: tuple[PrizeOutcome, ...]

    @property
    def max_prize(self) -> Decimal:
        return max(o.amount for o in self.payout_table)

    @property
    def total_probability(self) -> float:
        return math.fsum(o.probability for o in self.payout_table)


# ── Validation ──────────────────────────────────────────────────────


def validate_tier(tier: PriceTier, epsilon: float = PROBABILITY_EPSILON) -> None:
    """Check a tier's configuration.

    Raises:
        InvalidConfiguration: empty table, probability outside (0, 1],
            negative amount, non-positive price, or probabilities summing
            to more than ``1 + epsilon``.
    """
    if tier.value <= 0:
        raise InvalidConfiguration(f"Tier {tier.label!r}: price must be positive, got {tier.value}")

    if not tier.payout_table:
        raise InvalidConfiguration(f"Tier {tier.label!r}: payout table is empty")

    for index, outcome in enumerate(tier.payout_table):
        if not 0 < outcome.probability <= 1:
            raise InvalidConfiguration(
                f"Tier {tier.label!r}: entry {index} has probability "
                f"{outcome.probability}, must be in (0, 1]"
            )
        if outcome.amount < 0:
            raise InvalidConfiguration(
                f"Tier {tier.label!r}: entry {index} has negative amount {outcome.amount}"
            )

    total = tier.total_probability
    if total > 1 + epsilon:
        raise InvalidConfiguration(
            f"Tier {tier.label!r}: probabilities sum to {total:.6f}, exceeding 1"
        )
    if total < 1 - epsilon:
        # Allowed: the shortfall falls through to the last entry on draw.
        logger.warning(
            "Tier %s payout table sums to %.6f; remainder goes to the last entry",
            tier.label,
            total,
        )


# ── Draw ────────────────────────────────────────────────────────────


def draw(tier: PriceTier, random_unit: float) -> PrizeOutcome:
    """Select one outcome from *tier* for a random unit in ``[0, 1)``.

    The first entry whose cumulative probability is ``>= random_unit`` wins,
    so an exact boundary goes to the earlier-listed outcome. A unit beyond
    the final cumulative sum (short table or float drift) yields the last
    entry.
    """
    if not 0 <= random_unit < 1:
        raise OutOfRangeInput(f"random_unit must be in [0, 1), got {random_unit}")

    cumulative = 0.0
    for outcome in tier.payout_table:
        cumulative += outcome.probability
        if random_unit <= cumulative:
            return outcome
    return tier.payout_table[-1]


class PrizeEngine:
    """Holds the validated price tiers and draws prizes from them.

    Stateless apart from the tier configuration; safe to share between
    sessions and threads.
    """

    def __init__(
        self,
        tiers: Iterable[PriceTier],
        *,
        epsilon: float = PROBABILITY_EPSILON,
    ) -> None:
        by_value: dict[Decimal, PriceTier] = {}
        for tier in tiers:
            validate_tier(tier, epsilon=epsilon)
            if tier.value in by_value:
                raise InvalidConfiguration(f"Duplicate tier value: {tier.value}")
            by_value[tier.value] = tier

        if not by_value:
            raise InvalidConfiguration("At least one price tier must be configured")

        self._tiers = by_value

    @property
    def tiers(self) -> list[PriceTier]:
        """Configured tiers, cheapest first."""
        return [self._tiers[v] for v in sorted(self._tiers)]

    def get_tier(self, value: Decimal | int | str) -> PriceTier:
        """Look up a tier by its price.

        Raises:
            UnknownTier: If no tier has that price.
        """
        try:
            key = Decimal(str(value))
        except ArithmeticError as exc:
            raise UnknownTier(f"Invalid tier value: {value!r}") from exc
        if not key.is_finite():
            raise UnknownTier(f"Invalid tier value: {value!r}")

        tier = self._tiers.get(key)
        if tier is None:
            available = [str(v) for v in sorted(self._tiers)]
            raise UnknownTier(f"No tier priced {value}. Available: {available}")
        return tier

    def draw(self, tier: PriceTier, random_unit: float) -> PrizeOutcome:
        return draw(tier, random_unit)

    def draw_for(self, value: Decimal | int | str, random_unit: float) -> PrizeOutcome:
        """Draw for the tier priced *value*."""
        return draw(self.get_tier(value), random_unit)
