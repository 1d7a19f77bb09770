"""Simulated payment step.

Stands in for a real payment provider: it only checks that the method is
supported and the charged amount matches the tier price, then issues a
receipt. No money moves.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from raspadinha.core.constants import PAYMENT_METHOD_NAMES, PAYMENT_METHODS
from raspadinha.core.errors import PaymentError
from raspadinha.services.prize_engine import PriceTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentReceipt:
    payment_id: str
    method: str
    amount: Decimal
    paid_at: datetime

    @property
    def method_name(self) -> str:
        return PAYMENT_METHOD_NAMES.get(self.method, self.method)


class PaymentSimulator:
    """Approves any well-formed charge for a ticket tier."""

    def __init__(self, methods: list[str] | None = None) -> None:
        self.methods = list(methods) if methods is not None else list(PAYMENT_METHODS)

    def charge(
        self,
        tier: PriceTier,
        method: str,
        amount: Decimal | None = None,
        *,
        now: datetime | None = None,
    ) -> PaymentReceipt:
        """Charge the price of *tier* using *method*.

        Args:
            tier: Tier being bought; its value is the price.
            method: One of ``PAYMENT_METHODS``.
            amount: Amount the client believes it is paying. Defaults to
                the tier price; any other value is rejected.

        Raises:
            PaymentError: Unsupported method or amount mismatch.
        """
        if method not in self.methods:
            raise PaymentError(
                f"Unsupported payment method: {method!r}. Must be one of: {self.methods}"
            )

        if amount is not None and Decimal(str(amount)) != tier.value:
            raise PaymentError(
                f"Amount {amount} does not match ticket price {tier.value}"
            )

        if now is None:
            now = datetime.now(tz=UTC)

        receipt = PaymentReceipt(
            payment_id=uuid.uuid4().hex,
            method=method,
            amount=tier.value,
            paid_at=now,
        )
        logger.info(
            "Payment %s approved: %s via %s",
            receipt.payment_id[:8],
            tier.label,
            receipt.method_name,
        )
        return receipt
