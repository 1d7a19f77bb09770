"""Domain constants for Raspadinha."""

from __future__ import annotations

from typing import Any

# ── Reveal ──────────────────────────────────────────────────────────
REVEAL_THRESHOLD_PERCENT = 60.0
REVEAL_PERCENT_MIN = 0.0
REVEAL_PERCENT_MAX = 100.0

# ── Payout tables ───────────────────────────────────────────────────
PROBABILITY_EPSILON = 1e-9

MESSAGE_NO_WIN = "Tente novamente!"
MESSAGE_BREAK_EVEN = "Recuperou o valor!"
MESSAGE_TRIPLE = "Triplicou!"
MESSAGE_BIG_PRIZE = "Grande prêmio!"
MESSAGE_JACKPOT = "JACKPOT!"

# Each tier: value, display label, and payout rows in draw order.
# Row layout: (amount, probability, message)
PRICE_TIERS: list[dict[str, Any]] = [
    {
        "value": 5,
        "label": "R$ 5,00",
        "payouts": [
            (0, 0.75, MESSAGE_NO_WIN),
            (5, 0.15, MESSAGE_BREAK_EVEN),
            (15, 0.08, MESSAGE_TRIPLE),
            (50, 0.019, MESSAGE_BIG_PRIZE),
            (250, 0.001, MESSAGE_JACKPOT),
        ],
    },
    {
        "value": 10,
        "label": "R$ 10,00",
        "payouts": [
            (0, 0.70, MESSAGE_NO_WIN),
            (10, 0.18, MESSAGE_BREAK_EVEN),
            (30, 0.10, MESSAGE_TRIPLE),
            (100, 0.019, MESSAGE_BIG_PRIZE),
            (500, 0.001, MESSAGE_JACKPOT),
        ],
    },
    {
        "value": 25,
        "label": "R$ 25,00",
        "payouts": [
            (0, 0.65, MESSAGE_NO_WIN),
            (25, 0.20, MESSAGE_BREAK_EVEN),
            (75, 0.12, MESSAGE_TRIPLE),
            (250, 0.029, MESSAGE_BIG_PRIZE),
            (1000, 0.001, MESSAGE_JACKPOT),
        ],
    },
    {
        "value": 50,
        "label": "R$ 50,00",
        "payouts": [
            (0, 0.60, MESSAGE_NO_WIN),
            (50, 0.22, MESSAGE_BREAK_EVEN),
            (150, 0.15, MESSAGE_TRIPLE),
            (500, 0.029, MESSAGE_BIG_PRIZE),
            (2500, 0.001, MESSAGE_JACKPOT),
        ],
    },
]

TIER_VALUES: list[int] = [t["value"] for t in PRICE_TIERS]

# ── Payment ─────────────────────────────────────────────────────────
PAYMENT_METHODS: list[str] = ["card", "pix"]

PAYMENT_METHOD_NAMES: dict[str, str] = {
    "card": "Cartão de Crédito",
    "pix": "PIX",
}

# ── Odds simulation ─────────────────────────────────────────────────
SIMULATION_DEFAULT_ROUNDS = 100_000
SIMULATION_MAX_ROUNDS = 10_000_000
