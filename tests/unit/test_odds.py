"""Tests for odds reporting — services/odds.py."""

from __future__ import annotations

import math
from decimal import Decimal

import pytest

from raspadinha.core.errors import OutOfRangeInput
from raspadinha.services.odds import (
    expected_return,
    hit_rate,
    house_edge,
    return_to_player,
    simulate,
    tier_summary,
)
from raspadinha.services.prize_engine import PriceTier, PrizeEngine


class TestTheoretical:
    # 5*.15 + 15*.08 + 50*.019 + 250*.001
    def test_expected_return_tier5(self, tier5: PriceTier) -> None:
        assert math.isclose(expected_return(tier5), 3.15)

    def test_rtp_and_edge(self, tier5: PriceTier) -> None:
        assert math.isclose(return_to_player(tier5), 0.63)
        assert math.isclose(house_edge(tier5), 0.37)

    @pytest.mark.parametrize(("value", "rate"), [(5, 0.25), (10, 0.30), (25, 0.35), (50, 0.40)])
    def test_hit_rate(self, engine: PrizeEngine, value: int, rate: float) -> None:
        assert math.isclose(hit_rate(engine.get_tier(value)), rate)

    def test_every_tier_favours_the_house(self, engine: PrizeEngine) -> None:
        assert all(return_to_player(t) < 1 for t in engine.tiers)

    def test_summary(self, tier5: PriceTier) -> None:
        summary = tier_summary(tier5)
        assert summary["label"] == "R$ 5,00"
        assert summary["max_prize"] == Decimal(250)
        assert summary["total_probability"] == 1.0
        assert summary["return_to_player"] == 0.63
        assert summary["hit_rate"] == 0.25


class TestSimulate:
    def test_reproducible(self, tier5: PriceTier) -> None:
        assert simulate(tier5, rounds=2_000, seed=3) == simulate(tier5, rounds=2_000, seed=3)

    def test_frequencies_track_probabilities(self, tier5: PriceTier) -> None:
        result = simulate(tier5, rounds=50_000, seed=11)
        assert result["rounds"] == 50_000
        assert result["total_wagered"] == Decimal(250_000)
        for entry in result["distribution"]:
            assert abs(entry["frequency"] - entry["probability"]) < 0.01
        assert math.isclose(sum(e["frequency"] for e in result["distribution"]), 1.0, abs_tol=1e-3)
        assert abs(result["rtp_measured"] - result["rtp_theoretical"]) < 0.1

    def test_hit_rate_close(self, tier5: PriceTier) -> None:
        assert abs(simulate(tier5, rounds=20_000, seed=5)["hit_rate"] - 0.25) < 0.02

    @pytest.mark.parametrize("rounds", [0, -1, 10_000_001])
    def test_rejects_bad_rounds(self, tier5: PriceTier, rounds: int) -> None:
        with pytest.raises(OutOfRangeInput):
            simulate(tier5, rounds=rounds)
