"""Shared pytest fixtures and test configuration."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Ensure src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from raspadinha.core.config import Settings  # noqa: E402
from raspadinha.services.prize_engine import PriceTier, PrizeEngine  # noqa: E402
from raspadinha.services.sessions import TicketSession  # noqa: E402
from raspadinha.services.tiers import build_prize_engine  # noqa: E402

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


class ScriptedRandom:
    """Random source that replays a fixed list of units, cycling."""

    def __init__(self, units: Iterable[float]) -> None:
        self.units = list(units)
        self.calls = 0

    def __call__(self) -> float:
        value = self.units[self.calls % len(self.units)]
        self.calls += 1
        return value


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, app_env="testing")


@pytest.fixture
def engine() -> PrizeEngine:
    return build_prize_engine()


@pytest.fixture
def tier5(engine: PrizeEngine) -> PriceTier:
    return engine.get_tier(5)


@pytest.fixture
def scripted_random() -> ScriptedRandom:
    """Defaults to 0.80: the break-even band of every configured tier."""
    return ScriptedRandom([0.80])


@pytest.fixture
def session(engine: PrizeEngine, scripted_random: ScriptedRandom) -> TicketSession:
    return TicketSession(engine, rng=scripted_random, clock=lambda: FIXED_NOW)


@pytest.fixture
def app(settings: Settings, scripted_random: ScriptedRandom) -> FastAPI:
    """FastAPI test app with a scripted random source."""
    from raspadinha.main import create_app

    return create_app(settings=settings, rng=scripted_random)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
