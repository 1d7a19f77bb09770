"""CLI runner for Raspadinha.

Usage:
    python -m raspadinha.cli odds [--tier 5]
    python -m raspadinha.cli simulate --tier 5 --rounds 100000 --seed 42
    python -m raspadinha.cli serve
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from typing import Any

from raspadinha.core.constants import SIMULATION_DEFAULT_ROUNDS
from raspadinha.core.errors import GameError
from raspadinha.core.logging import setup_logging

logger = logging.getLogger(__name__)


def _engine(args: argparse.Namespace):  # type: ignore[no-untyped-def]
    from raspadinha.services.tiers import build_prize_engine

    return build_prize_engine(normalize=args.normalize)


def _emit(data: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(data, default=str, indent=2))
        return
    rows = data if isinstance(data, list) else [data]
    for row in rows:
        for key, value in row.items():
            if key == "distribution":
                print("  distribution:")
                for entry in value:
                    print(
                        f"    R$ {entry['amount']:>6}  p={entry['probability']:<7} "
                        f"freq={entry['frequency']:<7} {entry['message']}"
                    )
            else:
                print(f"  {key}: {value}")
        print()


def run_odds(args: argparse.Namespace) -> int:
    """Print the theoretical odds for one or all tiers."""
    from raspadinha.services.odds import tier_summary

    engine = _engine(args)
    tiers = [engine.get_tier(args.tier)] if args.tier is not None else engine.tiers
    _emit([tier_summary(t) for t in tiers], args.json)
    return 0


def run_simulate(args: argparse.Namespace) -> int:
    """Run a Monte Carlo simulation of one tier."""
    from raspadinha.services.odds import simulate

    engine = _engine(args)
    tier = engine.get_tier(args.tier)
    logger.info("Simulating %d draws of tier %s (seed=%d)", args.rounds, tier.label, args.seed)
    _emit(simulate(tier, rounds=args.rounds, seed=args.seed), args.json)
    return 0


def run_serve(args: argparse.Namespace) -> int:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from raspadinha.core.config import Settings

    settings = Settings()
    uvicorn.run(
        "raspadinha.main:app_factory",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug and settings.is_development,
    )
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace], int]] = {
    "odds": run_odds,
    "simulate": run_simulate,
    "serve": run_serve,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Raspadinha scratch ticket tools",
        prog="python -m raspadinha.cli",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    odds = sub.add_parser("odds", help="Theoretical odds per tier")
    odds.add_argument("--tier", default=None, help="Tier price (default: all tiers)")

    sim = sub.add_parser("simulate", help="Monte Carlo check of a tier")
    sim.add_argument("--tier", required=True, help="Tier price")
    sim.add_argument("--rounds", type=int, default=SIMULATION_DEFAULT_ROUNDS)
    sim.add_argument("--seed", type=int, default=42)

    for p in (odds, sim):
        p.add_argument("--json", action="store_true", help="Emit JSON")
        p.add_argument(
            "--normalize", action="store_true", help="Rescale payout tables to sum to 1"
        )

    sub.add_parser("serve", help="Run the HTTP API")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level.upper())

    try:
        return COMMANDS[args.command](args)
    except GameError as exc:
        logger.error("%s", exc.detail)
        print(f"error: {exc.detail}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
