from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from powerplant.catalog import default_catalog
from powerplant.config import EconomyConfig
from powerplant.cost_scaling import CostScaling
from powerplant.engine import SimulationEngine
from powerplant.formatting import format_multiplier, format_number, format_status
from powerplant.persistence import FileBlobStore, PersistenceAdapter
from powerplant.scheduler import Scheduler
from powerplant.session import GameSession
from powerplant.strategy import GreedyCheapest, Idle, Strategy, autoplay

DEFAULT_SAVE_DIR = Path(
    os.environ.get("POWERPLANT_SAVE_DIR", Path.home() / ".powerplant")
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="powerplant",
        description="Power Plant — idle economy simulation CLI",
    )
    parser.add_argument(
        "--save-dir",
        default=str(DEFAULT_SAVE_DIR),
        help=f"Directory holding the save slot (default: {DEFAULT_SAVE_DIR})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Show the saved game")

    buy = sub.add_parser("buy", help="Buy generators")
    buy.add_argument("kind", help="Generator ID (solar, wind, coal, nuclear, fusion)")
    buy.add_argument("--times", type=int, default=1, help="How many to buy")

    prestige = sub.add_parser("prestige", help="Reset for prestige levels")
    prestige.add_argument(
        "--yes", action="store_true", help="Confirm without showing the preview"
    )

    run = sub.add_parser("run", help="Run the game loop in real time")
    run.add_argument("--seconds", type=float, default=10.0, help="Wall-clock seconds")
    run.add_argument("--fps", type=float, default=60.0, help="Frames per second")

    sim = sub.add_parser("simulate", help="Fast-forward with an autoplay strategy")
    sim.add_argument("--seconds", type=float, default=3600.0, help="Simulated seconds")
    sim.add_argument(
        "--strategy",
        default="greedy_cheapest",
        choices=["idle", "greedy_cheapest"],
        help="Strategy to use (default: greedy_cheapest)",
    )
    sim.add_argument(
        "--prestige", action="store_true", help="Prestige at the first opportunity"
    )
    sim.add_argument("--step", type=float, default=1.0, help="Seconds per tick")
    sim.add_argument("--save", action="store_true", help="Write the result to the save slot")

    ladder = sub.add_parser("ladder", help="Print the cost ladder of a generator")
    ladder.add_argument("kind", help="Generator ID")
    ladder.add_argument("--steps", type=int, default=10, help="Number of purchases")

    sub.add_parser("reset", help="Delete the save slot")

    return parser


def build_strategy(name: str, prestige: bool) -> Strategy:
    if name == "idle":
        return Idle()
    return GreedyCheapest(prestige_mode="first_opportunity" if prestige else "never")


def open_session(save_dir: str | Path) -> GameSession:
    persistence = PersistenceAdapter(FileBlobStore(save_dir))
    return GameSession.hydrate(persistence)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    catalog = default_catalog()

    if args.command == "ladder":
        kind = catalog.get(args.kind)
        if kind is None:
            _unknown_kind(args.kind)
        scaling = CostScaling.truncated(EconomyConfig().cost_growth)
        for i, cost in enumerate(scaling.ladder(kind.base_cost, args.steps), start=1):
            print(f"{i:>4d}  {cost:.0f}")
        return

    if args.command == "reset":
        PersistenceAdapter(FileBlobStore(args.save_dir)).clear()
        print("Save slot cleared.")
        return

    session = open_session(args.save_dir)
    offline = session.persistence.last_offline_earnings
    if offline > 0:
        print(f"Welcome back! Earned {format_number(offline)} while away.\n")

    if args.command == "status":
        print(format_status(session.snapshot()))

    elif args.command == "buy":
        if args.kind not in catalog:
            _unknown_kind(args.kind)
        bought = 0
        for _ in range(max(args.times, 0)):
            if not session.buy_generator(args.kind):
                break
            bought += 1
        print(f"Bought {bought} {args.kind}.")
        print(format_status(session.snapshot()))

    elif args.command == "prestige":
        preview = session.request_prestige()
        if preview is None:
            print(
                f"Not eligible: lifetime earnings "
                f"{format_number(session.state.lifetime_earned)} < "
                f"{format_number(session.engine.config.prestige_threshold)}"
            )
            sys.exit(1)
        print(
            f"Prestige grants {preview.reward} level(s); "
            f"multiplier becomes x{format_multiplier(preview.new_multiplier)}."
        )
        if not args.yes:
            answer = input("Confirm? [y/N] ").strip().lower()
            if answer not in ("y", "yes"):
                session.cancel_prestige()
                print("Cancelled.")
                return
        result = session.confirm_prestige()
        print(f"Prestige level is now {result.new_level}.")

    elif args.command == "run":
        scheduler = Scheduler(session)
        fps = args.fps if args.fps > 0 else 60.0
        scheduler.run(args.seconds, frame_interval=1.0 / fps)
        session.teardown()
        print(f"Ran {scheduler.frames} frames, {scheduler.autosaves} autosave(s).")
        print(format_status(session.snapshot()))

    elif args.command == "simulate":
        _simulate(session, args)


def _simulate(session: GameSession, args: argparse.Namespace) -> None:
    # Detached from the save slot unless --save is given
    engine = SimulationEngine(session.engine.catalog, session.engine.config)
    sandbox = GameSession(session.state, engine)
    strategy = build_strategy(args.strategy, args.prestige)

    report = autoplay(sandbox, strategy, args.seconds, step=args.step)

    print(f"Strategy: {report.strategy_description}")
    print(f"Simulated: {report.total_time:.0f}s")
    print(f"Purchases: {report.purchase_count}")
    for kind, n in report.purchases.items():
        print(f"  {kind}: {n}")
    if report.prestige_eligible_at is not None:
        print(f"Prestige eligible at: {report.prestige_eligible_at:.0f}s")
    print(f"Prestiges: {report.prestiges}")
    print()
    print(format_status(sandbox.snapshot()))

    if args.save:
        session.persistence.save(session.state)
        print("\nSaved.")


def _unknown_kind(kind: str) -> None:
    ids = ", ".join(default_catalog().ids())
    print(f"Error: unknown generator {kind!r} (expected one of: {ids})", file=sys.stderr)
    sys.exit(2)
