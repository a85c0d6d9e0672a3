"""
Headless Monte Carlo run of The Doghouse.

Drives the real RoundController on a virtual clock, so the numbers reflect the
exact same debit, evaluation and credit path the bot uses.

    python simulate.py --spins 100000 --seed 7 --wager 1
"""
import argparse
import json
import logging
import random
import sys
from collections import Counter, defaultdict
from typing import Optional

from utils.round_controller import ReelTiming, RoundController, Wallet
from utils.scheduler import ManualScheduler

logger = logging.getLogger(__name__)


def run_simulation(num_spins: int = 100_000, seed: Optional[int] = None, wager: float = 1.0) -> dict:
    """
    Plays num_spins rounds and returns a JSON-ready report.
    """
    scheduler = ManualScheduler()
    timing = ReelTiming()
    # Enough to never reject a round
    wallet = Wallet(balance=wager * (num_spins + 1))
    summaries = []

    controller = RoundController(
        wallet,
        scheduler,
        rng=random.Random(seed),
        timing=timing,
        on_round_resolved=summaries.append,
    )
    settle_time = max(timing.column_stop_times())

    print(f"Running {num_spins:,} spin simulation...", file=sys.stderr)
    for i in range(num_spins):
        if not controller.start_round(wager):
            raise RuntimeError(f"Round {i} rejected: {controller.last_rejection}")
        scheduler.advance(settle_time)
    controller.cancel()

    total_wagered = wager * num_spins
    total_returned = 0.0
    hits = 0
    max_win = 0.0
    wins_by_symbol = defaultdict(float)
    hits_by_symbol = Counter()
    for summary in summaries:
        total_returned += summary.total
        max_win = max(max_win, summary.total)
        if summary.total > 0:
            hits += 1
        for item in summary.items:
            wins_by_symbol[item["symbol"]] += item["amount"]
            hits_by_symbol[item["symbol"]] += 1

    rtp = (total_returned / total_wagered * 100) if total_wagered else 0.0
    hit_rate = (hits / num_spins * 100) if num_spins else 0.0

    print(f"  RTP: {rtp:.4f}%  Hit rate: {hit_rate:.2f}%", file=sys.stderr)
    return {
        "spins": num_spins,
        "seed": seed,
        "wager": wager,
        "total_wagered": round(total_wagered, 2),
        "total_returned": round(total_returned, 2),
        "rtp_pct": round(rtp, 4),
        "hit_rate_pct": round(hit_rate, 4),
        "max_win": round(max_win, 2),
        "max_win_multiplier": round(max_win / wager, 2) if wager else 0.0,
        "wins_by_symbol": {
            symbol: {"lines": hits_by_symbol[symbol], "returned": round(amount, 2)}
            for symbol, amount in sorted(wins_by_symbol.items(), key=lambda kv: -kv[1])
        },
        "net": round(total_returned - total_wagered, 2),
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="The Doghouse Monte Carlo simulation")
    parser.add_argument("--spins", type=int, default=100_000, help="Number of spins")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for a reproducible run")
    parser.add_argument("--wager", type=float, default=1.0, help="Total bet per spin")
    parser.add_argument("--output", type=str, default=None, help="Also write the report to this file")
    args = parser.parse_args(argv)

    if args.spins <= 0 or args.wager <= 0:
        parser.error("--spins and --wager must be positive")

    logging.basicConfig(level=logging.WARNING, format='[%(levelname)-5s] [%(name)-20s] --- %(message)s')
    results = run_simulation(args.spins, seed=args.seed, wager=args.wager)
    report = json.dumps(results, indent=2)
    print(report)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(report)
        print(f"Results saved to: {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
