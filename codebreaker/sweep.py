#!/usr/bin/env python3
"""
Solver sweep: how many rounds does the heuristic need per secret?

Plays full sessions in-process against the reference arbiter (no sockets)
for a sample of secrets, or all 32768 with --all, and reports the
distribution of rounds.

Usage:
  codebreaker-sweep --secrets 200 --seed 7
  codebreaker-sweep --all --plot rounds.png
"""

from __future__ import annotations

import argparse
import collections
import random
import time

import numpy as np

from .arbiter import Arbiter, MAX_ROUNDS
from .session import Outcome, Session
from .space import COMBINATIONS, format_combination
from .transport import LoopbackTransport


def run_secret(secret: int, max_rounds: int = MAX_ROUNDS):
    """Play one game against `secret`. Returns the SessionResult."""
    transport = LoopbackTransport(Arbiter(secret, max_rounds))
    return Session(transport).run()


def run_sweep(secrets, max_rounds: int = MAX_ROUNDS, verbose: bool = False):
    """Returns {secret: (outcome, rounds)}."""
    results = {}
    for secret in secrets:
        result = run_secret(secret, max_rounds)
        results[secret] = (result.outcome, result.rounds)
        if verbose:
            status = "OK" if result.solved else result.outcome.value.upper()
            print(f"  {format_combination(secret)}: {status}  ({result.rounds} rounds)")
    return results


def summarize(results) -> dict:
    rounds = np.array([r for outcome, r in results.values() if outcome is Outcome.SOLVED])
    failures = sum(1 for outcome, _ in results.values() if outcome is not Outcome.SOLVED)
    return {
        "secrets": len(results),
        "solved": int(rounds.size),
        "failures": failures,
        "mean": float(rounds.mean()) if rounds.size else float("nan"),
        "std": float(rounds.std()) if rounds.size else float("nan"),
        "max": int(rounds.max()) if rounds.size else 0,
        "histogram": collections.Counter(int(r) for r in rounds),
    }


def plot_histogram(results, path: str):
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    rounds = [r for outcome, r in results.values() if outcome is Outcome.SOLVED]
    bins = np.arange(1, max(rounds, default=1) + 2) - 0.5

    fig, ax = plt.subplots(figsize=(8, 4.5))
    ax.hist(rounds, bins=bins, color="tab:blue", edgecolor="black", linewidth=0.5)
    ax.set_xlabel("Rounds to solve")
    ax.set_ylabel("Secrets")
    ax.set_title(f"Rounds per secret ({len(results)} secrets)")
    ax.grid(axis="y", alpha=0.3)
    plt.tight_layout()
    plt.savefig(path, dpi=200, bbox_inches="tight")
    plt.close(fig)
    print(f"  Saved {path}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Measure rounds-to-solve over many secrets")
    parser.add_argument("--secrets", type=int, default=200, help="Number of random secrets")
    parser.add_argument("--seed", type=int, default=1, help="Random seed for the sample")
    parser.add_argument("--all", action="store_true", help="Sweep every combination")
    parser.add_argument("--max-rounds", type=int, default=MAX_ROUNDS,
                        help="Arbiter round limit")
    parser.add_argument("--plot", metavar="FILE", help="Save a histogram of rounds")
    parser.add_argument("--verbose", "-v", action="store_true", help="One line per secret")
    args = parser.parse_args(argv)

    if args.all:
        secrets = range(COMBINATIONS)
    else:
        rng = random.Random(args.seed)
        secrets = rng.sample(range(COMBINATIONS), args.secrets)

    print(f"=== Solver sweep ({len(secrets)} secrets) ===\n")
    t0 = time.time()
    results = run_sweep(secrets, args.max_rounds, verbose=args.verbose)
    elapsed = time.time() - t0
    s = summarize(results)

    print(f"\n=== Summary ===")
    print(f"  Secrets tested: {s['secrets']}")
    print(f"  Solved: {s['solved']}  Failed: {s['failures']}")
    print(f"  Rounds: {s['mean']:.2f} ± {s['std']:.2f}  (max {s['max']})")
    for r in sorted(s["histogram"]):
        print(f"  {r:3d} rounds: {s['histogram'][r]}")
    print(f"  Total time: {elapsed:.2f}s")

    if args.plot:
        plot_histogram(results, args.plot)


if __name__ == "__main__":
    main()
