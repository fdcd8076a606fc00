#!/usr/bin/env python
"""Time the Monte Carlo search across thread counts and summarise best fitness per run."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

from roomsearch.optimization.heuristics import solve_monte_carlo
from roomsearch.scenario.contract import Problem
from roomsearch.scenario.io import load_scenario
from roomsearch.scenario.synthetic import build_default_scenario

DEFAULT_THREADS = [1, 2, 4, 8]
DEFAULT_ITERS = 10_000
DEFAULT_REPEATS = 3


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--threads",
        type=int,
        nargs="+",
        default=DEFAULT_THREADS,
        help="Thread counts to benchmark (default: %(default)s).",
    )
    parser.add_argument(
        "--iters",
        type=int,
        default=DEFAULT_ITERS,
        help="Iterations per thread (default: %(default)s).",
    )
    parser.add_argument(
        "--repeats",
        type=int,
        default=DEFAULT_REPEATS,
        help="Runs per thread count (default: %(default)s).",
    )
    parser.add_argument("--scenario", type=Path, help="Scenario YAML (defaults to built-in problem).")
    parser.add_argument("--seed", type=int, help="Base seed; run r of each thread count uses seed+1000*r.")
    parser.add_argument("--out", type=Path, help="Optional CSV path for the raw per-run table.")
    return parser.parse_args(argv)


def run_scaling(
    pb: Problem,
    thread_counts: list[int],
    iters: int,
    repeats: int,
    seed: int | None = None,
) -> pd.DataFrame:
    """Run ``repeats`` searches per thread count and return one row per run."""
    rows: list[dict[str, object]] = []
    for threads in thread_counts:
        for repeat in range(repeats):
            run_seed = None if seed is None else seed + 1000 * repeat
            res = solve_monte_carlo(pb, workers=threads, iters=iters, seed=run_seed)
            meta = res["meta"]
            rows.append(
                {
                    "threads": threads,
                    "repeat": repeat,
                    "best_fitness": res["objective"],
                    "evaluations": meta["evaluations"],
                    "elapsed_ms": meta["elapsed_ms"],
                }
            )
    return pd.DataFrame(rows)


def summarise(frame: pd.DataFrame) -> pd.DataFrame:
    summary = frame.groupby("threads").agg(
        best_fitness_min=("best_fitness", "min"),
        best_fitness_mean=("best_fitness", "mean"),
        elapsed_ms_mean=("elapsed_ms", "mean"),
        evaluations=("evaluations", "sum"),
    )
    summary["evals_per_ms"] = summary["evaluations"] / (
        frame.groupby("threads")["elapsed_ms"].sum().clip(lower=1)
    )
    return summary.reset_index()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    scenario = load_scenario(args.scenario) if args.scenario else build_default_scenario()
    pb = Problem.from_scenario(scenario)
    frame = run_scaling(pb, args.threads, args.iters, args.repeats, seed=args.seed)
    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(args.out, index=False)
    print(summarise(frame).to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
