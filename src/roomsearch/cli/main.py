from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from roomsearch.cli._utils import parse_thread_count
from roomsearch.core.errors import RoomSearchValueError, WorkerFailureError
from roomsearch.optimization.heuristics import (
    DEFAULT_WORKERS,
    penalty_breakdown,
    solve_monte_carlo,
)
from roomsearch.scenario.contract import Problem
from roomsearch.scenario.io import load_scenario
from roomsearch.scenario.synthetic import build_default_scenario

app = typer.Typer(add_completion=False)
console = Console()


def _enable_rich_tracebacks():
    """Enable rich tracebacks with local variables and customized formatting."""
    import rich.traceback as _rt

    _rt.install(show_locals=True, width=140, extra_lines=2)


def _print_report(pb: Problem, result: dict[str, Any], thread_count: int) -> None:
    objective = result["objective"]
    assignment: list[int] = result["assignment"]
    console.print("\nBest Room Assignment per Student:")
    for student, room in enumerate(assignment):
        console.print(f"Student {student}: Room {room}")
    if math.isinf(objective):
        console.print("Best fitness found: n/a (no candidates evaluated)")
    else:
        console.print(f"Best fitness found: {objective}")
        breakdown = penalty_breakdown(pb, assignment)
        console.print(
            f"[dim]Penalty breakdown: overflow={breakdown.overflow}, "
            f"incompatibility={breakdown.incompatibility} "
            f"({len(breakdown.violated_pairs)} pair(s))[/dim]"
        )
    console.print(f"Total Time taken (ms): {result['meta']['elapsed_ms']}")
    console.print(f"Thread Count used: {thread_count}")


# a leading "-" must reach the thread-count parser instead of being read as an option
@app.command(context_settings={"ignore_unknown_options": True})
def solve(
    threads: str = typer.Argument(
        str(DEFAULT_WORKERS),
        help=f"Number of worker threads (default {DEFAULT_WORKERS}). Non-numeric values are rejected.",
        show_default=False,
    ),
    scenario: Path | None = typer.Option(
        None,
        "--scenario",
        help="Scenario YAML to search instead of the built-in 10-room/100-student problem.",
        dir_okay=False,
    ),
    iters: int | None = typer.Option(
        None,
        "--iters",
        min=0,
        help="Random candidates drawn per thread (defaults to the scenario setting).",
    ),
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Base RNG seed for reproducible runs (thread k uses seed+k). Defaults to OS entropy.",
    ),
    time_limit: float | None = typer.Option(
        None,
        "--time-limit",
        help="Stop all threads after this many seconds even if iterations remain.",
    ),
    out: Path | None = typer.Option(
        None,
        "--out",
        help="Write the best assignment to CSV (student_id, room_id).",
        dir_okay=False,
    ),
    telemetry_log: Path | None = typer.Option(
        None,
        "--telemetry-log",
        help="Append run telemetry to a JSONL file (e.g. telemetry/runs.jsonl); improvement logs land in telemetry/steps/.",
        writable=True,
        dir_okay=False,
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable rich tracebacks."),
):
    """Search for a low-penalty student-to-room assignment with parallel random sampling."""
    if debug:
        _enable_rich_tracebacks()

    try:
        thread_count = parse_thread_count(threads)
        sc = load_scenario(scenario) if scenario else build_default_scenario()
        pb = Problem.from_scenario(sc)
        result = solve_monte_carlo(
            pb,
            workers=thread_count,
            iters=iters,
            seed=seed,
            time_limit=time_limit,
            telemetry_log=telemetry_log,
            telemetry_context={
                "source": "cli.solve",
                "scenario_path": str(scenario) if scenario else None,
            },
        )
    except (RoomSearchValueError, ValidationError, FileNotFoundError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    except WorkerFailureError as exc:
        console.print(f"[red]Search aborted:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    _print_report(pb, result, thread_count)

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        result["assignments"].to_csv(out, index=False)
        console.print(f"Assignment written to {out}")
    if telemetry_log:
        console.print(f"[dim]Telemetry run {result['meta']['telemetry_run_id']} written to {telemetry_log}.[/dim]")


if __name__ == "__main__":
    app()
