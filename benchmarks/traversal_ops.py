from __future__ import annotations

import dataclasses
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional

import typer
from numpy.random import Generator, default_rng

from safelist import SafeList
from safelist import config as sl_config

app = typer.Typer(
    add_completion=False,
    pretty_exceptions_enable=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Time SafeList traversals under mutation and nesting.",
)


@dataclass(frozen=True)
class BenchmarkResult:
    mode: Literal["churn", "nested"]
    elapsed_seconds: float
    initial_size: int
    final_size: int
    elements_visited: int
    mutations: int
    registry_slots: int
    elements_per_sec: float


def _finish(
    mode: Literal["churn", "nested"],
    items: SafeList[int],
    *,
    start: float,
    initial_size: int,
    visited: int,
    mutations: int,
) -> BenchmarkResult:
    elapsed = time.perf_counter() - start
    return BenchmarkResult(
        mode=mode,
        elapsed_seconds=elapsed,
        initial_size=initial_size,
        final_size=len(items),
        elements_visited=visited,
        mutations=mutations,
        registry_slots=len(items.cursor_registry),
        elements_per_sec=visited / elapsed if elapsed > 0 else float("inf"),
    )


def benchmark_churn(*, size: int, mutation_rate: float, seed: int) -> BenchmarkResult:
    """Traverse once while inserting and removing at random positions."""

    rng: Generator = default_rng(seed)
    items = SafeList(range(size))
    visited = 0
    mutations = 0
    next_value = size
    start = time.perf_counter()
    for _ in items:
        visited += 1
        if rng.random() >= mutation_rate:
            continue
        mutations += 1
        if len(items) > 1 and rng.random() < 0.5:
            items.remove_at(int(rng.integers(0, len(items))))
        else:
            items.insert(int(rng.integers(0, len(items) + 1)), next_value)
            next_value += 1
    return _finish(
        "churn", items, start=start, initial_size=size, visited=visited, mutations=mutations
    )


def benchmark_nested(*, size: int, every: int, seed: int) -> BenchmarkResult:
    """Start a full inner traversal from every `every`-th outer step."""

    if every < 1:
        raise ValueError(f"every must be positive, got {every}")
    rng: Generator = default_rng(seed)
    items = SafeList(rng.integers(0, 1_000, size=size).tolist())
    visited = 0
    start = time.perf_counter()
    for offset, _ in enumerate(items):
        visited += 1
        if offset % every == 0:
            for _ in items:
                visited += 1
    return _finish("nested", items, start=start, initial_size=size, visited=visited, mutations=0)


def _emit(result: BenchmarkResult, output: Optional[Path]) -> None:
    payload: dict[str, Any] = dataclasses.asdict(result)
    payload["runtime"] = dataclasses.asdict(sl_config.runtime_config())
    text = json.dumps(payload, indent=2, sort_keys=True)
    if output is None:
        typer.echo(text)
        return
    output.write_text(text, encoding="utf-8")
    typer.echo(f"Wrote {result.mode} benchmark to {output}")


@app.command()
def churn(
    size: int = typer.Option(10_000, "--size", min=0, help="Initial number of elements."),
    mutation_rate: float = typer.Option(
        0.1, "--mutation-rate", min=0.0, max=1.0, help="Chance of a mutation per step."
    ),
    seed: int = typer.Option(0, "--seed", help="Random seed."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="JSON output path."),
) -> None:
    """Single traversal with random inserts and removals along the way."""

    _emit(benchmark_churn(size=size, mutation_rate=mutation_rate, seed=seed), output)


@app.command()
def nested(
    size: int = typer.Option(1_000, "--size", min=0, help="Number of elements."),
    every: int = typer.Option(100, "--every", min=1, help="Outer steps between inner passes."),
    seed: int = typer.Option(0, "--seed", help="Random seed."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="JSON output path."),
) -> None:
    """Outer traversal that periodically runs a full inner traversal."""

    _emit(benchmark_nested(size=size, every=every, seed=seed), output)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
