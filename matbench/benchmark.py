"""Matrix multiplication benchmark with row-partitioned worker threads."""

from __future__ import annotations

import os
import random
import sys
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import suppress

from matbench.settings import (
    Settings,
    UsageError,
    parse_args,
    parse_cpuinfo,
    read_cpuinfo,
    save_results,
)

Matrix = list[list[int]]

DEFAULT_SEED = 0xDEADBEEFCAFEBABE
_U32_MASK = 0xFFFFFFFF
_THREAD_COUNTS = range(2, 6)

_MODE_NAMES = {
    1: "regulär parallel",
    2: "loop unrolling",
    3: "block tiling",
    4: "rayon",
}


def random_matrix(n: int, rng: random.Random) -> Matrix:
    """An n x n matrix of random integers in [0, 10)."""
    return [[rng.randrange(10) for _ in range(n)] for _ in range(n)]


def _dot(row: Sequence[int], column: Sequence[int]) -> int:
    return sum(x * y for x, y in zip(row, column)) & _U32_MASK


def _columns(b: Sequence[Sequence[int]], n: int) -> list[tuple[int, ...]]:
    return list(zip(*b))[:n]


def multiply_single(a: Sequence[Sequence[int]], b: Sequence[Sequence[int]]) -> Matrix:
    """Product of two square matrices in one thread, with 32-bit wrap-around."""
    columns = _columns(b, len(a))
    return [[_dot(row, column) for column in columns] for row in a]


def _row_ranges(n: int, num_threads: int) -> list[tuple[int, int, int]]:
    if num_threads < 1:
        raise ValueError("num_threads must be at least 1")
    base, rest = divmod(n, num_threads)
    ranges = []
    start = 0
    for core in range(num_threads):
        rows = base + (1 if core < rest else 0)
        ranges.append((core, start, start + rows))
        start += rows
    return ranges


def _pin(core: int) -> None:
    if hasattr(os, "sched_setaffinity"):
        with suppress(OSError):
            os.sched_setaffinity(0, {core})


def multiply_threaded(
    a: Sequence[Sequence[int]], b: Sequence[Sequence[int]], num_threads: int
) -> Matrix:
    """Product where each thread returns its block of rows, assembled afterwards."""
    n = len(a)
    ranges = _row_ranges(n, num_threads)
    columns = _columns(b, n)

    def work(core: int, start: int, end: int) -> list[tuple[int, list[int]]]:
        _pin(core)
        return [(i, [_dot(a[i], column) for column in columns]) for i in range(start, end)]

    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        futures = [pool.submit(work, *r) for r in ranges]

    result: Matrix = [[0] * n for _ in range(n)]
    for future in futures:
        for i, row in future.result():
            result[i] = row
    return result


def multiply_chunked(
    a: Sequence[Sequence[int]], b: Sequence[Sequence[int]], num_threads: int
) -> Matrix:
    """Product where each thread writes its rows straight into the shared result."""
    n = len(a)
    ranges = _row_ranges(n, num_threads)
    columns = _columns(b, n)
    result: Matrix = [[0] * n for _ in range(n)]

    def fill(core: int, start: int, end: int) -> None:
        _pin(core)
        for i in range(start, end):
            out = result[i]
            row = a[i]
            for j, column in enumerate(columns):
                out[j] = _dot(row, column)

    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        futures = [pool.submit(fill, *r) for r in ranges]
    for future in futures:
        future.result()
    return result


def results_match(single: Sequence[Sequence[int]], parallel: Sequence[Sequence[int]]) -> bool:
    """True when every entry of the reference result appears in the parallel one."""
    if len(parallel) < len(single):
        return False
    width = len(single[0]) if single else 0
    return all(
        len(p_row) >= width and list(s_row[:width]) == list(p_row[:width])
        for s_row, p_row in zip(single, parallel)
    )


def mode_name(mode: int) -> str:
    """Human-readable name of a benchmark mode."""
    return _MODE_NAMES.get(mode, "crossbeam")


def _current_cpu():
    try:
        return read_cpuinfo()
    except OSError:
        return parse_cpuinfo("", 0)


def run(settings: Settings, seed: int = DEFAULT_SEED) -> dict[int, list[float]]:
    """Run the benchmark for 2 to 5 threads and append the runtimes to the result file."""
    sizes = settings.sizes
    if settings.debug:
        print(
            f"Einstellungen:\n-n: {sizes}\n-b: {mode_name(settings.mode)}\n-c: {settings.path}\n"
        )
    if len(sizes) <= max(_THREAD_COUNTS):
        raise ValueError(
            f"at least {max(_THREAD_COUNTS) + 1} matrix sizes are needed, got {len(sizes)}"
        )

    rng = random.Random(seed)
    results: dict[int, list[float]] = {}
    for threads in _THREAD_COUNTS:
        size = sizes[threads]
        a = random_matrix(size, rng)
        b = random_matrix(size, rng)
        product: Matrix = [[0] * size for _ in range(size)]
        runtimes: list[float] = []

        for _ in sizes:
            start = time.perf_counter()
            if settings.mode == 1:
                product = multiply_threaded(a, b, threads)
            elif settings.mode == 2:
                product = multiply_chunked(a, b, threads)
            runtimes.append((time.perf_counter() - start) * 1000.0)

            if settings.debug:
                correct = results_match(multiply_single(a, b), product)
                print("Ergebnis korrekt\n" if correct else "Ergebnis falsch\n")

        cpu = _current_cpu()
        if not cpu.complete:
            print("Fehler beim Lesen der Prozessorspezifikationen\n")
        save_results(settings.path, sizes, runtimes, threads, cpu)
        results[threads] = runtimes
        print(f"Benchmark Thread {threads} beendet")
    return results


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        settings = parse_args(args)
    except UsageError as exc:
        print(exc.report)
        return 1
    try:
        run(settings)
    except ValueError as exc:
        print(f"Fehler! {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Fehler beim Öffnen der Datei {settings.path}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())