import random

import pytest

from matbench.benchmark import (
    main,
    mode_name,
    multiply_chunked,
    multiply_single,
    multiply_threaded,
    random_matrix,
    results_match,
    run,
)
from matbench.settings import Settings


def _identity(n):
    return [[1 if i == j else 0 for j in range(n)] for i in range(n)]


def test_random_matrix_shape_and_range():
    matrix = random_matrix(7, random.Random(1))
    assert len(matrix) == 7
    assert all(len(row) == 7 for row in matrix)
    assert all(0 <= value < 10 for row in matrix for value in row)


def test_random_matrix_is_deterministic():
    first = random_matrix(5, random.Random(42))
    second = random_matrix(5, random.Random(42))
    assert len(first) == 5
    assert all(len(row) == 5 for row in first)
    assert first == second


def test_random_matrix_advances_generator():
    rng = random.Random(42)
    first = random_matrix(6, rng)
    second = random_matrix(6, rng)
    assert first != second
    assert random_matrix(6, random.Random(42)) == first


def test_multiply_single_worked_example():
    assert multiply_single([[1, 2], [3, 4]], [[5, 6], [7, 8]]) == [[19, 22], [43, 50]]


def test_multiply_single_identity():
    a = random_matrix(6, random.Random(3))
    assert multiply_single(a, _identity(6)) == a
    assert multiply_single(_identity(6), a) == a


def test_multiply_single_wraps_to_32_bits():
    assert multiply_single([[2**31]], [[2]]) == [[0]]


@pytest.mark.parametrize("threads", [1, 2, 3, 5, 12])
def test_threaded_matches_single(threads):
    rng = random.Random(7)
    a = random_matrix(9, rng)
    b = random_matrix(9, rng)
    assert multiply_threaded(a, b, threads) == multiply_single(a, b)


@pytest.mark.parametrize("threads", [1, 2, 4, 5, 12])
def test_chunked_matches_single(threads):
    rng = random.Random(11)
    a = random_matrix(10, rng)
    b = random_matrix(10, rng)
    assert multiply_chunked(a, b, threads) == multiply_single(a, b)


@pytest.mark.parametrize("multiply", [multiply_threaded, multiply_chunked])
def test_zero_threads_rejected(multiply):
    with pytest.raises(ValueError):
        multiply([[1]], [[1]], 0)


def test_results_match():
    a = [[1, 2], [3, 4]]
    assert results_match(a, [[1, 2], [3, 4]]) is True
    assert results_match(a, [[1, 2], [3, 5]]) is False
    assert results_match(a, [[1, 2]]) is False


def test_mode_names():
    assert mode_name(1) == "regulär parallel"
    assert mode_name(2) == "loop unrolling"
    assert mode_name(3) == "block tiling"
    assert mode_name(4) == "rayon"
    assert mode_name(5) == "crossbeam"


@pytest.mark.parametrize("mode", [1, 2])
def test_run_writes_results(tmp_path, capsys, mode):
    sizes = [6, 7, 8, 9, 10, 11]
    target = tmp_path / "out.txt"
    settings = Settings(sizes=sizes, mode=mode, path=str(target), debug=True)
    results = run(settings, seed=5)

    assert sorted(results) == [2, 3, 4, 5]
    assert all(len(runtimes) == len(sizes) for runtimes in results.values())

    lines = target.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1 + 4 * len(sizes)
    data = [line.split(",") for line in lines[1:]]
    assert [int(fields[0]) for fields in data[: len(sizes)]] == [2] * len(sizes)
    assert [int(fields[1]) for fields in data[: len(sizes)]] == sizes
    assert all(float(fields[2]) >= 0 for fields in data)

    out = capsys.readouterr().out
    assert "Ergebnis korrekt" in out
    assert "Ergebnis falsch" not in out
    assert "Benchmark Thread 5 beendet" in out


def test_run_unimplemented_mode_reports_mismatch(tmp_path, capsys):
    settings = Settings(sizes=[6, 7, 8, 9, 10, 11], mode=3, path=str(tmp_path / "o.txt"), debug=True)
    run(settings)
    out = capsys.readouterr().out
    assert "Ergebnis falsch" in out
    assert "block tiling" in out


def test_run_needs_enough_sizes(tmp_path):
    settings = Settings(sizes=[6, 10], mode=1, path=str(tmp_path / "o.txt"))
    with pytest.raises(ValueError):
        run(settings)


def test_main_reports_missing_argument(capsys):
    assert main(["-b", "1"]) == 1
    assert "Parameter n fehlt" in capsys.readouterr().out


def test_main_runs_benchmark(tmp_path):
    stem = tmp_path / "bench"
    assert main(["-n", "30", "-b", "2", "-c", str(stem)]) == 0
    lines = (tmp_path / "bench.txt").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1 + 4 * 6


def test_main_too_few_sizes(tmp_path):
    assert main(["-n", "10", "-b", "1", "-c", str(tmp_path / "x")]) == 1