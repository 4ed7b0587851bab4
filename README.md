# matbench

A small benchmark for square integer matrix multiplication. It has two
parallel strategies that split the rows of the product between worker
threads. It times them and appends the runtimes to a text file. The first
line of a new file describes the processor.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
matbench -n <size> -b <mode> [-c <file>] [-d] [-h]
```

`python -m matbench.benchmark` with the same options runs the same program.

| Option       | Meaning |
|--------------|---------|
| `-n <size>`  | Required. The largest entry of the size series, which starts at 6. It must be greater than 6. |
| `-b <mode>`  | Required. A number from 1 to 5. `1` runs `multiply_threaded`, `2` runs `multiply_chunked`. `3`, `4` and `5` are accepted but run no multiplication. |
| `-c <file>`  | Result file. `.txt` is appended if the name does not already end with it. Default: `matrix.txt`. |
| `-d`         | Debug mode. Prints the settings and the name of the mode. After each timed run it compares the product with the single-threaded result and prints `Ergebnis korrekt` or `Ergebnis falsch`. |
| `-h`         | Prints the help text and exits with status 0. |

Invalid or missing options print a message such as
`Fehler! Parameter b fehlt. Benutzung siehe -h`. The command then exits with
status 1.

Example:

```
matbench -n 30 -b 2 -c ergebnis -d
```

### Size series

The series starts at 6. The step grows with the last value:

- up to 9: step 4
- 10–99: step 6
- 100–999: step 100
- 1000–9999: step 500
- from 10000: step 1000

The last entry is always the requested size. For example, `-n 30` gives
`[6, 10, 16, 22, 28, 30]`.

### What a run does

The run is repeated for 2, 3, 4 and 5 threads. For `t` threads:

1. Two random matrices of size `sizes[t]` are built, with entries 0–9. The
   random generator is seeded with a fixed value, so every run uses the same
   matrices.
2. The multiplication is timed once for every entry of the size series. The
   timing is in milliseconds.
3. The runtimes are appended to the result file and
   `Benchmark Thread <t> beendet` is printed.

The series therefore needs at least six entries. A shorter series is
reported as an error.

Products wrap around at 32 bits. Each worker thread tries to pin itself to
CPU core `t` where the platform supports it. If that fails, the thread
carries on unpinned.

### Result file

When the file is first created, its first line is

```
<model name>,<logical cores>,<physical cores>,<logical per physical>
```

The model name and physical core count come from `/proc/cpuinfo`. The
logical count is the number of CPUs the process may run on. If this
information cannot be read, empty or zero values are written and
`Fehler beim Lesen der Prozessorspezifikationen` is printed.

Each run then appends one line per timing:

```
<threads>,<size series entry>,<milliseconds>
```

The second column is the size series entry at the same position, paired
with the timings in order. It is not the size of the matrices that were
multiplied.

## Library use

```python
import random
from matbench.benchmark import random_matrix, multiply_single, multiply_chunked, results_match

rng = random.Random(0)
a = random_matrix(50, rng)
b = random_matrix(50, rng)
assert results_match(multiply_single(a, b), multiply_chunked(a, b, 4))
```

`matbench.benchmark`:

- `random_matrix(n, rng)`: builds an `n x n` matrix of integers in [0, 10).
- `multiply_single(a, b)`: computes the product in the calling thread.
- `multiply_threaded(a, b, num_threads)`: each thread returns its block of
  rows, and the product is assembled from those blocks.
- `multiply_chunked(a, b, num_threads)`: each thread writes its rows into a
  shared result.
- `results_match(single, parallel)`: compares two products.
- `mode_name(mode)`: gives the display name of a mode.
- `run(settings, seed)`: performs the benchmark, writes the file and returns
  a dict that maps each thread count to its list of runtimes.
- `main(argv)`: the command-line entry point. It returns the exit status.

`matbench.settings`:

- `parse_args(argv)`: turns an argument list into a frozen `Settings`
  (`sizes`, `mode`, `path`, `debug`). It raises `UsageError` on invalid
  input.
- `size_series(start, end)`: builds the size series.
- `parse_cpuinfo(text, logical)` and `read_cpuinfo(path)`: build a `CpuInfo`
  (`name`, `logical`, `physical`, `hyperthreading`, and the `complete`
  property).
- `save_results(path, sizes, runtimes, threads, cpu)`: appends to a result
  file.

## Limitations

Only modes 1 and 2 have a multiplication kernel. Modes 3 to 5 are accepted
and have display names ("block tiling", "rayon", "crossbeam"), but nothing is
multiplied for them. Their runtimes measure an empty step, and in debug mode
their check reports a wrong result. The package also has no plotting or
analysis of the result file; it only writes it.