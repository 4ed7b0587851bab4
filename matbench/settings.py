"""Command-line settings, CPU description and result-file output."""

from __future__ import annotations

import getopt
import math
import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

MIN_SIZE = 6
DEFAULT_FILE = "matrix.txt"
CPUINFO_PATH = "/proc/cpuinfo"

HELP_TEXT = """
Pflicht:
-n <zahl>   Matrixgrößen im Bereich [6, zahl] erzeugen
-b <zahl>   1: regulär parallel
            2: loop unrolling
            3: block tiling
            4: rayon
            5: crossbeam
Optional:
-c <datei>  Ergebnisdatei, Default: matrix.txt
-d          Debugmodus
"""

_U32_MAX = 0xFFFFFFFF
_U32_PATTERN = re.compile(r"\+?[0-9]+")


class UsageError(Exception):
    """Raised when the command line is missing or holds invalid options."""

    def __init__(self, message: str, *, parse_failure: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.parse_failure = parse_failure

    @property
    def report(self) -> str:
        """The text shown to the user for this error."""
        if self.parse_failure:
            return "\nFehler beim Parsen der Eingabe. Benutzung siehe -h\n"
        return f"\nFehler! {self.message}. Benutzung siehe -h\n"


@dataclass(frozen=True)
class Settings:
    """Benchmark settings taken from the command line."""

    sizes: list[int]
    mode: int
    path: str = DEFAULT_FILE
    debug: bool = False


@dataclass(frozen=True)
class CpuInfo:
    """Processor name and core counts."""

    name: str
    logical: int
    physical: int
    hyperthreading: int

    @property
    def complete(self) -> bool:
        """True when every field could be determined."""
        return bool(self.name) and self.logical > 0 and self.physical > 0 and self.hyperthreading > 0


def _parse_u32(text: str) -> int | None:
    if not _U32_PATTERN.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _U32_MAX else None


def _step(last: int) -> int:
    if last <= 9:
        return 4
    if last <= 99:
        return 6
    if last <= 999:
        return 100
    if last <= 9999:
        return 500
    return 1000


def size_series(start: int, end: int) -> list[int]:
    """Matrix sizes from start to end inclusive, with a step that grows with the size."""
    if start >= end:
        raise UsageError(f"-n <zahl> muss größer {start} sein")
    sizes = [start]
    last = start
    while last < end:
        following = last + _step(last)
        if following >= end:
            sizes.append(end)
            break
        sizes.append(following)
        last = following
    return sizes


def parse_args(argv: Sequence[str]) -> Settings:
    """Parse the command-line options into Settings.

    With -h the help text is printed and SystemExit(0) is raised.
    """
    try:
        options, _free = getopt.gnu_getopt(list(argv), "n:b:c:dh")
    except getopt.GetoptError as exc:
        raise UsageError(str(exc), parse_failure=True) from exc

    values: dict[str, str] = {}
    for flag, value in options:
        key = flag.lstrip("-")
        if key in values:
            raise UsageError(f"option -{key} given more than once", parse_failure=True)
        values[key] = value

    if "h" in values:
        print(HELP_TEXT)
        raise SystemExit(0)

    raw_n = values.get("n")
    if raw_n is None:
        raise UsageError("Parameter n fehlt")
    end = _parse_u32(raw_n.strip())
    if end is None:
        raise UsageError("Format für n <ganze Zahl>")
    sizes = size_series(MIN_SIZE, end)

    raw_b = values.get("b")
    if raw_b is None:
        raise UsageError("Parameter b fehlt")
    mode = _parse_u32(raw_b)
    if mode is None:
        raise UsageError("Parameter b muss eine Zahl sein")
    if not 1 <= mode <= 5:
        raise UsageError("Parameter b muss eine Zahl zwischen 1 und 5 sein")

    path = values.get("c", DEFAULT_FILE)
    if not path.endswith(".txt"):
        path += ".txt"

    return Settings(sizes=sizes, mode=mode, path=path, debug="d" in values)


def _field(text: str, prefix: str) -> str | None:
    for line in text.splitlines():
        if line.startswith(prefix):
            _, sep, rest = line.partition(":")
            return rest.strip() if sep else None
    return None


def parse_cpuinfo(text: str, logical: int) -> CpuInfo:
    """Build a CpuInfo from the text of a cpuinfo file and a logical core count."""
    name = _field(text, "model name") or ""
    cores = _field(text, "cpu cores")
    physical = (_parse_u32(cores) if cores is not None else None) or 0
    hyperthreading = logical // physical if physical > 0 else 0
    return CpuInfo(name=name, logical=logical, physical=physical, hyperthreading=hyperthreading)


def _logical_cores() -> int:
    try:
        return len(os.sched_getaffinity(0))
    except AttributeError:
        return os.cpu_count() or 0


def read_cpuinfo(path: str | os.PathLike[str] = CPUINFO_PATH) -> CpuInfo:
    """Read the processor description from a cpuinfo file."""
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return parse_cpuinfo(text, _logical_cores())


def _format_runtime(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == int(value):
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def save_results(
    path: str | os.PathLike[str],
    sizes: Iterable[int],
    runtimes: Iterable[float],
    threads: int,
    cpu: CpuInfo,
) -> None:
    """Append runtimes to the result file, writing the CPU line first if the file is new."""
    target = Path(path)
    existed = target.exists()
    with target.open("a", encoding="utf-8", newline="") as out:
        if not existed:
            out.write(f"{cpu.name},{cpu.logical},{cpu.physical},{cpu.hyperthreading}\n")
        for size, runtime in zip(sizes, runtimes):
            out.write(f"{threads},{size},{_format_runtime(runtime)}\n")