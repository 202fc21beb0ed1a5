"""Colored report lines and timing utilities for spine-perf.

Report lines (info, ok, warn, error, detail) go to stdout. Debug lines go to
stderr and only appear after ``set_verbose(True)``, so machine-readable
output on stdout stays clean.
"""

import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TextIO


class Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    DIM = "\033[2m"
    CYAN = "\033[36m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"


_VERBOSE = False


def set_verbose(enabled: bool) -> None:
    """Enable or silence debug output."""
    global _VERBOSE
    _VERBOSE = enabled


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _c(color: str, text: str, stream: TextIO | None = None) -> str:
    """Wrap text in ``color`` when ``stream`` (stdout by default) is a terminal."""
    if not _is_tty(stream or sys.stdout):
        return text
    return f"{color}{text}{Colors.RESET}"


def cyan(text: str) -> str:
    return _c(Colors.CYAN, text)


def score_color(score: float, poor: float, good: float = 75.0) -> str:
    """Format a 0-100 score, green at ``good`` and above, red below ``poor``."""
    if score >= good:
        color = Colors.BRIGHT_GREEN
    elif score >= poor:
        color = Colors.BRIGHT_YELLOW
    else:
        color = Colors.BRIGHT_RED
    return _c(color, f"{score:.1f}")


def _emit(label: str, color: str, msg: str) -> None:
    # Labels right-aligned in a 6-wide column: "  INFO", "    OK", " ERROR"
    print(f"{_c(color, label.rjust(6))}  {msg}")


def log_info(msg: str) -> None:
    _emit("INFO", Colors.CYAN, msg)


def log_ok(msg: str) -> None:
    _emit("OK", Colors.BRIGHT_GREEN, msg)


def log_warn(msg: str) -> None:
    _emit("WARN", Colors.BRIGHT_YELLOW, msg)


def log_error(msg: str) -> None:
    _emit("ERROR", Colors.BRIGHT_RED, msg)


def log_debug(msg: str) -> None:
    """Dimmed sampling and resolution detail on stderr; verbose mode only."""
    if not _VERBOSE:
        return
    stream = sys.stderr
    print(f" {_c(Colors.DIM, 'DEBUG', stream)}  {_c(Colors.DIM, msg, stream)}", file=stream)


def log_detail(msg: str, indent: int = 6) -> None:
    print(f"{' ' * indent}{msg}")


def format_duration(seconds: float) -> str:
    """Format seconds into human-readable duration."""
    if seconds < 0.001:
        return f"{seconds * 1000000:.0f}μs"
    elif seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    elif seconds < 60:
        return f"{seconds:.2f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


@dataclass
class TimingResult:
    """Elapsed time of one timed analysis step."""

    elapsed: float
    message: str


@contextmanager
def timed(description: str) -> Iterator[TimingResult]:
    """Time an analysis step and log it at debug level on exit.

        with timed("Sampling run") as t:
            do_work()
        print(f"Took {t.elapsed}s")
    """
    result = TimingResult(elapsed=0.0, message=description)
    start = time.perf_counter()
    try:
        yield result
    finally:
        result.elapsed = time.perf_counter() - start
        log_debug(f"{description}: {format_duration(result.elapsed)}")
