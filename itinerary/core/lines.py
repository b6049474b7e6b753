"""
Per-line fan-out.

Lines are independent, so a pass may map its line function over a thread
pool. Output order always matches input order, and when several lines fail
the error raised is the one from the earliest line.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

T = TypeVar("T")


def map_lines(fn: Callable[[str], T], lines: list[str], workers: int = 1) -> list[T]:
    """
    Apply ``fn`` to every line, preserving order.

    Args:
        fn: Line function; may raise
        lines: Input lines
        workers: Thread count; 1 (or less) runs inline

    Returns:
        One result per input line, in input order
    """
    if workers <= 1 or len(lines) <= 1:
        return [fn(line) for line in lines]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        # Executor.map yields in submission order and re-raises at the
        # first failed position.
        return list(pool.map(fn, lines))
