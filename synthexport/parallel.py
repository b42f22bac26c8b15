"""
Fork-join helpers shared by row, table, and file generation.

Work is fanned out over a thread pool and fanned back in by position, so the
combined output never depends on which task finished first. A failing task fails
the whole map: pending tasks are cancelled, tasks already running are allowed to
finish (their results are discarded), and the failure is re-raised to the caller.

Only the outermost map owns a pool. A map called from inside a pool task (tables
within a file, row chunks within a table) runs its items inline on that worker,
so the number of live threads never exceeds one pool's `max_workers`.
"""

from __future__ import annotations

import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from synthexport.config import get_settings

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CHUNK_ROWS = 10_000

_worker_state = threading.local()


def ordered_concat(parts: Sequence[str]) -> str:
    """Concatenate partial texts in index order."""
    return "".join(parts)


def in_fork_join_worker() -> bool:
    """True when the current thread is executing a ForkJoin task."""
    return getattr(_worker_state, "active", False)


def _run_as_worker(func: Callable[[T], R], item: T) -> R:
    _worker_state.active = True
    try:
        return func(item)
    finally:
        _worker_state.active = False


def _first_failure(futures: Sequence[Future]) -> Optional[BaseException]:
    for future in futures:
        if future.done() and not future.cancelled() and future.exception() is not None:
            return future.exception()
    return None


@dataclass(frozen=True)
class ForkJoin:
    """
    Fork-join runner.

    Attributes
    ----------
    max_workers : int | None
        Size of the outermost thread pool; None lets the executor pick.
    chunk_rows : int
        Maximum rows produced by a single row-generation task.
    """

    max_workers: Optional[int] = None
    chunk_rows: int = DEFAULT_CHUNK_ROWS

    def __post_init__(self) -> None:
        if self.chunk_rows < 1:
            raise ValueError("chunk_rows must be positive")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be positive")

    @classmethod
    def from_settings(cls) -> "ForkJoin":
        settings = get_settings()
        return cls(max_workers=settings.workers, chunk_rows=settings.chunk_rows)

    def chunks(self, count: int) -> List[range]:
        """Split range(count) into contiguous ranges of at most chunk_rows."""
        return [
            range(start, min(start + self.chunk_rows, count))
            for start in range(0, count, self.chunk_rows)
        ]

    def map(self, func: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """
        Apply `func` to every item in parallel and return results in item order.

        Raises the failure of the lowest-indexed failed task among those that had
        completed when the first failure was observed.
        """
        work = list(items)
        if not work:
            return []
        if len(work) == 1 or in_fork_join_worker():
            return [func(item) for item in work]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(_run_as_worker, func, item) for item in work]
            _, pending = wait(futures, return_when=FIRST_EXCEPTION)
            failure = _first_failure(futures)
            if failure is not None:
                for future in pending:
                    future.cancel()
                raise failure
        return [future.result() for future in futures]


__all__ = ["DEFAULT_CHUNK_ROWS", "ForkJoin", "in_fork_join_worker", "ordered_concat"]
