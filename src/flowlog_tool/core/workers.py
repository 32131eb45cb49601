"""Helpers for dispatching independent work units onto a pool."""

from __future__ import annotations

import os
from concurrent.futures import Future, wait
from math import ceil
from typing import Any, List, Optional, Sequence, TypeVar

from ..logging import get_logger
from .config import settings

logger = get_logger(__name__)

T = TypeVar("T")


def resolve_workers(workers: Optional[int] = None) -> int:
    """Return the pool size to use.

    ``None`` falls back to ``settings.max_workers`` and then to the number of
    CPUs. The result is never below one.
    """
    if workers is None:
        workers = settings.max_workers
    if workers is None:
        workers = os.cpu_count() or 1
    return max(1, workers)


def should_parallelize(size: int, workers: int, min_size: Optional[int] = None) -> bool:
    """Return ``True`` if ``size`` items are worth spreading over ``workers``."""
    if min_size is None:
        min_size = settings.parallel_min_lines
    return workers > 1 and size > 0 and size >= min_size


def partition(items: Sequence[T], parts: int) -> List[Sequence[T]]:
    """Split ``items`` into at most ``parts`` contiguous, non-empty slices."""
    if not items:
        return []
    step = ceil(len(items) / max(1, parts))
    return [items[i : i + step] for i in range(0, len(items), step)]


def collect_completed(
    futures: Sequence[Future],
    timeout: Optional[float],
    label: str,
) -> List[Any]:
    """Wait for ``futures`` and return the results of those that finished.

    Results keep submission order. When ``timeout`` expires the unfinished
    units are cancelled where possible and a warning is logged; the caller
    continues with partial results. Exceptions raised by a finished unit are
    re-raised here.
    """
    done, pending = wait(futures, timeout=timeout)
    if pending:
        logger.warning(
            "%s: %d of %d work units did not finish within %s seconds; continuing with completed results",
            label,
            len(pending),
            len(futures),
            timeout,
        )
        for fut in pending:
            fut.cancel()
    return [fut.result() for fut in futures if fut in done]


__all__ = ["resolve_workers", "should_parallelize", "partition", "collect_completed"]
