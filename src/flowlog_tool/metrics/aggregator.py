# src/flowlog_tool/metrics/aggregator.py
"""Frequency tables over port/protocol keys and their tags.

Both reductions are order independent. Large inputs are split into
contiguous partitions, each partition is counted on a process pool and the
partial :class:`~collections.Counter` objects are merged by summing, which
gives the same table as a single-threaded fold.
"""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, Iterator, Mapping, Sequence

import pandas as pd

from ..core.config import settings
from ..core.constants import UNTAGGED
from ..core.decorators import handle_analysis_errors
from ..core.models import PortProtocolKey
from ..core.workers import collect_completed, partition, resolve_workers, should_parallelize
from ..logging import get_logger

logger = get_logger(__name__)


def _count_chunk(keys: Sequence[PortProtocolKey]) -> Counter[PortProtocolKey]:
    return Counter(keys)


def _count_tag_chunk(
    keys: Sequence[PortProtocolKey], tag_rules: Mapping[PortProtocolKey, str]
) -> Counter[str]:
    return Counter(tag_rules.get(key, UNTAGGED) for key in keys)


def _merge_partitions(func, keys: Sequence[PortProtocolKey], workers: int, label: str, *extra) -> Counter:
    merged: Counter = Counter()
    pool = ProcessPoolExecutor(max_workers=workers)
    try:
        futures = [pool.submit(func, chunk, *extra) for chunk in partition(keys, workers)]
        for partial in collect_completed(futures, settings.pool_timeout_s, label):
            merged.update(partial)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)
    return merged


@handle_analysis_errors
def count_port_protocols(
    keys: Iterable[PortProtocolKey],
    workers: int | None = None,
    min_parallel_size: int | None = None,
) -> Counter[PortProtocolKey]:
    """Return the number of occurrences of every distinct key in ``keys``.

    Keys absent from the input never appear in the result, and the counts
    sum to the number of input keys.
    """
    keys = list(keys)
    workers = resolve_workers(workers)
    if should_parallelize(len(keys), workers, min_parallel_size):
        counts = _merge_partitions(_count_chunk, keys, workers, "count_port_protocols")
    else:
        counts = _count_chunk(keys)
    logger.debug("Counted %d distinct port/protocol pairs over %d flows", len(counts), len(keys))
    return counts


@handle_analysis_errors
def count_tags(
    keys: Iterable[PortProtocolKey],
    tag_rules: Mapping[PortProtocolKey, str],
    workers: int | None = None,
    min_parallel_size: int | None = None,
) -> Counter[str]:
    """Return tag occurrence counts for ``keys`` joined against ``tag_rules``.

    Every key contributes to exactly one bucket: its rule's tag, or
    ``UNTAGGED`` when no rule matches.
    """
    keys = list(keys)
    workers = resolve_workers(workers)
    if should_parallelize(len(keys), workers, min_parallel_size):
        rules = dict(tag_rules)
        counts = _merge_partitions(_count_tag_chunk, keys, workers, "count_tags", rules)
    else:
        counts = _count_tag_chunk(keys, tag_rules)
    logger.debug(
        "Counted %d tags over %d flows (%d untagged)", len(counts), len(keys), counts.get(UNTAGGED, 0)
    )
    return counts


def count_rows(counts: Mapping[object, int]) -> Iterator[str]:
    """Yield ``"key,count"`` rows in the iteration order of ``counts``."""
    for key, count in counts.items():
        yield f"{key},{count}"


def port_protocol_rows(counts: Mapping[PortProtocolKey, int]) -> Iterator[str]:
    return count_rows(counts)


def tag_rows(counts: Mapping[str, int]) -> Iterator[str]:
    return count_rows(counts)


def port_protocol_counts_frame(counts: Mapping[PortProtocolKey, int]) -> pd.DataFrame:
    """Return ``counts`` as a DataFrame ordered by descending count."""
    rows = [
        {"Port": key.port, "Protocol": key.protocol, "Count": count}
        for key, count in counts.items()
    ]
    df = pd.DataFrame(rows, columns=["Port", "Protocol", "Count"])
    return df.sort_values("Count", ascending=False, kind="stable").reset_index(drop=True)


def tag_counts_frame(counts: Mapping[str, int]) -> pd.DataFrame:
    """Return tag ``counts`` as a DataFrame ordered by descending count."""
    df = pd.DataFrame(list(counts.items()), columns=["Tag", "Count"])
    return df.sort_values("Count", ascending=False, kind="stable").reset_index(drop=True)


__all__ = [
    "count_port_protocols",
    "count_tags",
    "count_rows",
    "port_protocol_rows",
    "tag_rows",
    "port_protocol_counts_frame",
    "tag_counts_frame",
]
