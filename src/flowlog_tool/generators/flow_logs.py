"""Synthetic VPC flow log generation.

Records are produced in fixed-size batches on a thread pool. Each batch is
built independently and appended to a :class:`SharedCsvSink` in one locked
write, so batches never interleave within the output file (their relative
order is unspecified).
"""

from __future__ import annotations

import os
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from ..core.config import settings
from ..core.constants import FLOW_LOG_HEADER, PROTOCOL_NUMBERS
from ..core.decorators import log_performance
from ..core.workers import collect_completed, resolve_workers
from ..exceptions import GenerationError, OutputWriteError
from ..logging import get_logger
from ..reporting.sink import SharedCsvSink

logger = get_logger(__name__)

LOG_STATUSES = ("OK", "NODATA", "SKIPDATA")
ACTIONS = ("ACCEPT", "REJECT")
YEAR_IN_SECONDS = 31_536_000
PRIVATE_FIRST_OCTETS = (10, 172, 192)


def random_ip(rng: random.Random) -> str:
    """Return a random address from the private 10/172.16/192 ranges."""
    first = rng.choice(PRIVATE_FIRST_OCTETS)
    second = 16 + rng.randrange(16) if first == 172 else rng.randrange(256)
    return f"{first}.{second}.{rng.randrange(256)}.{rng.randrange(256)}"


def random_port(rng: random.Random) -> int:
    """Return a port: 90% well-known, 5% registered, 5% dynamic."""
    probability = rng.randrange(100)
    if probability < 90:
        return rng.randrange(1, 1025)
    if probability < 95:
        return rng.randrange(1025, 49152)
    return rng.randrange(49152, 65536)


def random_hex(rng: random.Random, length: int) -> str:
    return "".join(rng.choice("0123456789abcdef") for _ in range(length))


def random_account_id(rng: random.Random) -> str:
    return "".join(str(rng.randrange(10)) for _ in range(12))


def generate_flow_log_record(rng: random.Random, now: int) -> str:
    """Return one flow log CSV line, newline included."""
    packets = rng.randrange(1000) + 1
    byte_count = packets * (rng.randrange(100) + 20)
    start = now - rng.randrange(YEAR_IN_SECONDS)
    end = start + rng.randrange(600)
    fields = (
        "2",
        random_account_id(rng),
        "eni-" + random_hex(rng, 8),
        random_ip(rng),
        random_ip(rng),
        random_port(rng),
        random_port(rng),
        rng.choice(PROTOCOL_NUMBERS),
        packets,
        byte_count,
        start,
        end,
        rng.choice(ACTIONS),
        rng.choice(LOG_STATUSES),
    )
    return ",".join(str(f) for f in fields) + "\n"


@dataclass
class BatchResult:
    start_idx: int
    records: int = 0
    error: Optional[OutputWriteError] = None


class FlowLogGenerator:
    """Write synthetic flow log records to a CSV file.

    Parameters
    ----------
    seed:
        Seed for the random source. Each batch gets its own generator seeded
        from this one, so a seeded run produces the same set of batches.
    now:
        UNIX time used as the end of the one-year timestamp window.
        Defaults to the current time.
    """

    def __init__(self, seed: Optional[int] = None, now: Optional[int] = None) -> None:
        self._rng = random.Random(seed)
        self._now = now

    def _generate_batch(
        self, sink: SharedCsvSink, start_idx: int, size: int, batch_seed: int, now: int
    ) -> BatchResult:
        rng = random.Random(batch_seed)
        batch = "".join(generate_flow_log_record(rng, now) for _ in range(size))
        try:
            sink.append(batch)
        except OutputWriteError as exc:
            logger.error("Error writing batch starting at record %d to CSV file", start_idx, exc_info=True)
            return BatchResult(start_idx, 0, exc)
        return BatchResult(start_idx, size)

    @log_performance
    def generate_flow_logs(
        self,
        number_of_records: int,
        csv_file: str | os.PathLike[str],
        batch_size: int | None = None,
        workers: int | None = None,
        timeout: float | None = None,
    ) -> int:
        """Generate ``number_of_records`` records into ``csv_file``.

        Returns the number of records written. Batches still running when
        ``timeout`` expires are logged and left out of the count.

        Raises
        ------
        GenerationError
            If ``number_of_records`` is negative or ``batch_size`` is not positive.
        OutputWriteError
            If the file cannot be created or any batch failed to write.
        """
        if number_of_records < 0:
            raise GenerationError("number_of_records must not be negative")
        batch_size = settings.batch_size if batch_size is None else batch_size
        if batch_size <= 0:
            raise GenerationError("batch_size must be positive")
        timeout = settings.pool_timeout_s if timeout is None else timeout
        workers = resolve_workers(workers)
        now = int(time.time()) if self._now is None else self._now

        with SharedCsvSink(csv_file, header=FLOW_LOG_HEADER) as sink:
            pool = ThreadPoolExecutor(max_workers=workers)
            try:
                futures = [
                    pool.submit(
                        self._generate_batch,
                        sink,
                        start,
                        min(batch_size, number_of_records - start),
                        self._rng.getrandbits(64),
                        now,
                    )
                    for start in range(0, number_of_records, batch_size)
                ]
                results = collect_completed(futures, timeout, "generate_flow_logs")
            finally:
                pool.shutdown(wait=False, cancel_futures=True)

        failed = [r for r in results if r.error is not None]
        if failed:
            first = failed[0].error
            raise OutputWriteError(
                f"Error generating flow logs: {csv_file} ({len(failed)} batches failed)",
                path=csv_file,
                context=str(first),
            ) from first
        written = sum(r.records for r in results)
        logger.info("Flow log data generated successfully: %d records in %s", written, csv_file)
        return written


__all__ = [
    "FlowLogGenerator",
    "BatchResult",
    "generate_flow_log_record",
    "random_ip",
    "random_port",
    "random_hex",
    "random_account_id",
]
