# src/flowlog_tool/parser/core.py
"""Turn raw flow log and tag rule lines into :class:`PortProtocolKey` data.

Malformed lines are filtered, never raised: a flow log line needs at least
eight fields and a registered protocol number, a tag rule line needs three
fields. Only I/O problems abort a run.
"""

from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.config import settings
from ..core.constants import (
    FLOW_LOG_DSTPORT_INDEX,
    FLOW_LOG_MIN_FIELDS,
    FLOW_LOG_PROTOCOL_INDEX,
    TAG_RULE_MIN_FIELDS,
)
from ..core.decorators import handle_parse_errors, log_performance
from ..core.models import PortProtocolKey, TagRuleMap
from ..core.protocols import resolve_protocol
from ..core.workers import collect_completed, partition, resolve_workers, should_parallelize
from ..exceptions import InputReadError
from ..logging import get_logger

logger = get_logger(__name__)


def split_fields(line: str) -> List[str]:
    """Split ``line`` on commas, dropping trailing empty fields.

    ``"80,TCP,"`` therefore yields two fields, not three.
    """
    values = line.split(",")
    while values and values[-1] == "":
        values.pop()
    return values


def parse_flow_line(line: str) -> Optional[PortProtocolKey]:
    """Return the destination port/protocol key of a flow log line.

    ``None`` is returned for lines with too few fields or an unregistered
    protocol number.
    """
    values = split_fields(line)
    if len(values) < FLOW_LOG_MIN_FIELDS:
        return None
    protocol = resolve_protocol(values[FLOW_LOG_PROTOCOL_INDEX])
    if protocol is None:
        return None
    return PortProtocolKey(values[FLOW_LOG_DSTPORT_INDEX], protocol)


def parse_tag_rule_line(line: str) -> Optional[tuple[PortProtocolKey, str]]:
    values = split_fields(line)
    if len(values) < TAG_RULE_MIN_FIELDS:
        return None
    return PortProtocolKey(values[0], values[1]), values[2]


def _parse_flow_chunk(lines: Sequence[str]) -> List[PortProtocolKey]:
    keys = []
    for line in lines:
        key = parse_flow_line(line)
        if key is not None:
            keys.append(key)
    return keys


def _parse_tag_rule_chunk(lines: Sequence[str]) -> Dict[PortProtocolKey, str]:
    rules: Dict[PortProtocolKey, str] = {}
    for line in lines:
        entry = parse_tag_rule_line(line)
        if entry is not None:
            rules[entry[0]] = entry[1]
    return rules


def _map_chunks(func, lines: Sequence[str], workers: int, label: str) -> list:
    """Run ``func`` over contiguous slices of ``lines`` on a process pool."""
    chunks = partition(lines, workers)
    logger.debug("%s: dispatching %d chunks to %d workers", label, len(chunks), workers)
    pool = ProcessPoolExecutor(max_workers=workers)
    try:
        futures = [pool.submit(func, chunk) for chunk in chunks]
        return collect_completed(futures, settings.pool_timeout_s, label)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)


@handle_parse_errors
def parse_flows(
    lines: Iterable[str],
    workers: int | None = None,
    min_parallel_lines: int | None = None,
) -> List[PortProtocolKey]:
    """Parse de-headered flow log ``lines`` into port/protocol keys.

    Parameters
    ----------
    lines:
        Flow log lines without the CSV header.
    workers:
        Size of the process pool. ``None`` uses ``settings.max_workers`` or
        the CPU count; ``1`` parses in-process.
    min_parallel_lines:
        Inputs shorter than this are parsed in-process. Defaults to
        ``settings.parallel_min_lines``.
    """
    lines = list(lines)
    workers = resolve_workers(workers)
    if should_parallelize(len(lines), workers, min_parallel_lines):
        keys: List[PortProtocolKey] = []
        for part in _map_chunks(_parse_flow_chunk, lines, workers, "parse_flows"):
            keys.extend(part)
    else:
        keys = _parse_flow_chunk(lines)
    dropped = len(lines) - len(keys)
    if dropped:
        logger.debug("Dropped %d malformed or unregistered flow log lines", dropped)
    return keys


@handle_parse_errors
def parse_tag_rules(
    lines: Iterable[str],
    workers: int | None = None,
    min_parallel_lines: int | None = None,
) -> TagRuleMap:
    """Parse de-headered tag rule ``lines`` into a key to tag mapping.

    When a key appears on several lines exactly one of its tags is kept.
    Chunks are merged in input order, so the last line wins.
    """
    lines = list(lines)
    workers = resolve_workers(workers)
    if should_parallelize(len(lines), workers, min_parallel_lines):
        rules: Dict[PortProtocolKey, str] = {}
        for part in _map_chunks(_parse_tag_rule_chunk, lines, workers, "parse_tag_rules"):
            rules.update(part)
    else:
        rules = _parse_tag_rule_chunk(lines)
    return rules


def read_csv_lines(csv_file: str | os.PathLike[str]) -> List[str]:
    """Return all lines of ``csv_file`` except the header.

    Lines end only at ``\\n``, ``\\r`` or ``\\r\\n``; other Unicode line
    separators stay inside their field. Undecodable bytes are replaced with
    U+FFFD so the affected line is parsed or dropped like any other.

    Raises
    ------
    InputReadError
        If the file cannot be opened or read.
    """
    path = Path(csv_file)
    try:
        with path.open("r", encoding="utf-8", errors="replace", newline=None) as fh:
            lines = fh.read().split("\n")
    except OSError as exc:
        logger.error("Error reading CSV file: %s", path, exc_info=True)
        raise InputReadError(
            f"Error reading CSV file: {path}",
            path=path,
            suggestion="Check that the file exists and is readable",
        ) from exc
    if lines and lines[-1] == "":
        lines.pop()
    return lines[1:]


@log_performance
def parse_flow_logs(csv_file: str | os.PathLike[str], workers: int | None = None) -> List[PortProtocolKey]:
    """Read ``csv_file`` and return the keys of its valid flow log lines."""
    lines = read_csv_lines(csv_file)
    keys = parse_flows(lines, workers=workers)
    logger.info("Parsed %d of %d flow log lines from %s", len(keys), len(lines), csv_file)
    return keys


@log_performance
def parse_tag_rule_file(csv_file: str | os.PathLike[str], workers: int | None = None) -> TagRuleMap:
    """Read ``csv_file`` and return its tag rules."""
    lines = read_csv_lines(csv_file)
    rules = parse_tag_rules(lines, workers=workers)
    logger.info("Loaded %d tag rules from %s", len(rules), csv_file)
    return rules
