from __future__ import annotations

from typing import Mapping

from ..core.constants import PORT_PROTOCOL_COUNT_HEADER, TAG_COUNT_HEADER
from ..core.models import PortProtocolKey
from ..logging import get_logger
from ..metrics.aggregator import port_protocol_rows, tag_rows
from .sink import Destination, describe_destination, write_csv

logger = get_logger(__name__)


def write_port_protocol_counts(counts: Mapping[PortProtocolKey, int], destination: Destination) -> int:
    """Write the ``Port,Protocol,Count`` report for ``counts``."""
    written = write_csv(destination, PORT_PROTOCOL_COUNT_HEADER, port_protocol_rows(counts))
    logger.info("Output CSV file generated successfully: %s", describe_destination(destination))
    return written


def write_tag_counts(counts: Mapping[str, int], destination: Destination) -> int:
    """Write the ``Tag,Count`` report for ``counts``."""
    written = write_csv(destination, TAG_COUNT_HEADER, tag_rows(counts))
    logger.info("Output CSV file generated successfully: %s", describe_destination(destination))
    return written
