from .aggregator import (
    count_port_protocols,
    count_tags,
    count_rows,
    port_protocol_rows,
    tag_rows,
    port_protocol_counts_frame,
    tag_counts_frame,
)

__all__ = [
    "count_port_protocols",
    "count_tags",
    "count_rows",
    "port_protocol_rows",
    "tag_rows",
    "port_protocol_counts_frame",
    "tag_counts_frame",
]
