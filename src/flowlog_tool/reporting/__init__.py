from .sink import write_csv, SharedCsvSink
from .summary import write_port_protocol_counts, write_tag_counts

__all__ = ["write_csv", "SharedCsvSink", "write_port_protocol_counts", "write_tag_counts"]
