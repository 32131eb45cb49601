"""Stock pipeline stages for flow log processing.

Context keys:

``flows``
    list of :class:`~flowlog_tool.core.models.PortProtocolKey`
``tag_rules``
    key to tag mapping
``port_protocol_counts`` / ``tag_counts``
    :class:`collections.Counter` frequency tables
``outputs``
    mapping of report name to the path written
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from ..core.config import settings
from ..metrics.aggregator import count_port_protocols, count_tags
from ..parser.core import parse_flow_logs, parse_tag_rule_file
from ..reporting.summary import write_port_protocol_counts, write_tag_counts
from .components import BaseAnalyzer, BaseProcessor, BaseReporter, Context


class FlowLogLoader(BaseProcessor):
    """Parse the flow log and tag rule files into the context."""

    def __init__(
        self,
        flow_logs: str | Path | None = None,
        tag_rules: str | Path | None = None,
        workers: int | None = None,
    ) -> None:
        self.flow_logs = flow_logs
        self.tag_rules = tag_rules
        self.workers = workers

    def process(
        self, data: Context, *, on_progress: Optional[Callable[[int, Optional[int]], None]] = None
    ) -> Context:
        flow_logs = self.flow_logs or data.get("flow_logs_path") or settings.flow_logs_path
        tag_rules = self.tag_rules or data.get("tag_rules_path") or settings.tag_rules_path
        data["flows"] = parse_flow_logs(flow_logs, workers=self.workers)
        data["tag_rules"] = parse_tag_rule_file(tag_rules, workers=self.workers)
        return data


class PortProtocolCounter(BaseAnalyzer):
    def __init__(self, workers: int | None = None) -> None:
        self.workers = workers

    def analyze(self, data: Context) -> Context:
        data["port_protocol_counts"] = count_port_protocols(data.get("flows", []), workers=self.workers)
        return data


class TagCounter(BaseAnalyzer):
    """Join flows against tag rules, counting misses as ``UNTAGGED``."""

    def __init__(self, workers: int | None = None) -> None:
        self.workers = workers

    def analyze(self, data: Context) -> Context:
        data["tag_counts"] = count_tags(
            data.get("flows", []), data.get("tag_rules", {}), workers=self.workers
        )
        return data


class CsvReporter(BaseReporter):
    """Write whichever frequency tables are present in the context."""

    def __init__(
        self,
        port_protocol_counts: str | Path | None = None,
        tag_counts: str | Path | None = None,
    ) -> None:
        self.port_protocol_counts = port_protocol_counts
        self.tag_counts = tag_counts

    def report(self, data: Context) -> Context:
        outputs = data.setdefault("outputs", {})
        if "port_protocol_counts" in data:
            path = (
                self.port_protocol_counts
                or data.get("port_protocol_counts_path")
                or settings.port_protocol_counts_path
            )
            write_port_protocol_counts(data["port_protocol_counts"], path)
            outputs["port_protocol_counts"] = str(path)
        if "tag_counts" in data:
            path = self.tag_counts or data.get("tag_counts_path") or settings.tag_counts_path
            write_tag_counts(data["tag_counts"], path)
            outputs["tag_counts"] = str(path)
        return data


__all__ = ["FlowLogLoader", "PortProtocolCounter", "TagCounter", "CsvReporter"]
