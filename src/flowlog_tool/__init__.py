# src/flowlog_tool/__init__.py
from .core.models import PortProtocolKey
from .core.protocols import resolve_protocol
from .parser import (
    parse_flows,
    parse_tag_rules,
    read_csv_lines,
    parse_flow_logs,
    parse_tag_rule_file,
)
from .metrics import (
    count_port_protocols,
    count_tags,
    port_protocol_counts_frame,
    tag_counts_frame,
)
from .reporting import write_csv, SharedCsvSink, write_port_protocol_counts, write_tag_counts
from .generators import FlowLogGenerator, TagRuleGenerator
from .pipeline import Pipeline, BaseProcessor, BaseAnalyzer, BaseReporter
from .pipeline_app import default_pipeline, process_flow_logs, generate_inputs, run_all


__all__ = [
    "PortProtocolKey",
    "resolve_protocol",
    "parse_flows",
    "parse_tag_rules",
    "read_csv_lines",
    "parse_flow_logs",
    "parse_tag_rule_file",
    "count_port_protocols",
    "count_tags",
    "port_protocol_counts_frame",
    "tag_counts_frame",
    "write_csv",
    "SharedCsvSink",
    "write_port_protocol_counts",
    "write_tag_counts",
    "FlowLogGenerator",
    "TagRuleGenerator",
    "Pipeline",
    "BaseProcessor",
    "BaseAnalyzer",
    "BaseReporter",
    "default_pipeline",
    "process_flow_logs",
    "generate_inputs",
    "run_all",
]
