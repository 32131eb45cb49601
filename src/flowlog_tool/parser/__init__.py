from .core import (
    split_fields,
    parse_flow_line,
    parse_tag_rule_line,
    parse_flows,
    parse_tag_rules,
    read_csv_lines,
    parse_flow_logs,
    parse_tag_rule_file,
)

__all__ = [
    "split_fields",
    "parse_flow_line",
    "parse_tag_rule_line",
    "parse_flows",
    "parse_tag_rules",
    "read_csv_lines",
    "parse_flow_logs",
    "parse_tag_rule_file",
]
