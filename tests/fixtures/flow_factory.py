"""Builders for flow log and tag rule test data."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from flowlog_tool.core.constants import FLOW_LOG_HEADER, TAG_RULE_HEADER


class FlowFactory:
    """Create flow log lines and CSV files."""

    @staticmethod
    def flow_line(dstport: str, protocol: str, srcport: str = "49152") -> str:
        """Return a 14-field flow log line with the given port and protocol number."""
        return (
            f"2,123456789012,eni-0a1b2c3d,10.0.0.1,10.0.0.2,{srcport},{dstport},{protocol},"
            "10,840,1700000000,1700000060,ACCEPT,OK"
        )

    @staticmethod
    def write_flow_logs(path: Path, lines: Iterable[str]) -> Path:
        path.write_text("\n".join([FLOW_LOG_HEADER, *lines]) + "\n", encoding="utf-8")
        return path

    @staticmethod
    def write_tag_rules(path: Path, lines: Iterable[str]) -> Path:
        path.write_text("\n".join([TAG_RULE_HEADER, *lines]) + "\n", encoding="utf-8")
        return path


def read_report(path: Path) -> tuple[str, set[str]]:
    """Return the header and the set of rows of a written report."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return lines[0], set(lines[1:])
