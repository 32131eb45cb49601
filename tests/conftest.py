import sys
from pathlib import Path

# Ensure the src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


import pytest

from tests.fixtures.flow_factory import FlowFactory


@pytest.fixture
def flow_lines() -> list[str]:
    """Six valid lines and two malformed ones."""
    return [
        FlowFactory.flow_line("80", "6"),
        FlowFactory.flow_line("80", "6"),
        FlowFactory.flow_line("443", "6"),
        FlowFactory.flow_line("53", "17"),
        FlowFactory.flow_line("22", "6"),
        FlowFactory.flow_line("0", "1"),
        FlowFactory.flow_line("8080", "99"),
        "2,123456789012,eni-0a1b2c3d,10.0.0.1,10.0.0.2,1234,80",
    ]


@pytest.fixture
def tag_rule_lines() -> list[str]:
    return [
        "80,TCP,Web",
        "443,TCP,Web",
        "53,UDP,Service",
        "25,TCP",
    ]


@pytest.fixture
def flow_logs_csv(tmp_path: Path, flow_lines: list[str]) -> Path:
    return FlowFactory.write_flow_logs(tmp_path / "flow_logs.csv", flow_lines)


@pytest.fixture
def tag_rules_csv(tmp_path: Path, tag_rule_lines: list[str]) -> Path:
    return FlowFactory.write_tag_rules(tmp_path / "tag_rules.csv", tag_rule_lines)
