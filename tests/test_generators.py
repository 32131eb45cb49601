import random
import threading
from pathlib import Path

import pytest

from flowlog_tool.core.constants import FLOW_LOG_HEADER, PROTOCOL_MAP, PROTOCOL_NAMES, TAG_RULE_HEADER
from flowlog_tool.exceptions import GenerationError, OutputWriteError
from flowlog_tool.generators import FlowLogGenerator, TagRuleGenerator
from flowlog_tool.generators import flow_logs as flow_logs_mod
from flowlog_tool.generators.flow_logs import generate_flow_log_record, random_ip, random_port
from flowlog_tool.generators.tag_rules import MAX_UNIQUE_RULES, random_rule_port, random_tag
from flowlog_tool.parser import parse_flows, parse_tag_rules, read_csv_lines

NOW = 1_700_000_000


def test_flow_log_record_layout():
    rng = random.Random(7)
    fields = generate_flow_log_record(rng, NOW).rstrip("\n").split(",")
    assert len(fields) == 14
    assert fields[0] == "2"
    assert len(fields[1]) == 12 and fields[1].isdigit()
    assert fields[2].startswith("eni-") and len(fields[2]) == 12
    assert 1 <= int(fields[6]) <= 65535
    assert fields[7] in PROTOCOL_MAP
    packets, byte_count = int(fields[8]), int(fields[9])
    assert 1 <= packets <= 1000
    assert 20 * packets <= byte_count <= 119 * packets
    start, end = int(fields[10]), int(fields[11])
    assert NOW - 31_536_000 < start <= NOW
    assert 0 <= end - start < 600
    assert fields[12] in {"ACCEPT", "REJECT"}
    assert fields[13] in {"OK", "NODATA", "SKIPDATA"}


def test_random_ip_is_private():
    rng = random.Random(1)
    for _ in range(200):
        octets = [int(o) for o in random_ip(rng).split(".")]
        assert octets[0] in {10, 172, 192}
        if octets[0] == 172:
            assert 16 <= octets[1] <= 31
        assert all(0 <= o <= 255 for o in octets)


def test_random_ports_in_range():
    rng = random.Random(2)
    for _ in range(500):
        assert 1 <= random_port(rng) <= 65535
        assert 1 <= random_rule_port(rng) <= 65535


def test_random_tag_values():
    rng = random.Random(3)
    allowed = {"Prod", "Dev", "Test", "Staging", "App1", "App2", "App3", "App4", "Web", "Database", "Cache", "Messaging"}
    for _ in range(200):
        tag = random_tag(rng)
        assert tag in allowed or (tag.startswith("SG-") and 0 <= int(tag[3:]) < 1000)


def test_generate_flow_logs(tmp_path: Path):
    path = tmp_path / "flow_logs.csv"
    written = FlowLogGenerator(seed=11, now=NOW).generate_flow_logs(2500, path, batch_size=1000, workers=3)
    assert written == 2500
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == FLOW_LOG_HEADER
    assert len(lines) == 2501
    assert all(len(line.split(",")) == 14 for line in lines[1:])
    # every generated record survives parsing
    assert len(parse_flows(read_csv_lines(path), workers=1)) == 2500


def test_generate_zero_flow_logs(tmp_path: Path):
    path = tmp_path / "flow_logs.csv"
    assert FlowLogGenerator(seed=1).generate_flow_logs(0, path, workers=1) == 0
    assert path.read_text(encoding="utf-8") == FLOW_LOG_HEADER + "\n"


def test_seeded_generation_is_reproducible(tmp_path: Path):
    a, b = tmp_path / "a.csv", tmp_path / "b.csv"
    FlowLogGenerator(seed=5, now=NOW).generate_flow_logs(300, a, batch_size=100, workers=2)
    FlowLogGenerator(seed=5, now=NOW).generate_flow_logs(300, b, batch_size=100, workers=2)
    assert sorted(read_csv_lines(a)) == sorted(read_csv_lines(b))


def test_invalid_flow_log_requests(tmp_path: Path):
    gen = FlowLogGenerator(seed=1)
    with pytest.raises(ValueError):
        gen.generate_flow_logs(-1, tmp_path / "x.csv")
    with pytest.raises(ValueError):
        gen.generate_flow_logs(10, tmp_path / "x.csv", batch_size=-5)


def test_zero_batch_size_is_rejected(tmp_path: Path):
    path = tmp_path / "flow_logs.csv"
    with pytest.raises(GenerationError):
        FlowLogGenerator(seed=1).generate_flow_logs(10, path, batch_size=0, workers=1)
    assert not path.exists()


def test_failed_batch_does_not_abort_siblings(tmp_path: Path, monkeypatch):
    original_append = flow_logs_mod.SharedCsvSink.append
    lock = threading.Lock()
    calls = {"n": 0}

    def flaky_append(self, text):
        with lock:
            calls["n"] += 1
            first = calls["n"] == 1
        if first:
            raise OutputWriteError("simulated failure", path=self.path)
        original_append(self, text)

    monkeypatch.setattr(flow_logs_mod.SharedCsvSink, "append", flaky_append)
    path = tmp_path / "flow_logs.csv"
    with pytest.raises(OutputWriteError) as info:
        FlowLogGenerator(seed=3, now=NOW).generate_flow_logs(400, path, batch_size=100, workers=2)
    assert str(path) in str(info.value)
    assert len(read_csv_lines(path)) == 300


def test_generate_flow_logs_unwritable(tmp_path: Path):
    with pytest.raises(OutputWriteError):
        FlowLogGenerator(seed=1).generate_flow_logs(10, tmp_path / "no" / "such" / "dir.csv", workers=1)


def test_generate_tag_rules_unique(tmp_path: Path):
    path = tmp_path / "tag_rules.csv"
    assert TagRuleGenerator(seed=4).generate_tag_rules(2000, path) == 2000
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == TAG_RULE_HEADER
    pairs = [tuple(line.split(",")[:2]) for line in lines[1:]]
    assert len(pairs) == len(set(pairs)) == 2000
    assert all(proto in PROTOCOL_NAMES for _, proto in pairs)
    assert len(parse_tag_rules(lines[1:], workers=1)) == 2000


def test_tag_rule_generator_rejects_impossible_requests():
    gen = TagRuleGenerator(seed=1)
    with pytest.raises(GenerationError):
        list(gen.iter_rules(MAX_UNIQUE_RULES + 1))
    with pytest.raises(GenerationError):
        list(gen.iter_rules(-1))
