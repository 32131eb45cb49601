import io
import threading
from pathlib import Path

import pytest

from flowlog_tool.exceptions import OutputWriteError
from flowlog_tool.reporting import SharedCsvSink, write_csv, write_port_protocol_counts, write_tag_counts
from flowlog_tool.core.models import PortProtocolKey
from tests.fixtures.flow_factory import read_report


class _FailingStream(io.StringIO):
    name = "failing-stream"

    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self.fail_after = fail_after
        self.writes = 0

    def write(self, s):
        if self.writes >= self.fail_after:
            raise OSError("disk full")
        self.writes += 1
        return super().write(s)


def test_write_csv_to_path(tmp_path: Path):
    path = tmp_path / "out.csv"
    written = write_csv(path, "Tag,Count", iter(["Web,2", "UNTAGGED,1"]))
    assert written == 2
    assert path.read_text(encoding="utf-8") == "Tag,Count\nWeb,2\nUNTAGGED,1\n"


def test_write_csv_header_only(tmp_path: Path):
    path = tmp_path / "out.csv"
    assert write_csv(path, "Port,Protocol,Count", []) == 0
    assert path.read_text(encoding="utf-8") == "Port,Protocol,Count\n"


def test_write_csv_to_stream_leaves_it_open():
    buf = io.StringIO()
    write_csv(buf, "Tag,Count", ["Web,1"])
    assert not buf.closed
    assert buf.getvalue() == "Tag,Count\nWeb,1\n"


def test_unwritable_path_raises_with_path(tmp_path: Path):
    with pytest.raises(OutputWriteError) as info:
        write_csv(tmp_path, "Tag,Count", ["Web,1"])
    assert info.value.path == str(tmp_path)


def test_failure_mid_stream_keeps_partial_output():
    stream = _FailingStream(fail_after=2)
    with pytest.raises(OutputWriteError) as info:
        write_csv(stream, "Tag,Count", ["Web,1", "Prod,2", "Dev,3"])
    assert info.value.path == "failing-stream"
    assert stream.getvalue() == "Tag,Count\nWeb,1\n"


def test_report_writers(tmp_path: Path):
    ports = tmp_path / "port_protocol_counts.csv"
    tags = tmp_path / "tag_counts.csv"
    write_port_protocol_counts({PortProtocolKey("80", "TCP"): 2, PortProtocolKey("443", "TCP"): 1}, ports)
    write_tag_counts({"Web": 1, "UNTAGGED": 1}, tags)
    assert read_report(ports) == ("Port,Protocol,Count", {"80,TCP,2", "443,TCP,1"})
    assert read_report(tags) == ("Tag,Count", {"Web,1", "UNTAGGED,1"})


def test_shared_sink_serialises_concurrent_appends(tmp_path: Path):
    path = tmp_path / "shared.csv"
    batch_lines = 50

    def writer(idx: int, sink: SharedCsvSink) -> None:
        sink.append("".join(f"{idx},{n}\n" for n in range(batch_lines)))

    with SharedCsvSink(path, header="writer,line") as sink:
        threads = [threading.Thread(target=writer, args=(i, sink)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
    assert sink.closed

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "writer,line"
    body = lines[1:]
    assert len(body) == 8 * batch_lines
    # each batch is contiguous
    for start in range(0, len(body), batch_lines):
        writers = {line.split(",")[0] for line in body[start : start + batch_lines]}
        assert len(writers) == 1


def test_shared_sink_append_after_close(tmp_path: Path):
    sink = SharedCsvSink(tmp_path / "closed.csv")
    sink.close()
    sink.close()
    with pytest.raises(OutputWriteError):
        sink.append("x\n")


def test_shared_sink_open_failure(tmp_path: Path):
    with pytest.raises(OutputWriteError) as info:
        SharedCsvSink(tmp_path / "missing-dir" / "out.csv")
    assert "missing-dir" in info.value.path
