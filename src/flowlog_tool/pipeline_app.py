"""End-to-end entry points: generate inputs, aggregate, write reports."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from .core.config import settings
from .generators import FlowLogGenerator, TagRuleGenerator
from .logging import get_logger
from .pipeline import (
    CsvReporter,
    FlowLogLoader,
    Pipeline,
    PortProtocolCounter,
    TagCounter,
)
from .pipeline.components import Context

logger = get_logger(__name__)


def default_pipeline(
    flow_logs: str | Path | None = None,
    tag_rules: str | Path | None = None,
    port_protocol_counts: str | Path | None = None,
    tag_counts: str | Path | None = None,
    workers: int | None = None,
) -> Pipeline:
    """Return the standard parse, count and report pipeline.

    Paths left as ``None`` fall back to the settings defaults.
    """
    pipeline = Pipeline()
    pipeline.add_processor(FlowLogLoader(flow_logs, tag_rules, workers=workers))
    pipeline.add_analyzer(PortProtocolCounter(workers=workers))
    pipeline.add_analyzer(TagCounter(workers=workers))
    pipeline.add_reporter(CsvReporter(port_protocol_counts, tag_counts))
    return pipeline


def process_flow_logs(
    flow_logs: str | Path | None = None,
    tag_rules: str | Path | None = None,
    port_protocol_counts: str | Path | None = None,
    tag_counts: str | Path | None = None,
    *,
    workers: int | None = None,
    config: str | Path | None = None,
    on_progress: Optional[Callable[[int, Optional[int]], None]] = None,
) -> Context:
    """Aggregate ``flow_logs`` against ``tag_rules`` and write both reports.

    When ``config`` is given the pipeline is loaded from that file and the
    path arguments only fill in what its stages leave unset. ``workers`` is
    ignored in that case; stages take it from their own params.
    """
    if config is not None:
        pipeline = Pipeline.from_config(config)
        if workers is not None:
            logger.warning(
                "workers=%s is ignored with a pipeline configuration; set 'workers' in the stage params of %s",
                workers,
                config,
            )
    else:
        pipeline = default_pipeline(flow_logs, tag_rules, port_protocol_counts, tag_counts, workers)
    context: Context = {
        "flow_logs_path": flow_logs,
        "tag_rules_path": tag_rules,
        "port_protocol_counts_path": port_protocol_counts,
        "tag_counts_path": tag_counts,
    }
    return pipeline.run(context, on_progress=on_progress)


def generate_inputs(
    flow_logs: str | Path | None = None,
    tag_rules: str | Path | None = None,
    flow_log_count: int | None = None,
    tag_rule_count: int | None = None,
    *,
    seed: int | None = None,
    workers: int | None = None,
) -> tuple[int, int]:
    """Write synthetic flow logs and tag rules; return both record counts."""
    flow_logs = flow_logs or settings.flow_logs_path
    tag_rules = tag_rules or settings.tag_rules_path
    flow_log_count = settings.flow_log_count if flow_log_count is None else flow_log_count
    tag_rule_count = settings.tag_rule_count if tag_rule_count is None else tag_rule_count

    flows_written = FlowLogGenerator(seed=seed).generate_flow_logs(flow_log_count, flow_logs, workers=workers)
    rules_seed = None if seed is None else seed + 1
    rules_written = TagRuleGenerator(seed=rules_seed).generate_tag_rules(tag_rule_count, tag_rules)
    return flows_written, rules_written


def run_all(
    flow_logs: str | Path | None = None,
    tag_rules: str | Path | None = None,
    port_protocol_counts: str | Path | None = None,
    tag_counts: str | Path | None = None,
    *,
    flow_log_count: int | None = None,
    tag_rule_count: int | None = None,
    seed: int | None = None,
    workers: int | None = None,
) -> Context:
    """Generate inputs, then aggregate them into the two reports."""
    flow_logs = flow_logs or settings.flow_logs_path
    tag_rules = tag_rules or settings.tag_rules_path
    generate_inputs(flow_logs, tag_rules, flow_log_count, tag_rule_count, seed=seed, workers=workers)
    return process_flow_logs(flow_logs, tag_rules, port_protocol_counts, tag_counts, workers=workers)
