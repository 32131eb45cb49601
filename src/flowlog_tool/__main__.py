import argparse
import sys

from .core.config import settings
from .exceptions import FlowLogToolError
from .logging import get_logger
from .metrics import port_protocol_counts_frame, tag_counts_frame
from .pipeline_app import generate_inputs, process_flow_logs, run_all

logger = get_logger("flowlog_tool")


def _add_input_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--flow-logs", default=settings.flow_logs_path, help="flow log CSV path")
    cmd.add_argument("--tag-rules", default=settings.tag_rules_path, help="tag rule CSV path")
    cmd.add_argument("--workers", type=int, default=None, help="worker pool size")


def _add_generate_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--flows", type=int, default=settings.flow_log_count, help="flow log records to generate")
    cmd.add_argument("--rules", type=int, default=settings.tag_rule_count, help="tag rules to generate")
    cmd.add_argument("--seed", type=int, default=None, help="random seed")


def _add_output_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument(
        "--port-protocol-output",
        default=settings.port_protocol_counts_path,
        help="port/protocol count CSV path",
    )
    cmd.add_argument("--tag-output", default=settings.tag_counts_path, help="tag count CSV path")


def _print_preview(context: dict) -> None:
    if "port_protocol_counts" in context:
        print(f"{len(context['port_protocol_counts'])} distinct port/protocol pairs")
        print(port_protocol_counts_frame(context["port_protocol_counts"]).head())
    if "tag_counts" in context:
        print(f"{len(context['tag_counts'])} distinct tags")
        print(tag_counts_frame(context["tag_counts"]).head())


def main(argv=None):
    parser = argparse.ArgumentParser(description="Flow log tag and port/protocol counter")
    sub = parser.add_subparsers(dest="cmd", required=True)

    gen_cmd = sub.add_parser("generate", help="generate synthetic flow logs and tag rules")
    _add_input_args(gen_cmd)
    _add_generate_args(gen_cmd)

    proc_cmd = sub.add_parser("process", help="count port/protocol pairs and tags")
    _add_input_args(proc_cmd)
    _add_output_args(proc_cmd)
    proc_cmd.add_argument(
        "--config",
        default=None,
        help=(
            "pipeline YAML or JSON file; --workers is ignored and the path "
            "options only fill in what its stages leave unset"
        ),
    )

    run_cmd = sub.add_parser("run", help="generate inputs, then process them")
    _add_input_args(run_cmd)
    _add_generate_args(run_cmd)
    _add_output_args(run_cmd)

    args = parser.parse_args(argv)

    try:
        if args.cmd == "generate":
            flows, rules = generate_inputs(
                args.flow_logs, args.tag_rules, args.flows, args.rules, seed=args.seed, workers=args.workers
            )
            print(f"Generated {flows} flow log records and {rules} tag rules")
        elif args.cmd == "process":
            context = process_flow_logs(
                args.flow_logs,
                args.tag_rules,
                args.port_protocol_output,
                args.tag_output,
                workers=args.workers,
                config=args.config,
            )
            _print_preview(context)
        elif args.cmd == "run":
            context = run_all(
                args.flow_logs,
                args.tag_rules,
                args.port_protocol_output,
                args.tag_output,
                flow_log_count=args.flows,
                tag_rule_count=args.rules,
                seed=args.seed,
                workers=args.workers,
            )
            _print_preview(context)
    except (FlowLogToolError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
