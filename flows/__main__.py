#!/usr/bin/env python3
# Command-line entry point for storefront flows
#
#   python -m flows list
#   python -m flows catalog
#   python -m flows run international_shipping --input '{"destinationCountry": "France"}'

import argparse
import json
import logging
import sys

from inference.config.config_loader import ConfigLoader

from .config import LOG_DATE_FORMAT, LOG_FORMAT, get_settings
from .errors import FlowError
from .flow_registry import FlowRegistry, get_flow_registry
from .sync_adapter import run_sync

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m flows",
        description="Run Peak Pulse generative flows",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List registered flow names")
    sub.add_parser("catalog", help="Print every flow's description and input schema")

    run = sub.add_parser("run", help="Run one flow")
    run.add_argument("name", help="Flow name (see `list`)")
    source = run.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="Request as a JSON object")
    source.add_argument("--input-file", help="Path to a JSON file holding the request")
    run.add_argument("--model", help="Override the model for this run")
    return parser


def _load_request(args: argparse.Namespace) -> dict:
    if args.input_file:
        with open(args.input_file, "r", encoding="utf-8") as fh:
            return json.load(fh)
    return json.loads(args.input)


def _run(registry: FlowRegistry, args: argparse.Namespace) -> int:
    flow = registry.get_flow(args.name)
    if flow is None:
        print(f"Unknown flow: {args.name}. Available: {', '.join(registry.list_flows())}", file=sys.stderr)
        return 2

    try:
        request = _load_request(args)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read request: {e}", file=sys.stderr)
        return 2

    model = args.model or get_settings().default_model
    if model:
        flow.llm.model = model
    logger.info("Running flow %s with model %s", flow.name, getattr(flow.llm, "model", "?"))

    try:
        output = run_sync(flow, request)
    except FlowError as e:
        print(json.dumps({"error": e.to_dict()}, ensure_ascii=False, indent=2), file=sys.stderr)
        return 1

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


def main(argv=None) -> int:
    """Main entry point"""
    ConfigLoader.load_env_file()
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )

    args = _build_parser().parse_args(argv)
    registry = get_flow_registry()

    if args.command == "list":
        for name in registry.list_flows():
            print(name)
        return 0
    if args.command == "catalog":
        print(json.dumps(registry.get_catalog(), ensure_ascii=False, indent=2))
        return 0
    return _run(registry, args)


if __name__ == '__main__':
    sys.exit(main())
