# src/Cardiopy/application/cli/main.py
# -*- coding: utf-8 -*-
"""
Command line front end for Cardiopy.

Subcommands:
    formats   list the extensions the registry can read and write
    info      summarize a recording (leads, ignored leads, sample interval)
    convert   read a recording, optionally filter it and mark bad leads,
              then write it (or a time window of it) in another format
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from Cardiopy import __version__
from Cardiopy.core.ecg_model import ECGModel
from Cardiopy.core.filter_dispatch import DispatchPolicy, FilterKind
from Cardiopy.infrastructure.adapter_registry import READ, WRITE, build_default_registry
from Cardiopy.shared.error_handling import CardiopyError, ProcessingError
from Cardiopy.shared.logging_config import dev_mode_from_env, setup_logging

log = logging.getLogger('Cardiopy.application.cli')


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    filter_help = ", ".join(f"{kind.value}={kind.name.lower()}" for kind in FilterKind)
    parser = argparse.ArgumentParser(prog="cardiopy", description="Cardiopy multi-lead recording tool")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--dev", action="store_true", help="Enable development mode with verbose logging")
    parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    parser.add_argument("--plugin-dir", type=Path, default=None, help="Directory with adapter plugins")
    parser.add_argument("--no-plugins", action="store_true", help="Use only the built-in adapters")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("formats", help="List supported file extensions")

    info = subparsers.add_parser("info", help="Summarize a recording")
    info.add_argument("input", type=Path)

    convert = subparsers.add_parser("convert", help="Convert, filter and export a recording")
    convert.add_argument("input", type=Path)
    convert.add_argument("output", type=Path)
    convert.add_argument("--start", type=float, default=None, help="Window start time (inclusive)")
    convert.add_argument("--end", type=float, default=None, help="Window end time (exclusive)")
    convert.add_argument("--filter", nargs="+", action="append", default=[], metavar=("KIND", "PARAM"),
                         help=f"Filter kind followed by its parameters; repeatable. Kinds: {filter_help}")
    convert.add_argument("--lead", type=int, action="append", default=None,
                         help="Restrict filters to this good lead index; repeatable (default: all leads)")
    convert.add_argument("--strict", action="store_true", help="Fail on unknown filter kinds")
    convert.add_argument("--bad", type=int, action="append", default=[], help="Mark a good lead index as bad")
    convert.add_argument("--bad-leads", type=Path, default=None, help="Write the bad-lead list to this file")
    convert.add_argument("--annotate", nargs=2, action="append", default=[], metavar=("KIND", "TIME"),
                         help="Add an annotation; repeatable")
    convert.add_argument("--annotations", type=Path, default=None, help="Write the annotation list to this file")

    return parser.parse_args(argv)


def _parse_filter(tokens: List[str]):
    try:
        kind = int(tokens[0])
        params = [float(token) for token in tokens[1:]]
    except ValueError as e:
        raise ProcessingError(f"Invalid --filter arguments {tokens}: {e}") from e
    return kind, params


def _command_formats(args) -> int:
    registry = build_default_registry(args.plugin_dir, load_plugins=not args.no_plugins)
    print("read:  " + " ".join(registry.supported_extensions(READ)))
    print("write: " + " ".join(registry.supported_extensions(WRITE)))
    return 0


def _command_info(args) -> int:
    registry = build_default_registry(args.plugin_dir, load_plugins=not args.no_plugins)
    model = ECGModel(registry=registry)
    model.read_data(args.input)
    samples = model.get_dataset(0).size() if model.size() else 0
    print(f"file:             {args.input}")
    print(f"channels:         {model.lead_count}")
    print(f"good leads:       {model.size()}")
    print(f"ignored leads:    {len(model.ignored_signals)} ({model.get_offset()} leading)")
    print(f"samples per lead: {samples}")
    print(f"sample interval:  {model.get_sample_interval()}")
    return 0


def _command_convert(args) -> int:
    registry = build_default_registry(args.plugin_dir, load_plugins=not args.no_plugins)
    policy = DispatchPolicy.STRICT if args.strict else DispatchPolicy.IGNORE_UNKNOWN
    model = ECGModel(registry=registry, dispatch_policy=policy)
    model.read_data(args.input)

    leads = args.lead if args.lead is not None else range(model.size())
    for tokens in args.filter:
        kind, params = _parse_filter(tokens)
        for index in leads:
            model.apply_filter(index, kind, params)
        log.info(f"Filter {kind} {params} applied to lead(s) {list(leads)}")

    for index in args.bad:
        model.set_bad(index, True)
    for kind, time in args.annotate:
        model.add_annotation(int(kind), float(time))

    if args.start is not None or args.end is not None:
        start = args.start if args.start is not None else float("-inf")
        end = args.end if args.end is not None else float("inf")
        model.write_data_window(args.output, start, end)
    else:
        model.write_data(args.output)

    if args.bad_leads is not None:
        model.write_bad_leads(args.bad_leads)
    if args.annotations is not None:
        model.write_annotations(args.annotations)
    print(f"Wrote {args.output}")
    return 0


COMMANDS = {
    "formats": _command_formats,
    "info": _command_info,
    "convert": _command_convert,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logging(dev_mode=args.dev or dev_mode_from_env(), log_dir=args.log_dir)
    log.debug(f"Cardiopy {__version__} CLI invoked with {args}")
    try:
        return COMMANDS[args.command](args)
    except (CardiopyError, OSError) as e:
        log.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
