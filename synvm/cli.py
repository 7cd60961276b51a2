"""synvm command-line entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .debugger import (
    ChainedLineSource,
    ConsoleLineSource,
    DebugInput,
    DebuggerContext,
    HistoryStore,
    LineSource,
    StreamLineSource,
)
from .debugger.context import DEFAULT_DUMP_PATH, DEFAULT_SNAPSHOT_PATH
from .errors import InputClosedError, SnapshotError, VMFault
from .loader import load_program
from .snapshot import load_snapshot
from .vm import VM

LOG = logging.getLogger("synvm.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="synvm", description="synvm virtual machine with input-stream debugger")
    parser.add_argument("program", type=Path, help="program image (16-bit little-endian words)")
    parser.add_argument(
        "--dump-path",
        type=Path,
        default=Path(os.environ.get("SYNVM_DUMP_PATH", str(DEFAULT_DUMP_PATH))),
        help="file written by !dump (default memory.bin)",
    )
    parser.add_argument(
        "--snapshot-path",
        type=Path,
        default=Path(os.environ.get("SYNVM_SNAPSHOT_PATH", str(DEFAULT_SNAPSHOT_PATH))),
        help="file used by !save and !load (default snapshot.bin)",
    )
    parser.add_argument("--load-snapshot", type=Path, help="restore this snapshot before running")
    parser.add_argument("--script", type=Path, help="feed lines from this file before reading the console")
    parser.add_argument("--max-steps", type=int, default=None, help="safety cap on executed steps")
    parser.add_argument("--trace", action="store_true", help="log executed instructions")
    parser.add_argument("--trace-file", help="write trace output to a file")
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".synvm-history",
        help="path to console history file",
    )
    parser.add_argument("--no-console", action="store_true", help="read plain stdin even on a terminal")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("SYNVM_LOG", "WARNING"),
        help="logging level (default WARNING)",
    )
    return parser


def _build_source(args: argparse.Namespace, output: TextIO, script: Optional[TextIO]) -> LineSource:
    stdin = sys.stdin
    if not args.no_console and stdin is not None and stdin.isatty():
        primary: LineSource = ConsoleLineSource(history_store=HistoryStore(str(args.history)), output=output)
    else:
        primary = StreamLineSource(stdin)
    if script is None:
        return primary
    return ChainedLineSource([StreamLineSource(script), primary])


def _summarise(vm: VM, max_steps: Optional[int]) -> None:
    if vm.running and max_steps is not None:
        print(f"[VM] Max steps {max_steps} reached; stopping", file=sys.stderr)
    print(f"[VM] {vm.status.capitalize()} after {vm.cycles} cycles @ PC={vm.pc}", file=sys.stderr)


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    try:
        words = load_program(args.program)
    except (OSError, ValueError) as exc:
        print(f"error: cannot load {args.program}: {exc}", file=sys.stderr)
        return 2

    output = sys.stdout
    trace_fp: Optional[TextIO] = None
    script_fp: Optional[TextIO] = None
    try:
        try:
            if args.trace_file:
                trace_fp = open(args.trace_file, "w", encoding="utf-8")
            if args.script:
                script_fp = args.script.open("r", encoding="utf-8")
        except OSError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        ctx = DebuggerContext(dump_path=args.dump_path, snapshot_path=args.snapshot_path)
        debug_input = DebugInput(_build_source(args, output, script_fp), ctx=ctx)
        vm = VM(words, output=output, debug_input=debug_input, trace=args.trace, trace_file=trace_fp)
        if args.load_snapshot:
            try:
                vm.restore(load_snapshot(args.load_snapshot))
            except SnapshotError as exc:
                print(f"error: {exc}", file=sys.stderr)
                return 2
        try:
            vm.run(args.max_steps)
        except InputClosedError:
            LOG.info("input closed at pc=%d", vm.pc)
            print("\n[VM] input closed", file=sys.stderr)
            _summarise(vm, None)
            return 0
        except VMFault as exc:
            print(f"\n[VM] fault: {type(exc).__name__}: {exc}", file=sys.stderr)
            _summarise(vm, None)
            return 1
        except KeyboardInterrupt:
            print(file=sys.stderr)
            return 130
        finally:
            output.flush()
        _summarise(vm, args.max_steps)
        return 0
    finally:
        if trace_fp:
            trace_fp.close()
        if script_fp:
            script_fp.close()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
