"""Memory dump and poke commands."""

from __future__ import annotations

import argparse
import logging
from typing import List

from .base import Command, CommandParser, parse_args
from ..context import DebuggerContext
from ..output import emit_error, emit_result
from ...errors import SnapshotError
from ...memory import CODE_UNIT_MASK, MEMORY_CELLS
from ...snapshot import dump_memory

LOGGER = logging.getLogger("synvm.debugger.memory")


def _u16(text: str) -> int:
    if not text.isdigit():
        raise argparse.ArgumentTypeError(f"expected an unsigned decimal integer, got {text!r}")
    value = int(text)
    if value > CODE_UNIT_MASK:
        raise argparse.ArgumentTypeError(f"{value} does not fit in 16 bits")
    return value


class DumpCommand(Command):
    def __init__(self) -> None:
        super().__init__("!dump", "Write raw memory to the dump file")
        self._parser = CommandParser("!dump")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        if parse_args(ctx, self._parser, argv, ignore_extra=True) is None:
            return 1
        vm = ctx.ensure_vm()
        try:
            target = dump_memory(ctx.dump_path, vm.memory.to_list())
        except SnapshotError as exc:
            LOGGER.warning("memory dump failed: %s", exc)
            emit_error(ctx, message=f"dump failed: {exc}")
            return 2
        emit_result(ctx, message=f"[DBG] memory dumped to {target}")
        return 0


class SetCommand(Command):
    def __init__(self) -> None:
        super().__init__("!set", "Overwrite one memory cell: !set <address> <value>")
        parser = CommandParser("!set")
        parser.add_argument("address", type=_u16)
        parser.add_argument("value", type=_u16)
        self._parser = parser

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        args = parse_args(ctx, self._parser, argv)
        if args is None:
            return 1
        if args.address >= MEMORY_CELLS:
            emit_error(ctx, message=f"address {args.address} outside memory (0..{MEMORY_CELLS - 1})")
            return 1
        vm = ctx.ensure_vm()
        previous = vm.memory[args.address]
        vm.memory[args.address] = args.value
        LOGGER.info("mem[%d]: %d -> %d", args.address, previous, args.value)
        emit_result(ctx, message=f"[DBG] mem[{args.address}] = {args.value} (was {previous})")
        return 0
