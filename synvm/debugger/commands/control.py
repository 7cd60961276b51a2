"""Execution control command."""

from __future__ import annotations

import logging
from typing import List

from .base import Command, CommandParser, parse_args
from ..context import DebuggerContext
from ..output import emit_result

LOGGER = logging.getLogger("synvm.debugger.control")


class HaltCommand(Command):
    def __init__(self) -> None:
        super().__init__("!halt", "Stop the machine immediately")
        self._parser = CommandParser("!halt")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        if parse_args(ctx, self._parser, argv, ignore_extra=True) is None:
            return 1
        vm = ctx.ensure_vm()
        vm.halt()
        ctx.preempted = True
        LOGGER.info("halt requested at pc=%d", vm.pc)
        emit_result(ctx, message=f"[DBG] halted at pc={vm.pc} after {vm.cycles} cycles")
        return 0
