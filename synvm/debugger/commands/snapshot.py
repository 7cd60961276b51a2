"""Snapshot save/restore commands."""

from __future__ import annotations

import logging
from typing import List

from .base import Command, CommandParser, parse_args
from ..context import DebuggerContext
from ..output import emit_error, emit_result
from ...errors import SnapshotError
from ...snapshot import load_snapshot, save_snapshot

LOGGER = logging.getLogger("synvm.debugger.snapshot")


class SaveCommand(Command):
    def __init__(self) -> None:
        super().__init__("!save", "Write a snapshot of pc, stack and memory")
        self._parser = CommandParser("!save")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        if parse_args(ctx, self._parser, argv, ignore_extra=True) is None:
            return 1
        vm = ctx.ensure_vm()
        try:
            target = save_snapshot(ctx.snapshot_path, vm.snapshot())
        except SnapshotError as exc:
            LOGGER.warning("snapshot save failed: %s", exc)
            emit_error(ctx, message=f"save failed: {exc}")
            return 2
        emit_result(ctx, message=f"[DBG] snapshot saved to {target}")
        return 0


class LoadCommand(Command):
    def __init__(self) -> None:
        super().__init__("!load", "Restore the machine from the snapshot file")
        self._parser = CommandParser("!load")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        if parse_args(ctx, self._parser, argv, ignore_extra=True) is None:
            return 1
        vm = ctx.ensure_vm()
        try:
            snapshot = load_snapshot(ctx.snapshot_path)
        except SnapshotError as exc:
            LOGGER.warning("snapshot load failed: %s", exc)
            emit_error(ctx, message=f"load failed: {exc}")
            return 2
        vm.restore(snapshot)
        ctx.preempted = True
        emit_result(ctx, message=f"[DBG] snapshot restored from {ctx.snapshot_path} (pc={vm.pc})")
        return 0
