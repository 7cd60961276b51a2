"""Debugger context shared by the overlay commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

if TYPE_CHECKING:  # pragma: no cover
    from ..vm import VM

LOGGER = logging.getLogger("synvm.debugger.context")

DEFAULT_DUMP_PATH = Path("memory.bin")
DEFAULT_SNAPSHOT_PATH = Path("snapshot.bin")


@dataclass
class DebuggerContext:
    """Holds the machine under inspection and the overlay's file locations."""

    vm: Optional["VM"] = None
    dump_path: Path = DEFAULT_DUMP_PATH
    snapshot_path: Path = DEFAULT_SNAPSHOT_PATH
    operator: Optional[TextIO] = field(default=None, repr=False)
    # Set by commands that abandon the pending ``in`` instruction.
    preempted: bool = False

    def attach(self, vm: "VM") -> None:
        self.vm = vm
        LOGGER.debug("debugger attached to %r", vm)

    def ensure_vm(self) -> "VM":
        if self.vm is None:
            raise RuntimeError("debugger is not attached to a machine")
        return self.vm

    def set_paths(self, *, dump_path: Optional[str] = None, snapshot_path: Optional[str] = None) -> None:
        if dump_path:
            self.dump_path = Path(dump_path).expanduser()
        if snapshot_path:
            self.snapshot_path = Path(snapshot_path).expanduser()
