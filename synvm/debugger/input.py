"""Line-buffered guest input with embedded debugger commands.

The guest reads one character per ``in`` instruction. Whenever the pending
line is exhausted a new line is pulled from the line source; lines whose first
token names a debugger command are executed and swallowed, anything else is
handed to the guest with a trailing newline.
"""

from __future__ import annotations

import logging
from typing import Optional

from .commands import Command, CommandRegistry, build_registry
from .console import LineSource
from .context import DebuggerContext
from .output import emit_error
from .parser import command_token
from ..errors import InputClosedError
from ..memory import CODE_UNIT_MASK

LOGGER = logging.getLogger("synvm.debugger.input")

REPLACEMENT_CHAR = "\ufffd"


def _fit_code_units(line: str) -> str:
    """Replace characters that do not fit a 16-bit cell with U+FFFD."""
    if all(ord(char) <= CODE_UNIT_MASK for char in line):
        return line
    LOGGER.warning("replacing characters above U+FFFF in input line")
    return "".join(char if ord(char) <= CODE_UNIT_MASK else REPLACEMENT_CHAR for char in line)


class DebugInput:
    """Sits between the ``in`` opcode and the real input source."""

    def __init__(
        self,
        source: LineSource,
        *,
        registry: Optional[CommandRegistry] = None,
        ctx: Optional[DebuggerContext] = None,
    ) -> None:
        self.source = source
        self.registry = registry if registry is not None else build_registry()
        self.ctx = ctx if ctx is not None else DebuggerContext()
        self.pending = ""

    def reset(self) -> None:
        self.pending = ""

    def read_char(self) -> Optional[int]:
        """Return the next guest character code, or ``None`` if a command preempted the read."""
        if not self.pending:
            line = self._next_guest_line()
            if line is None:
                return None
            self.pending = _fit_code_units(line) + "\n"
        char, self.pending = self.pending[0], self.pending[1:]
        return ord(char)

    def _next_guest_line(self) -> Optional[str]:
        while True:
            line = self.source.read_line()
            if line is None:
                raise InputClosedError("input source closed")
            command = self.registry.get(command_token(line))
            if command is None:
                return line
            self.ctx.preempted = False
            self._dispatch(command, line)
            if self.ctx.preempted:
                self.ctx.preempted = False
                return None

    def _dispatch(self, command: Command, line: str) -> None:
        try:
            argv = command.parse(line.strip())
        except ValueError as exc:
            emit_error(self.ctx, message=f"parse error: {exc}")
            return
        try:
            status = command.run(self.ctx, argv[1:])
        except Exception as exc:  # pragma: no cover
            LOGGER.exception("command failed")
            emit_error(self.ctx, message=f"command '{command.name}' failed: {exc}")
            return
        LOGGER.debug("%s -> %d", command.name, status)


__all__ = ["DebugInput"]
