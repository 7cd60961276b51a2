"""Command base classes for the debugger overlay."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import List, NoReturn, Optional

from ..context import DebuggerContext
from ..output import emit_error
from ..parser import split_command

LOGGER = logging.getLogger("synvm.debugger.commands")


class CommandUsageError(Exception):
    """Raised by :class:`CommandParser` instead of printing and exiting."""


class CommandParser(argparse.ArgumentParser):
    """argparse parser that reports usage errors by raising."""

    def __init__(self, prog: str) -> None:
        super().__init__(prog=prog, add_help=False)

    def error(self, message: str) -> NoReturn:
        raise CommandUsageError(message)


@dataclass
class Command:
    """A host-side command recognised by its exact `!name` token."""

    name: str
    description: str

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        raise NotImplementedError(f"{type(self).__name__}.run")

    def parse(self, line: str) -> List[str]:
        return split_command(line)


def parse_args(
    ctx: DebuggerContext,
    parser: CommandParser,
    argv: List[str],
    *,
    ignore_extra: bool = False,
) -> Optional[argparse.Namespace]:
    """Parse *argv*; usage errors go to the operator and yield ``None``.

    With *ignore_extra*, tokens the parser does not know are dropped.
    """
    try:
        if not ignore_extra:
            return parser.parse_args(argv)
        args, extra = parser.parse_known_args(argv)
    except CommandUsageError as exc:
        emit_error(ctx, message=f"{parser.prog}: {exc}", usage=parser.format_usage())
        return None
    if extra:
        LOGGER.debug("%s ignoring arguments %s", parser.prog, extra)
    return args
