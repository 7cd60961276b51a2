"""Operator-facing output helpers.

Debugger feedback goes to the operator stream (stderr by default) so it never
mixes with the guest's own character output.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .context import DebuggerContext


def _stream(ctx: DebuggerContext) -> TextIO:
    return ctx.operator if ctx.operator is not None else sys.stderr


def emit_result(ctx: DebuggerContext, *, message: str) -> None:
    """Emit a successful command result."""
    stream = _stream(ctx)
    stream.write(f"{message}\n")
    stream.flush()


def emit_error(ctx: DebuggerContext, *, message: str, usage: Optional[str] = None) -> None:
    stream = _stream(ctx)
    stream.write(f"error: {message}\n")
    if usage:
        stream.write(f"{usage.rstrip()}\n")
    stream.flush()


__all__ = ["emit_result", "emit_error"]
