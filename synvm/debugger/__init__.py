"""
Debugger overlay for the synvm machine.

Debugger commands travel on the same stream as guest input; see
:class:`synvm.debugger.input.DebugInput`.
"""

from __future__ import annotations

from .commands import CommandRegistry, build_registry
from .console import ChainedLineSource, ConsoleLineSource, LineSource, StreamLineSource
from .context import DebuggerContext
from .history import HistoryStore
from .input import DebugInput

__all__ = [
    "CommandRegistry",
    "build_registry",
    "ChainedLineSource",
    "ConsoleLineSource",
    "LineSource",
    "StreamLineSource",
    "DebuggerContext",
    "HistoryStore",
    "DebugInput",
]
