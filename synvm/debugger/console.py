"""Line sources feeding the debugger input overlay."""

from __future__ import annotations

import logging
import sys
from typing import Iterable, List, Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.input import Input
from prompt_toolkit.output import Output

from .history import HistoryStore
from ..errors import InputError

LOGGER = logging.getLogger("synvm.debugger.console")


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


class LineSource:
    """Produces one input line at a time; ``None`` marks end of input."""

    def read_line(self) -> Optional[str]:
        raise NotImplementedError("LineSource must implement read_line()")


class StreamLineSource(LineSource):
    """Reads lines from a text stream (stdin, a script file, a StringIO)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdin

    def read_line(self) -> Optional[str]:
        try:
            line = self.stream.readline()
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(f"cannot read input: {exc}") from exc
        if not line:
            return None
        return _strip_terminator(line)


class ChainedLineSource(LineSource):
    """Drains each source in turn, moving on when one reports end of input."""

    def __init__(self, sources: Iterable[LineSource]) -> None:
        self._sources: List[LineSource] = list(sources)

    def read_line(self) -> Optional[str]:
        while self._sources:
            line = self._sources[0].read_line()
            if line is not None:
                return line
            self._sources.pop(0)
        return None


class ConsoleLineSource(LineSource):
    """Interactive prompt_toolkit input with history recall."""

    def __init__(
        self,
        *,
        history_store: Optional[HistoryStore] = None,
        output: Optional[TextIO] = None,
        prompt: str = "",
        pt_input: Optional[Input] = None,
        pt_output: Optional[Output] = None,
    ) -> None:
        self.history_store = history_store
        self.output = output
        self.prompt = prompt
        self._pt_input = pt_input
        self._pt_output = pt_output
        self._session: Optional[PromptSession] = None

    def _ensure_session(self) -> PromptSession:
        if self._session is None:
            history = InMemoryHistory()
            if self.history_store:
                for entry in self.history_store.snapshot():
                    history.append_string(entry)
            self._session = PromptSession(
                self.prompt,
                history=history,
                input=self._pt_input,
                output=self._pt_output,
            )
        return self._session

    def read_line(self) -> Optional[str]:
        if self.output is not None:
            self.output.flush()
        session = self._ensure_session()
        try:
            line = session.prompt()
        except (EOFError, KeyboardInterrupt):
            LOGGER.debug("console input closed")
            return None
        if self.history_store:
            self.history_store.append(line)
        return line


__all__ = ["LineSource", "StreamLineSource", "ChainedLineSource", "ConsoleLineSource"]
