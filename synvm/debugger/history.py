"""Console history kept across sessions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

LOGGER = logging.getLogger("synvm.debugger.history")


class HistoryStore:
    """Lines typed at the console, newest last, capped at *limit* entries.

    New lines are appended to the file; the file is rewritten only when it
    has grown past the cap.
    """

    def __init__(self, path: Optional[Union[str, Path]], *, limit: int = 1000) -> None:
        self.limit = max(1, int(limit or 1))
        self.path = Path(path).expanduser() if path else None
        self._entries: List[str] = []
        self._on_disk = 0
        if self.path is not None:
            stored = self._read()
            self._entries = stored[-self.limit :]
            self._on_disk = len(stored)

    def _read(self) -> List[str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("cannot read history %s: %s", self.path, exc)
            return []
        return [line.strip() for line in text.splitlines() if line.strip()]

    def append(self, line: str) -> None:
        text = line.strip()
        if not text or (self._entries and self._entries[-1] == text):
            return
        self._entries.append(text)
        if len(self._entries) > self.limit:
            del self._entries[: len(self._entries) - self.limit]
        self._write(text)

    def extend(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.append(line)

    def _write(self, text: str) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self._on_disk >= self.limit:
                self.path.write_text("".join(f"{entry}\n" for entry in self._entries), encoding="utf-8")
                self._on_disk = len(self._entries)
            else:
                with self.path.open("a", encoding="utf-8") as handle:
                    handle.write(f"{text}\n")
                self._on_disk += 1
        except OSError as exc:
            LOGGER.warning("cannot write history %s: %s", self.path, exc)

    def snapshot(self) -> List[str]:
        return list(self._entries)
