"""Recognising and tokenising debugger command lines."""

from __future__ import annotations

import shlex
from typing import List

COMMAND_PREFIX = "!"


def command_token(line: str) -> str:
    """Return the leading ``!word`` of *line*, or '' when the line is not command-shaped."""
    tokens = line.split(None, 1)
    if not tokens or not tokens[0].startswith(COMMAND_PREFIX):
        return ""
    return tokens[0]


def split_command(line: str) -> List[str]:
    """Split *line* into argv tokens with shell quoting rules.

    Raises ``ValueError`` for unbalanced quotes.
    """
    return shlex.split(line, comments=False, posix=True)
