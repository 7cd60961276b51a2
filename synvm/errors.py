"""Fault taxonomy for the synvm machine.

Every abnormal stop of the execution engine is a :class:`VMFault` subclass so
callers can tell a fault apart from a normal ``halt``. Snapshot and dump I/O
failures are reported through :class:`SnapshotError`, which never stops the
machine.
"""

from __future__ import annotations

from typing import Optional

SYN_ERR_MALFORMED = 0x01
SYN_ERR_STACK_UNDERFLOW = 0x02
SYN_ERR_DIV_ZERO = 0x03
SYN_ERR_BAD_OPCODE = 0x04
SYN_ERR_INPUT_CLOSED = 0x05
SYN_ERR_INPUT_IO = 0x06


class SynVMError(Exception):
    """Base class for synvm errors."""


class VMFault(SynVMError):
    """Raised when execution stops abnormally."""

    code = 0

    def __init__(self, message: str, *, pc: Optional[int] = None) -> None:
        super().__init__(message)
        self.pc = pc

    def __str__(self) -> str:
        text = super().__str__()
        if self.pc is None:
            return text
        return f"{text} (pc={self.pc})"


class MalformedProgramError(VMFault):
    """Operand, address or program counter outside the valid range."""

    code = SYN_ERR_MALFORMED


class StackUnderflowError(VMFault):
    """``pop`` executed against an empty stack."""

    code = SYN_ERR_STACK_UNDERFLOW


class ArithmeticFault(VMFault):
    """Modulo by zero."""

    code = SYN_ERR_DIV_ZERO


class UnknownOpcodeError(VMFault):
    code = SYN_ERR_BAD_OPCODE


class InputClosedError(VMFault):
    """The input source ran dry while the guest was waiting for a line."""

    code = SYN_ERR_INPUT_CLOSED


class InputError(VMFault):
    """The input source failed: unreadable stream or undecodable bytes."""

    code = SYN_ERR_INPUT_IO


class SnapshotError(SynVMError):
    """Raised when a snapshot or memory dump cannot be read or written."""


__all__ = [
    "SYN_ERR_MALFORMED",
    "SYN_ERR_STACK_UNDERFLOW",
    "SYN_ERR_DIV_ZERO",
    "SYN_ERR_BAD_OPCODE",
    "SYN_ERR_INPUT_CLOSED",
    "SYN_ERR_INPUT_IO",
    "SynVMError",
    "VMFault",
    "MalformedProgramError",
    "StackUnderflowError",
    "ArithmeticFault",
    "UnknownOpcodeError",
    "InputClosedError",
    "InputError",
    "SnapshotError",
]
