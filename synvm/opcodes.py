"""Shared opcode definitions for the synvm machine.

Keeping the canonical mapping in a single module prevents drift between the
execution engine and the trace disassembler.
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

# (mnemonic, opcode, operand count) in opcode order.
OPCODE_LIST: Tuple[Tuple[str, int, int], ...] = (
    ("halt", 0, 0),
    ("set", 1, 2),
    ("push", 2, 1),
    ("pop", 3, 1),
    ("eq", 4, 3),
    ("gt", 5, 3),
    ("jmp", 6, 1),
    ("jt", 7, 2),
    ("jf", 8, 2),
    ("add", 9, 3),
    ("mult", 10, 3),
    ("mod", 11, 3),
    ("and", 12, 3),
    ("or", 13, 3),
    ("not", 14, 2),
    ("rmem", 15, 2),
    ("wmem", 16, 2),
    ("call", 17, 1),
    ("ret", 18, 0),
    ("out", 19, 1),
    ("in", 20, 1),
    ("noop", 21, 0),
)

OPCODES: Dict[str, int] = {mnemonic: opcode for mnemonic, opcode, _ in OPCODE_LIST}
OPCODE_NAMES: Dict[int, str] = {opcode: mnemonic for mnemonic, opcode, _ in OPCODE_LIST}
OPERAND_COUNTS: Dict[int, int] = {opcode: count for _, opcode, count in OPCODE_LIST}

OP_HALT = OPCODES["halt"]
OP_SET = OPCODES["set"]
OP_PUSH = OPCODES["push"]
OP_POP = OPCODES["pop"]
OP_EQ = OPCODES["eq"]
OP_GT = OPCODES["gt"]
OP_JMP = OPCODES["jmp"]
OP_JT = OPCODES["jt"]
OP_JF = OPCODES["jf"]
OP_ADD = OPCODES["add"]
OP_MULT = OPCODES["mult"]
OP_MOD = OPCODES["mod"]
OP_AND = OPCODES["and"]
OP_OR = OPCODES["or"]
OP_NOT = OPCODES["not"]
OP_RMEM = OPCODES["rmem"]
OP_WMEM = OPCODES["wmem"]
OP_CALL = OPCODES["call"]
OP_RET = OPCODES["ret"]
OP_OUT = OPCODES["out"]
OP_IN = OPCODES["in"]
OP_NOOP = OPCODES["noop"]

__all__ = [
    "OPCODE_LIST",
    "OPCODES",
    "OPCODE_NAMES",
    "OPERAND_COUNTS",
    "instruction_size",
    "opcode_values",
]


def opcode_values() -> Iterable[int]:
    """Return all VM opcode numeric values."""

    return OPCODE_NAMES.keys()


def instruction_size(opcode: int) -> int:
    """Return the number of code units occupied by *opcode* and its operands."""

    return 1 + OPERAND_COUNTS[opcode]
