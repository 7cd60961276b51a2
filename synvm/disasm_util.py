"""Operand and instruction rendering for trace output."""

from __future__ import annotations

from typing import Optional, Sequence

from .memory import MEMORY_CELLS, REGISTER_BASE
from .opcodes import OPCODE_NAMES, OPCODES, OPERAND_COUNTS, OP_OUT, instruction_size

__all__ = ["format_operand", "format_instruction", "instruction_size"]

# Opcodes whose first operand names a location rather than a value.
_DESTINATION_OPS = frozenset(
    OPCODES[name]
    for name in ("set", "pop", "eq", "gt", "add", "mult", "mod", "and", "or", "not", "rmem", "in")
)


def format_operand(code_unit: int, registers: Optional[Sequence[int]] = None) -> str:
    """Render a literal as decimal, a register as ``rN`` (``rN=value`` when values are known)."""
    if code_unit < REGISTER_BASE:
        return str(code_unit)
    if code_unit < MEMORY_CELLS:
        idx = code_unit - REGISTER_BASE
        if registers is not None and idx < len(registers):
            return f"r{idx}={registers[idx]}"
        return f"r{idx}"
    return f"?{code_unit}"


def format_instruction(
    words: Sequence[int],
    pc: int,
    registers: Optional[Sequence[int]] = None,
) -> str:
    if not 0 <= pc < len(words):
        return "<out of range>"
    opcode = words[pc]
    mnemonic = OPCODE_NAMES.get(opcode)
    if mnemonic is None:
        return f".word {opcode}"
    count = OPERAND_COUNTS[opcode]
    operands = [words[pc + 1 + i] if pc + 1 + i < len(words) else 0 for i in range(count)]
    if not operands:
        return mnemonic
    rendered = []
    for idx, code_unit in enumerate(operands):
        show_value = idx > 0 or opcode not in _DESTINATION_OPS
        rendered.append(format_operand(code_unit, registers if show_value else None))
    text = f"{mnemonic} {', '.join(rendered)}"
    if opcode == OP_OUT and 32 <= operands[0] < 127:
        text += f"  ; {chr(operands[0])!r}"
    return text
