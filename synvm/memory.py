"""Word-addressed memory with the eight registers mapped above the address space."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from .errors import MalformedProgramError

ADDRESS_SPACE = 0x8000  # 32768 general-purpose cells
REGISTER_BASE = ADDRESS_SPACE
REGISTER_COUNT = 8
MEMORY_CELLS = REGISTER_BASE + REGISTER_COUNT
WORD_MODULUS = 0x8000
WORD_MASK = 0x7FFF
CODE_UNIT_MASK = 0xFFFF


def is_register(code_unit: int) -> bool:
    return REGISTER_BASE <= code_unit < MEMORY_CELLS


class Memory:
    """Fixed-size array of code units; addresses 32768..32775 are r0..r7."""

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[Iterable[int]] = None) -> None:
        self._cells: List[int] = [0] * MEMORY_CELLS
        if cells is not None:
            self.replace(cells)

    def __len__(self) -> int:
        return MEMORY_CELLS

    def __iter__(self) -> Iterator[int]:
        return iter(self._cells)

    def __getitem__(self, addr: int) -> int:
        if addr < 0 or addr >= MEMORY_CELLS:
            raise MalformedProgramError(f"memory address {addr} out of range")
        return self._cells[addr]

    def __setitem__(self, addr: int, value: int) -> None:
        if addr < 0 or addr >= MEMORY_CELLS:
            raise MalformedProgramError(f"memory address {addr} out of range")
        self._cells[addr] = int(value) & CODE_UNIT_MASK

    def resolve(self, code_unit: int) -> int:
        """Return the value a code unit denotes: the literal itself or a register's contents."""
        if code_unit < REGISTER_BASE:
            return code_unit
        if code_unit < MEMORY_CELLS:
            return self._cells[code_unit]
        raise MalformedProgramError(f"invalid operand {code_unit}")

    def register(self, index: int) -> int:
        if index < 0 or index >= REGISTER_COUNT:
            raise IndexError("register index out of range")
        return self._cells[REGISTER_BASE + index]

    def set_register(self, index: int, value: int) -> None:
        if index < 0 or index >= REGISTER_COUNT:
            raise IndexError("register index out of range")
        self._cells[REGISTER_BASE + index] = int(value) & CODE_UNIT_MASK

    @property
    def registers(self) -> List[int]:
        return self._cells[REGISTER_BASE:MEMORY_CELLS]

    def load(self, words: Iterable[int], base: int = 0) -> int:
        """Copy a program image into memory starting at *base*; returns the word count."""
        data = [int(word) & CODE_UNIT_MASK for word in words]
        if base < 0 or base + len(data) > ADDRESS_SPACE:
            raise ValueError(f"image of {len(data)} words does not fit at address {base}")
        self._cells[base : base + len(data)] = data
        return len(data)

    def replace(self, words: Iterable[int]) -> None:
        data = [int(word) & CODE_UNIT_MASK for word in words]
        if len(data) != MEMORY_CELLS:
            raise ValueError(f"memory image must hold {MEMORY_CELLS} cells, got {len(data)}")
        self._cells[:] = data

    def to_list(self) -> List[int]:
        return list(self._cells)


__all__ = [
    "ADDRESS_SPACE",
    "REGISTER_BASE",
    "REGISTER_COUNT",
    "MEMORY_CELLS",
    "WORD_MODULUS",
    "WORD_MASK",
    "CODE_UNIT_MASK",
    "Memory",
    "is_register",
]
