"""Binary snapshot and memory dump codec.

Snapshot layout (little-endian, no header):

* PC (u16)
* stack depth (u32)
* stack words bottom-to-top (u16 each)
* the full memory array (``MEMORY_CELLS`` u16 cells in address order)

A memory dump is just the last section on its own.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence, Tuple, Union

from .errors import SnapshotError
from .memory import CODE_UNIT_MASK, MEMORY_CELLS

LOGGER = logging.getLogger("synvm.snapshot")

HEADER = struct.Struct("<HI")
HEADER_FIELDS = ("pc", "stack_depth")
MEMORY_STRUCT = struct.Struct(f"<{MEMORY_CELLS}H")

PathLike = Union[str, Path]


@dataclass(frozen=True)
class Snapshot:
    """Saved machine state: program counter, call stack and memory."""

    pc: int
    stack: Tuple[int, ...]
    memory: Tuple[int, ...]

    @classmethod
    def capture(cls, pc: int, stack: Iterable[int], memory: Iterable[int]) -> "Snapshot":
        return cls(
            pc=int(pc) & CODE_UNIT_MASK,
            stack=tuple(int(v) & CODE_UNIT_MASK for v in stack),
            memory=tuple(int(v) & CODE_UNIT_MASK for v in memory),
        )


def encode_memory(words: Sequence[int]) -> bytes:
    if len(words) != MEMORY_CELLS:
        raise SnapshotError(f"memory image must hold {MEMORY_CELLS} cells, got {len(words)}")
    return MEMORY_STRUCT.pack(*(int(w) & CODE_UNIT_MASK for w in words))


def encode_snapshot(snapshot: Snapshot) -> bytes:
    stack = snapshot.stack
    parts = [
        HEADER.pack(snapshot.pc & CODE_UNIT_MASK, len(stack)),
        struct.pack(f"<{len(stack)}H", *(v & CODE_UNIT_MASK for v in stack)),
        encode_memory(snapshot.memory),
    ]
    return b"".join(parts)


def decode_snapshot(data: bytes) -> Snapshot:
    if len(data) < HEADER.size:
        raise SnapshotError("snapshot too small")
    header = dict(zip(HEADER_FIELDS, HEADER.unpack_from(data)))
    depth = header["stack_depth"]
    stack_end = HEADER.size + depth * 2
    expected = stack_end + MEMORY_STRUCT.size
    if len(data) != expected:
        raise SnapshotError(
            f"snapshot size mismatch: expected {expected} bytes for {depth} stack entries, got {len(data)}"
        )
    stack = struct.unpack_from(f"<{depth}H", data, HEADER.size)
    memory = MEMORY_STRUCT.unpack_from(data, stack_end)
    return Snapshot(pc=header["pc"], stack=tuple(stack), memory=tuple(memory))


def _write_atomic(path: PathLike, payload: bytes) -> Path:
    target = Path(path)
    tmp_path = target.with_name(target.name + ".tmp")
    try:
        tmp_path.write_bytes(payload)
        tmp_path.replace(target)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise SnapshotError(f"cannot write {target}: {exc}") from exc
    return target


def save_snapshot(path: PathLike, snapshot: Snapshot) -> Path:
    target = _write_atomic(path, encode_snapshot(snapshot))
    LOGGER.info("snapshot written to %s (pc=%d, stack=%d)", target, snapshot.pc, len(snapshot.stack))
    return target


def load_snapshot(path: PathLike) -> Snapshot:
    source = Path(path)
    try:
        data = source.read_bytes()
    except OSError as exc:
        raise SnapshotError(f"cannot read {source}: {exc}") from exc
    snapshot = decode_snapshot(data)
    LOGGER.info("snapshot read from %s (pc=%d, stack=%d)", source, snapshot.pc, len(snapshot.stack))
    return snapshot


def dump_memory(path: PathLike, words: Sequence[int]) -> Path:
    target = _write_atomic(path, encode_memory(words))
    LOGGER.info("memory dump written to %s", target)
    return target


__all__ = [
    "Snapshot",
    "encode_memory",
    "encode_snapshot",
    "decode_snapshot",
    "save_snapshot",
    "load_snapshot",
    "dump_memory",
]
