"""Fetch-decode-execute engine for the synvm instruction set."""

from __future__ import annotations

import logging
import sys
from typing import Iterable, List, Optional, TextIO

from .debugger.console import LineSource, StreamLineSource
from .debugger.input import DebugInput
from .disasm_util import format_instruction
from .errors import (
    ArithmeticFault,
    MalformedProgramError,
    SnapshotError,
    StackUnderflowError,
    UnknownOpcodeError,
    VMFault,
)
from .memory import ADDRESS_SPACE, MEMORY_CELLS, WORD_MASK, WORD_MODULUS, Memory
from .opcodes import (
    OP_ADD,
    OP_AND,
    OP_CALL,
    OP_EQ,
    OP_GT,
    OP_HALT,
    OP_IN,
    OP_JF,
    OP_JMP,
    OP_JT,
    OP_MOD,
    OP_MULT,
    OP_NOOP,
    OP_NOT,
    OP_OR,
    OP_OUT,
    OP_POP,
    OP_PUSH,
    OP_RET,
    OP_RMEM,
    OP_SET,
    OP_WMEM,
    OPERAND_COUNTS,
)
from .snapshot import Snapshot

LOGGER = logging.getLogger("synvm.vm")

STATUS_RUNNING = "running"
STATUS_HALTED = "halted"
STATUS_FAULTED = "faulted"


class VM:
    """A single machine: memory with mapped registers, a call stack and a program counter."""

    def __init__(
        self,
        program: Optional[Iterable[int]] = None,
        *,
        output: Optional[TextIO] = None,
        input_source: Optional[LineSource] = None,
        debug_input: Optional[DebugInput] = None,
        trace: bool = False,
        trace_file: Optional[TextIO] = None,
    ) -> None:
        self.memory = Memory()
        self.pc = 0
        self.stack: List[int] = []
        self.cycles = 0
        self.running = True
        self.fault: Optional[VMFault] = None
        self.output = output if output is not None else sys.stdout
        self.trace = trace
        self.trace_out = trace_file
        if debug_input is None:
            source = input_source if input_source is not None else StreamLineSource()
            debug_input = DebugInput(source)
        self.input = debug_input
        self.input.ctx.attach(self)
        if program is not None:
            self.load_program(program)

    def __repr__(self) -> str:
        return f"<VM pc={self.pc} cycles={self.cycles} status={self.status}>"

    def _log(self, msg: str) -> None:
        if self.trace_out:
            self.trace_out.write(msg + "\n")
            self.trace_out.flush()
        else:
            LOGGER.debug(msg)

    @property
    def status(self) -> str:
        if self.running:
            return STATUS_RUNNING
        return STATUS_FAULTED if self.fault is not None else STATUS_HALTED

    @property
    def registers(self) -> List[int]:
        return self.memory.registers

    def load_program(self, words: Iterable[int]) -> int:
        count = self.memory.load(words)
        LOGGER.debug("program loaded: %d words", count)
        return count

    def halt(self) -> None:
        if self.running:
            LOGGER.info("halted at pc=%d after %d cycles", self.pc, self.cycles)
        self.running = False

    # ------------------------------------------------------------------ state

    def snapshot(self) -> Snapshot:
        return Snapshot.capture(self.pc, self.stack, self.memory.to_list())

    def restore(self, snapshot: Snapshot) -> None:
        """Overwrite pc, stack and memory from *snapshot* and resume running."""
        if len(snapshot.memory) != MEMORY_CELLS:
            raise SnapshotError(f"snapshot memory holds {len(snapshot.memory)} cells, expected {MEMORY_CELLS}")
        self.memory.replace(snapshot.memory)
        self.stack[:] = snapshot.stack
        self.pc = snapshot.pc
        self.running = True
        self.fault = None
        self.input.reset()
        LOGGER.info("state restored: pc=%d stack=%d", self.pc, len(self.stack))

    # -------------------------------------------------------------- execution

    def run(self, max_steps: Optional[int] = None) -> int:
        """Execute until halted; returns the number of instructions executed."""
        executed = 0
        while self.running:
            if max_steps is not None and executed >= max_steps:
                break
            self.step()
            executed += 1
        return executed

    def step(self) -> None:
        if not self.running:
            return
        try:
            self._execute()
        except VMFault as exc:
            if exc.pc is None:
                exc.pc = self.pc
            self.running = False
            self.fault = exc
            LOGGER.error("%s: %s", type(exc).__name__, exc)
            raise

    def _execute(self) -> None:
        pc = self.pc
        if pc < 0 or pc >= ADDRESS_SPACE:
            raise MalformedProgramError(f"pc {pc} is outside memory")
        mem = self.memory
        op = mem[pc]
        self.cycles += 1
        count = OPERAND_COUNTS.get(op)
        if count is None:
            raise UnknownOpcodeError(f"unknown opcode {op}")
        if pc + count >= ADDRESS_SPACE:
            raise MalformedProgramError(f"operands of opcode {op} run past the end of memory")
        a = mem[pc + 1] if count > 0 else 0
        b = mem[pc + 2] if count > 1 else 0
        c = mem[pc + 3] if count > 2 else 0

        if self.trace or self.trace_out:
            self._log(f"[TRACE] pc={pc} {format_instruction(mem, pc, mem.registers)}")

        resolve = mem.resolve
        next_pc = pc + 1 + count

        if op == OP_HALT:
            self.pc = next_pc
            self.halt()
            return
        elif op == OP_SET:
            mem[a] = resolve(b)
        elif op == OP_PUSH:
            self.stack.append(resolve(a))
        elif op == OP_POP:
            if not self.stack:
                raise StackUnderflowError("pop from empty stack")
            mem[a] = self.stack[-1]
            self.stack.pop()
        elif op == OP_EQ:
            mem[a] = 1 if resolve(b) == resolve(c) else 0
        elif op == OP_GT:
            mem[a] = 1 if resolve(b) > resolve(c) else 0
        elif op == OP_JMP:
            next_pc = resolve(a)
        elif op == OP_JT:
            if resolve(a) != 0:
                next_pc = resolve(b)
        elif op == OP_JF:
            if resolve(a) == 0:
                next_pc = resolve(b)
        elif op == OP_ADD:
            mem[a] = (resolve(b) + resolve(c)) % WORD_MODULUS
        elif op == OP_MULT:
            mem[a] = (resolve(b) * resolve(c)) % WORD_MODULUS
        elif op == OP_MOD:
            divisor = resolve(c)
            if divisor == 0:
                raise ArithmeticFault("modulo by zero")
            mem[a] = (resolve(b) % divisor) & WORD_MASK
        elif op == OP_AND:
            mem[a] = (resolve(b) & resolve(c)) & WORD_MASK
        elif op == OP_OR:
            mem[a] = (resolve(b) | resolve(c)) & WORD_MASK
        elif op == OP_NOT:
            mem[a] = (~resolve(b)) & WORD_MASK
        elif op == OP_RMEM:
            mem[a] = mem[resolve(b)]
        elif op == OP_WMEM:
            mem[resolve(a)] = resolve(b)
        elif op == OP_CALL:
            target = resolve(a)
            self.stack.append(next_pc)
            next_pc = target
        elif op == OP_RET:
            if not self.stack:
                self.pc = next_pc
                LOGGER.debug("ret with empty stack")
                self.halt()
                return
            next_pc = self.stack.pop()
        elif op == OP_OUT:
            self.output.write(chr(resolve(a)))
        elif op == OP_IN:
            if a >= MEMORY_CELLS:
                raise MalformedProgramError(f"invalid destination {a}")
            char = self.input.read_char()
            if char is None:
                # A debugger command halted the machine or replaced its state.
                return
            mem[a] = char
        elif op == OP_NOOP:
            pass

        self.pc = next_pc


__all__ = ["VM", "STATUS_RUNNING", "STATUS_HALTED", "STATUS_FAULTED"]
