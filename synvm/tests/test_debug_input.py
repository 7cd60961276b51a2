"""Tests for the line-buffered input overlay, independent of the fetch loop."""

from __future__ import annotations

import io

import pytest

from synvm.debugger.commands import build_registry
from synvm.debugger.console import StreamLineSource
from synvm.debugger.context import DebuggerContext
from synvm.debugger.input import DebugInput
from synvm.errors import InputClosedError, InputError
from synvm.vm import STATUS_HALTED, VM

R0, R1 = 32768, 32769


def _source(*lines):
    return StreamLineSource(io.StringIO("".join(line + "\n" for line in lines)))


def _drain(debug_input, count):
    return "".join(chr(debug_input.read_char()) for _ in range(count))


def test_guest_lines_get_a_trailing_newline():
    debug_input = DebugInput(_source("abc", ""))
    assert _drain(debug_input, 4) == "abc\n"
    assert debug_input.pending == ""
    assert _drain(debug_input, 1) == "\n"


def test_characters_are_consumed_one_at_a_time():
    debug_input = DebugInput(_source("go north"))
    assert debug_input.read_char() == ord("g")
    assert debug_input.pending == "o north\n"


def test_unknown_bang_lines_pass_through_to_the_guest():
    debug_input = DebugInput(_source("!teleport now"))
    assert _drain(debug_input, 14) == "!teleport now\n"


def test_command_token_must_match_exactly():
    debug_input = DebugInput(_source("!halting"))
    assert _drain(debug_input, 9) == "!halting\n"


def test_end_of_input_raises():
    debug_input = DebugInput(_source())
    with pytest.raises(InputClosedError):
        debug_input.read_char()


def test_commands_are_never_visible_to_the_guest(capsys):
    vm = VM([0], output=io.StringIO(), input_source=_source())
    ctx = DebuggerContext()
    ctx.attach(vm)
    debug_input = DebugInput(_source("!set 32768 5", "look"), registry=build_registry(), ctx=ctx)
    assert _drain(debug_input, 5) == "look\n"
    assert vm.memory[R0] == 5
    assert "mem[32768] = 5" in capsys.readouterr().err


def test_set_command_does_not_advance_guest_input(make_vm):
    vm = make_vm([20, R1, 0], lines=["!set 32768 5", "go"])
    vm.step()
    assert vm.memory[R0] == 5
    assert vm.memory[R1] == ord("g")
    assert vm.input.pending == "o\n"
    assert vm.pc == 2


def test_halt_command_stops_before_the_in_completes(make_vm):
    vm = make_vm([20, R0, 19, 65, 0], lines=["!halt", "never read"])
    vm.run()
    assert vm.status == STATUS_HALTED
    assert vm.pc == 0
    assert vm.memory[R0] == 0
    assert vm.output.getvalue() == ""


def test_failed_command_reprompts(make_vm, capsys):
    vm = make_vm([20, R0, 0], lines=["!set 1", "!set 40000 1", "!set 1 70000", "!set x 1", "ok"])
    vm.step()
    assert vm.memory[R0] == ord("o")
    err = capsys.readouterr().err
    assert "outside memory" in err
    assert err.count("error:") >= 4


def test_unbalanced_quotes_report_a_parse_error(make_vm, capsys):
    vm = make_vm([20, R0, 0], lines=['!set "1 2', "y"])
    vm.step()
    assert vm.memory[R0] == ord("y")
    assert "parse error" in capsys.readouterr().err


def test_halt_with_trailing_words_still_halts(make_vm):
    vm = make_vm([20, R0, 0], lines=["!halt now", "x"])
    vm.step()
    assert vm.status == STATUS_HALTED
    assert vm.memory[R0] == 0
    assert vm.pc == 0


def test_characters_beyond_sixteen_bits_are_replaced(make_vm):
    vm = make_vm([20, R0, 20, R1, 0], lines=["\U0001F600a"])
    vm.step()
    vm.step()
    assert vm.memory[R0] == 0xFFFD
    assert vm.memory[R1] == ord("a")


def test_undecodable_input_faults_the_machine(make_vm):
    vm = make_vm([20, R0, 0])
    vm.input.source = StreamLineSource(io.TextIOWrapper(io.BytesIO(b"\xc3\x28\n"), encoding="utf-8"))
    with pytest.raises(InputError):
        vm.step()
    assert not vm.running
    assert isinstance(vm.fault, InputError)
    assert vm.fault.pc == 0
