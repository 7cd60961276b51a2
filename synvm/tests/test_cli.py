"""Command-line runner tests."""

from __future__ import annotations

import io
import struct

import pytest

from synvm import cli
from synvm.memory import MEMORY_CELLS
from synvm.snapshot import Snapshot, save_snapshot

R0 = 32768


def _image(tmp_path, words, name="prog.bin"):
    path = tmp_path / name
    path.write_bytes(struct.pack(f"<{len(words)}H", *words))
    return path


@pytest.fixture
def run_cli(tmp_path, monkeypatch):
    def runner(words, *extra, stdin=""):
        monkeypatch.setattr("sys.stdin", io.StringIO(stdin) if isinstance(stdin, str) else stdin)
        argv = [
            str(_image(tmp_path, words)),
            "--no-console",
            "--history",
            str(tmp_path / "history"),
            "--dump-path",
            str(tmp_path / "memory.bin"),
            "--snapshot-path",
            str(tmp_path / "snapshot.bin"),
            *extra,
        ]
        return cli.main(argv)

    return runner


def test_program_output_and_halt_summary(run_cli, capsys):
    assert run_cli([19, 72, 19, 105, 0]) == 0
    captured = capsys.readouterr()
    assert captured.out == "Hi"
    assert "[VM] Halted after 3 cycles @ PC=5" in captured.err


def test_echo_program_reads_stdin(run_cli, capsys):
    program = [20, R0, 19, R0, 6, 0]
    assert run_cli(program, stdin="ab\n") == 0
    captured = capsys.readouterr()
    assert captured.out == "ab\n"
    assert "input closed" in captured.err


def test_fault_exits_with_one(run_cli, capsys):
    assert run_cli([3, R0]) == 1
    err = capsys.readouterr().err
    assert "StackUnderflowError" in err
    assert "Faulted" in err


def test_missing_program_exits_with_two(tmp_path, capsys):
    assert cli.main([str(tmp_path / "absent.bin")]) == 2
    assert "cannot load" in capsys.readouterr().err


def test_max_steps_caps_an_infinite_loop(run_cli, capsys):
    assert run_cli([6, 0], "--max-steps", "5") == 0
    err = capsys.readouterr().err
    assert "Max steps 5 reached" in err
    assert "Running after 5 cycles" in err


def test_trace_file_collects_disassembly(run_cli, tmp_path, capsys):
    trace = tmp_path / "trace.log"
    assert run_cli([19, 65, 0], "--trace-file", str(trace)) == 0
    assert capsys.readouterr().out == "A"
    assert trace.read_text(encoding="utf-8").splitlines() == [
        "[TRACE] pc=0 out 65  ; 'A'",
        "[TRACE] pc=2 halt",
    ]


def test_script_lines_run_before_stdin(run_cli, tmp_path, capsys):
    script = tmp_path / "walk.txt"
    script.write_text("!set 32769 66\nx\n", encoding="utf-8")
    program = [20, R0, 19, 32769, 20, R0, 19, R0, 0]
    assert run_cli(program, "--script", str(script), stdin="y\n") == 0
    assert capsys.readouterr().out == "B\n"


def test_load_snapshot_before_running(run_cli, tmp_path, capsys):
    memory = [0] * MEMORY_CELLS
    memory[10:13] = [19, 90, 0]
    saved = save_snapshot(tmp_path / "start.bin", Snapshot.capture(10, [], memory))
    assert run_cli([0], "--load-snapshot", str(saved)) == 0
    assert capsys.readouterr().out == "Z"


def test_bad_snapshot_exits_with_two(run_cli, tmp_path, capsys):
    bad = tmp_path / "bad.bin"
    bad.write_bytes(b"\x00")
    assert run_cli([0], "--load-snapshot", str(bad)) == 2
    assert "error:" in capsys.readouterr().err


def test_dump_command_from_stdin(run_cli, tmp_path):
    assert run_cli([20, R0, 0], stdin="!dump\nq\n") == 0
    assert (tmp_path / "memory.bin").stat().st_size == MEMORY_CELLS * 2


def test_undecodable_stdin_is_an_input_fault(run_cli, capsys):
    stdin = io.TextIOWrapper(io.BytesIO(b"\xff\xfe\n"), encoding="utf-8")
    assert run_cli([20, R0, 0], stdin=stdin) == 1
    err = capsys.readouterr().err
    assert "InputError" in err
    assert "Faulted" in err


def test_undecodable_script_is_an_input_fault(run_cli, tmp_path, capsys):
    script = tmp_path / "bad.txt"
    script.write_bytes(b"go \xff\n")
    assert run_cli([20, R0, 0], "--script", str(script)) == 1
    assert "InputError" in capsys.readouterr().err


def test_unopenable_trace_file_exits_with_two(run_cli, tmp_path, capsys):
    assert run_cli([0], "--trace-file", str(tmp_path / "no" / "such" / "trace.log")) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_script_exits_with_two(run_cli, tmp_path, capsys):
    assert run_cli([0], "--script", str(tmp_path / "absent.txt")) == 2
    assert "error:" in capsys.readouterr().err
