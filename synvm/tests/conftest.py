"""
Pytest configuration and fixtures for synvm tests.
"""
import io

import pytest

from synvm.debugger.console import StreamLineSource
from synvm.vm import VM


def _lines_source(lines):
    return StreamLineSource(io.StringIO("".join(line + "\n" for line in lines)))


@pytest.fixture
def make_vm(tmp_path):
    """Build a VM over *program* with scripted input lines and a StringIO output.

    Debugger files land in the test's tmp_path.
    """

    def factory(program, lines=(), **kwargs):
        vm = VM(program, output=io.StringIO(), input_source=_lines_source(lines), **kwargs)
        vm.input.ctx.set_paths(
            dump_path=str(tmp_path / "memory.bin"),
            snapshot_path=str(tmp_path / "snapshot.bin"),
        )
        return vm

    return factory
