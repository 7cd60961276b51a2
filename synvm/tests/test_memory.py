import pytest

from synvm.errors import MalformedProgramError
from synvm.memory import (
    ADDRESS_SPACE,
    MEMORY_CELLS,
    REGISTER_BASE,
    REGISTER_COUNT,
    Memory,
    is_register,
)


def test_layout_constants():
    assert ADDRESS_SPACE == 32768
    assert REGISTER_BASE == 32768
    assert REGISTER_COUNT == 8
    assert MEMORY_CELLS == 32776
    assert len(Memory()) == MEMORY_CELLS


def test_resolve_returns_every_literal_unchanged():
    mem = Memory()
    for value in range(ADDRESS_SPACE):
        assert mem.resolve(value) == value


def test_resolve_reads_register_cells():
    mem = Memory()
    for idx in range(REGISTER_COUNT):
        mem[REGISTER_BASE + idx] = 100 + idx
    for idx in range(REGISTER_COUNT):
        assert mem.resolve(REGISTER_BASE + idx) == 100 + idx
    assert mem.registers == [100 + idx for idx in range(REGISTER_COUNT)]


@pytest.mark.parametrize("code_unit", [32776, 40000, 65535])
def test_resolve_rejects_invalid_code_units(code_unit):
    with pytest.raises(MalformedProgramError):
        Memory().resolve(code_unit)


def test_out_of_range_address_is_a_malformed_program_fault():
    mem = Memory()
    with pytest.raises(MalformedProgramError):
        mem[MEMORY_CELLS] = 1
    with pytest.raises(MalformedProgramError):
        mem[-1]


def test_stored_values_are_kept_to_sixteen_bits():
    mem = Memory()
    mem[10] = 0x1FFFF
    assert mem[10] == 0xFFFF


def test_register_helpers():
    mem = Memory()
    mem.set_register(7, 42)
    assert mem.register(7) == 42
    assert mem[REGISTER_BASE + 7] == 42
    assert is_register(REGISTER_BASE + 7)
    assert not is_register(MEMORY_CELLS)
    with pytest.raises(IndexError):
        mem.register(8)


def test_load_places_image_at_base():
    mem = Memory()
    assert mem.load([1, 2, 3], base=10) == 3
    assert [mem[10], mem[11], mem[12]] == [1, 2, 3]
    with pytest.raises(ValueError):
        mem.load([0] * 2, base=ADDRESS_SPACE - 1)


def test_replace_requires_full_image():
    mem = Memory()
    with pytest.raises(ValueError):
        mem.replace([0] * 10)
    image = list(range(MEMORY_CELLS))
    mem.replace(image)
    assert mem.to_list() == image
