from synvm.disasm_util import format_instruction, format_operand

R0, R1 = 32768, 32769


def test_operand_rendering():
    assert format_operand(42) == "42"
    assert format_operand(R1) == "r1"
    assert format_operand(R1, [0, 7]) == "r1=7"
    assert format_operand(32776) == "?32776"


def test_destination_operand_never_shows_value():
    regs = [5, 9, 0, 0, 0, 0, 0, 0]
    assert format_instruction([9, R0, R1, 3], 0, regs) == "add r0, r1=9, 3"


def test_source_registers_show_values():
    regs = [65, 0, 0, 0, 0, 0, 0, 0]
    assert format_instruction([2, R0], 0, regs) == "push r0=65"
    assert format_instruction([16, R0, R0], 0, regs) == "wmem r0=65, r0=65"


def test_out_literal_gets_character_comment():
    assert format_instruction([19, 65], 0) == "out 65  ; 'A'"
    assert format_instruction([19, 10], 0) == "out 10"


def test_unknown_and_out_of_range():
    assert format_instruction([22], 0) == ".word 22"
    assert format_instruction([0], 3) == "<out of range>"
    assert format_instruction([0, 18], 1) == "ret"
