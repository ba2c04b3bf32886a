import pytest

from mips_iss import (
    DATA_SEGMENT_BASE, GP_INIT, REG_GP, REG_SP, SP_INIT, TEXT_SEGMENT_BASE,
    Machine, Memory, MemoryAccessError, RegisterFile,
)


def test_write_word_is_little_endian():
    mem = Memory()
    mem.write_word(DATA_SEGMENT_BASE, 0x12345678)
    assert [mem.read_byte(DATA_SEGMENT_BASE + i) for i in range(4)] == \
        [0x78, 0x56, 0x34, 0x12]
    assert mem.read_word(DATA_SEGMENT_BASE) == 0x12345678


def test_read_word_is_signed():
    mem = Memory()
    mem.write_word(0x100, 0xFFFFFFFE)
    assert mem.read_word(0x100) == -2
    mem.write_word(0x104, -2)
    assert mem.read_byte(0x104) == 0xFE


def test_unaligned_word_access():
    mem = Memory()
    mem.write_word(0x101, 0xAABBCCDD)
    assert mem.read_word(0x101) == -0x55443323  # 0xAABBCCDD signed
    assert mem.read_byte(0x101) == 0xDD


def test_unmapped_read_raises_with_address():
    mem = Memory()
    with pytest.raises(MemoryAccessError) as excinfo:
        mem.read_byte(DATA_SEGMENT_BASE)
    assert excinfo.value.address == DATA_SEGMENT_BASE
    assert str(excinfo.value) == "Unmapped memory access (address = 10010000)"


def test_partially_mapped_word_names_first_missing_byte():
    mem = Memory()
    mem.write_byte(0x200, 1)
    mem.write_byte(0x201, 2)
    with pytest.raises(MemoryAccessError) as excinfo:
        mem.read_word(0x200)
    assert excinfo.value.address == 0x202


def test_addresses_wrap_to_32_bits():
    mem = Memory()
    mem.write_word(0xFFFFFFFE, 0x11223344)
    assert mem.read_byte(0xFFFFFFFE) == 0x44
    assert mem.read_byte(0xFFFFFFFF) == 0x33
    assert mem.read_byte(0) == 0x22
    assert mem.read_byte(1) == 0x11
    assert -1 in mem
    assert mem.read_word(-2) == 0x11223344


def test_load_words_lays_out_consecutively():
    mem = Memory()
    mem.load_words(TEXT_SEGMENT_BASE, [0xAAAAAAAA, 0x00000001, 0x00000002])
    assert len(mem) == 12
    assert mem.read_word(TEXT_SEGMENT_BASE + 4) == 1
    assert mem.read_word(TEXT_SEGMENT_BASE + 8) == 2
    assert TEXT_SEGMENT_BASE + 12 not in mem


def test_read_string_stops_at_terminator():
    mem = Memory()
    for i, b in enumerate([72, 105, 0, 33]):
        mem.write_byte(0x300 + i, b)
    assert mem.read_string(0x300) == "Hi"
    assert mem.read_string(0x302) == ""


def test_read_string_without_terminator_fails():
    mem = Memory()
    mem.write_word(0x300, 0x41414141)
    with pytest.raises(MemoryAccessError) as excinfo:
        mem.read_string(0x300)
    assert excinfo.value.address == 0x304


def test_mapped_words_fills_gaps_with_zero():
    mem = Memory()
    mem.write_word(DATA_SEGMENT_BASE, 7)
    mem.write_byte(DATA_SEGMENT_BASE + 9, 0x01)
    mem.write_word(TEXT_SEGMENT_BASE, 0x2408FFFF)
    assert list(mem.mapped_words(DATA_SEGMENT_BASE)) == [
        (DATA_SEGMENT_BASE, 7),
        (DATA_SEGMENT_BASE + 8, 0x0100),
    ]


def test_register_file_initial_values():
    regs = RegisterFile()
    assert regs[REG_GP] == GP_INIT == 0x10008000
    assert regs[REG_SP] == SP_INIT == 0x7FFFEFFC
    others = [v for i, v in enumerate(regs.snapshot()) if i not in (REG_GP, REG_SP)]
    assert others == [0] * 30
    assert len(regs) == 32


def test_register_writes_wrap_to_signed_32():
    regs = RegisterFile()
    regs[8] = 0xFFFFFFFF
    assert regs[8] == -1
    regs[9] = 0x100000005
    assert regs[9] == 5


def test_register_zero_is_writable():
    regs = RegisterFile()
    regs[0] = 42
    assert regs[0] == 42


def test_machine_from_images():
    machine = Machine.from_images([0x24080001], [0x00006948])
    assert machine.pc == TEXT_SEGMENT_BASE
    assert machine.memory.read_word(TEXT_SEGMENT_BASE) == 0x24080001
    assert machine.memory.read_string(DATA_SEGMENT_BASE) == "Hi"
    assert machine.registers[REG_SP] == SP_INIT
