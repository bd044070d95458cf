import pytest

from memory_map import LOAD_BASE, MAX_NUM_DATA, MAX_NUM_INSTRS, MemoryMap, MemoryRegion
from sim_errors import MemoryOutOfRangeError, ProgramTooLargeError


def test_default_segments():
    mem = MemoryMap()
    assert len(mem.words) == MAX_NUM_INSTRS + MAX_NUM_DATA
    assert (mem.text.start, mem.text.end) == (LOAD_BASE, 0x00401000)
    assert (mem.data.start, mem.data.end) == (0x00401000, 0x00404000)
    assert mem.get_stack_top() == 0x00404000
    assert mem.find_region(0x00400ffc) is mem.text
    assert mem.find_region(0x00401000) is mem.data
    assert mem.find_region(0x00404000) is None


def test_index_of_maps_addresses_to_words():
    mem = MemoryMap()
    assert mem.index_of(LOAD_BASE) == 0
    assert mem.index_of(LOAD_BASE + 4) == 1
    assert mem.index_of(0x00403ffc) == MAX_NUM_INSTRS + MAX_NUM_DATA - 1

    with pytest.raises(MemoryOutOfRangeError):
        mem.index_of(LOAD_BASE - 4)
    with pytest.raises(MemoryOutOfRangeError):
        mem.index_of(0x00404000)
    with pytest.raises(MemoryOutOfRangeError) as excinfo:
        mem.index_of(LOAD_BASE + 2)
    assert "unaligned" in str(excinfo.value)


def test_fetch_covers_whole_array():
    mem = MemoryMap()
    mem.load_program([0x11111111, 0x22222222])
    assert mem.fetch(LOAD_BASE + 4) == 0x22222222
    assert mem.fetch(0x00401000) == 0
    with pytest.raises(MemoryOutOfRangeError) as excinfo:
        mem.fetch(0x00500000)
    assert excinfo.value.op == "fetch"


def test_data_read_write():
    mem = MemoryMap()
    mem.write_word(0x00401004, -1)
    assert mem.read_word(0x00401004) == 0xffffffff
    assert mem.words[MAX_NUM_INSTRS + 1] == 0xffffffff

    with pytest.raises(MemoryOutOfRangeError) as excinfo:
        mem.write_word(LOAD_BASE, 1)
    assert excinfo.value.op == "write"
    assert "outside data segment, in text" in str(excinfo.value)
    assert mem.words[0] == 0
    with pytest.raises(MemoryOutOfRangeError):
        mem.read_word(LOAD_BASE)


def test_load_program_capacity():
    mem = MemoryMap(max_instrs=2, max_data=2)
    assert mem.load_program([1, 2]) == 2
    with pytest.raises(ProgramTooLargeError) as excinfo:
        mem.load_program([1, 2, 3])
    assert excinfo.value.count == 3
    assert excinfo.value.capacity == 2


def test_nonzero_data():
    mem = MemoryMap(max_instrs=4, max_data=4)
    mem.load_program([0xdead, 0xbeef])
    mem.write_word(mem.data.start + 8, 0x42)
    assert list(mem.nonzero_data()) == [(mem.data.start + 8, 0x42)]


def test_no_data_segment():
    mem = MemoryMap(max_instrs=4, max_data=0)
    assert mem.data is None
    assert list(mem.nonzero_data()) == []
    with pytest.raises(MemoryOutOfRangeError, match="in text"):
        mem.read_word(LOAD_BASE)


def test_memory_map_errors():
    with pytest.raises(ValueError):
        MemoryMap(base=LOAD_BASE + 2)
    with pytest.raises(ValueError):
        MemoryMap(max_instrs=0)
    with pytest.raises(ValueError):
        MemoryRegion(0x100, 0x100, "bad")
