from sim_errors import MemoryOutOfRangeError, ProgramTooLargeError

LOAD_BASE = 0x00400000
MAX_NUM_INSTRS = 1024
MAX_NUM_DATA = 3072
WORD = 4


class MemoryRegion:
    def __init__(self, start, end, name="mem"):
        if end <= start:
            raise ValueError(f"Invalid memory region {name}: 0x{start:08x}-0x{end:08x}")
        self.start = start
        self.end = end
        self.name = name

    def contains(self, addr):
        return self.start <= addr < self.end


class MemoryMap:
    """Word array holding the instruction segment followed by the data segment.

    Word k of the array lives at byte address base + 4 * k.
    """

    def __init__(self, base=LOAD_BASE, max_instrs=MAX_NUM_INSTRS, max_data=MAX_NUM_DATA):
        if base & 0x3:
            raise ValueError(f"Load base 0x{base:08x} is not word aligned")
        if max_instrs <= 0 or max_data < 0:
            raise ValueError(f"Invalid segment capacity: {max_instrs} instruction / {max_data} data words")
        self.base = base & 0xffffffff
        self.max_instrs = max_instrs
        self.max_data = max_data
        self.words = [0] * (max_instrs + max_data)
        self.text = MemoryRegion(self.base, self.base + WORD * max_instrs, "text")
        self.data = None
        if max_data:
            self.data = MemoryRegion(self.text.end, self.text.end + WORD * max_data, "data")
        self.regions = [r for r in (self.text, self.data) if r is not None]

    @property
    def end(self):
        return self.base + WORD * len(self.words)

    def find_region(self, addr):
        for region in self.regions:
            if region.contains(addr):
                return region
        return None

    def index_of(self, addr, op="read"):
        addr &= 0xffffffff
        if addr & 0x3:
            raise MemoryOutOfRangeError(addr, op, "unaligned word access")
        if not (self.base <= addr < self.end):
            raise MemoryOutOfRangeError(addr, op)
        return (addr - self.base) // WORD

    def fetch(self, addr):
        return self.words[self.index_of(addr, "fetch")]

    def read_word(self, addr):
        return self.words[self._data_index(addr, "read")]

    def write_word(self, addr, value):
        self.words[self._data_index(addr, "write")] = value & 0xffffffff

    def _data_index(self, addr, op):
        index = self.index_of(addr, op)
        region = self.find_region(addr & 0xffffffff)
        if region is not self.data:
            raise MemoryOutOfRangeError(addr, op, f"outside data segment, in {region.name}")
        return index

    def load_program(self, words):
        words = list(words)
        if len(words) > self.max_instrs:
            raise ProgramTooLargeError(len(words), self.max_instrs)
        for k, word in enumerate(words):
            self.words[k] = word & 0xffffffff
        return len(words)

    def nonzero_data(self):
        if self.data is None:
            return
        offset = self.max_instrs
        for k, word in enumerate(self.words[offset:]):
            if word:
                yield self.data.start + WORD * k, word

    def get_stack_top(self):
        return self.end
