from decoder import REG_SP, REG_ZERO
from memory_map import LOAD_BASE, MAX_NUM_DATA, MAX_NUM_INSTRS, MemoryMap

NUM_REGS = 32


class RegisterFile:
    """32 general purpose registers stored as unsigned 32-bit values."""

    def __init__(self, enforce_zero=True):
        self.enforce_zero = enforce_zero
        self.values = [0] * NUM_REGS

    def __len__(self):
        return NUM_REGS

    def __getitem__(self, idx):
        return self.values[idx]

    def __setitem__(self, idx, value):
        self.write(idx, value)

    def __iter__(self):
        return iter(self.values)

    def write(self, idx, value):
        """Overwrite register idx; returns False when the write was discarded."""
        if not 0 <= idx < NUM_REGS:
            raise IndexError(f"Register index out of range: {idx}")
        if idx == REG_ZERO and self.enforce_zero:
            return False
        self.values[idx] = value & 0xffffffff
        return True

    def signed(self, idx):
        val = self.values[idx]
        return val - 0x100000000 if val & 0x80000000 else val

    def snapshot(self):
        return list(self.values)


class MachineState:
    def __init__(
        self,
        base=LOAD_BASE,
        max_instrs=MAX_NUM_INSTRS,
        max_data=MAX_NUM_DATA,
        enforce_zero=True,
    ):
        self.memory = MemoryMap(base, max_instrs, max_data)
        self.regs = RegisterFile(enforce_zero=enforce_zero)
        self.pc = self.memory.base
        self.reset()

    def reset(self):
        self.regs.values = [0] * NUM_REGS
        # Stack pointer starts one word past the end of data memory
        self.regs[REG_SP] = self.memory.get_stack_top()
        self.memory.words = [0] * len(self.memory.words)
        self.pc = self.memory.base
