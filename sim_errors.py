class SimError(Exception):
    pass


class IllegalInstructionError(SimError):
    def __init__(self, word, opcode=None, funct=None):
        word &= 0xffffffff
        if funct is not None:
            detail = f"opcode 0x{opcode:02x} funct 0x{funct:02x}"
        elif opcode is not None:
            detail = f"opcode 0x{opcode:02x}"
        else:
            detail = "unknown encoding"
        super().__init__(f"Illegal instruction 0x{word:08x} ({detail})")
        self.word = word
        self.opcode = opcode
        self.funct = funct


class MemoryOutOfRangeError(SimError):
    def __init__(self, addr, op="read", detail=None):
        addr &= 0xffffffff
        message = f"Memory {op} out of range at 0x{addr:08x}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.addr = addr
        self.op = op


class ProgramTooLargeError(SimError):
    def __init__(self, count, capacity):
        super().__init__(f"Program too big: {count} words, capacity is {capacity} words")
        self.count = count
        self.capacity = capacity
