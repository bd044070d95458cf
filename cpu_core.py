from decoder import (
    FORMAT_I,
    FORMAT_J,
    FORMAT_R,
    FUNCT_ADDU,
    FUNCT_AND,
    FUNCT_JR,
    FUNCT_OR,
    FUNCT_SLL,
    FUNCT_SLT,
    FUNCT_SRL,
    FUNCT_SUBU,
    OP_ADDIU,
    OP_ANDI,
    OP_BEQ,
    OP_BNE,
    OP_J,
    OP_JAL,
    OP_LUI,
    OP_LW,
    OP_ORI,
    OP_SW,
    REG_RA,
)
from sim_errors import IllegalInstructionError


class CPUCore:
    # R-format dispatches on the function code, I/J-format on the opcode.
    _FUNCT_HANDLERS = {
        FUNCT_ADDU: "_exec_addu",
        FUNCT_SUBU: "_exec_subu",
        FUNCT_SLL: "_exec_sll",
        FUNCT_SRL: "_exec_srl",
        FUNCT_AND: "_exec_and",
        FUNCT_OR: "_exec_or",
        FUNCT_SLT: "_exec_slt",
        FUNCT_JR: "_exec_jr",
    }

    _OPCODE_HANDLERS = {
        OP_ADDIU: "_exec_addiu",
        OP_ANDI: "_exec_andi",
        OP_ORI: "_exec_ori",
        OP_LUI: "_exec_lui",
        OP_BEQ: "_exec_branch",
        OP_BNE: "_exec_branch",
        OP_LW: "_exec_address",
        OP_SW: "_exec_address",
        OP_J: "_exec_j",
        OP_JAL: "_exec_jal",
    }

    _NO_DESTINATION = {OP_BEQ, OP_BNE, OP_SW}

    def __init__(self, state):
        self.state = state

    @property
    def regs(self):
        return self.state.regs

    @staticmethod
    def _u32(val):
        return val & 0xffffffff

    @staticmethod
    def _s32(val):
        val &= 0xffffffff
        return val - 0x100000000 if val & 0x80000000 else val

    def _handler_for(self, decoded):
        if decoded.fmt == FORMAT_R:
            handler_name = self._FUNCT_HANDLERS.get(decoded.funct)
        else:
            handler_name = self._OPCODE_HANDLERS.get(decoded.opcode)
        if handler_name is None:
            raise IllegalInstructionError(decoded.word, decoded.opcode, decoded.funct)
        return getattr(self, handler_name)

    # Execute

    def execute(self, decoded):
        """Compute the instruction's result as a signed 32-bit value."""
        return self._s32(self._handler_for(decoded)(decoded))

    def _exec_addu(self, d):
        return self.regs[d.rs] + self.regs[d.rt]

    def _exec_subu(self, d):
        return self.regs[d.rs] - self.regs[d.rt]

    def _exec_sll(self, d):
        return self.regs[d.rt] << d.shamt

    def _exec_srl(self, d):
        return self.regs[d.rt] >> d.shamt

    def _exec_and(self, d):
        return self.regs[d.rs] & self.regs[d.rt]

    def _exec_or(self, d):
        return self.regs[d.rs] | self.regs[d.rt]

    def _exec_slt(self, d):
        return 1 if self.regs.signed(d.rs) < self.regs.signed(d.rt) else 0

    def _exec_jr(self, d):
        # Target is read straight from rs by next_pc
        return 0

    def _exec_addiu(self, d):
        return self.regs[d.rs] + d.imm

    def _exec_andi(self, d):
        return self.regs[d.rs] & self._u32(d.imm)

    def _exec_ori(self, d):
        return self.regs[d.rs] | self._u32(d.imm)

    def _exec_lui(self, d):
        return d.imm << 16

    def _exec_branch(self, d):
        # Zero means the operands are equal
        return self.regs[d.rs] - self.regs[d.rt]

    def _exec_address(self, d):
        return self.regs[d.rs] + d.imm

    def _exec_j(self, d):
        return 0

    def _exec_jal(self, d):
        return self.state.pc + 4

    # PC update

    def next_pc(self, pc, decoded, value):
        seq_pc = self._u32(pc + 4)
        if decoded.fmt == FORMAT_J:
            return decoded.target
        if decoded.fmt == FORMAT_R:
            if decoded.funct == FUNCT_JR:
                return self.regs[decoded.rs]
            return seq_pc
        taken = (
            (decoded.opcode == OP_BEQ and value == 0)
            or (decoded.opcode == OP_BNE and value != 0)
        )
        if taken:
            return self._u32(seq_pc + decoded.imm * 4)
        return seq_pc

    # Memory

    def access_memory(self, decoded, value):
        """Run the load/store stage.

        Returns (value, changed_mem): a load replaces value with the word read,
        a store reports the address it wrote. Other instructions pass through.
        """
        if decoded.fmt != FORMAT_I:
            return value, None
        if decoded.opcode == OP_LW:
            return self.state.memory.read_word(self._u32(value)), None
        if decoded.opcode == OP_SW:
            addr = self._u32(value)
            self.state.memory.write_word(addr, self.regs[decoded.rt])
            return value, addr
        return value, None

    # Writeback

    def destination(self, decoded):
        if decoded.fmt == FORMAT_R:
            return None if decoded.funct == FUNCT_JR else decoded.rd
        if decoded.fmt == FORMAT_J:
            return REG_RA if decoded.opcode == OP_JAL else None
        if decoded.opcode in self._NO_DESTINATION:
            return None
        return decoded.rt

    def writeback(self, decoded, value):
        """Overwrite the destination register with value.

        Returns the index of the register that changed, or None.
        """
        dest = self.destination(decoded)
        if dest is None:
            return None
        if not self.regs.write(dest, value):
            return None
        return dest
