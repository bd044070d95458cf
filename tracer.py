from decoder import (
    FORMAT_J,
    FORMAT_R,
    FUNCT_JR,
    FUNCT_SLL,
    FUNCT_SRL,
    OP_BEQ,
    OP_BNE,
    OP_LUI,
    OP_LW,
    OP_SW,
    REG_NAMES,
)


def disassemble(decoded, pc):
    """Render a decoded instruction as assembly text.

    Branch targets are printed as absolute addresses computed from pc.
    """
    m = decoded.mnemonic
    if decoded.fmt == FORMAT_R:
        if decoded.funct == FUNCT_JR:
            return f"{m}\t${decoded.rs}"
        if decoded.funct in (FUNCT_SLL, FUNCT_SRL):
            return f"{m}\t${decoded.rd}, ${decoded.rt}, {decoded.shamt}"
        return f"{m}\t${decoded.rd}, ${decoded.rs}, ${decoded.rt}"
    if decoded.fmt == FORMAT_J:
        return f"{m}\t0x{decoded.target:08x}"
    if decoded.opcode in (OP_BEQ, OP_BNE):
        target = (pc + 4 + decoded.imm * 4) & 0xffffffff
        return f"{m}\t${decoded.rs}, ${decoded.rt}, 0x{target:08x}"
    if decoded.opcode in (OP_LW, OP_SW):
        return f"{m}\t${decoded.rt}, {decoded.imm}(${decoded.rs})"
    if decoded.opcode == OP_LUI:
        return f"{m}\t${decoded.rt}, 0x{decoded.imm & 0xffff:x}"
    return f"{m}\t${decoded.rt}, ${decoded.rs}, {decoded.imm}"


def format_registers(regs):
    lines = []
    for k in range(0, 32, 4):
        lines.append("  ".join(f"r{i:02d}: {regs[i]:08x}" for i in range(k, k + 4)))
    return "\n".join(lines)


def dump_regs(sim):
    for i in range(32):
        print(f"r{i:2} ({REG_NAMES[i]:>4}) = 0x{sim.regs[i]:08x}")
    print(f"pc             = 0x{sim.pc:08x}")


class Tracer:
    def __init__(self, print_registers=False, print_memory=False):
        self.print_registers = print_registers
        self.print_memory = print_memory

    def instruction(self, pc, word, decoded):
        print(f"Executing instruction at {pc:08x}: {word:08x}")
        print(disassemble(decoded, pc))

    def info(self, sim):
        print(f"New pc = {sim.pc:08x}")

        if self.print_registers:
            print(format_registers(sim.regs))
        elif sim.changed_reg is None:
            print("No register was updated.")
        else:
            print(f"Updated r{sim.changed_reg:02d} to {sim.regs[sim.changed_reg]:08x}")

        memory = sim.state.memory
        if self.print_memory:
            print("Nonzero memory")
            print("ADDR      CONTENTS")
            for addr, word in memory.nonzero_data():
                print(f"{addr:08x}  {word:08x}")
        elif sim.changed_mem is None:
            print("No memory location was updated.")
        else:
            print(f"Updated memory at address {sim.changed_mem:08x} to {memory.read_word(sim.changed_mem):08x}")

    def __call__(self, sim):
        if sim.last_decoded is not None:
            self.instruction(sim.last_pc, sim.last_decoded.word, sim.last_decoded)
        self.info(sim)
