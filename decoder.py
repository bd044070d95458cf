# decoder.py
# Bit-field extraction and instruction classification for the MIPS subset.
#
# R-format: opcode(6)=0 | rs(5) | rt(5) | rd(5) | shamt(5) | funct(6)
# I-format: opcode(6)   | rs(5) | rt(5) | immediate(16)
# J-format: opcode(6)   | target(26)

from sim_errors import IllegalInstructionError

FORMAT_R = "R"
FORMAT_I = "I"
FORMAT_J = "J"

# R-format function codes (opcode 0)
FUNCT_SLL = 0x00
FUNCT_SRL = 0x02
FUNCT_JR = 0x08
FUNCT_ADDU = 0x21
FUNCT_SUBU = 0x23
FUNCT_AND = 0x24
FUNCT_OR = 0x25
FUNCT_SLT = 0x2a

# Opcodes
OP_RTYPE = 0x00
OP_J = 0x02
OP_JAL = 0x03
OP_BEQ = 0x04
OP_BNE = 0x05
OP_ADDIU = 0x09
OP_ANDI = 0x0c
OP_ORI = 0x0d
OP_LUI = 0x0f
OP_LW = 0x23
OP_SW = 0x2b

R_MNEMONICS = {
    FUNCT_ADDU: "addu",
    FUNCT_SUBU: "subu",
    FUNCT_SLL: "sll",
    FUNCT_SRL: "srl",
    FUNCT_AND: "and",
    FUNCT_OR: "or",
    FUNCT_SLT: "slt",
    FUNCT_JR: "jr",
}

I_MNEMONICS = {
    OP_ADDIU: "addiu",
    OP_ANDI: "andi",
    OP_ORI: "ori",
    OP_BEQ: "beq",
    OP_LUI: "lui",
    OP_BNE: "bne",
    OP_LW: "lw",
    OP_SW: "sw",
}

J_MNEMONICS = {
    OP_J: "j",
    OP_JAL: "jal",
}

REG_NAMES = [
    "zero", "at", "v0", "v1", "a0", "a1", "a2", "a3",
    "t0", "t1", "t2", "t3", "t4", "t5", "t6", "t7",
    "s0", "s1", "s2", "s3", "s4", "s5", "s6", "s7",
    "t8", "t9", "k0", "k1", "gp", "sp", "fp", "ra",
]

REG_ZERO = 0
REG_SP = 29
REG_RA = 31


def bits(word, high, low):
    """Return the unsigned value of bits high..low (inclusive) of word."""
    if high < low or low < 0:
        raise ValueError(f"Invalid bit range [{high}:{low}]")
    return (word >> low) & ((1 << (high - low + 1)) - 1)


def sign_extend(val, width=16):
    return (val & ((1 << width) - 1)) - (1 << width) if (val & (1 << (width - 1))) else val


def extend_immediate(field, signed=True):
    """Widen a 16-bit immediate field to 32 bits.

    With signed set the field is read as two's complement, so 0x8000 becomes
    -32768 and 0xffff becomes -1; otherwise the field is returned as is.
    """
    field &= 0xffff
    return sign_extend(field, 16) if signed else field


def instruction_format(opcode):
    if opcode == OP_RTYPE:
        return FORMAT_R
    if opcode in (OP_J, OP_JAL):
        return FORMAT_J
    return FORMAT_I


class DecodedInstruction:
    __slots__ = (
        "word",
        "opcode",
        "fmt",
        "mnemonic",
        "rs",
        "rt",
        "rd",
        "shamt",
        "funct",
        "imm",
        "target",
    )

    def __init__(
        self,
        word,
        opcode,
        fmt,
        mnemonic,
        rs=None,
        rt=None,
        rd=None,
        shamt=None,
        funct=None,
        imm=None,
        target=None,
    ):
        self.word = word
        self.opcode = opcode
        self.fmt = fmt
        self.mnemonic = mnemonic
        self.rs = rs
        self.rt = rt
        self.rd = rd
        self.shamt = shamt
        self.funct = funct
        self.imm = imm
        self.target = target

    def __repr__(self):
        if self.fmt == FORMAT_R:
            fields = f"rs={self.rs} rt={self.rt} rd={self.rd} shamt={self.shamt} funct=0x{self.funct:02x}"
        elif self.fmt == FORMAT_I:
            fields = f"rs={self.rs} rt={self.rt} imm={self.imm}"
        else:
            fields = f"target=0x{self.target:08x}"
        return f"<DecodedInstruction {self.mnemonic} {fields}>"


def _decode_r(word):
    funct = bits(word, 5, 0)
    mnemonic = R_MNEMONICS.get(funct)
    if mnemonic is None:
        raise IllegalInstructionError(word, OP_RTYPE, funct)
    return DecodedInstruction(
        word,
        OP_RTYPE,
        FORMAT_R,
        mnemonic,
        rs=bits(word, 25, 21),
        rt=bits(word, 20, 16),
        rd=bits(word, 15, 11),
        shamt=bits(word, 10, 6),
        funct=funct,
    )


def _decode_i(word, opcode):
    mnemonic = I_MNEMONICS.get(opcode)
    if mnemonic is None:
        raise IllegalInstructionError(word, opcode)
    return DecodedInstruction(
        word,
        opcode,
        FORMAT_I,
        mnemonic,
        rs=bits(word, 25, 21),
        rt=bits(word, 20, 16),
        imm=extend_immediate(bits(word, 15, 0)),
    )


def _decode_j(word, opcode):
    return DecodedInstruction(
        word,
        opcode,
        FORMAT_J,
        J_MNEMONICS[opcode],
        target=bits(word, 25, 0) << 2,
    )


def decode(word):
    """Classify a 32-bit word and extract its fields.

    Raises IllegalInstructionError for any opcode or R-format function code
    outside the supported subset.
    """
    word &= 0xffffffff
    opcode = bits(word, 31, 26)
    fmt = instruction_format(opcode)
    if fmt == FORMAT_R:
        return _decode_r(word)
    if fmt == FORMAT_J:
        return _decode_j(word, opcode)
    return _decode_i(word, opcode)
