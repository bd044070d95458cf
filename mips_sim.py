# mips_sim.py
# Step-at-a-time simulator for a MIPS32 integer subset

import signal
import sys

from cpu_core import CPUCore
from decoder import OP_LW, decode
from loader import load_program
from machine_state import MachineState
from sim_config import SimConfig, _parse_int, load_config, save_config
from sim_errors import IllegalInstructionError, MemoryOutOfRangeError, SimError
from tracer import Tracer, format_registers

HALT_ILLEGAL_INSTRUCTION = "illegal_instruction"
HALT_MEMORY_OUT_OF_RANGE = "memory_out_of_range"
HALT_USER_REQUESTED = "user_requested"


class HaltException(Exception):
    def __init__(self, reason, code=None):
        message = f"{reason}: 0x{code:08x}" if code is not None else reason
        super().__init__(message)
        self.reason = reason
        self.code = code


class MipsSim:
    def __init__(self, config=None):
        self.config = config or SimConfig()
        self.state = MachineState(
            base=self.config.load_base,
            max_instrs=self.config.max_instrs,
            max_data=self.config.max_data,
            enforce_zero=self.config.enforce_zero_register,
        )
        self.cpu = CPUCore(self.state)
        self.observers = []
        self.halt_reason = None
        self.halt_code = None
        self.instr_count = 0
        self.last_pc = None
        self.last_decoded = None
        self.changed_reg = None
        self.changed_mem = None

    @property
    def pc(self):
        return self.state.pc

    @pc.setter
    def pc(self, value):
        self.state.pc = value & 0xffffffff

    @property
    def regs(self):
        return self.state.regs

    @property
    def memory(self):
        return self.state.memory

    @property
    def running(self):
        return self.halt_reason is None

    def attach(self, observer):
        self.observers.append(observer)

    def load_words(self, words):
        return self.state.memory.load_program(words)

    def load_file(self, filename):
        return load_program(self.state.memory, filename, self.config.byteorder)

    def store_word(self, addr, value):
        """Place a word anywhere in memory, bypassing the data-segment check."""
        self.state.memory.words[self.state.memory.index_of(addr, "write")] = value & 0xffffffff

    def _debug(self, message):
        if self.config.debugging:
            print(f"[DEBUG] {message}")

    def _halt(self, reason, code=None):
        self.halt_reason = reason
        self.halt_code = code
        raise HaltException(reason, code)

    def request_halt(self):
        """Stop the simulation at the next cycle boundary."""
        if self.halt_reason is None:
            self.halt_reason = HALT_USER_REQUESTED

    def execute(self):
        if self.halt_reason is not None:
            raise HaltException(self.halt_reason, self.halt_code)

        pc = self.state.pc
        try:
            word = self.state.memory.fetch(pc)
            decoded = decode(word)
            value = self.cpu.execute(decoded)
            next_pc = self.cpu.next_pc(pc, decoded, value)
            self._debug(f"{decoded!r} value=0x{value & 0xffffffff:08x} next_pc=0x{next_pc:08x}")
            value, changed_mem = self.cpu.access_memory(decoded, value)
            if decoded.opcode == OP_LW:
                self._debug(f"loaded 0x{value & 0xffffffff:08x}")
        except IllegalInstructionError as e:
            print(f"[SIM] {e}")
            self._halt(HALT_ILLEGAL_INSTRUCTION, e.word)
        except MemoryOutOfRangeError as e:
            print(f"[SIM] {e}")
            self._halt(HALT_MEMORY_OUT_OF_RANGE, e.addr)

        self.changed_reg = self.cpu.writeback(decoded, value)
        self.changed_mem = changed_mem
        self.state.pc = next_pc
        self.last_pc = pc
        self.last_decoded = decoded
        self.instr_count += 1

        for observer in self.observers:
            observer(self)

    def step(self):
        try:
            self.execute()
            return True
        except HaltException as e:
            print(f"[SIM] Execution stopped: {e}")
            return False

    def run(self, max_cycles=None):
        """Step until halted or max_cycles cycles ran; returns the cycle count."""
        executed = 0
        while self.running:
            if max_cycles is not None and executed >= max_cycles:
                break
            if not self.step():
                break
            executed += 1
        return executed


USAGE = """Usage: python mips_sim.py PROGRAM [OPTIONS]
Options:
  --config=FILE    Load simulator settings from a JSON config
  --regs           Print every register after each instruction
  --mem            Print all nonzero data memory after each instruction
  --debug          Print per-stage debug information
  --interactive    Prompt before each instruction ('q' quits)
  --max-cycles=N   Stop after N instructions
  --big-endian     Program file stores words big-endian
  --no-zero-reg    Let writes to register 0 land
  --save-config=FILE  Write the effective settings to a JSON config"""


def interactive_loop(sim, max_cycles=None, read_line=None):
    if read_line is None:
        read_line = input
    executed = 0
    while sim.running:
        if max_cycles is not None and executed >= max_cycles:
            break
        try:
            line = read_line("> ")
        except EOFError:
            line = "q"
        if line.strip().lower().startswith("q"):
            sim.request_halt()
        if not sim.running or not sim.step():
            break
        executed += 1
    return executed


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    program = None
    config_file = None
    save_file = None
    overrides = {}

    while args:
        arg = args.pop(0)
        if arg.startswith("--config="):
            config_file = arg.split("=", 1)[1]
        elif arg == "--regs":
            overrides["print_registers"] = True
        elif arg == "--mem":
            overrides["print_memory"] = True
        elif arg == "--debug":
            overrides["debugging"] = True
        elif arg == "--interactive":
            overrides["interactive"] = True
        elif arg.startswith("--max-cycles="):
            try:
                overrides["max_cycles"] = _parse_int(arg.split("=", 1)[1])
            except ValueError:
                print(f"Invalid cycle count: {arg}")
                return 1
        elif arg == "--big-endian":
            overrides["byteorder"] = "big"
        elif arg == "--no-zero-reg":
            overrides["enforce_zero_register"] = False
        elif arg.startswith("--save-config="):
            save_file = arg.split("=", 1)[1]
        elif arg in ("-h", "--help"):
            print(USAGE)
            return 0
        elif arg.startswith("-"):
            print(f"Unknown option: {arg}")
            return 1
        else:
            if program:
                print("Only one program file allowed")
                return 1
            program = arg

    if not program:
        print(USAGE)
        return 1

    try:
        config = load_config(config_file) if config_file else SimConfig()
        for key, value in overrides.items():
            setattr(config, key, value)
        sim = MipsSim(config)
        sim.load_file(program)
        if save_file:
            save_config(config, save_file)
    except (OSError, ValueError, SimError) as e:
        print(f"[ERROR] {e}")
        return 1

    tracer = Tracer(config.print_registers, config.print_memory)
    sim.attach(tracer)

    # Ctrl-C becomes a halt request, honored at the next cycle boundary
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: sim.request_halt())
    try:
        if config.interactive:
            interactive_loop(sim, config.max_cycles)
        else:
            sim.run(config.max_cycles)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    reason = sim.halt_reason or "cycle limit reached"
    print(f"[SIM] Halted: {reason} after {sim.instr_count} instructions")
    print(f"pc = {sim.pc:08x}")
    print(format_registers(sim.regs))
    if sim.halt_reason in (HALT_ILLEGAL_INSTRUCTION, HALT_MEMORY_OUT_OF_RANGE):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
