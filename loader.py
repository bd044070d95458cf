import os
import struct

WORD_BYTES = 4


def unpack_words(data, byteorder="little"):
    """Split raw bytes into 32-bit words; a trailing partial word is dropped."""
    if byteorder not in ("little", "big"):
        raise ValueError(f"Invalid byte order: {byteorder!r}")
    count = len(data) // WORD_BYTES
    fmt = ("<" if byteorder == "little" else ">") + "I" * count
    return list(struct.unpack(fmt, data[:count * WORD_BYTES]))


def read_program(filename, byteorder="little"):
    if not os.path.isfile(filename):
        raise FileNotFoundError(f"Program file not found: {filename}")

    with open(filename, "rb") as f:
        data = f.read()

    words = unpack_words(data, byteorder)
    extra = len(data) % WORD_BYTES
    if extra:
        print(f"[SIM] Ignoring {extra} trailing byte(s) in {filename}")
    return words


def load_program(memory, filename, byteorder="little"):
    """Read filename and place its words at the start of the text segment."""
    words = read_program(filename, byteorder)
    count = memory.load_program(words)
    print(f"[SIM] Loaded program: {os.path.abspath(filename)} ({count} words)")
    return count
