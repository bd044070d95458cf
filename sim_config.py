import json

from memory_map import LOAD_BASE, MAX_NUM_DATA, MAX_NUM_INSTRS


def _parse_int(value, default=0):
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


def _parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("1", "true", "yes", "on"):
            return True
        if text in ("0", "false", "no", "off"):
            return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _parse_byteorder(value, default="little"):
    if value is None:
        return default
    text = str(value).strip().lower()
    if text not in ("little", "big"):
        raise ValueError(f"Invalid byte order: {value!r}")
    return text


class SimConfig:
    _INT_KEYS = ("load_base", "max_instrs", "max_data")
    _OPTIONAL_INT_KEYS = ("max_cycles",)
    _BOOL_KEYS = (
        "print_registers",
        "print_memory",
        "debugging",
        "interactive",
        "enforce_zero_register",
    )

    def __init__(
        self,
        load_base=LOAD_BASE,
        max_instrs=MAX_NUM_INSTRS,
        max_data=MAX_NUM_DATA,
        print_registers=False,
        print_memory=False,
        debugging=False,
        interactive=False,
        enforce_zero_register=True,
        max_cycles=None,
        byteorder="little",
    ):
        self.load_base = load_base
        self.max_instrs = max_instrs
        self.max_data = max_data
        self.print_registers = print_registers
        self.print_memory = print_memory
        self.debugging = debugging
        self.interactive = interactive
        self.enforce_zero_register = enforce_zero_register
        self.max_cycles = max_cycles
        self.byteorder = byteorder

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError("Config must be a JSON object")
        known = set(cls._INT_KEYS) | set(cls._OPTIONAL_INT_KEYS) | set(cls._BOOL_KEYS) | {"byteorder"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        config = cls()
        for key in cls._INT_KEYS:
            if key in data:
                setattr(config, key, _parse_int(data[key]))
        for key in cls._OPTIONAL_INT_KEYS:
            if key in data:
                setattr(config, key, _parse_int(data[key], default=None))
        for key in cls._BOOL_KEYS:
            if key in data:
                setattr(config, key, _parse_bool(data[key]))
        config.byteorder = _parse_byteorder(data.get("byteorder"))
        return config

    def to_dict(self):
        return {
            "load_base": f"0x{self.load_base:08x}",
            "max_instrs": self.max_instrs,
            "max_data": self.max_data,
            "print_registers": self.print_registers,
            "print_memory": self.print_memory,
            "debugging": self.debugging,
            "interactive": self.interactive,
            "enforce_zero_register": self.enforce_zero_register,
            "max_cycles": self.max_cycles,
            "byteorder": self.byteorder,
        }


def load_config(filename):
    """Load a SimConfig from a JSON file; a missing file yields defaults."""
    try:
        with open(filename, "r") as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"[SIM] No config found: {filename}")
        return SimConfig()
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed config {filename}: {e}") from e
    return SimConfig.from_dict(data)


def save_config(config, filename):
    with open(filename, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
    print(f"[SIM] Saved config to {filename}")
