import json

import pytest

from sim_config import SimConfig, _parse_bool, _parse_int, load_config, save_config


def test_parse_int():
    assert _parse_int(None, 5) == 5
    assert _parse_int("0x00400000") == 0x00400000
    assert _parse_int("12") == 12
    assert _parse_int(7) == 7
    assert _parse_int(True) == 1
    with pytest.raises(ValueError):
        _parse_int("abc")


def test_parse_bool():
    assert _parse_bool(None) is False
    assert _parse_bool(None, True) is True
    assert _parse_bool("Yes") is True
    assert _parse_bool("off") is False
    assert _parse_bool(1) is True
    assert _parse_bool(0) is False
    with pytest.raises(ValueError):
        _parse_bool("maybe")


def test_defaults():
    config = SimConfig()
    assert config.load_base == 0x00400000
    assert config.max_instrs == 1024
    assert config.max_data == 3072
    assert config.enforce_zero_register is True
    assert config.max_cycles is None
    assert config.byteorder == "little"
    assert not config.debugging


def test_load_config(tmp_path):
    path = tmp_path / "sim.json"
    path.write_text(json.dumps({
        "load_base": "0x00010000",
        "max_instrs": 16,
        "print_registers": "true",
        "enforce_zero_register": False,
        "max_cycles": "100",
        "byteorder": "BIG",
    }))
    config = load_config(str(path))
    assert config.load_base == 0x00010000
    assert config.max_instrs == 16
    assert config.max_data == 3072
    assert config.print_registers is True
    assert config.enforce_zero_register is False
    assert config.max_cycles == 100
    assert config.byteorder == "big"


def test_load_config_missing_file(tmp_path, capsys):
    config = load_config(str(tmp_path / "missing.json"))
    assert config.max_instrs == 1024
    assert "[SIM] No config found" in capsys.readouterr().out


def test_load_config_rejects_bad_input(tmp_path):
    path = tmp_path / "sim.json"

    path.write_text("{not json")
    with pytest.raises(ValueError, match="Malformed config"):
        load_config(str(path))

    path.write_text('{"max_instrs": 4, "colour": "blue"}')
    with pytest.raises(ValueError, match="Unknown config keys: colour"):
        load_config(str(path))

    path.write_text("[1, 2]")
    with pytest.raises(ValueError, match="JSON object"):
        load_config(str(path))

    path.write_text('{"byteorder": "middle"}')
    with pytest.raises(ValueError, match="byte order"):
        load_config(str(path))


def test_save_and_reload(tmp_path, capsys):
    path = tmp_path / "out.json"
    config = SimConfig(max_data=8, debugging=True, max_cycles=50)
    save_config(config, str(path))
    assert "[SIM] Saved config to" in capsys.readouterr().out
    assert json.loads(path.read_text())["load_base"] == "0x00400000"

    loaded = load_config(str(path))
    assert loaded.to_dict() == config.to_dict()
