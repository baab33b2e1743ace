from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from blm.config.loader import DEFAULT_CONFIG, ConfigError, _validate_config_schema, load_config


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "blm.yml"
    p.write_text(text, encoding="utf-8")
    return p


def test_load_config_success(tmp_path: Path):
    cfg = load_config(_write(tmp_path, "eof: '|'\neor: ';'\ninternational: true\nencoding: latin-1\n"))
    assert cfg.eof == "|"
    assert cfg.eor == ";"
    assert cfg.international is True
    assert cfg.encoding == "latin-1"
    assert cfg.decode_errors == "strict"


def test_load_config_empty_file_uses_defaults(tmp_path: Path):
    assert load_config(_write(tmp_path, "")) == DEFAULT_CONFIG


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError) as e:
        load_config(tmp_path / "not_exists.yml")
    assert "config file not found" in str(e.value)


def test_load_config_invalid_yaml(tmp_path: Path):
    with pytest.raises(ConfigError) as e:
        load_config(_write(tmp_path, "eof: [\n"))
    assert "invalid yaml" in str(e.value)


def test_load_config_root_not_mapping(tmp_path: Path):
    with pytest.raises(ConfigError) as e:
        load_config(_write(tmp_path, "- eof\n"))
    assert "config root must be a mapping" in str(e.value)


def test_load_config_extra_field(tmp_path: Path):
    with pytest.raises(ConfigError) as e:
        load_config(_write(tmp_path, "extra_field: not_allowed\n"))
    assert "config validation failed" in str(e.value)


def test_load_config_separator_must_be_single_char(tmp_path: Path):
    with pytest.raises(ConfigError) as e:
        load_config(_write(tmp_path, "eof: '^^'\n"))
    assert "config validation failed" in str(e.value)


def test_load_config_identical_separators(tmp_path: Path):
    with pytest.raises(ConfigError) as e:
        load_config(_write(tmp_path, "eof: '~'\n"))
    assert "eof and eor must differ" in str(e.value)


def test_load_config_unknown_encoding(tmp_path: Path):
    with pytest.raises(ConfigError) as e:
        load_config(_write(tmp_path, "encoding: no-such-codec\n"))
    assert "unknown encoding" in str(e.value)


def test_load_config_bad_decode_errors(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, "decode_errors: ignore\n"))


def test_validate_config_schema_missing_schema_file():
    with patch("blm.config.loader.SCHEMA_PATH", Path("/nonexistent/schema.json")):
        with pytest.raises(ConfigError) as e:
            _validate_config_schema({})
        assert "config schema not found" in str(e.value)


def test_validate_config_schema_invalid_json_schema(tmp_path: Path):
    bad = tmp_path / "schema.json"
    bad.write_text("{ invalid json }", encoding="utf-8")
    with patch("blm.config.loader.SCHEMA_PATH", bad):
        with pytest.raises(ConfigError) as e:
            _validate_config_schema({})
        assert "invalid schema file" in str(e.value)
