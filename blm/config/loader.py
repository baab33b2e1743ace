from __future__ import annotations

import codecs
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader for the BLM tooling.

Responsibilities:
- Load a YAML config file (e.g. config/blm.yml)
- Validate it against the bundled JSON schema (unknown keys are rejected)
- Apply defaults for every key that is missing
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class BLMConfig:
    eof: str = "^"  # field separator for generated documents
    eor: str = "~"  # record separator for generated documents
    international: bool = False  # generated documents declare version 3i
    encoding: str = "utf-8"  # used when decoding files read from disk
    decode_errors: str = "strict"
    error_log_dir: str = "./logs"


DEFAULT_CONFIG = BLMConfig()


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: if the schema file is missing or not valid JSON, or if
            the config data violates the schema.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> BLMConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    cfg = BLMConfig(**data)
    if cfg.eof == cfg.eor:
        raise ConfigError(f"eof and eor must differ (both {cfg.eof!r})")
    try:
        codecs.lookup(cfg.encoding)
    except LookupError as e:
        raise ConfigError(f"unknown encoding: {cfg.encoding}") from e
    return cfg
