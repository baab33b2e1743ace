# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path

import pytest

from blm.logging.init import reset_logging

SAMPLE_BLM = """#HEADER#
VERSION : 3
EOF : '^'
EOR : '~'
Property Count : 2
Generated Date : 01-JAN-2024 10:00

#DEFINITION#
AGENT_REF^ADDRESS_1^PRICE^~

#DATA#
1234_001^1 High Street^250000^~
1234_002^2 Low Road^180000^~
#END#
"""

INVALID_ROW_BLM = SAMPLE_BLM.replace("1234_002^2 Low Road^180000^~", "1234_002^2 Low Road~")


@pytest.fixture()
def sample_blm() -> str:
    return SAMPLE_BLM


@pytest.fixture()
def invalid_row_blm() -> str:
    return INVALID_ROW_BLM


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    """Isolated working directory without config, .env or BLM_CONFIG."""
    monkeypatch.chdir(tmp_path)
    # setenv first so teardown removes anything a .env file loads
    monkeypatch.setenv("BLM_CONFIG", "")
    monkeypatch.delenv("BLM_CONFIG")
    reset_logging()
    yield tmp_path
    reset_logging()


@pytest.fixture()
def blm_files(temp_workdir: Path) -> dict[str, Path]:
    data = temp_workdir / "data"
    data.mkdir()
    files = {
        "valid": data / "valid.blm",
        "invalid": data / "invalid.blm",
        "broken": data / "broken.blm",
    }
    files["valid"].write_text(SAMPLE_BLM, encoding="utf-8")
    files["invalid"].write_text(INVALID_ROW_BLM, encoding="utf-8")
    files["broken"].write_text(SAMPLE_BLM.replace("#DATA#", ""), encoding="utf-8")
    return files
