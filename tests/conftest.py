from __future__ import annotations

from pathlib import Path

import pytest

from qrc_ass.config import AppConfig


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in (
        "QRC_ASS_STYLE",
        "QRC_ASS_LAYER",
        "QRC_ASS_MARGINS",
        "QRC_ASS_ROUNDING",
        "QRC_ASS_HEADER_TOLERANCE_MS",
        "QRC_ASS_FULL_HEADER",
        "QRC_ASS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cfg(tmp_path) -> AppConfig:
    return AppConfig(config_dir=Path(tmp_path))
