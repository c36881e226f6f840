from __future__ import annotations

import os
from pathlib import Path

import pytest

from btce_client.common import env


def test_init_env_loads_dotenv_without_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("BTCE_ENV_TEST_NEW=from-file\nBTCE_ENV_TEST_KEEP=from-file\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(env, "_project_root", lambda: None)
    monkeypatch.setenv("BTCE_ENV_TEST_NEW", "placeholder")
    monkeypatch.delenv("BTCE_ENV_TEST_NEW")
    monkeypatch.setenv("BTCE_ENV_TEST_KEEP", "from-process")

    env.init_env.cache_clear()
    try:
        env.init_env()
    finally:
        env.init_env.cache_clear()

    assert os.environ["BTCE_ENV_TEST_NEW"] == "from-file"
    assert os.environ["BTCE_ENV_TEST_KEEP"] == "from-process"
