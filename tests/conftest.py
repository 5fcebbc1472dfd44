"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Isolation:
    Every test runs with OSC_CONFIG_DIR pointing to a temporary directory
    whose application.yaml moves the token cache and the log file under
    tmp_path, and with all OS_* variables removed from the environment, so
    nothing reads or writes the real ~/.osc or ~/.config/osc.
"""

import os
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml

from ostack.core import logging as logging_module
from ostack.core.config import get_app_config, get_settings
from ostack.core.logging import setup_logging


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """User configuration directory under tmp_path, caches cleared around the test."""
    for name in list(os.environ):
        if name.startswith("OS_"):
            monkeypatch.delenv(name)

    config_dir = tmp_path / "osc-config"
    config_dir.mkdir()
    (config_dir / "application.yaml").write_text(
        yaml.safe_dump({"auth": {"cache_dir": str(tmp_path / "state")}})
    )
    monkeypatch.setenv("OSC_CONFIG_DIR", str(config_dir))

    get_settings.cache_clear()
    get_app_config.cache_clear()
    logging_module._logging_config = None
    setup_logging(enable_console=False, enable_file_logging=False)

    yield config_dir

    get_settings.cache_clear()
    get_app_config.cache_clear()
    logging_module._logging_config = None
