"""Shared pytest configuration and fixtures for the azdo test suite.

This module provides:
- An isolated configuration directory for every test
- An in-memory secret store standing in for the OS keyring
- Helpers to seed configuration files
"""
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import pytest


# Add src/ to path so test modules can import the azdo package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from azdo.config import Config, config_data  # noqa: E402
from azdo.config.errors import SecretStoreError  # noqa: E402
from azdo.config.secret_store import SecretStore  # noqa: E402
from azdo.logging import logger as azdo_logger  # noqa: E402


class InMemorySecretStore(SecretStore):
    """Secret store keeping secrets in a dict; ``fail`` simulates a broken backend"""

    def __init__(self, fail: bool = False):
        self.secrets: Dict[Tuple[str, str], str] = {}
        self.fail = fail

    def _check(self):
        if self.fail:
            raise SecretStoreError("secret store unavailable")

    def get(self, service: str, user: str) -> Optional[str]:
        self._check()
        return self.secrets.get((service, user))

    def set(self, service: str, user: str, secret: str) -> None:
        self._check()
        self.secrets[(service, user)] = secret

    def delete(self, service: str, user: str) -> None:
        self._check()
        if (service, user) not in self.secrets:
            raise SecretStoreError(f"secret {service} not found")
        del self.secrets[(service, user)]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point every azdo directory at tmp_path and clear azdo env overrides."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("AZDO_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    for name in ("AZDO_TOKEN", "AZDO_ORGANIZATION", "AZDO_EDITOR"):
        monkeypatch.delenv(name, raising=False)

    # Keep log output out of files; logging tests configure it explicitly
    monkeypatch.setattr(azdo_logger, "_logging_configured", True)
    root = logging.getLogger("azdo")
    saved = (list(root.handlers), root.propagate, root.level)

    config_data.reset()
    yield config_dir
    config_data.reset()

    root.handlers[:] = saved[0]
    root.propagate = saved[1]
    root.setLevel(saved[2])


@pytest.fixture
def config_dir(isolated_environment):
    return isolated_environment


@pytest.fixture
def secret_store():
    return InMemorySecretStore()


@pytest.fixture
def failing_secret_store():
    return InMemorySecretStore(fail=True)


@pytest.fixture
def write_config(config_dir):
    """Seed config.yml and/or organizations.yml in the isolated config dir."""

    def _write(general: Optional[str] = None, organizations: Optional[str] = None):
        config_dir.mkdir(parents=True, exist_ok=True)
        if general is not None:
            (config_dir / "config.yml").write_text(general, encoding="utf-8")
        if organizations is not None:
            (config_dir / "organizations.yml").write_text(organizations, encoding="utf-8")
        return config_dir

    return _write


@pytest.fixture
def make_config(config_dir, secret_store):
    """Load a fresh Config from the isolated config dir."""

    def _make(store=secret_store):
        data = config_data.load(
            config_dir / "config.yml", config_dir / "organizations.yml"
        )
        return Config(data, store)

    return _make


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (slower)"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on their location."""
    for item in items:
        if "integration" not in item.nodeid:
            item.add_marker(pytest.mark.unit)
