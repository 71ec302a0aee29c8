"""Shared fixtures: keep tests away from the real environment and config file."""

import pytest

from metrix.config.loader import INSIGHT_KEY_ENV_VARS
from metrix.config.store import CREDENTIAL_ENV_VAR, ENDPOINT_ENV_VAR


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Clear env overrides and point the default config path at tmp_path."""
    for name in (ENDPOINT_ENV_VAR, CREDENTIAL_ENV_VAR, *INSIGHT_KEY_ENV_VARS):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        "metrix.config.loader.get_config_path",
        lambda: tmp_path / "default-config.json",
    )
