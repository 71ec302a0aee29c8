"""
Data-source configuration store.

Persists the external endpoint address and optional bearer credential in the
``data_source`` section of the config file. Reading never fails; writing
always overwrites both keys.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from metrix.config.loader import read_config_file, save_config

logger = logging.getLogger(__name__)

ENDPOINT_ENV_VAR = "METRIX_API_URL"
CREDENTIAL_ENV_VAR = "METRIX_API_KEY"


@dataclass(frozen=True)
class DataSourceConfig:
    """Where dashboard data comes from."""
    endpoint: Optional[str] = None
    credential: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        """True when an endpoint address is set."""
        return bool(self.endpoint and self.endpoint.strip())

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)


def _string_or_none(value, key: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        logger.warning("Ignoring non-string data_source.%s value", key)
        return None
    return value


def read_data_source(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DataSourceConfig:
    """
    Read the configured data source.

    Missing file, section or keys yield absent values. METRIX_API_URL and
    METRIX_API_KEY, when set, take precedence over the file.
    """
    env = os.environ if environ is None else environ
    section = read_config_file(path).get("data_source")
    if not isinstance(section, dict):
        section = {}

    endpoint = _string_or_none(section.get("endpoint"), "endpoint")
    credential = _string_or_none(section.get("credential"), "credential")

    if env.get(ENDPOINT_ENV_VAR):
        endpoint = env[ENDPOINT_ENV_VAR]
    if env.get(CREDENTIAL_ENV_VAR):
        credential = env[CREDENTIAL_ENV_VAR]

    return DataSourceConfig(endpoint=endpoint, credential=credential)


def write_data_source(source: DataSourceConfig, path: Optional[Path] = None) -> None:
    """
    Overwrite both data-source keys.

    Absent values are stored as empty strings; the keys are never removed.
    Other config sections are preserved.
    """
    raw = read_config_file(path)
    raw["data_source"] = {
        "endpoint": source.endpoint or "",
        "credential": source.credential or "",
    }
    save_config(raw, path)
    logger.info("Saved data source (endpoint %s)", "set" if source.is_configured else "cleared")


def mask_credential(credential: Optional[str]) -> str:
    """Render a credential for display without revealing it."""
    if not credential:
        return ""
    if len(credential) <= 4:
        return "*" * len(credential)
    return "*" * (len(credential) - 4) + credential[-4:]
