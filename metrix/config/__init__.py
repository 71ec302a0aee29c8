"""Config package - configuration loading and the data-source store."""

from .loader import load_config, save_config, get_config_path, DEFAULT_CONFIG
from .store import DataSourceConfig, read_data_source, write_data_source

__all__ = [
    "load_config",
    "save_config",
    "get_config_path",
    "DEFAULT_CONFIG",
    "DataSourceConfig",
    "read_data_source",
    "write_data_source",
]
