"""
extmodel Configuration Module

Re-exports commonly used functions for cleaner imports across the codebase.
"""

# Logging (most commonly used)
from extmodel.configs.logging import get_logger, setup_logging

# Paths
from extmodel.configs.paths import ensure_data_dir, get_data_path, get_snapshot_path

# YAML config
from extmodel.configs.yaml_config import (
    DEFAULT_CONFIG_YAML,
    create_default_config,
    get_config_path,
    load_yaml_config,
)

# Runtime
from extmodel.configs.runtime import DEFAULT_CONFIG, get_full_config, validate_config

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Paths
    "get_data_path",
    "ensure_data_dir",
    "get_snapshot_path",
    # YAML config
    "DEFAULT_CONFIG_YAML",
    "get_config_path",
    "load_yaml_config",
    "create_default_config",
    # Runtime
    "DEFAULT_CONFIG",
    "get_full_config",
    "validate_config",
]
