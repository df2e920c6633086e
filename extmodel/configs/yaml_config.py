"""
extmodel YAML Configuration

Loading, saving, and defaults for ~/.extmodel/config.yaml.
"""

from pathlib import Path

import yaml

from extmodel.configs.logging import get_logger
from extmodel.configs.paths import ensure_data_dir, get_data_path

logger = get_logger("configs")

# --- Default Config Template ---

DEFAULT_CONFIG_YAML = """\
# extmodel Configuration
# Edit this file to customize how class definition files are analyzed.

parser:
  # Global namespace object whose define() call declares a class
  factory_namespace: "Ext"
  define_method: "define"

  # Treat any syntax error as a failed parse (empty result for the file)
  strict_syntax: true

  # Calls whose first string argument names the instantiated class
  instantiation_selectors:
    - create
    - down
    - up
    - next
    - prev

  # Project id used when a request does not carry one
  default_project: "default"

jsdoc:
  # Stop processing comments longer than this many lines
  max_lines: 100

  # A first comment line containing one of these is tooling noise
  control_markers:
    - eslint
    - vscode-extjs
    - extmodel
"""


def get_config_path() -> Path:
    """Get the path to config.yaml."""
    return get_data_path() / "config.yaml"


def load_yaml_config() -> dict:
    """
    Load configuration from ~/.extmodel/config.yaml.

    Returns:
        Configuration dictionary (empty if file doesn't exist or is unreadable)
    """
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        content = config_path.read_text()
        loaded = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read {config_path}: {e}")
        return {}

    if not isinstance(loaded, dict):
        logger.warning(f"Ignoring {config_path}: top level is not a mapping")
        return {}
    return loaded


def create_default_config() -> bool:
    """
    Create default config.yaml if it doesn't exist.

    Returns:
        True if file was created, False if it already exists
    """
    config_path = get_config_path()
    if config_path.exists():
        return False

    ensure_data_dir()
    config_path.write_text(DEFAULT_CONFIG_YAML)
    return True
