"""
extmodel Runtime Configuration

Combines defaults, YAML config, and environment variables into the flat
dictionary the parser, extractors and doc parser read their knobs from.
"""

import copy
import os
from typing import Optional

from extmodel.configs.yaml_config import load_yaml_config
from extmodel.exceptions import ConfigurationError

# --- Default Runtime Configuration ---

DEFAULT_CONFIG = {
    "factory_namespace": "Ext",
    "define_method": "define",
    "strict_syntax": True,
    "instantiation_selectors": ["create", "down", "up", "next", "prev"],
    "default_project": "default",
    "doc_max_lines": 100,
    "doc_control_markers": ["eslint", "vscode-extjs", "extmodel"],
}

# config.yaml section -> {yaml key: runtime key}
_YAML_KEYS = {
    "parser": {
        "factory_namespace": "factory_namespace",
        "define_method": "define_method",
        "strict_syntax": "strict_syntax",
        "instantiation_selectors": "instantiation_selectors",
        "default_project": "default_project",
    },
    "jsdoc": {
        "max_lines": "doc_max_lines",
        "control_markers": "doc_control_markers",
    },
}


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def validate_config(config: dict) -> dict:
    """
    Check value types of a merged configuration.

    Raises:
        ConfigurationError: If a value has the wrong type
    """
    for key in ("factory_namespace", "define_method", "default_project"):
        if not isinstance(config.get(key), str) or not config[key]:
            raise ConfigurationError(f"'{key}' must be a non-empty string", {key: config.get(key)})

    for key in ("instantiation_selectors", "doc_control_markers"):
        value = config.get(key)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(f"'{key}' must be a list of strings", {key: value})

    max_lines = config.get("doc_max_lines")
    if isinstance(max_lines, bool) or not isinstance(max_lines, int) or max_lines <= 0:
        raise ConfigurationError("'doc_max_lines' must be a positive integer", {"doc_max_lines": max_lines})

    if not isinstance(config.get("strict_syntax"), bool):
        raise ConfigurationError("'strict_syntax' must be a boolean", {"strict_syntax": config.get("strict_syntax")})

    return config


def get_full_config(overrides: Optional[dict] = None) -> dict:
    """
    Get the merged runtime configuration.

    Priority (highest first):
    1. Explicit overrides passed by the caller
    2. EXTMODEL_* environment variables
    3. parser/jsdoc sections of config.yaml
    4. DEFAULT_CONFIG

    Args:
        overrides: Optional runtime key overrides

    Returns:
        Validated configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    yaml_config = load_yaml_config()
    for section, keys in _YAML_KEYS.items():
        section_config = yaml_config.get(section) or {}
        if not isinstance(section_config, dict):
            raise ConfigurationError(f"config.yaml section '{section}' must be a mapping")
        for yaml_key, runtime_key in keys.items():
            if yaml_key in section_config:
                config[runtime_key] = section_config[yaml_key]

    env_namespace = os.environ.get("EXTMODEL_FACTORY_NAMESPACE")
    if env_namespace:
        config["factory_namespace"] = env_namespace
    env_strict = os.environ.get("EXTMODEL_STRICT_SYNTAX")
    if env_strict:
        config["strict_syntax"] = _env_bool(env_strict)

    if overrides:
        config.update(overrides)

    return validate_config(config)
