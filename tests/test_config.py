"""
Tests for Configuration

Tests runtime config merging, YAML loading, paths and logging setup.
"""

import logging

import pytest

from extmodel.configs import (
    DEFAULT_CONFIG,
    create_default_config,
    get_config_path,
    get_data_path,
    get_full_config,
    get_logger,
    get_snapshot_path,
    load_yaml_config,
    setup_logging,
    validate_config,
)
from extmodel.exceptions import ConfigurationError


class TestPaths:
    """Test data directory resolution."""

    def test_data_path_from_env(self, isolated_data_path):
        assert get_data_path() == isolated_data_path

    def test_snapshot_path_is_sanitized(self, isolated_data_path):
        path = get_snapshot_path("my project/1")
        assert path == isolated_data_path / "snapshots" / "my_project_1.json"


class TestYamlConfig:
    """Test config.yaml handling."""

    def test_missing_file(self):
        assert load_yaml_config() == {}

    def test_create_default_config(self):
        assert create_default_config()
        assert not create_default_config()
        loaded = load_yaml_config()
        assert loaded["parser"]["factory_namespace"] == "Ext"
        assert loaded["jsdoc"]["max_lines"] == 100

    def test_invalid_yaml_ignored(self):
        get_config_path().parent.mkdir(parents=True, exist_ok=True)
        get_config_path().write_text("parser: [unclosed")
        assert load_yaml_config() == {}


class TestRuntimeConfig:
    """Test merged runtime configuration."""

    def test_defaults(self):
        config = get_full_config()
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_yaml_overrides_defaults(self):
        get_config_path().parent.mkdir(parents=True, exist_ok=True)
        get_config_path().write_text("parser:\n  factory_namespace: Sx\njsdoc:\n  max_lines: 10\n")
        config = get_full_config()
        assert config["factory_namespace"] == "Sx"
        assert config["doc_max_lines"] == 10

    def test_env_overrides_yaml(self, monkeypatch):
        get_config_path().parent.mkdir(parents=True, exist_ok=True)
        get_config_path().write_text("parser:\n  factory_namespace: Sx\n")
        monkeypatch.setenv("EXTMODEL_FACTORY_NAMESPACE", "Env")
        monkeypatch.setenv("EXTMODEL_STRICT_SYNTAX", "false")
        config = get_full_config()
        assert config["factory_namespace"] == "Env"
        assert config["strict_syntax"] is False

    def test_explicit_overrides_win(self, monkeypatch):
        monkeypatch.setenv("EXTMODEL_FACTORY_NAMESPACE", "Env")
        assert get_full_config({"factory_namespace": "Call"})["factory_namespace"] == "Call"

    def test_invalid_values(self):
        with pytest.raises(ConfigurationError):
            get_full_config({"instantiation_selectors": "create"})
        with pytest.raises(ConfigurationError):
            get_full_config({"doc_max_lines": 0})
        with pytest.raises(ConfigurationError):
            get_full_config({"factory_namespace": ""})

    def test_bad_yaml_section(self):
        get_config_path().parent.mkdir(parents=True, exist_ok=True)
        get_config_path().write_text("parser: 5\n")
        with pytest.raises(ConfigurationError):
            get_full_config()

    def test_validate_config_returns_config(self, config):
        assert validate_config(config) is config


class TestLogging:
    """Test logging setup."""

    def teardown_method(self):
        logging.getLogger("extmodel").handlers.clear()

    def test_stderr_only(self):
        logger = setup_logging(debug=True, log_file="")
        assert logger.name == "extmodel"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "extmodel.log"
        logger = setup_logging(debug=False, log_file=str(log_file))
        assert len(logger.handlers) == 2
        assert log_file.exists()

    def test_file_handler_gets_debug(self, tmp_path):
        log_file = tmp_path / "extmodel.log"
        logger = setup_logging(debug=True, log_file=str(log_file))
        stderr_handler, file_handler = logger.handlers
        assert stderr_handler.level == logging.WARNING
        assert file_handler.level == logging.DEBUG

        get_logger("registry").debug("upserted")
        file_handler.flush()
        assert "[extmodel.registry] upserted" in log_file.read_text()

    def test_component_logger(self):
        assert get_logger("registry").name == "extmodel.registry"
