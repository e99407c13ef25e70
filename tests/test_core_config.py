"""Tests for configuration and logging helpers."""

import logging
from dataclasses import fields

import pytest

from listing_sheet import config
from listing_sheet.log import get_logger


def test_packaged_config_loads():
    cfg = config.get_config(reload=True)
    assert cfg["schema"] == "dynamic"


def test_get_config_value_nested():
    assert config.get_config_value("export", "sheet_name") == "Parsed Data"
    assert config.get_config_value("export", "missing", default="x") == "x"


def test_load_settings_defaults():
    settings = config.load_settings()
    assert settings.schema_mode == "dynamic"
    assert settings.export_file_name == "parsed_data_export.xlsx"
    assert settings.server_port == 7860


def test_env_overrides_schema(monkeypatch):
    monkeypatch.setenv(config.SCHEMA_ENV_VAR, " Fixed ")
    assert config.load_settings().schema_mode == "fixed"


def test_unknown_schema_rejected(monkeypatch):
    monkeypatch.setenv(config.SCHEMA_ENV_VAR, "adaptive")
    with pytest.raises(ValueError):
        config.load_settings()


def test_missing_config_file_uses_defaults(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "absent.yaml")
    assert config.load_settings(reload=True) == config.Settings()


def test_custom_config_file(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("schema: fixed\nexport:\n  sheet_name: Listings\n", encoding="utf-8")
    monkeypatch.setattr(config, "CONFIG_PATH", path)
    settings = config.load_settings(reload=True)
    assert settings.schema_mode == "fixed"
    assert settings.sheet_name == "Listings"
    assert settings.export_file_name == "parsed_data_export.xlsx"


def test_get_logger_cached():
    assert get_logger("test.cached") is get_logger("test.cached")


def test_get_logger_has_handler_and_format():
    logger = get_logger("test.format")
    assert isinstance(logger, logging.Logger)
    assert "%(name)s" in logger.handlers[0].formatter._fmt


def test_get_logger_accepts_level_name():
    logger = get_logger("test.level", level="debug")
    assert logger.level == logging.DEBUG


def test_settings_fields_are_listing_concerns():
    assert [f.name for f in fields(config.Settings)] == [
        "schema_mode",
        "export_file_name",
        "sheet_name",
        "log_level",
        "server_name",
        "server_port",
    ]


def test_configured_log_level_reaches_loggers(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("logging:\n  level: debug\n", encoding="utf-8")
    monkeypatch.setattr(config, "CONFIG_PATH", path)
    assert config.load_settings(reload=True).log_level == "debug"
    assert get_logger("test.configured_level").level == logging.DEBUG
