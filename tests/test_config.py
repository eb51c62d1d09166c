"""Tests for the settings manager and config helpers"""
import json

import config
from config import as_bool, as_optional_float, conf
from settings import SettingsManager


def test_defaults_without_settings_file(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")

    assert manager.get("server.port") == 52100
    assert manager.get("album_art.resolution") == 1080
    assert manager.get("album_art.download_timeout") is None
    assert manager.get("unknown.key", "fallback") == "fallback"
    assert not (tmp_path / "settings.json").exists()


def test_values_are_converted_to_declared_types(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "server.port": "6000",
        "debug.log_to_console": "no",
        "album_art.download_timeout": 7,
        "not.a.setting": 1,
    }))

    manager = SettingsManager(path)

    assert manager.get("server.port") == 6000
    assert manager.get("debug.log_to_console") is False
    assert manager.get("album_art.download_timeout") == 7.0
    assert "not.a.setting" not in manager.get_all()


def test_invalid_value_falls_back_to_default(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"server.port": "not-a-number"}))

    assert SettingsManager(path).get("server.port") == 52100


def test_corrupt_file_is_backed_up(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{ this is not json")

    manager = SettingsManager(path)

    assert manager.get("server.host") == "127.0.0.1"
    assert (tmp_path / "settings.json.corrupted").exists()


def test_env_var_overrides_settings(monkeypatch):
    monkeypatch.setenv("SERVER_PORT", "6001")

    assert conf("server.port") == "6001"


def test_conf_falls_back_to_default(monkeypatch):
    monkeypatch.delenv("SOME_MISSING_KEY", raising=False)

    assert conf("some.missing_key", "default") == "default"


def test_as_bool():
    assert as_bool("true") is True
    assert as_bool("ON") is True
    assert as_bool("0") is False
    assert as_bool(False) is False


def test_as_optional_float():
    assert as_optional_float(None) is None
    assert as_optional_float("") is None
    assert as_optional_float("2.5") == 2.5


def test_server_identity():
    assert config.SERVER_NAME == "bloxify-server v0.1.0"
