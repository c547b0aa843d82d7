"""Configuration tests. CONFIG_FILE is patched so real settings are never touched."""

import json
from unittest.mock import patch

import pytest

from llamachat.config import DEFAULT_SYSTEM_PROMPT, Config


def test_config_defaults():
    cfg = Config()

    assert cfg.host == "http://localhost:11434"
    assert cfg.default_model == "llama3.2"
    assert cfg.system_prompt == DEFAULT_SYSTEM_PROMPT
    assert cfg.chat_url == "http://localhost:11434/api/chat"
    assert cfg.tags_url == "http://localhost:11434/api/tags"


def test_config_save_load(tmp_path, monkeypatch):
    monkeypatch.delenv("OLLAMA_HOST", raising=False)
    fake_config_file = tmp_path / "settings.json"

    with patch("llamachat.config.CONFIG_FILE", str(fake_config_file)):
        cfg = Config()
        cfg.default_model = "codellama"
        cfg.chat_timeout = 120
        cfg.save()

        cfg_loaded = Config()
        cfg_loaded.load()

    assert cfg_loaded.default_model == "codellama"
    assert cfg_loaded.chat_timeout == 120


def test_load_creates_missing_file(tmp_path, monkeypatch):
    monkeypatch.delenv("OLLAMA_HOST", raising=False)
    fake_config_file = tmp_path / "settings.json"

    with patch("llamachat.config.CONFIG_FILE", str(fake_config_file)):
        Config().load()

    assert json.loads(fake_config_file.read_text())["default_model"] == "llama3.2"


def test_load_ignores_unknown_keys(tmp_path, monkeypatch):
    monkeypatch.delenv("OLLAMA_HOST", raising=False)
    fake_config_file = tmp_path / "settings.json"
    fake_config_file.write_text(json.dumps({"refresh_rate": 30, "host": "box:11434"}))

    with patch("llamachat.config.CONFIG_FILE", str(fake_config_file)):
        cfg = Config()
        cfg.load()

    assert not hasattr(cfg, "refresh_rate")
    assert cfg.base_url == "http://box:11434"


def test_env_host_overrides_stored_host(tmp_path, monkeypatch):
    monkeypatch.setenv("OLLAMA_HOST", "http://gpu-box:11434/")
    fake_config_file = tmp_path / "settings.json"

    with patch("llamachat.config.CONFIG_FILE", str(fake_config_file)):
        cfg = Config()
        cfg.load()

    assert cfg.chat_url == "http://gpu-box:11434/api/chat"


@pytest.mark.parametrize("payload", [[], "x", 3, None])
def test_load_rejects_non_object_settings(tmp_path, payload):
    fake_config_file = tmp_path / "settings.json"
    fake_config_file.write_text(json.dumps(payload))

    with patch("llamachat.config.CONFIG_FILE", str(fake_config_file)):
        with pytest.raises(ValueError):
            Config().load()


def test_load_skips_values_of_the_wrong_type(tmp_path, monkeypatch):
    monkeypatch.delenv("OLLAMA_HOST", raising=False)
    fake_config_file = tmp_path / "settings.json"
    fake_config_file.write_text(
        json.dumps(
            {
                "host": None,
                "chat_timeout": "slow",
                "probe_timeout": True,
                "listing_timeout": 2.5,
                "default_model": "phi3:mini",
            }
        )
    )

    with patch("llamachat.config.CONFIG_FILE", str(fake_config_file)):
        cfg = Config()
        cfg.load()

    assert cfg.base_url == "http://localhost:11434"
    assert cfg.chat_timeout == 60
    assert cfg.probe_timeout == 5
    assert cfg.listing_timeout == 2.5
    assert cfg.default_model == "phi3:mini"
