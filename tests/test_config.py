"""Tests for config loading."""

import os
import tempfile

import pytest

from pantry.config import PantryConfig, load_config


@pytest.fixture(autouse=True)
def _no_api_keys(monkeypatch):
    for var in (
        "OPENAI_API_KEY",
        "EXPO_PUBLIC_OPENAI_API_KEY",
        "GEMINI_API_KEY",
        "EXPO_PUBLIC_GEMINI_API_KEY",
        "ANTHROPIC_API_KEY",
    ):
        monkeypatch.delenv(var, raising=False)


def _load_toml(content: bytes) -> PantryConfig:
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(content)
        f.flush()
        config = load_config(f.name)
    os.unlink(f.name)
    return config


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, PantryConfig)
    assert config.vision.providers == ["openai", "gemini"]
    assert config.vision.min_confidence == 0.5
    assert config.vision.mock_fallback is True
    assert config.vision.openai.api_key == ""
    assert config.vision.openai.model == "gpt-4o-mini"
    assert config.vision.openai.base_url == "https://api.openai.com/v1"
    assert config.vision.openai.timeout == 60.0
    assert config.vision.gemini.model == "gemini-2.5-flash"
    assert config.vision.claude.model == "claude-sonnet-4-5-20250929"


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.vision.providers == ["openai", "gemini"]


def test_load_config_from_toml():
    """Loading a valid TOML file populates config."""
    config = _load_toml(b"""\
[vision]
providers = ["gemini", "claude"]
min_confidence = 0.7
mock_fallback = false

[vision.openai]
api_key = "sk-test"
model = "gpt-4o"
base_url = "http://localhost:8080/v1"
timeout = 15

[vision.gemini]
api_key = "test-key-123"
model = "gemini-2.0-flash"
""")

    assert config.vision.providers == ["gemini", "claude"]
    assert config.vision.min_confidence == 0.7
    assert config.vision.mock_fallback is False
    assert config.vision.openai.api_key == "sk-test"
    assert config.vision.openai.model == "gpt-4o"
    assert config.vision.openai.base_url == "http://localhost:8080/v1"
    assert config.vision.openai.timeout == 15.0
    assert config.vision.gemini.api_key == "test-key-123"
    assert config.vision.gemini.model == "gemini-2.0-flash"


def test_load_config_env_override(monkeypatch):
    """Environment variables fill empty API keys."""
    monkeypatch.setenv("OPENAI_API_KEY", "env-openai-key")
    monkeypatch.setenv("GEMINI_API_KEY", "env-gemini-key")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-anthropic-key")

    config = load_config()
    assert config.vision.openai.api_key == "env-openai-key"
    assert config.vision.gemini.api_key == "env-gemini-key"
    assert config.vision.claude.api_key == "env-anthropic-key"


def test_load_config_expo_env_names(monkeypatch):
    """The mobile app's EXPO_PUBLIC_* names are accepted."""
    monkeypatch.setenv("EXPO_PUBLIC_OPENAI_API_KEY", "expo-openai")
    monkeypatch.setenv("EXPO_PUBLIC_GEMINI_API_KEY", "expo-gemini")

    config = load_config()
    assert config.vision.openai.api_key == "expo-openai"
    assert config.vision.gemini.api_key == "expo-gemini"


def test_load_config_plain_env_name_wins(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "plain")
    monkeypatch.setenv("EXPO_PUBLIC_OPENAI_API_KEY", "expo")
    assert load_config().vision.openai.api_key == "plain"


def test_load_config_file_key_takes_precedence(monkeypatch):
    """Config file API key takes precedence over env var."""
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")

    config = _load_toml(b"""\
[vision.openai]
api_key = "file-key"
""")
    assert config.vision.openai.api_key == "file-key"


def test_load_config_partial_toml():
    """Partial TOML uses defaults for missing sections."""
    config = _load_toml(b"""\
[vision.gemini]
model = "gemini-pro"
""")
    assert config.vision.gemini.model == "gemini-pro"
    assert config.vision.providers == ["openai", "gemini"]
    assert config.vision.openai.model == "gpt-4o-mini"
