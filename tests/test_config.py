from pathlib import Path

import pytest

from gemchat.config import (
    API_KEY_NAME, ConfigError, DEFAULT_CONFIG, GemConfig, resolve_api_key, save_api_key,
)


@pytest.fixture
def dirs(tmp_path: Path):
    cwd = tmp_path / "project"
    home = tmp_path / "home"
    cwd.mkdir()
    home.mkdir()
    return cwd, home


def test_cwd_env_file_wins(dirs) -> None:
    cwd, home = dirs
    (cwd / ".env").write_text(f"{API_KEY_NAME}=from-cwd\n", encoding="utf-8")
    (home / ".env").write_text(f"{API_KEY_NAME}=from-home\n", encoding="utf-8")
    key, source = resolve_api_key(cwd, home, {API_KEY_NAME: "from-env"})
    assert key == "from-cwd"
    assert source == "./.env"


def test_home_env_file_before_environment(dirs) -> None:
    cwd, home = dirs
    (cwd / ".env").write_text(f"{API_KEY_NAME}=\nOTHER=1\n", encoding="utf-8")
    (home / ".env").write_text(f"{API_KEY_NAME}=from-home\n", encoding="utf-8")
    key, source = resolve_api_key(cwd, home, {API_KEY_NAME: "from-env"})
    assert key == "from-home"
    assert source == "~/.env"


def test_environment_fallback(dirs) -> None:
    cwd, home = dirs
    key, source = resolve_api_key(cwd, home, {API_KEY_NAME: "from-env"})
    assert (key, source) == ("from-env", "environment")


def test_missing_key_raises_with_guidance(dirs) -> None:
    cwd, home = dirs
    with pytest.raises(ConfigError) as info:
        resolve_api_key(cwd, home, {})
    assert API_KEY_NAME in str(info.value)
    assert "--setkey" in str(info.value)


def test_saved_key_is_resolved(dirs) -> None:
    cwd, home = dirs
    path = save_api_key("saved-key", home=home)
    assert path == home / ".env"
    assert resolve_api_key(cwd, home, {}) == ("saved-key", "~/.env")


def test_save_rejects_empty_key(dirs) -> None:
    _, home = dirs
    with pytest.raises(ConfigError):
        save_api_key("  ", home=home)


def test_defaults_without_file(tmp_path: Path) -> None:
    config = GemConfig(path=tmp_path / "config.json")
    assert config.get("model") == DEFAULT_CONFIG["model"]
    assert not (tmp_path / "config.json").exists()


def test_set_validates_and_persists(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    config = GemConfig(path=path)
    config.set("temperature", "0.3")
    config.set("show_banner", "off")
    assert config.get("temperature") == 0.3
    assert config.get("show_banner") is False

    reloaded = GemConfig(path=path)
    assert reloaded.get("temperature") == 0.3

    with pytest.raises(ValueError):
        config.set("temperature", "5")
    with pytest.raises(ValueError):
        config.set("max_tokens", "lots")


def test_unreadable_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert GemConfig(path=path).get("chat_history_limit") == DEFAULT_CONFIG["chat_history_limit"]


def test_override_does_not_write(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    config = GemConfig(path=path)
    config.override("model", "gemini-2.5-pro")
    assert config.get("model") == "gemini-2.5-pro"
    assert config.model_info()["alias"] == "pro"
    assert not path.exists()
