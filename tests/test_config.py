"""Tests for configuration loading."""

from pathlib import Path

import pytest

from manga_catalog import config as config_module
from manga_catalog.config import Settings
from manga_catalog.constants import CONFIG_ENV_VAR, StorageBackend


def test_defaults_when_config_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    settings = Settings(tmp_path / "missing.yaml")

    assert settings.storage_backend == StorageBackend.FILE
    assert settings.data_dir == Path("data")
    assert settings.storage_key == "mangas"
    assert settings.web_port == 8080
    assert settings.log_level == "INFO"


def test_loads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "storage:\n"
        "  backend: memory\n"
        f"  data_dir: {tmp_path / 'store'}\n"
        "  key: shelf\n"
        "web:\n"
        "  port: 9000\n"
        "log_level: debug\n",
        encoding="utf-8",
    )

    settings = Settings(path)

    assert settings.storage_backend == StorageBackend.MEMORY
    assert settings.data_dir == tmp_path / "store"
    assert settings.storage_key == "shelf"
    assert settings.web_port == 9000
    assert settings.log_level == "DEBUG"


def test_empty_sections_use_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("storage:\nweb:\n", encoding="utf-8")

    settings = Settings(path)
    assert settings.storage_key == "mangas"
    assert settings.web_host == "0.0.0.0"


@pytest.mark.parametrize("content", [
    "log_level: LOUD\n",
    "web:\n  port: 70000\n",
    "storage:\n  backend: s3\n",
    "storage: [1, 2\n",
])
def test_invalid_config_raises(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(Exception):
        Settings(path)


def test_template_copied_from_example(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    Path("config.example.yaml").write_text("storage:\n  key: from_example\n", encoding="utf-8")

    settings = Settings(tmp_path / "data" / "config.yaml")

    assert (tmp_path / "data" / "config.yaml").exists()
    assert settings.storage_key == "from_example"


def test_env_var_selects_config(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("storage:\n  key: env_key\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    monkeypatch.setattr(config_module, "_SETTINGS_SINGLETON", None)

    settings = config_module.get_settings()

    assert settings.config_path == path
    assert settings.storage_key == "env_key"
    assert config_module.get_settings() is settings
    assert config_module.reload_settings() is not settings
