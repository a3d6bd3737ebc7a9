"""
Loader Settings Test
====================
"""

import pytest

from confstore.config import GLIZY_NAMESPACE, LoaderSettings

ENV_VARS = [
    "CONFSTORE_SKIP_IF_MISSING",
    "CONFSTORE_CACHE_DIR",
    "CONFSTORE_NAMESPACE",
    "CONFSTORE_LOG_LEVEL",
    "CONFSTORE_LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults(tmp_path):
    settings = LoaderSettings.from_env(str(tmp_path / "missing.env"))

    assert settings.skip_if_missing is True
    assert settings.cache_dir == "cache"
    assert settings.namespace == GLIZY_NAMESPACE
    assert settings.log_level == "INFO"
    assert settings.log_file is None


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CONFSTORE_SKIP_IF_MISSING", "off")
    monkeypatch.setenv("CONFSTORE_CACHE_DIR", "/var/cache/confstore")
    monkeypatch.setenv("CONFSTORE_LOG_LEVEL", "debug")
    monkeypatch.setenv("CONFSTORE_LOG_FILE", "logs/confstore.log")

    settings = LoaderSettings.from_env(str(tmp_path / "missing.env"))

    assert settings.skip_if_missing is False
    assert settings.cache_dir == "/var/cache/confstore"
    assert settings.log_level == "DEBUG"
    assert settings.log_file == "logs/confstore.log"


def test_dotenv_file_is_loaded(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("CONFSTORE_CACHE_DIR=from-dotenv\nCONFSTORE_SKIP_IF_MISSING=no\n")

    # load_dotenv writes into os.environ; let monkeypatch restore it afterwards
    monkeypatch.setenv("CONFSTORE_CACHE_DIR", "")
    monkeypatch.delenv("CONFSTORE_CACHE_DIR")
    monkeypatch.setenv("CONFSTORE_SKIP_IF_MISSING", "")
    monkeypatch.delenv("CONFSTORE_SKIP_IF_MISSING")

    settings = LoaderSettings.from_env(str(env_file))

    assert settings.cache_dir == "from-dotenv"
    assert settings.skip_if_missing is False


def test_invalid_boolean_is_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv("CONFSTORE_SKIP_IF_MISSING", "maybe")

    with pytest.raises(ValueError, match="CONFSTORE_SKIP_IF_MISSING"):
        LoaderSettings.from_env(str(tmp_path / "missing.env"))
