"""Unit tests for config.py"""

import pytest

from blockparse.blocks.library import FREEFORM
from blockparse.config import Settings, build_config, load_config
from blockparse.core.models import BlockType


@pytest.fixture(autouse=True)
def isolate(tmp_path, monkeypatch):
    """Run each test from an empty directory with no BLOCKPARSE_ env vars."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"BLOCKPARSE_{name.upper()}", raising=False)


def test_load_config_defaults():
    """Settings defaults apply when no config.yaml, env var, or override exists."""
    settings = load_config()
    assert settings.fallback_block_name == FREEFORM
    assert settings.dev_mode is False
    assert settings.log_level == "WARNING"
    assert settings.indent == 2


def test_load_config_reads_config_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("fallback_block_name: core/html\nindent: 4\n")
    settings = load_config()
    assert settings.fallback_block_name == "core/html"
    assert settings.indent == 4


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """BLOCKPARSE_FALLBACK_BLOCK_NAME takes precedence over config.yaml."""
    (tmp_path / "config.yaml").write_text("fallback_block_name: core/html\n")
    monkeypatch.setenv("BLOCKPARSE_FALLBACK_BLOCK_NAME", "core/missing")
    assert load_config().fallback_block_name == "core/missing"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var."""
    monkeypatch.setenv("BLOCKPARSE_FALLBACK_BLOCK_NAME", "core/env")
    settings = load_config(overrides={"fallback_block_name": "core/cli", "dev_mode": None})
    assert settings.fallback_block_name == "core/cli"
    assert settings.dev_mode is False


def test_load_config_env_dev_mode(monkeypatch):
    """BLOCKPARSE_DEV_MODE is coerced to bool."""
    monkeypatch.setenv("BLOCKPARSE_DEV_MODE", "true")
    assert load_config().dev_mode is True


def test_load_config_env_indent(monkeypatch):
    monkeypatch.setenv("BLOCKPARSE_INDENT", "0")
    assert load_config().indent == 0


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_yaml_not_a_mapping(tmp_path):
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


def test_load_config_invalid_log_level(monkeypatch):
    monkeypatch.setenv("BLOCKPARSE_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        load_config()


def test_build_config_uses_builtin_types():
    config = build_config(Settings(dev_mode=True))
    assert config.fallback_block_name == FREEFORM
    assert config.dev_mode is True
    assert FREEFORM in [t.name for t in config.block_types]


def test_build_config_custom_types():
    custom = BlockType(name="core/x", to_markup=lambda a: "")
    config = build_config(Settings(fallback_block_name=None), block_types=[custom])
    assert config.block_types == (custom,)
    assert config.fallback_block_name is None
