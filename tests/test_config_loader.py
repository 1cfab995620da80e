"""Tests for commons.config.loader."""

import tempfile
from pathlib import Path

import pytest
import yaml

from commons.config import config, load_config
from commons.config.loader import CONFIG_ENV_VAR, ConfigProvider, YamlConfigProvider, get_config, get_section


def test_yaml_config_provider_loads_file():
    with tempfile.NamedTemporaryFile(
        suffix=".yaml", delete=False, mode="w", encoding="utf-8"
    ) as f:
        yaml.dump({"foo": "bar", "nested": {"a": 1}}, f)
        path = Path(f.name)
    try:
        provider = YamlConfigProvider(path=path)
        cfg = provider.load()
        assert cfg["foo"] == "bar"
        assert cfg["nested"]["a"] == 1
    finally:
        path.unlink(missing_ok=True)


def test_yaml_config_provider_default_path_exists():
    """Default path points to src/config/config.yaml from loader's perspective."""
    provider = YamlConfigProvider()
    # When run from project root with PYTHONPATH=src, __file__ is in src/commons/config/loader.py
    # so parent.parent.parent = src, and config/config.yaml exists
    cfg = provider.load()
    assert cfg["ocr"]["tesseract"]["lang"] == "chi_tra+eng"
    assert cfg["review"]["low_confidence_threshold"] == 0.85


def test_get_config_uses_provider():
    with tempfile.NamedTemporaryFile(
        suffix=".yaml", delete=False, mode="w", encoding="utf-8"
    ) as f:
        yaml.dump({"custom": True}, f)
        path = Path(f.name)
    try:
        provider = YamlConfigProvider(path=path)
        cfg = get_config(provider=provider)
        assert cfg["custom"] is True
    finally:
        path.unlink(missing_ok=True)


def test_get_config_default_is_yaml():
    cfg = get_config()
    assert isinstance(cfg, dict)
    assert len(cfg) >= 1


def test_env_var_overrides_default_path(tmp_path, monkeypatch):
    path = tmp_path / "alt.yaml"
    path.write_text("ocr:\n  engine: custom\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert YamlConfigProvider().load() == {"ocr": {"engine": "custom"}}


def test_empty_yaml_is_empty_dict(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert YamlConfigProvider(path=path).load() == {}


def test_get_section_walks_nested_keys():
    cfg = {"ocr": {"tesseract": {"dpi": 200}}, "review": None}
    assert get_section(cfg, "ocr", "tesseract") == {"dpi": 200}
    assert get_section(cfg, "review") == {}
    assert get_section(cfg, "missing", "deeper") == {}
    assert get_section(None, "ocr") == {}


def test_load_config_reload_updates_shared_dict(tmp_path):
    path = tmp_path / "alt.yaml"
    path.write_text("pipeline:\n  max_workers: 3\n", encoding="utf-8")
    try:
        load_config(path)
        assert config["pipeline"]["max_workers"] == 3
    finally:
        load_config(reload=True)
    assert config["pipeline"]["max_workers"] == 1
