"""Config provider protocol and implementations. Extend by adding new providers."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# .env at repo root may set FORMDESK_CONFIG to point at another YAML file
_project_root = Path(__file__).resolve().parent.parent.parent.parent
load_dotenv(_project_root / ".env")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "config.yaml"
CONFIG_ENV_VAR = "FORMDESK_CONFIG"


class ConfigProvider:
    """Protocol for config sources. Implement to add env, vault, remote, etc."""

    def load(self) -> Dict[str, Any]:
        """Return the full config dict."""
        raise NotImplementedError


class YamlConfigProvider(ConfigProvider):
    """Load config from a YAML file. Path: argument, then $FORMDESK_CONFIG, then src/config/config.yaml."""

    def __init__(self, path: Optional[Path] = None):
        env_path = os.getenv(CONFIG_ENV_VAR)
        self.path = Path(path or env_path or DEFAULT_CONFIG_PATH)

    def load(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}


def get_config(provider: Optional[ConfigProvider] = None) -> Dict[str, Any]:
    """Get config from the given provider, or default YAML."""
    if provider is None:
        provider = YamlConfigProvider()
    return provider.load()


def get_section(cfg: Optional[Dict[str, Any]], *keys: str) -> Dict[str, Any]:
    """Walk nested sections (e.g. get_section(cfg, "ocr", "tesseract")); missing levels give {}."""
    node: Any = cfg or {}
    for key in keys:
        node = node.get(key) if isinstance(node, dict) else None
        node = node or {}
    return node if isinstance(node, dict) else {}
