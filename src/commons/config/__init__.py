"""Extendible config loading. Add new providers (env, vault, etc.) by implementing ConfigProvider."""

from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from commons.config.loader import (
    ConfigProvider,
    YamlConfigProvider,
    get_config,
    get_section,
)

# Shared dict: load_config(path, reload=True) refreshes it in place so `from commons.config import config` stays valid
config: Dict[str, Any] = {}
_loaded = False


def load_config(path: Optional[Path] = None, reload: bool = False) -> Dict[str, Any]:
    """Load config once; optional path for tests or overrides (--config)."""
    global _loaded
    if not _loaded or reload or path is not None:
        provider = YamlConfigProvider(path=path)
        try:
            data = provider.load()
        except FileNotFoundError:
            if path is not None:
                raise
            # installed without src/config: every consumer has built-in defaults
            logger.warning("Config file not found: {}; using defaults", provider.path)
            data = {}
        config.clear()
        config.update(data)
        _loaded = True
    return config


load_config()

__all__ = ["ConfigProvider", "YamlConfigProvider", "get_config", "get_section", "load_config", "config"]
