#!/usr/bin/env python3
"""
HELMBRIDGE CONFIGURATION
------------------------
Builds the single BridgeConfig value used for a run. Settings are looked
up in order: command-line flag, environment, config file, default.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ruamel.yaml import YAML, YAMLError

from helmbridge.core.errors import ConfigError

logger = logging.getLogger("helmbridge.config")

DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_VALUES_FILE = "values.yaml"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class BridgeConfig:
    api_url: str
    values_file: Path = Path(DEFAULT_VALUES_FILE)
    timeout: float = DEFAULT_TIMEOUT
    helm_bin: str = "helm"
    release_name: str = ""
    namespace: str = ""
    kubeconfig: Optional[str] = None
    config_file: Optional[Path] = None

    def require_release(self):
        """register/deploy need the release identity Helm passes to plugins."""
        if not self.release_name:
            raise ConfigError("HELM_RELEASE_NAME environment variable is required")
        if not self.namespace:
            raise ConfigError("HELM_NAMESPACE environment variable is required")


def read_config_file(path: Path) -> Dict[str, Any]:
    """Loads a YAML mapping of settings; an empty file yields no settings."""
    yaml = YAML(typ="safe")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.load(f)
    except (OSError, YAMLError) as e:
        raise ConfigError(f"Unable to read config file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _locate_config_file(explicit: Optional[str]) -> Optional[Path]:
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return path

    default = Path.cwd() / DEFAULT_CONFIG_FILE
    if default.is_file():
        return default
    return None


def _pick(flag: Any, env: Mapping[str, str], env_key: str,
          file_settings: Mapping[str, Any], file_key: str, default: Any = None) -> Any:
    if flag not in (None, ""):
        return flag
    if env.get(env_key):
        return env[env_key]
    if file_settings.get(file_key) not in (None, ""):
        return file_settings[file_key]
    return default


def load_config(api_url: Optional[str] = None, config_file: Optional[str] = None,
                values_file: Optional[str] = None, timeout: Optional[float] = None,
                kubeconfig: Optional[str] = None,
                environ: Optional[Mapping[str, str]] = None) -> BridgeConfig:
    """
    Resolves every setting once at the process boundary.

    Raises ConfigError when no API URL is available from any source or
    when a named config file cannot be read.
    """
    env = os.environ if environ is None else environ

    path = _locate_config_file(config_file or env.get("CONFIG"))
    if path:
        logger.info(f"Using config file: {path}")
        file_settings = read_config_file(path)
    else:
        logger.warning("No config file found. Using default settings")
        file_settings = {}

    url = _pick(api_url, env, "API_URL", file_settings, "api_url", "")
    url = str(url).strip().rstrip("/")
    if not url:
        raise ConfigError("API URL is required (--api-url, API_URL or api_url in the config file)")

    raw_timeout = _pick(timeout, env, "BRIDGE_TIMEOUT", file_settings, "timeout", DEFAULT_TIMEOUT)
    try:
        resolved_timeout = float(raw_timeout)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid timeout '{raw_timeout}': expected a number of seconds")
    if resolved_timeout <= 0:
        raise ConfigError(f"Invalid timeout '{raw_timeout}': must be greater than zero")

    return BridgeConfig(
        api_url=url,
        values_file=Path(_pick(values_file, env, "VALUES_FILE", file_settings,
                               "values_file", DEFAULT_VALUES_FILE)),
        timeout=resolved_timeout,
        helm_bin=_pick(None, env, "HELM_BIN", file_settings, "helm_bin", "helm"),
        release_name=env.get("HELM_RELEASE_NAME", ""),
        namespace=env.get("HELM_NAMESPACE", ""),
        kubeconfig=_pick(kubeconfig, env, "KUBECONFIG", file_settings, "kubeconfig"),
        config_file=path,
    )
