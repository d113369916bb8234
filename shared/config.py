"""
Client configuration.

One ClientConfig is built at startup and handed to every component that talks
to the service. Values are layered, later wins:

    dataclass defaults  <-  YAML file  <-  CLI flags / SWSC_* environment

Example ~/.swsc/config.yaml:

    host: https://chat.example.org
    port: 443
    ws_path: /live
    timeout: 10
"""

from __future__ import annotations
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import yaml

from shared.errors import ConfigError
from shared.log import get_logger
from shared.utils import http_to_ws, normalize_host

logger = get_logger(__name__)

DEFAULT_HOST = "http://localhost"
DEFAULT_PORT = "3030"


def default_config_path() -> Path:
    return Path(os.getenv("SWSC_CONFIG", str(Path.home() / ".swsc" / "config.yaml")))


@dataclass(frozen=True)
class ClientConfig:
    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    ws_path: str = "/"
    timeout: Optional[float] = 30.0     # seconds per HTTP request, None waits forever

    @property
    def base_url(self) -> str:
        """HTTP root every endpoint path is appended to"""
        return f"{normalize_host(self.host)}:{self.port}"

    def ws_url(self, conversation_id: str) -> str:
        """Live channel url for one conversation"""
        path = self.ws_path if self.ws_path.startswith("/") else f"/{self.ws_path}"
        query = urlencode({"conversation_id": conversation_id})
        return f"{http_to_ws(self.base_url)}{path}?{query}"


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Load config keys from YAML. A missing file yields no keys."""
    if not path.exists():
        logger.debug("No config file at %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _validate_port(port: Any) -> str:
    """Port must be a decimal integer in 1..65535."""
    text = str(port).strip()
    if not text.isdigit() or not 0 < int(text) <= 65535:
        raise ConfigError(f"Invalid port: {port!r}")
    return text


def load_config(path: Optional[Path] = None, **overrides: Any) -> ClientConfig:
    """
    Build the ClientConfig for this run.

    Args:
        path: YAML file to read; defaults to SWSC_CONFIG or ~/.swsc/config.yaml
        **overrides: values from the command line; None means "not given"

    Raises:
        ConfigError: file unreadable, not a mapping, or has unknown keys
    """
    path = path or default_config_path()
    data = _read_yaml(path)

    known = {f.name for f in fields(ClientConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown keys in {path}: {', '.join(sorted(unknown))}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key in ("host", "port", "ws_path") and value is not None:
            value = str(value)
        values[key] = value
    values.update({k: v for k, v in overrides.items() if v is not None})

    if "timeout" in values and values["timeout"] is not None:
        try:
            values["timeout"] = float(values["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout: {values['timeout']!r}") from e

    if "port" in values:
        values["port"] = _validate_port(values["port"])

    config = replace(ClientConfig(), **values)
    logger.info("Using service at %s", config.base_url)
    return config
