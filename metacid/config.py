"""Configuration models and YAML loader with env var interpolation."""

import os
import re
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field

CONFIG_FILE_NAMES = [
    "metacid.yaml",
    "metacid.yml",
    ".metacid.yaml",
    ".metacid.yml",
]

CONFIG_SEARCH_PATHS = [
    Path.cwd(),
    Path.home() / ".config" / "metacid",
    Path.home(),
]

DEFAULT_GATEWAY = "https://ipfs.io"

_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)(?::([^}]*))?\}")


class RPCConfig(BaseModel):
    url: Optional[str] = None
    timeout: float = 10.0


class GatewayConfig(BaseModel):
    url: str = DEFAULT_GATEWAY
    timeout: float = 10.0


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    json_output: bool = False


class MetaCIDConfig(BaseModel):
    rpc: RPCConfig = Field(default_factory=RPCConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _interpolate_env(value: str) -> str:
    """Replace ${VAR} or ${VAR:default} with environment variable values."""

    def _replace(match: re.Match) -> str:
        default = match.group(2)
        return os.environ.get(match.group(1), default if default is not None else "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _walk_and_interpolate(obj: object) -> object:
    if isinstance(obj, str):
        return _interpolate_env(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(item) for item in obj]
    return obj


def find_config_file(explicit_path: Union[str, Path, None] = None) -> Optional[Path]:
    """Locate a metacid config file, returning the first found or None."""
    if explicit_path is not None:
        p = Path(explicit_path)
        return p if p.is_file() else None

    for search_dir in CONFIG_SEARCH_PATHS:
        for name in CONFIG_FILE_NAMES:
            candidate = search_dir / name
            if candidate.is_file():
                return candidate
    return None


def load_config(path: Union[str, Path, None] = None) -> MetaCIDConfig:
    """Load and validate configuration, falling back to defaults."""
    config_path = find_config_file(path)
    if config_path is None:
        return MetaCIDConfig()

    raw = yaml.safe_load(config_path.read_text()) or {}
    return MetaCIDConfig.model_validate(_walk_and_interpolate(raw))
