"""Configuration management for rc.d services."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .descriptor import ServiceDescriptor
from .services.rcconf import RC_CONF_LOCAL
from .services.runcom import RC_D

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RUNCOM_SERVICE_CONFIG"


def user_config_dir() -> Path:
    return Path.home() / ".config" / "runcom-service"


@dataclass
class Config:
    name: str
    display_name: Optional[str] = None
    executable: Optional[str] = None
    arguments: List[str] = field(default_factory=list)
    command: List[str] = field(default_factory=list)
    stop_timeout: float = 10.0
    options: Dict[str, Any] = field(default_factory=dict)
    script_dir: Path = RC_D
    rc_conf_local: Path = RC_CONF_LOCAL
    log_level: str = "INFO"
    log_directory: Optional[Path] = None
    log_file: str = "runcom_service.log"
    log_max_bytes: int = 50 * 1024 * 1024  # 50 MB
    log_backup_count: int = 5
    config_path: Optional[Path] = None

    @staticmethod
    def from_dict(data: Dict[str, Any], config_path: Optional[Path] = None) -> "Config":
        if not data.get("name"):
            raise ValueError("'name' is required in the service configuration")

        options = data.get("options") or {}
        if not isinstance(options, dict):
            raise ValueError(f"'options' must be a mapping, got {type(options).__name__}")

        log_directory = data.get("log_directory")

        return Config(
            name=str(data["name"]),
            display_name=data.get("display_name"),
            executable=data.get("executable"),
            arguments=[str(a) for a in data.get("arguments") or []],
            command=[str(c) for c in data.get("command") or []],
            stop_timeout=float(data.get("stop_timeout", 10)),
            options=dict(options),
            script_dir=Path(data.get("script_dir", RC_D)),
            rc_conf_local=Path(data.get("rc_conf_local", RC_CONF_LOCAL)),
            log_level=str(data.get("log_level", "INFO")).upper(),
            log_directory=(
                Path(os.path.expanduser(log_directory)) if log_directory else None
            ),
            log_file=str(data.get("log_file", "runcom_service.log")),
            log_max_bytes=int(data.get("log_max_bytes", 50 * 1024 * 1024)),
            log_backup_count=int(data.get("log_backup_count", 5)),
            config_path=config_path,
        )

    @staticmethod
    def from_file(path: Path) -> "Config":
        """Load a YAML or JSON configuration file, picked by suffix."""
        logger.info(f"Loading configuration from {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")

        return Config.from_dict(data, config_path=path)

    def descriptor(self) -> ServiceDescriptor:
        return ServiceDescriptor(
            name=self.name,
            display_name=self.display_name,
            executable=self.executable,
            arguments=tuple(self.arguments),
            options=self.options,
        )

    def __repr__(self) -> str:
        return f"Config(name={self.name!r}, path={self.config_path})"


def default_config_path() -> Path | None:
    """Return the config file from the environment or the user config dir."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()

    # Check for YAML first, then JSON
    for filename in ("config.yaml", "config.yml", "config.json"):
        path = user_config_dir() / filename
        if path.exists():
            return path

    return None


def resolve_config_path(cli_value: Path | None) -> Path:
    if cli_value:
        return cli_value.expanduser().resolve()
    auto = default_config_path()
    if auto:
        return auto
    raise FileNotFoundError(
        "No config provided and could not locate default config. "
        f"Provide --config /path/to/config.yaml or set {CONFIG_ENV_VAR}."
    )
