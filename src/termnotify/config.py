"""YAML configuration loader for termnotify."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from termnotify.osc.encode import Protocol, Urgency

_OUTPUTS = ("stdout", "stderr")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_FALSE_VALUES = frozenset(("0", "false", "no", "off"))


class ConfigError(Exception):
    """Raised when termnotify.yaml is invalid."""


@dataclass
class NotifyConfig:
    protocol: str | None = None  # None = auto-detect
    default_urgency: int = Urgency.NORMAL
    fallback: bool = True
    fallback_timeout: float = 10.0
    output: str = "stdout"
    log_level: str = "WARNING"
    log_file: str | None = None
    source_path: str | None = None

    @property
    def forced_protocol(self) -> Protocol | None:
        if not self.protocol or self.protocol.lower() == "auto":
            return None
        return Protocol.parse(self.protocol)

    def validate(self) -> list[str]:
        """Validate config, returning a list of error messages (empty = valid)."""
        errors: list[str] = []

        if self.protocol and self.protocol.lower() != "auto":
            try:
                Protocol.parse(self.protocol)
            except ValueError as exc:
                errors.append(str(exc))

        if not (Urgency.LOW <= self.default_urgency <= Urgency.CRITICAL):
            errors.append("default_urgency must be between 0 (low) and 2 (critical)")

        if self.fallback_timeout <= 0:
            errors.append("fallback_timeout must be > 0")

        if self.output not in _OUTPUTS:
            errors.append(f"output must be one of {', '.join(_OUTPUTS)}, got '{self.output}'")

        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(_LOG_LEVELS)}")

        if self.log_file:
            log_parent = Path(self.log_file).expanduser().parent
            if not log_parent.exists():
                errors.append(f"Log file parent directory does not exist: {log_parent}")

        return errors

    def apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""

        if val := os.environ.get("TERMNOTIFY_PROTOCOL"):
            self.protocol = val
        if val := os.environ.get("TERMNOTIFY_URGENCY"):
            try:
                self.default_urgency = int(Urgency.parse(val))
            except ValueError:
                pass
        if val := os.environ.get("TERMNOTIFY_FALLBACK"):
            self.fallback = _as_bool(val)
        if val := os.environ.get("TERMNOTIFY_OUTPUT"):
            self.output = val


def load_config(path: str | None = None) -> NotifyConfig:
    """Load config from explicit path, termnotify.yaml in CWD, or ~/.config/termnotify/config.yaml."""
    candidates = []
    if path:
        candidates.append(Path(path))
    else:
        candidates.append(Path.cwd() / "termnotify.yaml")
        candidates.append(Path.home() / ".config" / "termnotify" / "config.yaml")

    for candidate in candidates:
        if candidate.exists():
            return _parse_config(candidate)

    if path:
        raise ConfigError(f"Config file not found: {path}")
    return NotifyConfig()


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_VALUES
    return bool(value)


def _parse_config(path: Path) -> NotifyConfig:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    try:
        urgency = int(Urgency.parse(data.get("default_urgency", Urgency.NORMAL)))
    except ValueError as exc:
        raise ConfigError(f"default_urgency: {exc}") from exc

    protocol = data.get("protocol")
    try:
        timeout = float(data.get("fallback_timeout", 10.0))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"fallback_timeout must be a number: {exc}") from exc

    return NotifyConfig(
        protocol=str(protocol) if protocol is not None else None,
        default_urgency=urgency,
        fallback=_as_bool(data.get("fallback", True)),
        fallback_timeout=timeout,
        output=str(data.get("output", "stdout")),
        log_level=str(data.get("log_level", "WARNING")),
        log_file=data.get("log_file"),
        source_path=str(path),
    )


def serialize_config(config: NotifyConfig) -> dict[str, Any]:
    """Round-trip serialization of NotifyConfig to a dict. Omits None optional fields."""
    data: dict[str, Any] = {
        "protocol": config.protocol or "auto",
        "default_urgency": Urgency.clamp(config.default_urgency).name.lower(),
        "fallback": config.fallback,
        "fallback_timeout": config.fallback_timeout,
        "output": config.output,
        "log_level": config.log_level,
    }
    if config.log_file is not None:
        data["log_file"] = config.log_file
    return data


def save_config(config: NotifyConfig, path: str | None = None) -> None:
    """Write YAML config. Defaults to config.source_path, falls back to ./termnotify.yaml."""
    target = Path(path or config.source_path or "termnotify.yaml")
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w") as f:
        yaml.dump(serialize_config(config), f, default_flow_style=False, sort_keys=False)
    os.chmod(str(target), 0o600)
