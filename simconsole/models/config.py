"""Configuration dataclasses populated by :func:`simconsole.config.load_config`."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class APIConfig:
    """Simulator API connection settings."""

    base_url: str = "http://localhost:1212/api/v1"
    timeout_seconds: int = 30


@dataclass(frozen=True)
class LogConfig:
    level: str = "info"
    json: bool = True


@dataclass(frozen=True)
class TemplateConfig:
    """Raw YAML text of the default objects offered for new selections.

    None means the variable is unset.
    """

    pod: str | None = None
    node: str | None = None
    pv: str | None = None
    pvc: str | None = None
    storageclass: str | None = None


@dataclass(frozen=True)
class SimConsoleConfig:
    """Top-level configuration."""

    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    simulator_id: str = ""
