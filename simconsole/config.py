"""Environment-variable configuration loader.

All settings come from ``SIMCONSOLE_*`` variables, except the resource
templates which keep the console's historical names (``POD_TEMPLATE``,
``NODE_TEMPLATE``, ``PV_TEMPLATE``, ``PVC_TEMPLATE``, ``SC_TEMPLATE``).

Integer settings are clamped to their allowed range rather than rejected;
malformed strings for validated fields raise ``ValueError``.
"""

from __future__ import annotations

import os

from simconsole.models.config import APIConfig, LogConfig, SimConsoleConfig, TemplateConfig

_PREFIX = "SIMCONSOLE_"

_TRUE_VALUES: frozenset[str] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: frozenset[str] = frozenset({"0", "false", "no", "off"})
_LOG_LEVELS: frozenset[str] = frozenset({"debug", "info", "warning", "error", "critical"})

_TIMEOUT_MIN: int = 1
_TIMEOUT_MAX: int = 300


def load_config(api_url: str | None = None) -> SimConsoleConfig:
    """Build a :class:`SimConsoleConfig` from the current environment.

    Args:
        api_url: Explicit API URL; when given, ``SIMCONSOLE_API_URL`` is not read.
    """
    defaults_api = APIConfig()

    api = APIConfig(
        base_url=_parse_url(api_url if api_url is not None else _env("API_URL", defaults_api.base_url)),
        timeout_seconds=_clamp(
            _parse_int("TIMEOUT", _env("REQUEST_TIMEOUT", str(defaults_api.timeout_seconds))),
            _TIMEOUT_MIN,
            _TIMEOUT_MAX,
        ),
    )
    templates = TemplateConfig(
        pod=_template("POD_TEMPLATE"),
        node=_template("NODE_TEMPLATE"),
        pv=_template("PV_TEMPLATE"),
        pvc=_template("PVC_TEMPLATE"),
        storageclass=_template("SC_TEMPLATE"),
    )
    return SimConsoleConfig(
        api=api,
        log=load_log_config(),
        templates=templates,
        simulator_id=_env("SIMULATOR_ID", "").strip(),
    )


def load_log_config() -> LogConfig:
    """Read only the logging settings (``SIMCONSOLE_LOG_LEVEL``, ``SIMCONSOLE_LOG_JSON``)."""
    defaults = LogConfig()
    return LogConfig(
        level=_parse_log_level(_env("LOG_LEVEL", defaults.level)),
        json=_parse_bool(_env("LOG_JSON", "true" if defaults.json else "false")),
    )


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _env(name: str, default: str) -> str:
    return os.environ.get(_PREFIX + name, default)


def _template(name: str) -> str | None:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    return value


def _parse_bool(value: str) -> bool:
    normalised = value.strip().lower()
    if normalised in _TRUE_VALUES:
        return True
    if normalised in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _parse_int(field_name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {field_name}: {value!r}") from exc


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def _parse_log_level(value: str) -> str:
    normalised = value.strip().lower()
    if normalised not in _LOG_LEVELS:
        raise ValueError(f"Invalid log level: {value!r} (expected one of {sorted(_LOG_LEVELS)})")
    return normalised


def _parse_url(value: str) -> str:
    url = value.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"Invalid API URL: {value!r} (must start with http:// or https://)")
    return url
