"""Default objects offered when the user starts editing a new resource.

Each template is YAML text from the environment (see
:class:`simconsole.models.config.TemplateConfig`). Every call parses the text
again, so callers always get a fresh object they are free to mutate.
"""

from __future__ import annotations

from typing import Any

import yaml

from simconsole.models.config import TemplateConfig
from simconsole.models.resources import Resource


class TemplateError(ValueError):
    """A configured template is not valid YAML or not a mapping."""


class ResourceTemplates:
    """Parses the configured templates on demand.

    Args:
        config: Raw template text per kind; None entries fall back to the
            built-in empty defaults.
    """

    def __init__(self, config: TemplateConfig) -> None:
        self._config = config

    def pod(self, simulator_id: str) -> Resource:
        """Pod template placed in the simulator's namespace."""
        pod = _load("POD_TEMPLATE", self._config.pod)
        if pod:
            metadata = pod.get("metadata")
            if not isinstance(metadata, dict):
                metadata = {}
                pod["metadata"] = metadata
            metadata["namespace"] = simulator_id
        return pod

    def node(self) -> Resource:
        return _load("NODE_TEMPLATE", self._config.node)

    def pv(self) -> Resource:
        return _load("PV_TEMPLATE", self._config.pv)

    def pvc(self) -> Resource:
        return _load("PVC_TEMPLATE", self._config.pvc)

    def storageclass(self) -> Resource:
        """StorageClass template; defaults to an empty provisioner, which the API requires."""
        if self._config.storageclass is None:
            return {"provisioner": ""}
        return _load("SC_TEMPLATE", self._config.storageclass)


def _load(variable: str, text: str | None) -> dict[str, Any]:
    if text is None:
        return {}
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise TemplateError(f"{variable} is not valid YAML: {exc}") from exc
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise TemplateError(f"{variable} must be a YAML mapping, got {type(parsed).__name__}")
    return parsed
