"""Resource kinds and store-local data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# Raw resource object as returned by the simulator API (metadata/spec/status).
Resource = dict[str, Any]

UNSCHEDULED: str = "unscheduled"


class ResourceKind(StrEnum):
    """Cluster object categories exposed by the simulator API."""

    NODE = "Node"
    POD = "Pod"
    PERSISTENT_VOLUME = "PersistentVolume"
    PERSISTENT_VOLUME_CLAIM = "PersistentVolumeClaim"
    STORAGE_CLASS = "StorageClass"
    NAMESPACE = "Namespace"

    @property
    def plural(self) -> str:
        """REST sub-path for this kind, e.g. ``persistentvolumeclaims``."""
        return _PLURALS[self]


_PLURALS: dict[ResourceKind, str] = {
    ResourceKind.NODE: "nodes",
    ResourceKind.POD: "pods",
    ResourceKind.PERSISTENT_VOLUME: "persistentvolumes",
    ResourceKind.PERSISTENT_VOLUME_CLAIM: "persistentvolumeclaims",
    ResourceKind.STORAGE_CLASS: "storageclasses",
    ResourceKind.NAMESPACE: "namespaces",
}


@dataclass(frozen=True)
class Selection:
    """The single entity currently open for editing.

    ``is_new`` is True when the item has never been persisted and only lives
    in the UI; False when it was loaded from (or applied to) the backend and
    can be re-fetched by name.
    """

    is_new: bool
    item: Resource
    resource_kind: ResourceKind

    @property
    def name(self) -> str | None:
        return resource_name(self.item)


def resource_name(resource: Resource | None) -> str | None:
    """Return ``metadata.name`` of a raw resource, or None when absent/empty."""
    if not isinstance(resource, dict):
        return None
    metadata = resource.get("metadata")
    if not isinstance(metadata, dict):
        return None
    name = metadata.get("name")
    if not isinstance(name, str) or not name:
        return None
    return name
