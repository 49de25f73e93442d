"""Pod store: the generic entity store plus a pods-by-node view."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from simconsole.models.resources import UNSCHEDULED, Resource, ResourceKind
from simconsole.observability.metrics import pod_index_buckets
from simconsole.store.entity_store import EntityStore, ResourceAPI, WriteErrorHandler
from simconsole.store.pod_index import build_pod_index


class PodStore(EntityStore):
    """Entity store for Pods that also keeps pods grouped by assigned node.

    The grouping is recomputed from the full snapshot every time the cache is
    replaced, so it always matches :attr:`items` (minus pods without a spec).
    """

    def __init__(self, api: ResourceAPI, on_error: WriteErrorHandler | None = None) -> None:
        super().__init__(api, ResourceKind.POD, on_error=on_error)
        self._by_node: Mapping[str, Sequence[Resource]] = _freeze(build_pod_index(()))

    @property
    def pods_by_node(self) -> Mapping[str, Sequence[Resource]]:
        """Read-only mapping of node name (or ``"unscheduled"``) to pods."""
        return self._by_node

    @property
    def unscheduled(self) -> Sequence[Resource]:
        return self._by_node[UNSCHEDULED]

    @property
    def count(self) -> int:
        """Number of pods placed in the index."""
        return sum(len(pods) for pods in self._by_node.values())

    def pods_on(self, node_name: str) -> Sequence[Resource]:
        """Pods assigned to *node_name*; empty when the node has none."""
        return self._by_node.get(node_name, ())

    def _on_items_replaced(self) -> None:
        self._by_node = _freeze(build_pod_index(self._items))
        pod_index_buckets.set(len(self._by_node))


def _freeze(index: dict[str, list[Resource]]) -> Mapping[str, Sequence[Resource]]:
    return MappingProxyType({node: tuple(pods) for node, pods in index.items()})
