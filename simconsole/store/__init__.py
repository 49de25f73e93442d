"""Client-side entity stores, one per simulator resource kind."""

from simconsole.store.entity_store import EntityStore, ResourceAPI, WriteErrorHandler
from simconsole.store.pod_index import build_pod_index
from simconsole.store.pod_store import PodStore

__all__ = [
    "EntityStore",
    "PodStore",
    "ResourceAPI",
    "WriteErrorHandler",
    "build_pod_index",
]
