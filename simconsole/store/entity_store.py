"""Generic entity store: one server-backed collection plus one edit selection.

Every resource kind of the console (Node, Pod, PersistentVolume,
PersistentVolumeClaim, StorageClass) uses an :class:`EntityStore`
parameterised by a :class:`ResourceAPI` endpoint.

Collection cache
----------------
The cache is an immutable tuple replaced wholesale by each successful
:meth:`EntityStore.list`. Readers see either the previous snapshot or the new
one, never a mix. A failed list leaves the previous snapshot in place.

Write, then re-list
-------------------
:meth:`EntityStore.apply` and :meth:`EntityStore.delete` never edit the cache
directly. After the backend accepts the write, the store lists the kind again
and takes the server's answer as the new snapshot; the apply response body is
ignored because the backend may default or normalise fields. A write that
fails is not followed by a list.

Write failures are raised by default. A store built with ``on_error``
reports them to that callback instead; the choice holds for the lifetime of
the store instance.

Selection
---------
``select(None, ...)`` is a no-op; only :meth:`EntityStore.reset_selected`
clears the selection. :meth:`EntityStore.refresh_selected` re-fetches a
persisted selection by name and keeps its ``is_new`` flag.

Concurrency
-----------
There is no locking. Racing writes resolve as "last completed list wins";
the backend is the source of truth and is always re-read.
"""

from __future__ import annotations

import builtins
from collections.abc import Callable
from typing import Protocol

from simconsole.api.client import ResourceAPIError
from simconsole.models.resources import Resource, ResourceKind, Selection, resource_name
from simconsole.observability.logging import get_logger
from simconsole.observability.metrics import (
    store_cached_resources,
    store_operations_total,
    store_selection_active,
)


class ResourceAPI(Protocol):
    """CRUD contract for one simulator-scoped resource kind."""

    async def list(self, simulator_id: str) -> builtins.list[Resource]: ...

    async def get(self, name: str, simulator_id: str) -> Resource: ...

    async def apply(self, resource: Resource, simulator_id: str) -> Resource | None: ...

    async def delete(self, name: str, simulator_id: str) -> None: ...


# (operation, error) -> None; operation is "apply" or "delete".
WriteErrorHandler = Callable[[str, ResourceAPIError], None]


class EntityStore:
    """Collection cache and selection for one resource kind.

    Args:
        api: Endpoint performing the network calls for this kind.
        kind: The resource kind this store holds.
        on_error: Optional write-failure callback. When set, failed
            ``apply``/``delete`` calls are reported here instead of raised.

    Example::

        store = EntityStore(client.nodes, ResourceKind.NODE)
        await store.list("sim-1")
        store.select(store.items[0], is_new=False)
    """

    def __init__(
        self,
        api: ResourceAPI,
        kind: ResourceKind,
        on_error: WriteErrorHandler | None = None,
    ) -> None:
        self._api = api
        self._kind = kind
        self._on_error = on_error
        self._log = get_logger(f"store.{kind.value.lower()}")

        self._items: tuple[Resource, ...] = ()
        self._selected: Selection | None = None
        self._listeners: builtins.list[Callable[[EntityStore], None]] = []

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def resource_kind(self) -> ResourceKind:
        return self._kind

    @property
    def items(self) -> tuple[Resource, ...]:
        """The last successfully listed snapshot, in server order."""
        return self._items

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def selected(self) -> Selection | None:
        return self._selected

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Callable[[EntityStore], None]) -> Callable[[], None]:
        """Call *listener* with this store after every committed state change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in builtins.list(self._listeners):
            try:
                listener(self)
            except Exception as exc:
                self._log.error("store_listener_failed", error=str(exc), exc_info=True)

    # ------------------------------------------------------------------
    # Collection operations
    # ------------------------------------------------------------------

    async def list(self, simulator_id: str) -> None:
        """Replace the cache with the backend's current collection.

        Raises:
            ResourceAPIError: the cache is left untouched.
        """
        try:
            items = await self._api.list(simulator_id)
        except ResourceAPIError as exc:
            self._record("list", "error")
            self._log.warning("store_list_failed", simulator_id=simulator_id, error=str(exc))
            raise

        self._items = tuple(items)
        self._on_items_replaced()
        self._record("list", "ok")
        store_cached_resources.labels(kind=self._kind.value).set(len(self._items))
        self._log.debug("store_listed", simulator_id=simulator_id, count=len(self._items))
        self._notify()

    def _on_items_replaced(self) -> None:
        """Hook for derived views; runs synchronously after each cache replacement."""

    async def get(self, name: str, simulator_id: str) -> Resource:
        """Fetch one resource by name. Never touches the collection cache."""
        try:
            resource = await self._api.get(name, simulator_id)
        except ResourceAPIError as exc:
            self._record("get", "error")
            self._log.warning("store_get_failed", name=name, simulator_id=simulator_id, error=str(exc))
            raise
        self._record("get", "ok")
        return resource

    async def apply(self, resource: Resource, simulator_id: str) -> None:
        """Create or update *resource*, then re-list."""
        name = resource_name(resource)
        try:
            await self._api.apply(resource, simulator_id)
        except ResourceAPIError as exc:
            self._write_failed("apply", exc, name=name, simulator_id=simulator_id)
            return
        self._record("apply", "ok")
        self._log.info("store_applied", name=name, simulator_id=simulator_id)
        await self.list(simulator_id)

    async def delete(self, name: str, simulator_id: str) -> None:
        """Delete *name*, then re-list."""
        try:
            await self._api.delete(name, simulator_id)
        except ResourceAPIError as exc:
            self._write_failed("delete", exc, name=name, simulator_id=simulator_id)
            return
        self._record("delete", "ok")
        self._log.info("store_deleted", name=name, simulator_id=simulator_id)
        await self.list(simulator_id)

    def _write_failed(self, operation: str, exc: ResourceAPIError, name: str | None, simulator_id: str) -> None:
        """Report a failed write to ``on_error`` or re-raise it.

        Must be called from inside the ``except`` block handling *exc*.
        """
        self._record(operation, "error")
        self._log.error(
            f"store_{operation}_failed",
            name=name,
            simulator_id=simulator_id,
            error=str(exc),
            reported_via_callback=self._on_error is not None,
        )
        if self._on_error is None:
            raise exc
        self._on_error(operation, exc)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, resource: Resource | None, is_new: bool) -> None:
        """Make *resource* the selection. ``None`` leaves the selection as is."""
        if resource is None:
            return
        self._selected = Selection(is_new=is_new, item=resource, resource_kind=self._kind)
        store_selection_active.labels(kind=self._kind.value).set(1)
        self._notify()

    def reset_selected(self) -> None:
        self._selected = None
        store_selection_active.labels(kind=self._kind.value).set(0)
        self._notify()

    async def refresh_selected(self, simulator_id: str) -> None:
        """Replace the selected item with a fresh copy from the backend.

        No-op when nothing is selected, the selection is new, or it has no
        ``metadata.name``. If the selection is replaced or reset while the
        fetch is in flight, the fetched copy is discarded.
        """
        selection = self._selected
        if selection is None or selection.is_new:
            return
        name = selection.name
        if name is None:
            return

        fresh = await self.get(name, simulator_id)
        if self._selected is not selection:
            self._log.debug("store_refresh_discarded", name=name, simulator_id=simulator_id)
            return
        self._selected = Selection(is_new=selection.is_new, item=fresh, resource_kind=self._kind)
        self._notify()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record(self, operation: str, outcome: str) -> None:
        store_operations_total.labels(kind=self._kind.value, operation=operation, outcome=outcome).inc()
