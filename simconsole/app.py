"""Console bootstrap: config, logging, API client and one store per kind.

Wiring order: config -> logging -> API client -> stores. Each store is
independent state; a slow or failing call in one never blocks another.
"""

from __future__ import annotations

from types import TracebackType

from simconsole.api.client import ResourceAPIClient
from simconsole.config import load_config
from simconsole.models.config import SimConsoleConfig
from simconsole.models.resources import ResourceKind
from simconsole.observability.logging import get_logger, setup_logging
from simconsole.store.entity_store import EntityStore, WriteErrorHandler
from simconsole.store.pod_store import PodStore
from simconsole.templates import ResourceTemplates


class SimulatorConsole:
    """Owns the API client and the five resource stores.

    Args:
        config: Loaded configuration.
        api: Pre-built API client; built from ``config.api`` when omitted.
        on_error: Write-failure callback handed to every store. When omitted,
            failed ``apply``/``delete`` calls raise.

    Example::

        async with SimulatorConsole.from_env() as console:
            await console.refresh_all("sim-1")
            print(console.pods.pods_by_node)
    """

    def __init__(
        self,
        config: SimConsoleConfig,
        api: ResourceAPIClient | None = None,
        on_error: WriteErrorHandler | None = None,
    ) -> None:
        self.config = config
        self._log = get_logger("app")
        self.api = api or ResourceAPIClient(config.api.base_url, timeout=float(config.api.timeout_seconds))
        self.templates = ResourceTemplates(config.templates)

        self.nodes = EntityStore(self.api.nodes, ResourceKind.NODE, on_error=on_error)
        self.pods = PodStore(self.api.pods, on_error=on_error)
        self.pvs = EntityStore(self.api.persistent_volumes, ResourceKind.PERSISTENT_VOLUME, on_error=on_error)
        self.pvcs = EntityStore(
            self.api.persistent_volume_claims, ResourceKind.PERSISTENT_VOLUME_CLAIM, on_error=on_error
        )
        self.storageclasses = EntityStore(self.api.storage_classes, ResourceKind.STORAGE_CLASS, on_error=on_error)

        self._stores: dict[ResourceKind, EntityStore] = {
            store.resource_kind: store
            for store in (self.nodes, self.pods, self.pvs, self.pvcs, self.storageclasses)
        }

    @classmethod
    def from_env(cls, on_error: WriteErrorHandler | None = None) -> SimulatorConsole:
        """Load config from the environment, configure logging, build the console."""
        config = load_config()
        setup_logging(config.log.level, json=config.log.json)
        console = cls(config, on_error=on_error)
        console._log.info("console_configured", api_url=config.api.base_url)
        return console

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    def store(self, kind: ResourceKind) -> EntityStore:
        """Return the store for *kind*.

        Raises:
            KeyError: for Namespace, which has no store.
        """
        return self._stores[kind]

    @property
    def stores(self) -> dict[ResourceKind, EntityStore]:
        return dict(self._stores)

    async def refresh_all(self, simulator_id: str) -> None:
        """List every kind, one after the other.

        Stops at the first failure; stores listed before it keep their new
        snapshot, the rest keep their previous one.
        """
        for kind, store in self._stores.items():
            self._log.debug("console_refreshing", kind=kind.value, simulator_id=simulator_id)
            await store.list(simulator_id)

    def new_resource(self, kind: ResourceKind, simulator_id: str) -> None:
        """Select the configured template for *kind* as a new, unsaved item."""
        template = {
            ResourceKind.NODE: self.templates.node,
            ResourceKind.PERSISTENT_VOLUME: self.templates.pv,
            ResourceKind.PERSISTENT_VOLUME_CLAIM: self.templates.pvc,
            ResourceKind.STORAGE_CLASS: self.templates.storageclass,
        }
        if kind == ResourceKind.POD:
            item = self.templates.pod(simulator_id)
        else:
            item = template[kind]()
        self.store(kind).select(item, is_new=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        await self.api.aclose()
        self._log.debug("console_closed")

    async def __aenter__(self) -> SimulatorConsole:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
