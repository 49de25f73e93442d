"""Shared pytest configuration."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from simconsole.api.client import ResourceNotFoundError, TransportError


@pytest.fixture(autouse=True)
def _quiet_structlog() -> Iterator[None]:
    """Drop log output below CRITICAL so CLI output stays clean."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# In-memory simulator endpoint
# ---------------------------------------------------------------------------


class FakeEndpoint:
    """In-memory stand-in for one simulator-scoped resource endpoint.

    Behaves like the backend: ``apply`` upserts by name and fills in a
    server-side default, ``delete`` of an unknown name is a 404. Every call
    is recorded in ``calls``; operations listed in ``fail`` raise
    ``TransportError``.
    """

    def __init__(self, kind: str = "Node") -> None:
        self.kind = kind
        self.objects: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail: set[str] = set()
        self.on_get: Callable[[], None] | None = None

    def seed(self, *resources: dict[str, Any]) -> None:
        for resource in resources:
            self.objects[resource["metadata"]["name"]] = copy.deepcopy(resource)

    def _check(self, operation: str, arg: str) -> None:
        self.calls.append((operation, arg))
        if operation in self.fail:
            raise TransportError(f"{operation} failed: connection refused")

    async def list(self, simulator_id: str) -> list[dict[str, Any]]:
        self._check("list", simulator_id)
        return [copy.deepcopy(o) for o in self.objects.values()]

    async def get(self, name: str, simulator_id: str) -> dict[str, Any]:
        self._check("get", name)
        if self.on_get is not None:
            self.on_get()
        if name not in self.objects:
            raise ResourceNotFoundError("GET", f"/simulators/{simulator_id}/x/{name}", 404, "not found")
        return copy.deepcopy(self.objects[name])

    async def apply(self, resource: dict[str, Any], simulator_id: str) -> dict[str, Any]:
        stored = copy.deepcopy(resource)
        metadata = stored.setdefault("metadata", {})
        self._check("apply", metadata.get("name", ""))
        stored.setdefault("status", {"phase": "Pending"})
        metadata["resourceVersion"] = str(len(self.calls))
        self.objects[metadata.get("name", "")] = stored
        # The response deliberately differs from what a later list returns.
        return {"metadata": {"name": "response-body-must-be-ignored"}}

    async def delete(self, name: str, simulator_id: str) -> None:
        self._check("delete", name)
        if name not in self.objects:
            raise ResourceNotFoundError("DELETE", f"/simulators/{simulator_id}/x/{name}", 404, "not found")
        del self.objects[name]

    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]


@pytest.fixture
def fake_endpoint() -> FakeEndpoint:
    return FakeEndpoint()


@pytest.fixture
def fake_api() -> MagicMock:
    """API client double: one FakeEndpoint per store kind, async mocks elsewhere."""
    api = MagicMock()
    api.nodes = FakeEndpoint("Node")
    api.pods = FakeEndpoint("Pod")
    api.persistent_volumes = FakeEndpoint("PersistentVolume")
    api.persistent_volume_claims = FakeEndpoint("PersistentVolumeClaim")
    api.storage_classes = FakeEndpoint("StorageClass")
    api.namespaces.get = AsyncMock()
    api.namespaces.apply = AsyncMock(return_value=None)
    api.scheduler_configuration.get = AsyncMock()
    api.scheduler_configuration.apply = AsyncMock(return_value=None)
    api.aclose = AsyncMock()
    return api
