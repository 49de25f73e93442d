"""HTTP client for the scheduler simulator REST API.

One :class:`ResourceEndpoint` per resource kind performs ``apply`` (POST,
create-or-update), ``list``, ``get`` and ``delete`` against
``/simulators/{id}/{plural}``. Namespaces are the only kind without simulator
scoping. The client keeps no resource state; caching and consistency belong
to :mod:`simconsole.store`.

Failures surface as :class:`ResourceAPIError` subclasses:

    TransportError          - connection refused, DNS failure, timeout
    ResourceHTTPError       - any non-2xx response
    ResourceNotFoundError   - 404 (stale name on get/delete)
    MalformedResponseError  - 2xx body that is not the expected JSON shape
"""

from __future__ import annotations

import time
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from simconsole.api.schemas import ErrorBody, ResourceList, SchedulerConfiguration
from simconsole.models.resources import Resource, ResourceKind
from simconsole.observability.logging import get_logger
from simconsole.observability.metrics import api_request_duration_seconds, api_requests_total

_log = get_logger("api.client")

_DEFAULT_TIMEOUT_S: float = 30.0

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ResourceAPIError(Exception):
    """Base class for every failure raised by the simulator API client."""


class TransportError(ResourceAPIError):
    """The request never produced an HTTP response."""


class ResourceHTTPError(ResourceAPIError):
    """The simulator answered with a non-2xx status."""

    def __init__(self, method: str, path: str, status_code: int, detail: str = "") -> None:
        msg = f"{method} {path} returned HTTP {status_code}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.method = method
        self.path = path
        self.status_code = status_code
        self.detail = detail


class ResourceNotFoundError(ResourceHTTPError):
    """HTTP 404: the named resource does not exist (any more)."""


class MalformedResponseError(ResourceAPIError):
    """A 2xx response whose body could not be decoded into the expected shape."""


# ---------------------------------------------------------------------------
# Request plumbing
# ---------------------------------------------------------------------------


class _Requester:
    """Shared request helper: error mapping, logging and metrics."""

    def __init__(self, http: httpx.AsyncClient, metric_kind: str) -> None:
        self._http = http
        self._metric_kind = metric_kind

    async def request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        start = time.monotonic()
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.TimeoutException as exc:
            api_requests_total.labels(kind=self._metric_kind, method=method, status="timeout").inc()
            _log.warning("api_request_timeout", method=method, path=path)
            raise TransportError(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            api_requests_total.labels(kind=self._metric_kind, method=method, status="transport_error").inc()
            _log.warning("api_transport_error", method=method, path=path, error=str(exc))
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        finally:
            api_request_duration_seconds.labels(kind=self._metric_kind, method=method).observe(
                time.monotonic() - start
            )

        api_requests_total.labels(kind=self._metric_kind, method=method, status=str(response.status_code)).inc()
        if response.is_success:
            _log.debug("api_request_ok", method=method, path=path, status_code=response.status_code)
            return response

        detail = _error_detail(response)
        _log.warning(
            "api_unexpected_status",
            method=method,
            path=path,
            status_code=response.status_code,
            detail=detail,
        )
        error_cls = ResourceNotFoundError if response.status_code == 404 else ResourceHTTPError
        raise error_cls(method, path, response.status_code, detail)

    async def get_json(self, path: str) -> Any:
        response = await self.request("GET", path)
        return _decode_json(response, path)

    async def post_json(self, path: str, body: Any) -> Any:
        """POST *body*; returns the decoded response, or None for an empty body."""
        response = await self.request("POST", path, json=body)
        if not response.content.strip():
            return None
        return _decode_json(response, path)


def _decode_json(response: httpx.Response, path: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponseError(f"{path}: response body is not JSON") from exc


def _error_detail(response: httpx.Response) -> str:
    """Extract a short human-readable message from an error response."""
    try:
        return ErrorBody.model_validate(response.json()).message
    except (ValueError, ValidationError):
        return response.text[:200]


def _segment(value: str) -> str:
    """Quote a single path segment (names and ids may contain ``/`` or spaces)."""
    return quote(value, safe="")


def _expect_object(data: Any, path: str) -> Resource:
    if not isinstance(data, dict):
        raise MalformedResponseError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


class ResourceEndpoint:
    """CRUD over one simulator-scoped resource kind.

    Satisfies the ``ResourceAPI`` protocol consumed by
    :class:`simconsole.store.entity_store.EntityStore`.
    """

    def __init__(self, http: httpx.AsyncClient, kind: ResourceKind) -> None:
        self.kind = kind
        self._requester = _Requester(http, metric_kind=kind.value)

    def _collection_path(self, simulator_id: str) -> str:
        return f"/simulators/{_segment(simulator_id)}/{self.kind.plural}"

    def _item_path(self, name: str, simulator_id: str) -> str:
        return f"{self._collection_path(simulator_id)}/{_segment(name)}"

    def _apply_body(self, resource: Resource) -> Resource:
        return resource

    async def list(self, simulator_id: str) -> list[Resource]:
        path = self._collection_path(simulator_id)
        data = await self._requester.get_json(path)
        try:
            return ResourceList.model_validate(data).items
        except ValidationError as exc:
            raise MalformedResponseError(f"{path}: not a {self.kind.value} list") from exc

    async def get(self, name: str, simulator_id: str) -> Resource:
        path = self._item_path(name, simulator_id)
        return _expect_object(await self._requester.get_json(path), path)

    async def apply(self, resource: Resource, simulator_id: str) -> Resource | None:
        """Create-or-update; the backend decides which by ``metadata.name``.

        Returns the response object, or None when the backend replies with an
        empty body.
        """
        path = self._collection_path(simulator_id)
        data = await self._requester.post_json(path, self._apply_body(resource))
        return None if data is None else _expect_object(data, path)

    async def delete(self, name: str, simulator_id: str) -> None:
        await self._requester.request("DELETE", self._item_path(name, simulator_id))


class NodeEndpoint(ResourceEndpoint):
    """Nodes are applied by name and labels only; the simulator fills in the rest."""

    def _apply_body(self, resource: Resource) -> Resource:
        metadata = resource.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        body_metadata: dict[str, Any] = {"name": metadata.get("name")}
        if metadata.get("labels") is not None:
            body_metadata["labels"] = metadata["labels"]
        return {"metadata": body_metadata}


class NamespaceEndpoint:
    """Global (not simulator-scoped) namespace operations."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._requester = _Requester(http, metric_kind=ResourceKind.NAMESPACE.value)

    async def apply(self, namespace: Resource) -> Resource | None:
        path = f"/{ResourceKind.NAMESPACE.plural}"
        data = await self._requester.post_json(path, namespace)
        return None if data is None else _expect_object(data, path)

    async def get(self, name: str) -> Resource:
        path = f"/{ResourceKind.NAMESPACE.plural}/{_segment(name)}"
        return _expect_object(await self._requester.get_json(path), path)


class SchedulerConfigurationEndpoint:
    """``GET``/``POST /simulators/{id}/schedulerconfiguration``."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._requester = _Requester(http, metric_kind="SchedulerConfiguration")

    @staticmethod
    def _path(simulator_id: str) -> str:
        return f"/simulators/{_segment(simulator_id)}/schedulerconfiguration"

    async def get(self, simulator_id: str) -> SchedulerConfiguration:
        path = self._path(simulator_id)
        data = await self._requester.get_json(path)
        try:
            return SchedulerConfiguration.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(f"{path}: not a scheduler configuration") from exc

    async def apply(self, config: SchedulerConfiguration, simulator_id: str) -> SchedulerConfiguration | None:
        path = self._path(simulator_id)
        data = await self._requester.post_json(path, config.to_payload())
        if data is None:
            return None
        try:
            return SchedulerConfiguration.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(f"{path}: not a scheduler configuration") from exc


# ---------------------------------------------------------------------------
# Client facade
# ---------------------------------------------------------------------------


class ResourceAPIClient:
    """Owns the ``httpx.AsyncClient`` and exposes one endpoint per kind.

    Usage::

        async with ResourceAPIClient("http://localhost:1212/api/v1") as api:
            nodes = await api.nodes.list("sim-1")

    Args:
        base_url: API root, e.g. ``http://localhost:1212/api/v1``.
        timeout: Per-request timeout in seconds.
        http_client: Pre-built client (tests inject one with a mock transport).
            When given, the caller keeps ownership and :meth:`aclose` leaves
            it open.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = _DEFAULT_TIMEOUT_S,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

        self.nodes = NodeEndpoint(self._http, ResourceKind.NODE)
        self.pods = ResourceEndpoint(self._http, ResourceKind.POD)
        self.persistent_volumes = ResourceEndpoint(self._http, ResourceKind.PERSISTENT_VOLUME)
        self.persistent_volume_claims = ResourceEndpoint(self._http, ResourceKind.PERSISTENT_VOLUME_CLAIM)
        self.storage_classes = ResourceEndpoint(self._http, ResourceKind.STORAGE_CLASS)
        self.namespaces = NamespaceEndpoint(self._http)
        self.scheduler_configuration = SchedulerConfigurationEndpoint(self._http)

        self._by_kind: dict[ResourceKind, ResourceEndpoint] = {
            endpoint.kind: endpoint
            for endpoint in (
                self.nodes,
                self.pods,
                self.persistent_volumes,
                self.persistent_volume_claims,
                self.storage_classes,
            )
        }

    def endpoint(self, kind: ResourceKind) -> ResourceEndpoint:
        """Return the simulator-scoped endpoint for *kind*.

        Raises:
            KeyError: for kinds without simulator scoping (Namespace).
        """
        return self._by_kind[kind]

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> ResourceAPIClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

