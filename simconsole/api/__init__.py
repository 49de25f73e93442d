"""Simulator REST API client and wire schemas."""

from simconsole.api.client import (
    MalformedResponseError,
    NamespaceEndpoint,
    ResourceAPIClient,
    ResourceAPIError,
    ResourceEndpoint,
    ResourceHTTPError,
    ResourceNotFoundError,
    SchedulerConfigurationEndpoint,
    TransportError,
)

__all__ = [
    "MalformedResponseError",
    "NamespaceEndpoint",
    "ResourceAPIClient",
    "ResourceAPIError",
    "ResourceEndpoint",
    "ResourceHTTPError",
    "ResourceNotFoundError",
    "SchedulerConfigurationEndpoint",
    "TransportError",
]
