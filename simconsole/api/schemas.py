"""Pydantic models for simulator API payloads.

Resource objects themselves stay opaque dicts; only the envelopes the client
has to unpack (resource lists, error bodies) and the scheduler configuration
are modelled here. All models use Pydantic v2 syntax.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResourceList(BaseModel):
    """Envelope returned by ``GET /simulators/{id}/{plural}``."""

    model_config = ConfigDict(extra="allow")

    items: list[dict[str, Any]] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("items", mode="before")
    @classmethod
    def null_items_as_empty(cls, value: object) -> object:
        """The backend serialises an empty list as ``null``."""
        return [] if value is None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def null_metadata_as_empty(cls, value: object) -> object:
        return {} if value is None else value


class ErrorBody(BaseModel):
    """Error body produced by the simulator's HTTP framework."""

    model_config = ConfigDict(extra="allow")

    message: str = ""


class SchedulerConfiguration(BaseModel):
    """KubeSchedulerConfiguration as exchanged with ``/schedulerconfiguration``.

    Only the top-level shape is checked; unknown fields are preserved so that
    a get-edit-apply cycle never drops settings.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    kind: str | None = None
    api_version: str | None = Field(default=None, alias="apiVersion")
    profiles: list[dict[str, Any]] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialise back to the wire format (camelCase, unset fields omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)
