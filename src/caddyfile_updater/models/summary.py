"""Transient records extracted from Docker inspection and event payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ContainerSummary(BaseModel):
    """Identity, display name (runtime ``/`` prefix stripped) and labels of a container."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    labels: dict[str, str] = Field(default_factory=dict)


class EventSummary(BaseModel):
    """The parts of a container event the listener acts on."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    app_name: str | None = None
    old_name: str | None = None
