"""Normalise raw Docker inspection and event payloads into summaries."""

from __future__ import annotations

from typing import Any

from caddyfile_updater.errors import MetadataError
from caddyfile_updater.models import ContainerSummary, EventSummary


def strip_name(name: str) -> str:
    """Drop the single leading ``/`` Docker adds to container names."""
    return name[1:] if name.startswith("/") else name


def summarize_container(inspect: dict[str, Any]) -> ContainerSummary:
    """Build a ContainerSummary from a ``docker inspect`` payload.

    Raises MetadataError if the id, name or config section is missing.
    A config section without labels is treated as an empty label set.
    """
    container_id = inspect.get("Id")
    if not container_id:
        raise MetadataError("Container inspection has no Id")
    name = inspect.get("Name")
    if not name:
        raise MetadataError(f"Container {container_id} has no Name")
    config = inspect.get("Config")
    if config is None:
        raise MetadataError(f"Container {container_id} has no Config section")

    return ContainerSummary(
        id=container_id,
        name=strip_name(name),
        labels=dict(config.get("Labels") or {}),
    )


def summarize_event(event: dict[str, Any], app_label: str) -> EventSummary:
    """Build an EventSummary from a decoded Docker event.

    The actor id and its ``name`` attribute are mandatory; the application
    name (from ``app_label``) and ``oldName`` are optional.
    """
    actor = event.get("Actor") or {}
    actor_id = actor.get("ID")
    if not actor_id:
        raise MetadataError(f"Event {event.get('Action')!r} has no actor id")
    attributes = actor.get("Attributes")
    if attributes is None or "name" not in attributes:
        raise MetadataError(f"Event for {actor_id} has no name attribute")

    old_name = attributes.get("oldName")
    return EventSummary(
        id=actor_id,
        name=strip_name(attributes["name"]),
        app_name=attributes.get(app_label),
        old_name=strip_name(old_name) if old_name is not None else None,
    )
