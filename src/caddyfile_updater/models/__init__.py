"""Data models shared by the extractor, builder, registry and renderer."""

from caddyfile_updater.models.application import (
    ApplicationDescriptor,
    AuthKind,
    AuthMode,
    ContainerDescriptor,
)
from caddyfile_updater.models.summary import ContainerSummary, EventSummary

__all__ = [
    "ApplicationDescriptor",
    "AuthKind",
    "AuthMode",
    "ContainerDescriptor",
    "ContainerSummary",
    "EventSummary",
]
