"""Derive application and container descriptors from container labels."""

from __future__ import annotations

import logging

from caddyfile_updater.config import UpdaterConfig
from caddyfile_updater.errors import LabelParseError
from caddyfile_updater.models import (
    ApplicationDescriptor,
    AuthKind,
    AuthMode,
    ContainerDescriptor,
    ContainerSummary,
)

log = logging.getLogger(__name__)

_TRUE = {"true"}
_FALSE = {"false"}


def parse_port(label: str, raw: str | None) -> int:
    """Parse a mandatory unsigned 16-bit port label."""
    if raw is None:
        raise LabelParseError(label, raw, "label is required")
    if not (raw.isascii() and raw.isdigit()):
        raise LabelParseError(label, raw, "not a number")
    port = int(raw)
    if not 1 <= port <= 65535:
        raise LabelParseError(label, raw, "port out of range 1-65535")
    return port


def parse_bool(label: str, raw: str | None, default: bool = False) -> bool:
    """Parse an optional ``true``/``false`` label; absent means ``default``."""
    if raw is None:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise LabelParseError(label, raw, "expected 'true' or 'false'")


def app_name(summary: ContainerSummary, config: UpdaterConfig) -> str | None:
    return summary.labels.get(config.app_label)


def build_application(summary: ContainerSummary, config: UpdaterConfig) -> ApplicationDescriptor | None:
    """Return the application a container declares, or None if it is not proxied.

    The returned descriptor has no containers attached.
    Raises LabelParseError on a missing or invalid port, or an invalid
    ``external`` value.
    """
    name = app_name(summary, config)
    if name is None:
        return None

    labels = summary.labels
    port = parse_port(config.port_label, labels.get(config.port_label))
    external = parse_bool(config.external_label, labels.get(config.external_label))
    auth = AuthMode.from_label(labels.get(config.auth_label))
    if auth.kind is AuthKind.UNKNOWN:
        log.warning("app %s: unknown auth mode %r, no auth snippet will be imported", name, auth.tag)

    return ApplicationDescriptor(name=name, port=port, external=external, auth=auth)


def build_container(summary: ContainerSummary, config: UpdaterConfig) -> ContainerDescriptor | None:
    """Return the container descriptor for a proxied container, else None."""
    if app_name(summary, config) is None:
        return None
    return ContainerDescriptor(
        container_id=summary.id,
        name=summary.name,
        hostname=summary.name,
    )
