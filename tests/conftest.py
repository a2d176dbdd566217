"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from caddyfile_updater.config import CaddyConfig, CaddyLocation, UpdaterConfig

PREFIX = "test.caddy"


def labels(**kwargs: str) -> dict[str, str]:
    """Prefix label keys: ``labels(app="web")`` -> ``{"test.caddy.app": "web"}``."""
    return {f"{PREFIX}.{k}": v for k, v in kwargs.items()}


def inspect_payload(container_id: str, name: str, label_map: dict[str, str] | None = None) -> dict[str, Any]:
    return {"Id": container_id, "Name": f"/{name}", "Config": {"Labels": label_map}}


def event_payload(
    action: str,
    container_id: str,
    name: str,
    label_map: dict[str, str] | None = None,
    old_name: str | None = None,
) -> dict[str, Any]:
    attributes = {"name": name, **(label_map or {})}
    if old_name is not None:
        attributes["oldName"] = f"/{old_name}"
    return {"Type": "container", "Action": action, "Actor": {"ID": container_id, "Attributes": attributes}}


class FakeRuntime:
    """In-memory stand-in for DockerRuntime."""

    def __init__(self) -> None:
        self.containers: dict[str, dict[str, Any]] = {}
        self.queued_events: list[dict[str, Any]] = []

    def add(self, container_id: str, name: str, label_map: dict[str, str] | None = None) -> None:
        self.containers[container_id] = inspect_payload(container_id, name, label_map)

    def list_container_ids(self) -> list[str]:
        return list(self.containers)

    def inspect(self, container_id: str) -> dict[str, Any]:
        from caddyfile_updater.errors import ContainerNotFoundError

        try:
            return self.containers[container_id]
        except KeyError:
            raise ContainerNotFoundError(f"Container {container_id} not found") from None

    def events(self):
        yield from self.queued_events


class FakeReloader:
    def __init__(self) -> None:
        self.calls = 0

    def reload_all(self) -> None:
        self.calls += 1


@pytest.fixture
def tmp_config(tmp_path: Path) -> UpdaterConfig:
    """Return an UpdaterConfig pointing at temp directories."""
    return UpdaterConfig(
        label_prefix=PREFIX,
        domain_name="example.com",
        local_domain_prefix="lan",
        local_caddy=CaddyConfig(
            bin_path=tmp_path / "bin" / "caddy",
            config_dir=tmp_path / "etc",
            snippets_dir=tmp_path / "local-snippets",
        ),
        docker_caddy=CaddyConfig(
            bin_path=Path("caddy"),
            config_dir=Path("/etc/caddy"),
            snippets_dir=tmp_path / "docker-snippets",
            location=CaddyLocation.docker("caddy"),
        ),
        reload_timeout=5,
    )


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def reloader() -> FakeReloader:
    return FakeReloader()
