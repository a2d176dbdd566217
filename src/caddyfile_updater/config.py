"""Runtime configuration — one immutable UpdaterConfig built at startup."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from caddyfile_updater.constants import (
    APP_LABEL_SUFFIX,
    AUTH_HEADERS_SNIPPET,
    AUTH_LABEL_SUFFIX,
    DOCKER_SOCKET_PATH,
    EXTERNAL_LABEL_SUFFIX,
    LOCAL_UPSTREAM,
    PORT_LABEL_SUFFIX,
    RELOAD_TIMEOUT_SECONDS,
    SNIPPET_FILENAME,
)


class LocationKind(str, Enum):
    LOCAL = "local"
    DOCKER = "docker"


class CaddyLocation(BaseModel):
    """Where a Caddy instance runs: directly on this host, or inside a named container."""

    model_config = ConfigDict(frozen=True)

    kind: LocationKind = LocationKind.LOCAL
    container: str | None = None

    @model_validator(mode="after")
    def _container_required_for_docker(self) -> CaddyLocation:
        if self.kind is LocationKind.DOCKER and not self.container:
            raise ValueError("a docker location needs a container name")
        return self

    @classmethod
    def local(cls) -> CaddyLocation:
        return cls(kind=LocationKind.LOCAL)

    @classmethod
    def docker(cls, container: str) -> CaddyLocation:
        return cls(kind=LocationKind.DOCKER, container=container)

    def __str__(self) -> str:
        if self.kind is LocationKind.DOCKER:
            return f"docker({self.container})"
        return "local"


class CaddyConfig(BaseModel):
    """One Caddy instance: how to reload it and where its snippets go."""

    model_config = ConfigDict(frozen=True)

    bin_path: Path
    config_dir: Path
    snippets_dir: Path
    location: CaddyLocation = Field(default_factory=CaddyLocation.local)

    def snippet_path(self, filename: str) -> Path:
        return self.snippets_dir / filename


class UpdaterConfig(BaseModel):
    """Runtime configuration resolved once at startup."""

    model_config = ConfigDict(frozen=True)

    label_prefix: str
    domain_name: str
    local_domain_prefix: str
    local_caddy: CaddyConfig
    docker_caddy: CaddyConfig
    docker_socket_path: Path = DOCKER_SOCKET_PATH
    local_upstream: str = LOCAL_UPSTREAM
    snippet_filename: str = SNIPPET_FILENAME
    auth_headers_snippet: str = AUTH_HEADERS_SNIPPET
    reload_timeout: float = Field(default=RELOAD_TIMEOUT_SECONDS, gt=0)
    prune_empty_apps: bool = False

    def _label(self, suffix: str) -> str:
        return f"{self.label_prefix}.{suffix}"

    @property
    def app_label(self) -> str:
        return self._label(APP_LABEL_SUFFIX)

    @property
    def port_label(self) -> str:
        return self._label(PORT_LABEL_SUFFIX)

    @property
    def external_label(self) -> str:
        return self._label(EXTERNAL_LABEL_SUFFIX)

    @property
    def auth_label(self) -> str:
        return self._label(AUTH_LABEL_SUFFIX)

    @property
    def external_domain(self) -> str:
        return self.domain_name

    @property
    def local_domain(self) -> str:
        return f"{self.local_domain_prefix}.{self.domain_name}"

    @property
    def docker_base_url(self) -> str:
        return f"unix://{self.docker_socket_path}"
