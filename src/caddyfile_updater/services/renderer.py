"""Jinja2-based Caddy snippet renderer and writer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from caddyfile_updater.config import UpdaterConfig
from caddyfile_updater.constants import DENIED_PATHS, EXTERNAL_GROUP, INTERNAL_GROUP
from caddyfile_updater.errors import ArtifactWriteError
from caddyfile_updater.models import ApplicationDescriptor, AuthKind

log = logging.getLogger(__name__)


def _get_env() -> Environment:
    return Environment(
        loader=PackageLoader("caddyfile_updater", "templates"),
        autoescape=select_autoescape([]),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


@dataclass(frozen=True)
class SiteBlock:
    """One application's route as seen by one Caddy instance."""

    name: str
    host: str
    targets: tuple[str, ...]
    auth_import: str | None = None


@dataclass(frozen=True)
class RenderedSnippets:
    """Snippet text for both Caddy instances."""

    local: str
    docker: str


class SnippetRenderer:
    """Render the registry into the ``docker-hosts`` snippet of each Caddy instance.

    The host instance forwards every route to one fixed upstream (the
    Docker instance); the Docker instance forwards to the containers.
    """

    def __init__(self, config: UpdaterConfig) -> None:
        self._config = config
        self._template = _get_env().get_template("docker_hosts.caddy.j2")

    def domain(self, app: ApplicationDescriptor) -> str:
        return self._config.external_domain if app.external else self._config.local_domain

    def host(self, app: ApplicationDescriptor) -> str:
        return f"{app.name}.{self.domain(app)}"

    def auth_import(self, app: ApplicationDescriptor) -> str | None:
        if app.auth.kind is AuthKind.TRUSTED_HEADERS:
            return self._config.auth_headers_snippet
        return None

    def local_site(self, app: ApplicationDescriptor) -> SiteBlock:
        return SiteBlock(name=app.name, host=self.host(app), targets=(self._config.local_upstream,))

    def docker_site(self, app: ApplicationDescriptor) -> SiteBlock:
        targets = tuple(f"http://{c.hostname}:{app.port}" for c in app.containers)
        return SiteBlock(
            name=app.name,
            host=self.host(app),
            targets=targets,
            auth_import=self.auth_import(app),
        )

    def _render(self, external: list[SiteBlock], internal: list[SiteBlock]) -> str:
        return self._template.render(
            external=external,
            internal=internal,
            external_group=EXTERNAL_GROUP,
            internal_group=INTERNAL_GROUP,
            denied_paths=DENIED_PATHS,
        )

    def render(self, apps: Iterable[ApplicationDescriptor]) -> RenderedSnippets:
        """Render both snippets. Applications without containers are skipped."""
        local_external: list[SiteBlock] = []
        local_internal: list[SiteBlock] = []
        docker_external: list[SiteBlock] = []
        docker_internal: list[SiteBlock] = []

        for app in apps:
            if not app.is_routable:
                log.warning("app %s is registered but has no running containers", app.name)
                continue
            if app.external:
                local_external.append(self.local_site(app))
                docker_external.append(self.docker_site(app))
            else:
                local_internal.append(self.local_site(app))
                docker_internal.append(self.docker_site(app))

        return RenderedSnippets(
            local=self._render(local_external, local_internal),
            docker=self._render(docker_external, docker_internal),
        )

    def write(self, snippets: RenderedSnippets) -> tuple[Path, Path]:
        """Replace both snippet files on disk, docker instance first."""
        docker_path = self._config.docker_caddy.snippet_path(self._config.snippet_filename)
        local_path = self._config.local_caddy.snippet_path(self._config.snippet_filename)
        write_snippet(docker_path, snippets.docker)
        write_snippet(local_path, snippets.local)
        return docker_path, local_path


def write_snippet(path: Path, content: str) -> None:
    """Truncate-and-write ``content`` to ``path`` and fsync it."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
    except OSError as exc:
        raise ArtifactWriteError(f"Failed to write snippet {path}: {exc}") from exc
    log.debug("wrote %s (%d bytes)", path, len(content))
