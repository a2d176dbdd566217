"""In-memory registry of applications and the containers backing them."""

from __future__ import annotations

import logging
from typing import Iterator

from caddyfile_updater.errors import ApplicationNotFoundError
from caddyfile_updater.models import ApplicationDescriptor, ContainerDescriptor

log = logging.getLogger(__name__)


class ApplicationRegistry:
    """Mapping of application name to descriptor, owned by a single listener.

    Entries are kept in insertion order and, unless ``prune_empty`` is set,
    are never removed: an application whose last container goes away stays
    registered with an empty container list. Methods that address an
    application by name raise ApplicationNotFoundError when it is missing.
    """

    def __init__(self, *, prune_empty: bool = False) -> None:
        self._apps: dict[str, ApplicationDescriptor] = {}
        self._prune_empty = prune_empty

    def __contains__(self, app_name: object) -> bool:
        return app_name in self._apps

    def __len__(self) -> int:
        return len(self._apps)

    def __iter__(self) -> Iterator[ApplicationDescriptor]:
        return iter(list(self._apps.values()))

    def get(self, app_name: str) -> ApplicationDescriptor:
        try:
            return self._apps[app_name]
        except KeyError:
            raise ApplicationNotFoundError(app_name) from None

    def owner_of(self, container_id: str) -> str | None:
        """Name of the application a container is attached to, if any."""
        for app in self._apps.values():
            if container_id in app.container_ids():
                return app.name
        return None

    def upsert(self, app: ApplicationDescriptor, container: ContainerDescriptor) -> bool:
        """Insert ``app`` unless its name is taken, then attach ``container``.

        An existing entry keeps its own port, visibility and auth mode.
        Returns True when the registry changed.
        """
        if app.name in self._apps:
            return self.attach(app.name, container)

        owner = self.owner_of(container.container_id)
        if owner is not None:
            log.debug(
                "container %s already attached to %s, not registering %s",
                container.name,
                owner,
                app.name,
            )
            return False

        self._apps[app.name] = app.model_copy(update={"containers": []})
        log.info(
            "registered app %s (port %d, %s)",
            app.name,
            app.port,
            "external" if app.external else "local",
        )
        self.attach(app.name, container)
        return True

    def attach(self, app_name: str, container: ContainerDescriptor) -> bool:
        """Append ``container`` to a registered application.

        A container already attached anywhere is left where it is and
        False is returned.
        """
        app = self.get(app_name)
        owner = self.owner_of(container.container_id)
        if owner is not None:
            log.debug("container %s already attached to %s", container.name, owner)
            return False
        app.containers.append(container)
        log.info("attached container %s to %s", container.name, app_name)
        return True

    def detach(self, app_name: str, container_id: str) -> int:
        """Remove the container with ``container_id`` from an application.

        Returns the number of containers removed; zero is not an error.
        """
        app = self.get(app_name)
        before = len(app.containers)
        app.containers[:] = [c for c in app.containers if c.container_id != container_id]
        removed = before - len(app.containers)
        if removed:
            log.info("detached container %s from %s", container_id[:12], app_name)
        if self._prune_empty and not app.containers:
            del self._apps[app_name]
            log.info("pruned app %s, no containers left", app_name)
        return removed

    def rename(self, app_name: str, old_name: str, new_name: str) -> int:
        """Point every container named ``old_name`` at ``new_name``.

        Returns the number of containers renamed.
        """
        app = self.get(app_name)
        renamed = 0
        for container in app.containers:
            if container.name == old_name:
                container.name = new_name
                container.hostname = new_name
                renamed += 1
        if renamed:
            log.info("renamed %s -> %s in %s", old_name, new_name, app_name)
        return renamed
