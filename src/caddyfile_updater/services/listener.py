"""Reconciliation loop: snapshot scan, then one Docker event at a time."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from caddyfile_updater.config import UpdaterConfig
from caddyfile_updater.errors import ApplicationNotFoundError, ContainerNotFoundError, MetadataError
from caddyfile_updater.models import ContainerSummary, EventSummary
from caddyfile_updater.services import builder
from caddyfile_updater.services.extractor import summarize_container, summarize_event
from caddyfile_updater.services.registry import ApplicationRegistry
from caddyfile_updater.services.renderer import RenderedSnippets, SnippetRenderer

log = logging.getLogger(__name__)


class Runtime(Protocol):
    def list_container_ids(self) -> list[str]: ...

    def inspect(self, container_id: str) -> dict[str, Any]: ...

    def events(self) -> Any: ...


class Reloader(Protocol):
    def reload_all(self) -> None: ...


class Listener:
    """Owns the registry and keeps both Caddy snippets in step with it.

    Every effective registry change is followed by a full rewrite of both
    snippet files and a reload of both Caddy instances before the next
    event is read. Any UpdaterError other than a registry lookup miss
    propagates out of ``listen`` and ends the run.
    """

    def __init__(
        self,
        config: UpdaterConfig,
        runtime: Runtime,
        reloader: Reloader,
        renderer: SnippetRenderer | None = None,
    ) -> None:
        self.config = config
        self.runtime = runtime
        self.reloader = reloader
        self.renderer = renderer or SnippetRenderer(config)
        self.registry = ApplicationRegistry(prune_empty=config.prune_empty_apps)

    # -- snapshot ---------------------------------------------------------

    def _summary(self, container_id: str) -> ContainerSummary:
        return summarize_container(self.runtime.inspect(container_id))

    def scan(self) -> None:
        """Seed the registry from the currently running containers."""
        log.info("checking containers & building app data on startup")
        for container_id in self.runtime.list_container_ids():
            summary = self._summary(container_id)
            log.debug("checking container %s", summary.name)
            app = builder.build_application(summary, self.config)
            if app is None:
                log.debug("container %s not exposed via Caddy labels", summary.name)
                continue
            container = builder.build_container(summary, self.config)
            if container is None:
                raise MetadataError(f"Built app {app.name} but no container for {summary.name}")
            self.registry.upsert(app, container)

    # -- render + reload --------------------------------------------------

    def render(self) -> RenderedSnippets:
        return self.renderer.render(self.registry)

    def sync(self) -> None:
        """Rewrite both snippet files from the registry, then reload Caddy."""
        self.renderer.write(self.render())
        self.reloader.reload_all()

    # -- events -----------------------------------------------------------

    def handle_event(self, event: dict[str, Any]) -> bool:
        """Apply one decoded Docker event. Returns True if Caddy was resynced."""
        if event.get("Type") != "container":
            return False
        action = event.get("Action")
        if action not in {"create", "destroy", "rename", "update"}:
            return False

        summary = summarize_event(event, self.config.app_label)
        log.info("received container %s event for %s", action, summary.id[:12])

        if action == "create":
            changed = self.on_create(summary)
        elif action == "destroy":
            changed = self.on_destroy(summary)
        elif action == "rename":
            changed = self.on_rename(summary)
        else:
            changed = self.on_update(summary)

        if changed:
            self.sync()
        return changed

    def on_create(self, event: EventSummary) -> bool:
        try:
            summary = self._summary(event.id)
        except ContainerNotFoundError:
            log.warning("container %s was removed before it could be inspected", event.id[:12])
            return False

        app_name = builder.app_name(summary, self.config)
        if app_name is None:
            log.debug("container %s not exposed via Caddy labels", summary.name)
            return False

        container = builder.build_container(summary, self.config)
        if container is None:
            raise MetadataError(f"App {app_name} found but no container could be built for {summary.name}")

        if app_name in self.registry:
            return self.registry.attach(app_name, container)

        app = builder.build_application(summary, self.config)
        if app is None:
            raise MetadataError(f"App label {app_name} present but no app could be built for {summary.name}")
        return self.registry.upsert(app, container)

    def on_destroy(self, event: EventSummary) -> bool:
        if event.app_name is None:
            log.debug("no app name found for destroyed container %s", event.name)
            return False
        try:
            self.registry.detach(event.app_name, event.id)
        except ApplicationNotFoundError:
            log.warning("no app data found for %s - app not registered?", event.app_name)
            return False
        return True

    def on_rename(self, event: EventSummary) -> bool:
        if event.app_name is None:
            log.debug("no app name found for renamed container %s", event.name)
            return False
        if event.old_name is None:
            log.warning("rename event for %s carries no previous name", event.name)
            return False
        try:
            self.registry.rename(event.app_name, event.old_name, event.name)
        except ApplicationNotFoundError:
            log.warning("no app data found for %s - app not registered?", event.app_name)
            return False
        return True

    def on_update(self, event: EventSummary) -> bool:
        # Labels cannot change on an existing container; updates only touch resources.
        log.debug("ignoring update event for %s", event.name)
        return False

    # -- main loop --------------------------------------------------------

    def listen(self) -> None:
        """Scan, sync once, then follow the event stream until it ends."""
        self.scan()
        self.sync()
        for event in self.runtime.events():
            self.handle_event(event)
        log.info("docker event stream closed")
