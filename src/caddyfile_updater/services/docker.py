"""Docker SDK wrapper: snapshot, inspection, event stream and exec."""

from __future__ import annotations

import logging
from typing import Any, Iterator

import docker
from docker.errors import DockerException, NotFound

from caddyfile_updater.errors import ContainerNotFoundError, DockerError

log = logging.getLogger(__name__)


class DockerRuntime:
    """Thin adapter over ``docker.DockerClient`` returning plain payloads."""

    def __init__(self, client: docker.DockerClient) -> None:
        self._client = client

    @classmethod
    def connect(cls, base_url: str) -> DockerRuntime:
        try:
            client = docker.DockerClient(base_url=base_url)
            client.ping()
        except DockerException as exc:
            raise DockerError(f"Docker unavailable at {base_url}: {exc}") from exc
        return cls(client)

    def list_container_ids(self) -> list[str]:
        """Ids of all running containers."""
        try:
            return [c.id for c in self._client.containers.list()]
        except DockerException as exc:
            raise DockerError(f"Listing containers failed: {exc}") from exc

    def inspect(self, container_id: str) -> dict[str, Any]:
        try:
            return self._client.api.inspect_container(container_id)
        except NotFound as exc:
            raise ContainerNotFoundError(f"Container {container_id} not found") from exc
        except DockerException as exc:
            raise DockerError(f"Inspecting container {container_id} failed: {exc}") from exc

    def events(self) -> Iterator[dict[str, Any]]:
        """Decoded container events, in delivery order, until the stream closes."""
        try:
            yield from self._client.events(decode=True, filters={"type": "container"})
        except DockerException as exc:
            raise DockerError(f"Docker event stream failed: {exc}") from exc

    def find_single_container(self, name: str) -> str:
        """Id of the only running container named exactly ``name``.

        Docker's name filter matches substrings, so results are narrowed
        to exact names.
        """
        try:
            candidates = self._client.containers.list(filters={"name": name})
        except DockerException as exc:
            raise DockerError(f"Searching for container '{name}' failed: {exc}") from exc
        matches = [c for c in candidates if c.name == name]
        if len(matches) != 1:
            raise ContainerNotFoundError(
                f"Expected exactly one running container named '{name}', found {len(matches)}"
            )
        return matches[0].id

    def exec_create(self, container_id: str, cmd: list[str], workdir: str | None = None) -> str:
        try:
            result = self._client.api.exec_create(
                container_id, cmd, stdout=True, stderr=True, workdir=workdir
            )
        except DockerException as exc:
            raise DockerError(f"Creating exec in {container_id[:12]} failed: {exc}") from exc
        return result["Id"]

    def exec_stream(self, exec_id: str) -> Iterator[tuple[bytes | None, bytes | None]]:
        """Yield ``(stdout, stderr)`` chunks of a started exec."""
        try:
            yield from self._client.api.exec_start(exec_id, stream=True, demux=True)
        except DockerException as exc:
            raise DockerError(f"Exec {exec_id[:12]} failed: {exc}") from exc

    def exec_exit_code(self, exec_id: str) -> int | None:
        try:
            return self._client.api.exec_inspect(exec_id).get("ExitCode")
        except DockerException as exc:
            raise DockerError(f"Inspecting exec {exec_id[:12]} failed: {exc}") from exc

    def close(self) -> None:
        self._client.close()
