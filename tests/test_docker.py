"""Tests for the Docker SDK wrapper (client mocked)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from docker.errors import APIError, DockerException, NotFound

from caddyfile_updater.errors import ContainerNotFoundError, DockerError
from caddyfile_updater.services.docker import DockerRuntime


def _container(container_id: str, name: str = "") -> MagicMock:
    c = MagicMock()
    c.id = container_id
    c.name = name
    return c


class TestDockerRuntime:
    def test_connect_failure(self):
        with patch("caddyfile_updater.services.docker.docker.DockerClient", side_effect=DockerException("no socket")):
            with pytest.raises(DockerError):
                DockerRuntime.connect("unix:///nope.sock")

    def test_list_container_ids(self):
        client = MagicMock()
        client.containers.list.return_value = [_container("a"), _container("b")]
        assert DockerRuntime(client).list_container_ids() == ["a", "b"]
        client.containers.list.assert_called_once_with()

    def test_inspect(self):
        client = MagicMock()
        client.api.inspect_container.return_value = {"Id": "a"}
        assert DockerRuntime(client).inspect("a") == {"Id": "a"}

    def test_inspect_not_found(self):
        client = MagicMock()
        client.api.inspect_container.side_effect = NotFound("gone")
        with pytest.raises(ContainerNotFoundError):
            DockerRuntime(client).inspect("a")

    def test_inspect_api_error(self):
        client = MagicMock()
        client.api.inspect_container.side_effect = APIError("boom")
        with pytest.raises(DockerError) as exc_info:
            DockerRuntime(client).inspect("a")
        assert not isinstance(exc_info.value, ContainerNotFoundError)

    def test_events_filtered_to_containers(self):
        client = MagicMock()
        client.events.return_value = iter([{"Type": "container", "Action": "create"}])
        events = list(DockerRuntime(client).events())
        assert events == [{"Type": "container", "Action": "create"}]
        client.events.assert_called_once_with(decode=True, filters={"type": "container"})

    def test_find_single_container(self):
        client = MagicMock()
        client.containers.list.return_value = [_container("caddyid", "caddy")]
        assert DockerRuntime(client).find_single_container("caddy") == "caddyid"
        client.containers.list.assert_called_once_with(filters={"name": "caddy"})

    def test_find_single_container_ignores_partial_name_matches(self):
        client = MagicMock()
        client.containers.list.return_value = [
            _container("localid", "local-caddy"),
            _container("caddyid", "caddy"),
            _container("updaterid", "caddyfile-updater"),
        ]
        assert DockerRuntime(client).find_single_container("caddy") == "caddyid"

    def test_find_single_container_no_exact_match(self):
        client = MagicMock()
        client.containers.list.return_value = [_container("localid", "local-caddy")]
        with pytest.raises(ContainerNotFoundError):
            DockerRuntime(client).find_single_container("caddy")

    @pytest.mark.parametrize("count", [0, 2])
    def test_find_single_container_ambiguous(self, count):
        client = MagicMock()
        client.containers.list.return_value = [_container(str(i), "caddy") for i in range(count)]
        with pytest.raises(ContainerNotFoundError):
            DockerRuntime(client).find_single_container("caddy")

    def test_exec(self):
        client = MagicMock()
        client.api.exec_create.return_value = {"Id": "execid"}
        client.api.exec_start.return_value = iter([(b"ok", None)])
        client.api.exec_inspect.return_value = {"ExitCode": 0, "Running": False}
        runtime = DockerRuntime(client)

        exec_id = runtime.exec_create("caddyid", ["caddy", "reload"], workdir="/etc/caddy")
        assert exec_id == "execid"
        assert list(runtime.exec_stream(exec_id)) == [(b"ok", None)]
        assert runtime.exec_exit_code(exec_id) == 0
        client.api.exec_create.assert_called_once_with(
            "caddyid", ["caddy", "reload"], stdout=True, stderr=True, workdir="/etc/caddy"
        )
        client.api.exec_start.assert_called_once_with("execid", stream=True, demux=True)
