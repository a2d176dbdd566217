"""Caddy reloads, on the host or inside a container, each bounded by a timeout."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Any, Callable

from caddyfile_updater.config import CaddyConfig, LocationKind, UpdaterConfig
from caddyfile_updater.errors import ReloadError, ReloadTimeoutError, UpdaterError
from caddyfile_updater.services.docker import DockerRuntime

log = logging.getLogger(__name__)


def reload_local(caddy: CaddyConfig, timeout: float) -> None:
    """Run ``<bin> reload`` from the config directory and wait for it."""
    cmd = [str(caddy.bin_path), "reload"]
    try:
        result = subprocess.run(cmd, cwd=caddy.config_dir, timeout=timeout, check=False)
    except subprocess.TimeoutExpired as exc:
        raise ReloadTimeoutError(f"{' '.join(cmd)} did not finish within {timeout}s") from exc
    except OSError as exc:
        raise ReloadError(f"Could not run {' '.join(cmd)}: {exc}") from exc

    if result.returncode != 0:
        log.error("unable to reload Caddy at %s (exit %d)", caddy.bin_path, result.returncode)
        raise ReloadError(
            f"Unable to reload Caddy - exited with status {result.returncode}",
            status=result.returncode,
        )


def _log_exec_output(stdout: bytes | None, stderr: bytes | None) -> None:
    if stdout:
        log.info("%s", stdout.decode(errors="replace").rstrip())
    if stderr:
        log.warning("%s", stderr.decode(errors="replace").rstrip())


def _exec_reload(runtime: DockerRuntime, caddy: CaddyConfig) -> None:
    container_id = runtime.find_single_container(caddy.location.container or "")
    exec_id = runtime.exec_create(
        container_id,
        [str(caddy.bin_path), "reload"],
        workdir=str(caddy.config_dir),
    )
    for stdout, stderr in runtime.exec_stream(exec_id):
        _log_exec_output(stdout, stderr)

    exit_code = runtime.exec_exit_code(exec_id)
    if exit_code is None:
        raise ReloadError(
            f"Unable to reload Caddy in container '{caddy.location.container}' - no exit status reported"
        )
    if exit_code != 0:
        raise ReloadError(
            f"Unable to reload Caddy in container '{caddy.location.container}' - exited with status {exit_code}",
            status=exit_code,
        )


def _run_bounded(fn: Callable[[], None], timeout: float, what: str) -> None:
    """Run ``fn`` on a daemon thread and give up after ``timeout`` seconds.

    A timed-out call is abandoned, not cancelled; the caller is expected
    to treat the timeout as fatal.
    """
    outcome: dict[str, Any] = {}

    def _target() -> None:
        try:
            fn()
        except Exception as exc:  # re-raised on the calling thread
            outcome["error"] = exc

    worker = threading.Thread(target=_target, name=f"reload-{what}", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise ReloadTimeoutError(f"Reloading {what} did not finish within {timeout}s")
    error = outcome.get("error")
    if isinstance(error, UpdaterError):
        raise error
    if error is not None:
        raise ReloadError(f"Reloading {what} failed: {error}") from error


def reload_in_container(runtime: DockerRuntime, caddy: CaddyConfig, timeout: float) -> None:
    """Exec ``<bin> reload`` inside the single container named by the location."""
    _run_bounded(
        lambda: _exec_reload(runtime, caddy),
        timeout,
        f"Caddy in container '{caddy.location.container}'",
    )


class CaddyReloader:
    """Reload the Docker instance, then the host instance, stopping at the first failure."""

    def __init__(self, config: UpdaterConfig, runtime: DockerRuntime) -> None:
        self._config = config
        self._runtime = runtime

    def reload(self, label: str, caddy: CaddyConfig) -> None:
        log.info("reloading %s (%s)...", label, caddy.location)
        if caddy.location.kind is LocationKind.DOCKER:
            reload_in_container(self._runtime, caddy, self._config.reload_timeout)
        else:
            reload_local(caddy, self._config.reload_timeout)

    def reload_all(self) -> None:
        self.reload("docker-caddy", self._config.docker_caddy)
        self.reload("local-caddy", self._config.local_caddy)
