"""Root Typer application for the Caddyfile updater."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.syntax import Syntax

from caddyfile_updater import constants
from caddyfile_updater.config import CaddyConfig, CaddyLocation, UpdaterConfig
from caddyfile_updater.errors import UpdaterError
from caddyfile_updater.log import setup_logging
from caddyfile_updater.services.caddy import CaddyReloader
from caddyfile_updater.services.docker import DockerRuntime
from caddyfile_updater.services.listener import Listener

app = typer.Typer(
    name="caddyfile-updater",
    help="Watch Docker for container events, write Caddy snippets, then reload both Caddy instances.",
    no_args_is_help=True,
)
console = Console()
log = logging.getLogger("caddyfile_updater.cli")


@app.callback()
def main(
    ctx: typer.Context,
    label_prefix: str = typer.Option(..., envvar="LABEL_PREFIX", help="Label namespace, e.g. 'my.name'."),
    domain_name: str = typer.Option(..., envvar="DOMAIN_NAME", help="Public domain, e.g. example.com."),
    local_domain_prefix: str = typer.Option(
        ..., envvar="LOCAL_DOMAIN_PREFIX", help="Prefix for the local domain of non-external apps."
    ),
    local_caddy_snippets_dir: Path = typer.Option(
        ..., envvar="LOCAL_CADDY_SNIPPETS_DIR", help="Snippet directory of the host Caddy."
    ),
    docker_caddy_snippets_dir: Path = typer.Option(
        ..., envvar="DOCKER_CADDY_SNIPPETS_DIR", help="Host directory mounted as the Docker Caddy's snippets."
    ),
    local_caddy_bin_path: Path = typer.Option(constants.LOCAL_CADDY_BIN_PATH, envvar="LOCAL_CADDY_BIN_PATH"),
    local_caddy_config_dir: Path = typer.Option(constants.LOCAL_CADDY_CONFIG_DIR, envvar="LOCAL_CADDY_CONFIG_DIR"),
    local_caddy_on_docker: bool = typer.Option(
        False, envvar="LOCAL_CADDY_ON_DOCKER", help="The host Caddy runs in a container (e.g. host networking)."
    ),
    local_caddy_container: str = typer.Option(
        "local-caddy", envvar="LOCAL_CADDY_CONTAINER", help="Container name when --local-caddy-on-docker is set."
    ),
    docker_caddy_bin_path: Path = typer.Option(constants.DOCKER_CADDY_BIN_PATH, envvar="DOCKER_CADDY_BIN_PATH"),
    docker_caddy_config_dir: Path = typer.Option(
        constants.DOCKER_CADDY_CONFIG_DIR, envvar="DOCKER_CADDY_CONFIG_DIR"
    ),
    docker_caddy_container: str = typer.Option(constants.DOCKER_CADDY_CONTAINER, envvar="DOCKER_CADDY_CONTAINER"),
    docker_socket_path: Path = typer.Option(constants.DOCKER_SOCKET_PATH, envvar="DOCKER_SOCKET_PATH"),
    local_upstream: str = typer.Option(
        constants.LOCAL_UPSTREAM, envvar="LOCAL_UPSTREAM", help="Where the host Caddy forwards every route."
    ),
    reload_timeout: float = typer.Option(
        constants.RELOAD_TIMEOUT_SECONDS, envvar="RELOAD_TIMEOUT", min=0.1, help="Seconds allowed per reload."
    ),
    prune_empty_apps: bool = typer.Option(
        False, envvar="PRUNE_EMPTY_APPS", help="Forget an app once its last container is destroyed."
    ),
    log_level: str = typer.Option("INFO", envvar="LOG_LEVEL"),
) -> None:
    """Docker Caddyfile updater."""
    setup_logging(log_level)
    local_location = (
        CaddyLocation.docker(local_caddy_container) if local_caddy_on_docker else CaddyLocation.local()
    )
    ctx.obj = UpdaterConfig(
        label_prefix=label_prefix,
        domain_name=domain_name,
        local_domain_prefix=local_domain_prefix,
        local_caddy=CaddyConfig(
            bin_path=local_caddy_bin_path,
            config_dir=local_caddy_config_dir,
            snippets_dir=local_caddy_snippets_dir,
            location=local_location,
        ),
        docker_caddy=CaddyConfig(
            bin_path=docker_caddy_bin_path,
            config_dir=docker_caddy_config_dir,
            snippets_dir=docker_caddy_snippets_dir,
            location=CaddyLocation.docker(docker_caddy_container),
        ),
        docker_socket_path=docker_socket_path,
        local_upstream=local_upstream,
        reload_timeout=reload_timeout,
        prune_empty_apps=prune_empty_apps,
    )


def _listener(cfg: UpdaterConfig) -> Listener:
    runtime = DockerRuntime.connect(cfg.docker_base_url)
    return Listener(cfg, runtime, CaddyReloader(cfg, runtime))


@app.command()
def watch(ctx: typer.Context) -> None:
    """Build app data from running containers, then follow Docker events."""
    cfg: UpdaterConfig = ctx.obj
    try:
        _listener(cfg).listen()
    except UpdaterError as exc:
        log.error("%s", exc)
        raise typer.Exit(exc.exit_code) from exc


@app.command()
def render(ctx: typer.Context) -> None:
    """Print the snippets the running containers would produce. Writes and reloads nothing."""
    cfg: UpdaterConfig = ctx.obj
    try:
        listener = _listener(cfg)
        listener.scan()
    except UpdaterError as exc:
        log.error("%s", exc)
        raise typer.Exit(exc.exit_code) from exc

    snippets = listener.render()
    for title, content in (("docker-caddy", snippets.docker), ("local-caddy", snippets.local)):
        console.rule(f"[bold]{title}[/bold]")
        console.print(Syntax(content, "nginx", theme="monokai"))


if __name__ == "__main__":
    app()
