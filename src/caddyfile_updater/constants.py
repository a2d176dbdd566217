"""Shared constants for the Caddyfile updater."""

from pathlib import Path

# Docker
DOCKER_SOCKET_PATH = Path("/var/run/docker.sock")
DOCKER_CADDY_CONTAINER = "caddy"

# Caddy instance on the host (SSL termination, proxies into Docker)
LOCAL_CADDY_BIN_PATH = Path("/usr/local/bin/caddy")
LOCAL_CADDY_CONFIG_DIR = Path("/usr/local/etc")

# Caddy instance inside Docker (proxies to the application containers)
DOCKER_CADDY_BIN_PATH = Path("caddy")
DOCKER_CADDY_CONFIG_DIR = Path("/etc/caddy")

# Fixed endpoint the host instance forwards to (the Docker instance)
LOCAL_UPSTREAM = "http://localhost:880"

# Snippet output
SNIPPET_FILENAME = "docker-hosts"
AUTH_HEADERS_SNIPPET = "auth-headers"
EXTERNAL_GROUP = "external_docker_hosts"
INTERNAL_GROUP = "internal_docker_hosts"
DENIED_PATHS = ("/metrics", "/metrics/*")

# Label suffixes, appended to the operator-supplied prefix
APP_LABEL_SUFFIX = "app"
PORT_LABEL_SUFFIX = "port"
EXTERNAL_LABEL_SUFFIX = "external"
AUTH_LABEL_SUFFIX = "auth"

# Reload
RELOAD_TIMEOUT_SECONDS = 30.0
