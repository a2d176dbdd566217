"""Docker Caddyfile updater — keep Caddy snippets in sync with labelled containers."""

__version__ = "0.1.0"
