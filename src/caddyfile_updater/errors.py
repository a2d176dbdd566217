"""Custom exceptions for the Caddyfile updater."""

from __future__ import annotations


class UpdaterError(Exception):
    """Base exception for all updater operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class MetadataError(UpdaterError):
    """A record the runtime always supplies is missing mandatory metadata."""


class LabelParseError(MetadataError):
    """A container label is present but cannot be parsed."""

    def __init__(self, label: str, value: str | None, reason: str):
        super().__init__(f"Invalid label {label}={value!r}: {reason}")
        self.label = label
        self.value = value


class ApplicationNotFoundError(UpdaterError):
    """No application is registered under the requested name."""

    def __init__(self, app_name: str):
        super().__init__(f"Application '{app_name}' is not registered")
        self.app_name = app_name


class ArtifactWriteError(UpdaterError):
    """Writing a generated snippet file failed."""


class DockerError(UpdaterError):
    """Docker API operation failed."""


class ContainerNotFoundError(DockerError):
    """No single container found matching criteria."""


class ReloadError(UpdaterError):
    """Reloading a Caddy instance failed."""

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.status = status


class ReloadTimeoutError(ReloadError):
    """Reloading a Caddy instance did not finish in time."""
