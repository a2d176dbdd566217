"""Application and container descriptors held by the registry."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AuthKind(str, Enum):
    OIDC = "oidc"
    TRUSTED_HEADERS = "headers"
    NONE = "none"
    UNKNOWN = "unknown"


class AuthMode(BaseModel):
    """Access-control mode of a route. Unrecognised label values are kept in ``tag``."""

    model_config = ConfigDict(frozen=True)

    kind: AuthKind = AuthKind.NONE
    tag: str | None = None

    @classmethod
    def from_label(cls, value: str | None) -> AuthMode:
        if value is None:
            return cls()
        try:
            kind = AuthKind(value)
        except ValueError:
            return cls(kind=AuthKind.UNKNOWN, tag=value)
        if kind is AuthKind.UNKNOWN:
            return cls(kind=AuthKind.UNKNOWN, tag=value)
        return cls(kind=kind)


class ContainerDescriptor(BaseModel):
    """A running container backing an application.

    ``hostname`` is the upstream target on the container network and is
    derived from the display name, so both change together on rename.
    """

    container_id: str
    name: str
    hostname: str


class ApplicationDescriptor(BaseModel):
    """A named service with one backend port, reachable on one domain."""

    name: str
    port: int = Field(ge=1, le=65535)
    external: bool = False
    auth: AuthMode = Field(default_factory=AuthMode)
    containers: list[ContainerDescriptor] = Field(default_factory=list)

    @property
    def is_routable(self) -> bool:
        return bool(self.containers)

    def container_ids(self) -> list[str]:
        return [c.container_id for c in self.containers]
