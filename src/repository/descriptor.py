"""Immutable snapshots of remote repositories.

A ``RepositoryDescriptor`` copies everything the resolver needs out of a live
``RemoteRepository`` (proxy, authentication and mirrored repositories
included). Descriptors can be shared freely between threads; every call to
``to_live`` returns brand new resolver-native objects.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from common.errors import require
from .models import Authentication, Proxy, RemoteRepository, RepositoryPolicy


@dataclass(frozen=True)
class RepositoryAuthentication:
    """Value copy of an ``Authentication``."""

    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    private_key_file: Optional[str] = None
    passphrase: Optional[str] = field(default=None, repr=False)

    @classmethod
    def snapshot(cls, auth: Optional[Authentication]) -> Optional["RepositoryAuthentication"]:
        if auth is None:
            return None
        return cls(auth.username, auth.password, auth.private_key_file, auth.passphrase)

    def to_live(self) -> Authentication:
        return Authentication(self.username, self.password, self.private_key_file, self.passphrase)

    def __str__(self) -> str:
        return str(self.to_live())


@dataclass(frozen=True)
class RepositoryProxy:
    """Value copy of a ``Proxy`` with its own authentication."""

    type: str
    host: str
    port: int
    authentication: Optional[RepositoryAuthentication] = None

    @classmethod
    def snapshot(cls, proxy: Optional[Proxy]) -> Optional["RepositoryProxy"]:
        if proxy is None:
            return None
        return cls(
            proxy.type,
            proxy.host,
            proxy.port,
            RepositoryAuthentication.snapshot(proxy.authentication),
        )

    def to_live(self) -> Proxy:
        auth = self.authentication.to_live() if self.authentication is not None else None
        return Proxy(self.type, self.host, self.port, auth)


@dataclass(frozen=True)
class RepositoryDescriptor:
    """Immutable snapshot of a remote repository."""

    id: str
    content_type: str
    url: str
    release_policy: RepositoryPolicy
    snapshot_policy: RepositoryPolicy
    proxy: Optional[RepositoryProxy] = None
    authentication: Optional[RepositoryAuthentication] = None
    mirrored: Tuple["RepositoryDescriptor", ...] = ()
    repository_manager: bool = False

    @classmethod
    def snapshot(cls, remote: RemoteRepository) -> "RepositoryDescriptor":
        """Copy a live repository, recursing into its mirrored repositories.

        Args:
            remote: Live repository; it is not retained.

        Returns:
            RepositoryDescriptor sharing no mutable state with ``remote``.
        """
        require(remote, "remote repository")
        return cls(
            id=remote.id,
            content_type=remote.content_type,
            url=remote.url,
            release_policy=remote.get_policy(False),
            snapshot_policy=remote.get_policy(True),
            proxy=RepositoryProxy.snapshot(remote.proxy),
            authentication=RepositoryAuthentication.snapshot(remote.authentication),
            mirrored=tuple(cls.snapshot(m) for m in remote.mirrored_repositories),
            repository_manager=remote.repository_manager,
        )

    def to_live(self) -> RemoteRepository:
        """Build a fresh resolver-native repository from this snapshot."""
        return RemoteRepository(
            id=self.id,
            content_type=self.content_type,
            url=self.url,
            release_policy=self.release_policy,
            snapshot_policy=self.snapshot_policy,
            proxy=self.proxy.to_live() if self.proxy is not None else None,
            authentication=(
                self.authentication.to_live() if self.authentication is not None else None
            ),
            mirrored_repositories=[m.to_live() for m in self.mirrored],
            repository_manager=self.repository_manager,
        )

    def __str__(self) -> str:
        return f"{self.id} ({self.url}, {self.content_type})"
