"""Live, resolver-native repository objects.

These are the mutable objects handed to a ``ResolverService``. They are
never shared between resolutions in flight: the facade keeps immutable
``RepositoryDescriptor`` snapshots and rebuilds fresh objects per request.
"""
from __future__ import annotations

import urllib.parse
from dataclasses import dataclass, field
from typing import List, Optional

from constants import Constants


@dataclass(frozen=True)
class RepositoryPolicy:
    """Update and checksum policy for releases or snapshots of a repository."""

    enabled: bool = True
    update_policy: str = "daily"
    checksum_policy: str = "warn"


@dataclass
class Authentication:
    """Credentials for a repository or a proxy."""

    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    private_key_file: Optional[str] = None
    passphrase: Optional[str] = field(default=None, repr=False)

    def __str__(self) -> str:
        return self.username or "<anonymous>"


@dataclass
class Proxy:
    """A network proxy used to reach a repository."""

    type: str
    host: str
    port: int
    authentication: Optional[Authentication] = None

    def __str__(self) -> str:
        return f"{self.type}://{self.host}:{self.port}"


@dataclass
class RemoteRepository:
    """A remote repository as understood by the resolver service."""

    id: str
    content_type: str = Constants.DEFAULT_CONTENT_TYPE
    url: str = ""
    release_policy: RepositoryPolicy = field(default_factory=RepositoryPolicy)
    snapshot_policy: RepositoryPolicy = field(default_factory=RepositoryPolicy)
    proxy: Optional[Proxy] = None
    authentication: Optional[Authentication] = None
    mirrored_repositories: List["RemoteRepository"] = field(default_factory=list)
    repository_manager: bool = False

    def get_policy(self, snapshot: bool) -> RepositoryPolicy:
        return self.snapshot_policy if snapshot else self.release_policy

    @property
    def protocol(self) -> str:
        """URL scheme, e.g. "https" or "s3"; empty when the URL has none."""
        try:
            return urllib.parse.urlsplit(self.url).scheme.lower()
        except ValueError:
            return ""

    @property
    def host(self) -> str:
        try:
            return (urllib.parse.urlsplit(self.url).hostname or "").lower()
        except ValueError:
            return ""

    def __str__(self) -> str:
        return f"{self.id} ({self.url}, {self.content_type})"
