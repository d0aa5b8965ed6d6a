"""Resolver facade: resolve one root artifact and its dependencies to files.

``Aether`` takes the repositories a build asks for, applies the configured
mirrors and proxies, keeps immutable snapshots of the result, and for every
``resolve`` call builds fresh requests and a fresh session for the external
resolver service. Calls touching the same local repository directory are
serialized; calls against different directories run in parallel.
"""
from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from artifacts.models import Artifact, Dependency
from common.errors import DependencyResolutionFailure, InvalidArgument, require
from common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from constants import Constants
from repository.descriptor import RepositoryDescriptor
from repository.mirrors import select_mirrors, select_proxies
from repository.models import RemoteRepository
from repository.settings import Settings, load_settings
from .filters import classpath_filter
from .service import (
    CollectRequest,
    DependencyFilter,
    DependencyRequest,
    LocalRepository,
    RepositorySystemSession,
    ResolverService,
)
from .transfer import LogTransferListener

logger = logging.getLogger(__name__)

_SUPPORTED_PROTOCOLS = frozenset(Constants.SUPPORTED_PROTOCOLS)

# One lock per local repository directory, keyed by its real path.
_local_repo_locks: Dict[str, threading.Lock] = {}
_local_repo_locks_guard = threading.Lock()


@contextmanager
def local_repository_lock(path) -> Iterator[None]:
    """Hold the process-wide lock of the local repository at ``path``."""
    key = os.path.realpath(os.fspath(path))
    with _local_repo_locks_guard:
        lock = _local_repo_locks.setdefault(key, threading.Lock())
    with lock:
        yield


def describe_repositories(repositories: Iterable[RemoteRepository]) -> List[str]:
    """Render repositories for error messages, naming credentials but never secrets."""
    texts = []
    for repo in repositories:
        auth = repo.authentication
        if auth is None:
            texts.append(f"{repo} without authentication")
        else:
            texts.append(f"{repo} with {auth}")
    return texts


class Aether:
    """Facade over the external resolver service."""

    def __init__(
        self,
        repositories: Iterable[RemoteRepository],
        local_repository,
        service: ResolverService,
        settings: Optional[Settings] = None,
    ):
        """Initialize the facade.

        Args:
            repositories: Remote repositories requested by the build.
            local_repository: Directory of the local artifact cache.
            service: External resolver service.
            settings: Mirror/proxy settings; loaded from the settings files when None.
        """
        require(repositories, "repositories")
        require(local_repository, "local repository")
        require(service, "resolver service")
        if settings is None:
            settings = load_settings()
        selected = select_proxies(
            settings.proxies, select_mirrors(settings.mirrors, list(repositories))
        )
        self._remotes: Tuple[RepositoryDescriptor, ...] = tuple(
            RepositoryDescriptor.snapshot(remote) for remote in selected
        )
        self._local = Path(local_repository)
        self._service = service

    @classmethod
    def for_project(cls, project, local_repository, service: ResolverService,
                    settings: Optional[Settings] = None) -> "Aether":
        """Build a facade over the remote repositories declared by ``project``."""
        require(project, "project")
        return cls(project.remote_repositories, local_repository, service, settings)

    @property
    def remotes(self) -> Tuple[RepositoryDescriptor, ...]:
        return self._remotes

    @property
    def local_repository(self) -> Path:
        return self._local

    @property
    def service(self) -> ResolverService:
        return self._service

    def resolve(
        self,
        root: Artifact,
        scope: str,
        dependency_filter: Optional[DependencyFilter] = None,
    ) -> List[Artifact]:
        """Resolve ``root`` and its dependencies.

        Args:
            root: Artifact to resolve.
            scope: Scope of the root dependency, e.g. "runtime".
            dependency_filter: Graph filter; defaults to the classpath filter of ``scope``.

        Returns:
            Resolved artifacts bound to their files, in resolver order.

        Raises:
            InvalidArgument: root or scope is None.
            ConfigurationError: No filter can be derived from ``scope``.
            DependencyResolutionFailure: The resolver service failed.
        """
        require(root, "root artifact")
        require(scope, "scope")
        if not isinstance(root, Artifact):
            raise InvalidArgument(f"root must be an Artifact, got {type(root).__name__}")
        if dependency_filter is None:
            dependency_filter = classpath_filter(scope)
        request = self._request(Dependency(root, scope))
        return self._fetch(self.session(), DependencyRequest(request, dependency_filter))

    def session(self) -> RepositorySystemSession:
        """Create a fresh session bound to the local repository."""
        manager = self._service.new_local_repository_manager(LocalRepository(self._local))
        return RepositorySystemSession(
            local_repository_manager=manager,
            transfer_listener=LogTransferListener(),
        )

    def repositories(self) -> List[RemoteRepository]:
        """Fresh live copies of the repositories the resolver may use."""
        remotes = []
        for descriptor in self._remotes:
            remote = descriptor.to_live()
            if remote.protocol not in _SUPPORTED_PROTOCOLS:
                logger.warning(
                    "%s ignored (only S3, HTTP/S, and FILE are supported)",
                    descriptor,
                    extra=extra_context(
                        event="repository_skipped",
                        component="aether",
                        action="request",
                        repository=descriptor.id,
                        target=safe_url(descriptor.url),
                    ),
                )
                continue
            remotes.append(remote)
        return remotes

    def _request(self, root: Dependency) -> CollectRequest:
        return CollectRequest(root=root, repositories=self.repositories())

    def _fetch(
        self, session: RepositorySystemSession, request: DependencyRequest
    ) -> List[Artifact]:
        collect = request.collect_request
        with Timer() as timer:
            try:
                with local_repository_lock(self._local):
                    request.root = self._service.collect_dependencies(session, collect)
                    artifacts = list(self._service.resolve_dependencies(session, request))
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.debug(
                    "Resolution failed",
                    exc_info=True,
                    extra=extra_context(
                        event="resolution_failed",
                        component="aether",
                        action="resolve",
                        outcome="exception",
                        artifact=str(collect.root),
                        local_repository=str(session.local_repository),
                    ),
                )
                raise DependencyResolutionFailure(
                    str(collect.root),
                    describe_repositories(collect.repositories),
                    str(session.local_repository),
                ) from exc
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved %d artifact(s) for %s",
                len(artifacts),
                collect.root,
                extra=extra_context(
                    event="resolution_complete",
                    component="aether",
                    action="resolve",
                    outcome="success",
                    artifact=str(collect.root),
                    count=len(artifacts),
                    duration_ms=timer.duration_ms(),
                ),
            )
        return artifacts

    def __eq__(self, other) -> bool:
        if not isinstance(other, Aether):
            return NotImplemented
        return self._remotes == other._remotes and self._local == other._local

    def __hash__(self) -> int:
        return hash((self._remotes, self._local))

    def __repr__(self) -> str:
        return f"Aether(remotes={[str(r) for r in self._remotes]}, local={self._local})"
