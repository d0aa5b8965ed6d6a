"""Contract of the external resolver service and the objects passed to it.

The resolver service does the real work (graph collection, version
mediation, transport, local caching). This module only describes what the
facade hands over and what it expects back.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Optional, Protocol, Sequence, runtime_checkable

from artifacts.models import Artifact, Dependency
from repository.models import RemoteRepository

if TYPE_CHECKING:
    from .transfer import LogTransferListener


@dataclass(frozen=True)
class LocalRepository:
    """On-disk artifact cache."""

    basedir: Path

    def __str__(self) -> str:
        return str(self.basedir)


@runtime_checkable
class LocalRepositoryManager(Protocol):
    """Reads and writes one local repository; unsafe for concurrent writers."""

    repository: LocalRepository


@dataclass
class DependencyNode:
    """A node of a collected dependency graph."""

    dependency: Dependency
    children: List["DependencyNode"] = field(default_factory=list)

    @property
    def artifact(self) -> Artifact:
        return self.dependency.artifact

    def preorder(self, dependency_filter: Optional["DependencyFilter"] = None) -> Iterator["DependencyNode"]:
        """Walk the graph depth-first, yielding nodes accepted by the filter.

        Children of a rejected node are still visited.
        """
        parents: List[DependencyNode] = []

        def visit(node: DependencyNode) -> Iterator[DependencyNode]:
            if dependency_filter is None or dependency_filter.accept(node, list(parents)):
                yield node
            parents.append(node)
            try:
                for child in node.children:
                    yield from visit(child)
            finally:
                parents.pop()

        return visit(self)


class DependencyFilter(Protocol):
    """Decides whether a graph node takes part in a resolution."""

    def accept(self, node: DependencyNode, parents: Sequence[DependencyNode]) -> bool:
        ...


@dataclass
class CollectRequest:
    """Request to collect the transitive graph of ``root``."""

    root: Dependency
    repositories: List[RemoteRepository] = field(default_factory=list)


@dataclass
class DependencyRequest:
    """Request to resolve the files of a collected graph."""

    collect_request: CollectRequest
    dependency_filter: Optional[DependencyFilter] = None
    root: Optional[DependencyNode] = None

    def nodes(self) -> List[DependencyNode]:
        """Graph nodes to resolve, in pre-order, filter applied."""
        if self.root is None:
            return []
        return list(self.root.preorder(self.dependency_filter))


@dataclass
class ArtifactRequest:
    """Request to resolve a single artifact, without its dependencies."""

    artifact: Artifact
    repositories: List[RemoteRepository] = field(default_factory=list)


@dataclass
class RepositorySystemSession:
    """Per-call resolver session; never shared between calls."""

    local_repository_manager: LocalRepositoryManager
    transfer_listener: Optional["LogTransferListener"] = None
    offline: bool = False

    @property
    def local_repository(self) -> LocalRepository:
        return self.local_repository_manager.repository


class ResolverService(Protocol):
    """The external artifact-resolution engine."""

    def new_local_repository_manager(self, local: LocalRepository) -> LocalRepositoryManager:
        ...

    def collect_dependencies(
        self, session: RepositorySystemSession, request: CollectRequest
    ) -> DependencyNode:
        ...

    def resolve_dependencies(
        self, session: RepositorySystemSession, request: DependencyRequest
    ) -> List[Artifact]:
        ...

    def resolve_artifact(
        self, session: RepositorySystemSession, request: ArtifactRequest
    ) -> Artifact:
        ...
