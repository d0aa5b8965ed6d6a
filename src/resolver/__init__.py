"""Resolver facade and the contract of the external resolver service."""

from .aether import Aether, describe_repositories, local_repository_lock
from .filters import AndDependencyFilter, NonOptionalFilter, ScopeDependencyFilter, classpath_filter
from .service import (
    ArtifactRequest,
    CollectRequest,
    DependencyNode,
    DependencyRequest,
    LocalRepository,
    LocalRepositoryManager,
    RepositorySystemSession,
    ResolverService,
)
from .transfer import LogTransferListener, TransferEvent

__all__ = [
    "Aether",
    "describe_repositories",
    "local_repository_lock",
    "AndDependencyFilter",
    "NonOptionalFilter",
    "ScopeDependencyFilter",
    "classpath_filter",
    "ArtifactRequest",
    "CollectRequest",
    "DependencyNode",
    "DependencyRequest",
    "LocalRepository",
    "LocalRepositoryManager",
    "RepositorySystemSession",
    "ResolverService",
    "LogTransferListener",
    "TransferEvent",
]
