"""Shared fixtures: an in-memory resolver service and sample repositories."""
from __future__ import annotations

import threading
from typing import Callable, Dict, List, Optional

import pytest

from artifacts.models import Artifact, Dependency
from repository.models import RemoteRepository
from resolver.service import DependencyNode, LocalRepository


class FakeLocalRepositoryManager:
    """Local repository manager stand-in."""

    def __init__(self, repository: LocalRepository):
        self.repository = repository


class FakeResolverService:
    """Resolver serving a static table of artifacts and their dependencies.

    Resolved artifacts get an empty file under the session's local
    repository, laid out like a Maven repository.
    """

    def __init__(self):
        self.table: Dict[str, List[Dependency]] = {}
        self.broken: Dict[str, Exception] = {}
        self.collect_requests = []
        self.resolve_calls = 0
        self.sessions = []
        self.on_collect: Optional[Callable] = None
        self._lock = threading.Lock()

    def add(self, coords: str, *deps: Dependency) -> "FakeResolverService":
        self.table[_key(Artifact.parse(coords))] = list(deps)
        return self

    def new_local_repository_manager(self, local):
        return FakeLocalRepositoryManager(local)

    def collect_dependencies(self, session, request):
        with self._lock:
            self.collect_requests.append(request)
            self.sessions.append(session)
        if self.on_collect is not None:
            self.on_collect(session, request)
        return self._node(request.root, frozenset())

    def _node(self, dependency: Dependency, seen) -> DependencyNode:
        key = _key(dependency.artifact)
        if key in self.broken:
            raise self.broken[key]
        if key not in self.table:
            raise LookupError(f"Could not find artifact {dependency.artifact}")
        children = []
        for dep in self.table[key]:
            if _key(dep.artifact) in seen:
                continue
            children.append(self._node(dep, seen | {key}))
        return DependencyNode(dependency, children)

    def resolve_dependencies(self, session, request):
        with self._lock:
            self.resolve_calls += 1
        return [self._install(session, node.artifact) for node in request.nodes()]

    def resolve_artifact(self, session, request):
        if _key(request.artifact) not in self.table:
            raise LookupError(f"Could not find artifact {request.artifact}")
        return self._install(session, request.artifact)

    def _install(self, session, artifact: Artifact) -> Artifact:
        directory = (
            session.local_repository.basedir
            / artifact.group_id.replace(".", "/")
            / artifact.artifact_id
            / artifact.version
        )
        directory.mkdir(parents=True, exist_ok=True)
        name = f"{artifact.artifact_id}-{artifact.version}"
        if artifact.classifier:
            name = f"{name}-{artifact.classifier}"
        path = directory / f"{name}.{artifact.extension}"
        path.touch()
        return artifact.with_file(path)


def _key(artifact: Artifact) -> str:
    return f"{artifact.group_id}:{artifact.artifact_id}:{artifact.classifier}:{artifact.version}"


def dep(coords: str, scope: str = "compile", optional: bool = False, exclusions=()) -> Dependency:
    """Shortcut for a dependency on ``group:artifact[:ext[:classifier]]:version``."""
    return Dependency(Artifact.parse(coords), scope, optional, tuple(exclusions))


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep tests away from real settings files."""
    monkeypatch.setenv("AETHER_USER_SETTINGS", str(tmp_path / "no-such-settings.yml"))
    monkeypatch.delenv("AETHER_GLOBAL_SETTINGS", raising=False)


@pytest.fixture
def central() -> RemoteRepository:
    return RemoteRepository("maven-central", "default", "https://repo1.maven.org/maven2/")


@pytest.fixture
def resolver() -> FakeResolverService:
    """Resolver knowing a handful of well-known artifacts."""
    service = FakeResolverService()
    service.add("junit:junit:4.10", dep("org.hamcrest:hamcrest-core:1.1"))
    service.add("junit:junit:4.8")
    service.add("junit:junit:4.8.2")
    service.add("org.hamcrest:hamcrest-core:1.1")
    service.add(
        "commons-validator:commons-validator:1.3.1",
        dep("commons-beanutils:commons-beanutils:1.7.0"),
        dep("commons-digester:commons-digester:1.6"),
        dep("commons-logging:commons-logging:1.0.4"),
        dep("oro:oro:2.0.8", optional=True),
    )
    service.add("commons-beanutils:commons-beanutils:1.7.0", dep("commons-logging:commons-logging:1.0.3"))
    service.add("commons-digester:commons-digester:1.6", dep("commons-logging:commons-logging:1.0"))
    service.add("commons-logging:commons-logging:1.0.4")
    service.add("commons-logging:commons-logging:1.0.3")
    service.add("commons-logging:commons-logging:1.0")
    service.add("oro:oro:2.0.8")
    return service
