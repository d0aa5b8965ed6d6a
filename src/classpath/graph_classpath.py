"""Classpath built from a dependency graph produced by the build tool itself.

Where ``Classpath`` asks the resolver facade for the closure of every declared
dependency, ``GraphClasspath`` walks a graph the build tool has already
computed and only maps its nodes to files in the local repository.
"""
from __future__ import annotations

import logging
from collections.abc import Set
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Protocol, Union

from artifacts.models import Artifact, Dependency, Exclusion
from common.errors import DependencyResolutionFailure, require
from resolver.service import DependencyNode
from .project import Project
from .root_artifact import render_failure, render_root

logger = logging.getLogger(__name__)


class DependencyGraphBuilder(Protocol):
    """Builds the resolved dependency graph of a project."""

    def build_dependency_graph(
        self, project: Project, artifact_filter: Callable[[Dependency], bool]
    ) -> DependencyNode:
        ...


class ArtifactRepository(Protocol):
    """Local repository able to locate the file of a resolved artifact."""

    def find(self, artifact: Artifact) -> Artifact:
        ...


class GraphRootArtifact:
    """A declared dependency with children taken from a pre-built graph."""

    def __init__(self, artifact: Artifact, exclusions: Iterable[Exclusion],
                 children: Iterable[Artifact]):
        self._artifact = require(artifact, "artifact")
        self._exclusions = tuple(require(exclusions, "exclusions"))
        self._children = list(require(children, "children"))

    @property
    def artifact(self) -> Artifact:
        return self._artifact

    def children(self) -> List[Artifact]:
        return list(self._children)

    def excluded(self, artifact: Artifact) -> bool:
        require(artifact, "artifact")
        return any(exclusion.matches(artifact) for exclusion in self._exclusions)

    def __str__(self) -> str:
        return render_root(self._artifact, self._exclusions, self._children, self.excluded)

    def __eq__(self, other) -> bool:
        if not isinstance(other, GraphRootArtifact):
            return NotImplemented
        return self._artifact == other._artifact and self._exclusions == other._exclusions

    def __hash__(self) -> int:
        return hash((self._artifact, self._exclusions))


class GraphClasspath(Set):
    """Set of classpath files derived from the build tool's dependency graph."""

    def __init__(
        self,
        builder: DependencyGraphBuilder,
        project: Project,
        local_repository: ArtifactRepository,
        scopes: Union[str, Iterable[str]],
    ):
        self._builder = require(builder, "graph builder")
        self._project = require(project, "project")
        self._local = require(local_repository, "local repository")
        require(scopes, "scopes")
        if isinstance(scopes, str):
            scopes = [scopes]
        self._scopes = frozenset(scopes)

    def _accepts(self, dependency: Dependency) -> bool:
        return dependency.scope in self._scopes

    def graph(self) -> DependencyNode:
        """Ask the builder for the project graph, keeping in-scope dependencies only."""
        try:
            return self._builder.build_dependency_graph(self._project, self._accepts)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            root = self._project.artifact
            raise DependencyResolutionFailure(
                str(root),
                [],
                "",
                message=f"failed to build the dependency graph of '{root}': {exc}",
            ) from exc

    def roots(self) -> List[GraphRootArtifact]:
        """Declared in-scope dependencies with their subtree from the graph."""
        graph = self.graph()
        roots = []
        for dep in self._project.dependencies:
            if dep.scope not in self._scopes:
                continue
            node = _find_child(graph, dep.artifact)
            children = []
            if node is not None:
                children = [n.artifact for n in node.preorder()][1:]
            roots.append(GraphRootArtifact(dep.artifact, dep.exclusions, children))
        return roots

    def fetch(self) -> List[Path]:
        files = dict.fromkeys(self._project.classpath_paths(self._scopes))
        for path in self._dependencies(self.graph()):
            files.setdefault(path, None)
        return list(files)

    def _dependencies(self, node: DependencyNode) -> List[Path]:
        artifact = node.artifact
        scope = node.dependency.scope
        files: List[Path] = []
        if scope is not None and scope not in self._scopes:
            return files
        if scope is None:
            resolved: Optional[Path] = artifact.file
        else:
            resolved = self._local.find(artifact).file
        if resolved is None:
            logger.warning("%s has no file in the local repository, skipped", artifact)
        else:
            files.append(Path(resolved))
        for child in node.children:
            if child.artifact != artifact:
                files.extend(self._dependencies(child))
        return files

    def __iter__(self) -> Iterator[Path]:
        return iter(self.fetch())

    def __len__(self) -> int:
        return len(self.fetch())

    def __contains__(self, item) -> bool:
        try:
            path = Path(item)
        except TypeError:
            return False
        return path in self.fetch()

    def __str__(self) -> str:
        try:
            roots = self.roots()
        except DependencyResolutionFailure as exc:
            return "\n".join(
                render_failure(dep, exc)
                for dep in self._project.dependencies
                if dep.scope in self._scopes
            )
        return "\n".join(str(root) for root in roots)

    def __eq__(self, other) -> bool:
        if isinstance(other, GraphClasspath):
            if self._builder is other._builder and self._scopes == other._scopes:
                return True
        return super().__eq__(other)


def _find_child(graph: DependencyNode, artifact: Artifact) -> Optional[DependencyNode]:
    for child in graph.children:
        if child.artifact.coordinate == artifact.coordinate:
            return child
    return None
