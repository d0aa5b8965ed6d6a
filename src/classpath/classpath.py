"""Classpath built from a project's declared dependencies.

``Classpath`` is a read-only set of files. Building it resolves the closure of
every declared dependency in the requested scopes, keeps one artifact per
(group, artifact, classifier) with the highest version, honours each
declaration's exclusions, and prepends the classpath elements the build tool
already knows about.
"""
from __future__ import annotations

import logging
from collections.abc import Set
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from artifacts.models import Artifact, Coordinate, Dependency
from artifacts.version import GenericVersion
from common.errors import InvalidArgument, require
from common.logging_utils import Timer, extra_context, is_debug_enabled
from repository.settings import Settings
from resolver.aether import Aether
from resolver.service import ResolverService
from .project import Project
from .root_artifact import RootArtifact, render_failure, render_root

logger = logging.getLogger(__name__)


def newer(child: Artifact, found: Artifact) -> Artifact:
    """Return whichever artifact has the higher version; ``child`` on ties."""
    if GenericVersion(child.version) < GenericVersion(found.version):
        return found
    return child


def merge_artifacts(roots: Iterable[RootArtifact]) -> List[Artifact]:
    """Merge the closures of ``roots`` into one conflict-free list.

    Roots are visited in order and their children in resolver order. A child
    whose coordinate is already present replaces the stored artifact only when
    its version is higher. A child excluded by its root is otherwise skipped.

    Raises:
        DependencyResolutionFailure: A root's closure could not be resolved.
    """
    merged: Dict[Coordinate, Artifact] = {}
    for root in roots:
        for child in root.children():
            found = merged.get(child.coordinate)
            if found is not None:
                if found.version == child.version:
                    continue
                winner = newer(child, found)
                if winner is child:
                    # moves the coordinate to the end, like remove + add
                    del merged[child.coordinate]
                    merged[child.coordinate] = winner
            if root.excluded(child):
                continue
            if child.coordinate not in merged:
                merged[child.coordinate] = child
    return list(merged.values())


class Classpath(Set):
    """Set of files forming the classpath of ``project`` for some scopes."""

    def __init__(
        self,
        project: Project,
        local_repository,
        scopes: Union[str, Iterable[str]],
        service: Optional[ResolverService] = None,
        aether: Optional[Aether] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the classpath.

        Args:
            project: Project whose declared dependencies are resolved.
            local_repository: Directory of the local artifact cache.
            scopes: One scope name or several.
            service: Resolver service; required unless ``aether`` is given.
            aether: Pre-built resolver facade.
            settings: Mirror/proxy settings passed to a facade built here.
        """
        self._project = require(project, "project")
        require(scopes, "scopes")
        if isinstance(scopes, str):
            scopes = [scopes]
        self._scopes = frozenset(scopes)
        if aether is None:
            if service is None:
                raise InvalidArgument("either a resolver service or an Aether facade is required")
            aether = Aether.for_project(project, require(local_repository, "local repository"),
                                        service, settings)
        self._aether = aether
        self._roots: Optional[List[Tuple[Dependency, RootArtifact]]] = None

    @property
    def scopes(self):
        return self._scopes

    def _declared(self) -> List[Tuple[Dependency, RootArtifact]]:
        if self._roots is None:
            self._roots = [
                (dep, RootArtifact(self._aether, dep.artifact, dep.exclusions))
                for dep in self._project.dependencies
                if dep.scope in self._scopes
            ]
        return self._roots

    def roots(self) -> List[RootArtifact]:
        """Root artifacts of the in-scope declared dependencies, in declaration order."""
        return [root for _, root in self._declared()]

    def elements(self) -> List[Path]:
        return self._project.classpath_paths(self._scopes)

    def artifacts(self) -> List[Artifact]:
        """Resolved, conflict-free artifacts of all roots."""
        return merge_artifacts(self.roots())

    def fetch(self) -> List[Path]:
        """Build the ordered, duplicate-free list of classpath files.

        Raises:
            DependencyResolutionFailure: Any root could not be resolved.
        """
        with Timer() as timer:
            files: Dict[Path, None] = dict.fromkeys(self.elements())
            for artifact in self.artifacts():
                if artifact.file is None:
                    logger.warning("%s resolved without a file, skipped", artifact)
                    continue
                files.setdefault(Path(artifact.file), None)
        if is_debug_enabled(logger):
            logger.debug(
                "Classpath built",
                extra=extra_context(
                    event="classpath_built",
                    component="classpath",
                    scope=",".join(sorted(self._scopes)),
                    count=len(files),
                    duration_ms=timer.duration_ms(),
                ),
            )
        return list(files)

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
        lines = []
        for dep, root in self._declared():
            try:
                lines.append(
                    render_root(root.artifact, root.exclusions, root.children(), root.excluded)
                )
            except Exception as exc:  # pylint: disable=broad-exception-caught
                lines.append(render_failure(dep, exc))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Classpath(scopes={sorted(self._scopes)}, aether={self._aether!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Classpath):
            if (
                self._project is other._project
                and self._aether == other._aether
                and self._scopes == other._scopes
            ):
                return True
        return super().__eq__(other)
