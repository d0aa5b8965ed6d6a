"""A declared top-level dependency and its lazily resolved closure."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional, Tuple

from artifacts.models import Artifact, Exclusion
from common.errors import DependencyResolutionFailure, require
from constants import Constants, Scopes
from resolver.aether import local_repository_lock
from resolver.filters import NonOptionalFilter
from resolver.service import ArtifactRequest, RepositorySystemSession, ResolverService

logger = logging.getLogger(__name__)

_NS = "{%s}" % Constants.POM_NAMESPACE


def render_root(artifact: Artifact, exclusions, children, excluded) -> str:
    """Render a root header line and one indented line per child."""
    lines = [
        "{}:{}:{}:{}".format(
            artifact.group_id, artifact.artifact_id, artifact.version, len(exclusions)
        )
    ]
    for child in children:
        line = f"  {child}"
        if excluded(child):
            line += " (excluded)"
        lines.append(line)
    return "\n".join(lines)


def render_failure(dependency, error) -> str:
    """Render a declared dependency whose closure could not be loaded."""
    artifact = dependency.artifact
    return "failed to load '{}:{}:{}:{} ({})' {}".format(
        artifact.group_id,
        artifact.artifact_id,
        artifact.extension,
        artifact.version,
        dependency.scope,
        error,
    )


def _find_text(node: ET.Element, tag: str) -> Optional[str]:
    found = node.find(f"{_NS}{tag}")
    if found is None:
        found = node.find(tag)
    if found is None or found.text is None:
        return None
    return found.text.strip() or None


def read_parent(pom_file) -> Optional[Tuple[str, str, str]]:
    """Return the (group, artifact, version) of the parent declared in a POM.

    Args:
        pom_file: Path of the POM.

    Returns:
        Parent coordinates, or None when the POM declares no parent.
    """
    tree = ET.parse(pom_file)
    project = tree.getroot()
    parent = project.find(f"{_NS}parent")
    if parent is None:
        parent = project.find("parent")
    if parent is None:
        return None
    group = _find_text(parent, "groupId")
    artifact = _find_text(parent, "artifactId")
    version = _find_text(parent, "version")
    if not group or not artifact or not version:
        raise ValueError(f"incomplete <parent> in {pom_file}")
    return group, artifact, version


class RootArtifact:
    """A declared dependency, its exclusions, and its transitive closure."""

    def __init__(self, aether, artifact: Artifact, exclusions: Iterable[Exclusion] = ()):
        """Initialize a root artifact.

        Args:
            aether: Resolver facade used to fetch the closure.
            artifact: The declared artifact.
            exclusions: Exclusion rules of the declaration.
        """
        self._aether = require(aether, "aether")
        self._artifact = require(artifact, "artifact")
        self._exclusions: Tuple[Exclusion, ...] = tuple(require(exclusions, "exclusions"))
        self._children: Optional[List[Artifact]] = None

    @property
    def artifact(self) -> Artifact:
        return self._artifact

    @property
    def exclusions(self) -> Tuple[Exclusion, ...]:
        return self._exclusions

    def children(self) -> List[Artifact]:
        """Transitive closure without optional dependencies, resolved once.

        Raises:
            DependencyResolutionFailure: Resolution failed; the next call retries.
        """
        if self._children is None:
            self._children = self._aether.resolve(
                self._artifact, Scopes.COMPILE.value, NonOptionalFilter()
            )
        return list(self._children)

    def excluded(self, artifact: Artifact) -> bool:
        require(artifact, "artifact")
        return any(exclusion.matches(artifact) for exclusion in self._exclusions)

    def lookup_parent(
        self,
        system: ResolverService,
        session: RepositorySystemSession,
        repositories,
    ) -> Optional[Artifact]:
        """Resolve the parent POM declared by this artifact's POM file, if any.

        Only the parent POM itself is resolved, not its dependencies.
        """
        if self._artifact.file is None:
            raise ValueError(f"{self._artifact} is not resolved to a file")
        coords = read_parent(self._artifact.file)
        if coords is None:
            return None
        group, artifact_id, version = coords
        parent = Artifact(group, artifact_id, version, Constants.POM_EXTENSION)
        logger.debug("Resolving parent %s of %s", parent, self._artifact)
        request = ArtifactRequest(artifact=parent, repositories=list(repositories))
        with local_repository_lock(session.local_repository.basedir):
            return system.resolve_artifact(session, request)

    def __str__(self) -> str:
        try:
            children = self.children()
        except DependencyResolutionFailure as exc:
            return "{}:{}:{}:{} {}".format(
                self._artifact.group_id,
                self._artifact.artifact_id,
                self._artifact.version,
                len(self._exclusions),
                exc,
            )
        return render_root(self._artifact, self._exclusions, children, self.excluded)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RootArtifact):
            return NotImplemented
        return (
            self._aether == other._aether
            and self._artifact == other._artifact
            and self._exclusions == other._exclusions
        )

    def __hash__(self) -> int:
        return hash((self._artifact, self._exclusions))
