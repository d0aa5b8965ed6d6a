"""Data models for artifacts, exclusions and dependencies."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from constants import Constants
from common.errors import InvalidArgument

# Type alias for the dedup key of an artifact: (group, artifact, classifier).
Coordinate = Tuple[str, str, str]


@dataclass(frozen=True)
class Artifact:
    """A Maven artifact, optionally bound to its resolved file."""

    group_id: str
    artifact_id: str
    version: str
    extension: str = Constants.DEFAULT_EXTENSION
    classifier: str = ""
    file: Optional[Path] = field(default=None, compare=False)

    @classmethod
    def parse(cls, coords: str) -> "Artifact":
        """Parse ``group:artifact[:extension[:classifier]]:version``.

        Args:
            coords: Coordinate string, e.g. "junit:junit:jar:4.10".

        Returns:
            Artifact without a file.
        """
        if coords is None:
            raise InvalidArgument("coordinates must not be None")
        parts = [p.strip() for p in coords.strip().split(":")]
        if len(parts) < 3 or len(parts) > 5 or not all(parts[:2]) or not parts[-1]:
            raise InvalidArgument(
                f"bad artifact coordinates '{coords}', expected "
                "<groupId>:<artifactId>[:<extension>[:<classifier>]]:<version>"
            )
        group_id, artifact_id = parts[0], parts[1]
        version = parts[-1]
        extension = parts[2] if len(parts) >= 4 and parts[2] else Constants.DEFAULT_EXTENSION
        classifier = parts[3] if len(parts) == 5 else ""
        return cls(group_id, artifact_id, version, extension, classifier)

    @property
    def coordinate(self) -> Coordinate:
        """Identity used for conflict detection; ignores version and extension."""
        return (self.group_id, self.artifact_id, self.classifier)

    def with_file(self, path) -> "Artifact":
        """Return a copy bound to ``path``."""
        return dataclasses.replace(self, file=Path(path) if path is not None else None)

    def with_version(self, version: str) -> "Artifact":
        return dataclasses.replace(self, version=version)

    def __str__(self) -> str:
        parts = [self.group_id, self.artifact_id, self.extension]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)


@dataclass(frozen=True)
class Exclusion:
    """Rule suppressing one transitive (group, artifact) from a root's closure."""

    group_id: str
    artifact_id: str

    def matches(self, artifact: Artifact) -> bool:
        return (
            self.group_id == artifact.group_id
            and self.artifact_id == artifact.artifact_id
        )

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


@dataclass(frozen=True)
class Dependency:
    """An artifact requested in a given scope."""

    artifact: Artifact
    scope: Optional[str] = "compile"
    optional: bool = False
    exclusions: Tuple[Exclusion, ...] = ()

    @classmethod
    def declare(
        cls,
        group_id: str,
        artifact_id: str,
        version: str,
        scope: str = "compile",
        extension: str = Constants.DEFAULT_EXTENSION,
        classifier: str = "",
        optional: bool = False,
        exclusions=(),
    ) -> "Dependency":
        """Build a dependency the way it is declared in a project model."""
        return cls(
            Artifact(group_id, artifact_id, version, extension or Constants.DEFAULT_EXTENSION, classifier or ""),
            scope,
            optional,
            tuple(exclusions),
        )

    def __str__(self) -> str:
        suffix = "?" if self.optional else ""
        return f"{self.artifact} ({self.scope}{suffix})"
