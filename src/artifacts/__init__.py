"""Artifact coordinates and version ordering."""

from .models import Artifact, Coordinate, Dependency, Exclusion
from .version import GenericVersion, compare_versions

__all__ = [
    "Artifact",
    "Coordinate",
    "Dependency",
    "Exclusion",
    "GenericVersion",
    "compare_versions",
]
