"""Classpath reconciliation over declared dependencies."""

from .classpath import Classpath, merge_artifacts, newer
from .graph_classpath import GraphClasspath, GraphRootArtifact
from .project import Project
from .root_artifact import RootArtifact, read_parent

__all__ = [
    "Classpath",
    "merge_artifacts",
    "newer",
    "GraphClasspath",
    "GraphRootArtifact",
    "Project",
    "RootArtifact",
    "read_parent",
]
