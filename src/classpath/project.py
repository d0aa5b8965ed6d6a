"""Project model consumed by the classpath builders."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from artifacts.models import Artifact, Dependency
from constants import Scopes
from repository.models import RemoteRepository


@dataclass
class Project:
    """What a build tool knows about the project being built.

    ``dependencies`` are the declared (direct) dependencies with their scopes
    and exclusions. The ``*_classpath_elements`` lists hold paths the build
    has already produced, such as output directories.
    """

    dependencies: List[Dependency] = field(default_factory=list)
    remote_repositories: List[RemoteRepository] = field(default_factory=list)
    compile_classpath_elements: List[str] = field(default_factory=list)
    runtime_classpath_elements: List[str] = field(default_factory=list)
    system_classpath_elements: List[str] = field(default_factory=list)
    test_classpath_elements: List[str] = field(default_factory=list)
    artifact: Optional[Artifact] = None

    def classpath_elements(self, scopes: Iterable[str]) -> List[str]:
        """Caller-known classpath elements visible for ``scopes``.

        Order: test, runtime, system, then compile (for compile or provided).
        """
        wanted = set(scopes)
        elements: List[str] = []
        if Scopes.TEST.value in wanted:
            elements.extend(self.test_classpath_elements)
        if Scopes.RUNTIME.value in wanted:
            elements.extend(self.runtime_classpath_elements)
        if Scopes.SYSTEM.value in wanted:
            elements.extend(self.system_classpath_elements)
        if Scopes.COMPILE.value in wanted or Scopes.PROVIDED.value in wanted:
            elements.extend(self.compile_classpath_elements)
        return elements

    def classpath_paths(self, scopes: Iterable[str]) -> List[Path]:
        return [Path(element) for element in self.classpath_elements(scopes)]
