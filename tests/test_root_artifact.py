"""Tests for RootArtifact."""
import textwrap
import threading

import pytest

from artifacts.models import Artifact, Exclusion
from classpath.root_artifact import RootArtifact, read_parent
from common.errors import DependencyResolutionFailure
from repository.settings import Settings
from resolver.aether import Aether, local_repository_lock


@pytest.fixture
def aether(resolver, central, tmp_path):
    return Aether([central], tmp_path / "repo", resolver, Settings())


def test_children_resolved_once(aether, resolver):
    root = RootArtifact(aether, Artifact.parse("junit:junit:4.10"))
    first = root.children()
    second = root.children()
    assert [str(a) for a in first] == ["junit:junit:jar:4.10", "org.hamcrest:hamcrest-core:jar:1.1"]
    assert first == second
    assert first is not second
    assert resolver.resolve_calls == 1


def test_children_skip_optional(aether):
    root = RootArtifact(aether, Artifact.parse("commons-validator:commons-validator:1.3.1"))
    assert "oro" not in {a.artifact_id for a in root.children()}


def test_failure_is_not_cached(aether, resolver):
    root = RootArtifact(aether, Artifact.parse("com.example:late:2.0"))
    with pytest.raises(DependencyResolutionFailure):
        root.children()
    resolver.add("com.example:late:2.0")
    assert [a.artifact_id for a in root.children()] == ["late"]


def test_excluded(aether):
    root = RootArtifact(aether, Artifact.parse("junit:junit:4.10"), [Exclusion("org.hamcrest", "hamcrest-core")])
    assert root.excluded(Artifact.parse("org.hamcrest:hamcrest-core:1.3"))
    assert not root.excluded(Artifact.parse("junit:junit:4.10"))


def test_str_marks_excluded_children(aether):
    root = RootArtifact(aether, Artifact.parse("junit:junit:4.10"), [Exclusion("org.hamcrest", "hamcrest-core")])
    assert str(root) == (
        "junit:junit:4.10:1\n"
        "  junit:junit:jar:4.10\n"
        "  org.hamcrest:hamcrest-core:jar:1.1 (excluded)"
    )


def test_str_of_broken_root(aether):
    root = RootArtifact(aether, Artifact.parse("com.example:absent:1.0"))
    text = str(root)
    assert text.startswith("com.example:absent:1.0:0 failed to load")


def test_equality(aether, resolver, central, tmp_path):
    twin = Aether([central], tmp_path / "repo", resolver, Settings())
    a = RootArtifact(aether, Artifact.parse("junit:junit:4.10"))
    b = RootArtifact(twin, Artifact.parse("junit:junit:4.10"))
    assert a == b
    assert hash(a) == hash(b)
    assert a != RootArtifact(aether, Artifact.parse("junit:junit:4.10"), [Exclusion("x", "y")])


POM_WITH_PARENT = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>org.sonatype.oss</groupId>
    <artifactId>oss-parent</artifactId>
    <version>7</version>
  </parent>
  <artifactId>child</artifactId>
</project>
"""


def test_read_parent(tmp_path):
    namespaced = tmp_path / "ns.pom"
    namespaced.write_text(POM_WITH_PARENT, encoding="utf-8")
    assert read_parent(namespaced) == ("org.sonatype.oss", "oss-parent", "7")

    plain = tmp_path / "plain.pom"
    plain.write_text(
        "<project><parent><groupId>g</groupId><artifactId>a</artifactId>"
        "<version>1</version></parent></project>",
        encoding="utf-8",
    )
    assert read_parent(plain) == ("g", "a", "1")

    orphan = tmp_path / "orphan.pom"
    orphan.write_text("<project><artifactId>x</artifactId></project>", encoding="utf-8")
    assert read_parent(orphan) is None

    broken = tmp_path / "broken.pom"
    broken.write_text(
        textwrap.dedent(
            """\
            <project><parent><groupId>g</groupId></parent></project>
            """
        ),
        encoding="utf-8",
    )
    with pytest.raises(ValueError):
        read_parent(broken)


def test_lookup_parent(aether, resolver, central, tmp_path):
    pom = tmp_path / "child-1.0.pom"
    pom.write_text(POM_WITH_PARENT, encoding="utf-8")
    resolver.add("org.sonatype.oss:oss-parent:7")
    root = RootArtifact(aether, Artifact("com.example", "child", "1.0", "pom").with_file(pom))
    parent = root.lookup_parent(resolver, aether.session(), [central])
    assert str(parent) == "org.sonatype.oss:oss-parent:pom:7"
    assert parent.file.name == "oss-parent-7.pom"
    assert parent.file.exists()


def test_lookup_parent_requires_file(aether, resolver, central):
    root = RootArtifact(aether, Artifact.parse("com.example:child:1.0"))
    with pytest.raises(ValueError):
        root.lookup_parent(resolver, aether.session(), [central])


def test_lookup_parent_waits_for_local_repository_lock(aether, resolver, central, tmp_path):
    pom = tmp_path / "child-1.0.pom"
    pom.write_text(POM_WITH_PARENT, encoding="utf-8")
    resolver.add("org.sonatype.oss:oss-parent:7")
    root = RootArtifact(aether, Artifact("com.example", "child", "1.0", "pom").with_file(pom))
    session = aether.session()
    done = threading.Event()

    def worker():
        root.lookup_parent(resolver, session, [central])
        done.set()

    with local_repository_lock(aether.local_repository):
        thread = threading.Thread(target=worker)
        thread.start()
        assert not done.wait(0.2)
    thread.join(5)
    assert done.is_set()
