"""Tests for immutable repository snapshots."""
import dataclasses
import threading

import pytest

from common.errors import InvalidArgument
from repository.descriptor import RepositoryDescriptor
from repository.models import Authentication, Proxy, RemoteRepository, RepositoryPolicy


def _remote() -> RemoteRepository:
    auth = Authentication("deployer", "s3cr3t", "/home/me/.ssh/id_rsa", "phrase")
    mirrored = RemoteRepository("central", "default", "https://repo1.maven.org/maven2/")
    return RemoteRepository(
        id="internal",
        content_type="default",
        url="https://nexus.example.com/repository/public/",
        release_policy=RepositoryPolicy(True, "never", "fail"),
        snapshot_policy=RepositoryPolicy(False),
        proxy=Proxy("https", "proxy.example.com", 3128, Authentication("proxyuser", "proxypass")),
        authentication=auth,
        mirrored_repositories=[mirrored],
        repository_manager=True,
    )


class TestSnapshot:
    """Tests for RepositoryDescriptor.snapshot."""

    def test_copies_every_field(self):
        descriptor = RepositoryDescriptor.snapshot(_remote())
        assert descriptor.id == "internal"
        assert descriptor.url == "https://nexus.example.com/repository/public/"
        assert descriptor.release_policy == RepositoryPolicy(True, "never", "fail")
        assert descriptor.snapshot_policy.enabled is False
        assert descriptor.proxy.host == "proxy.example.com"
        assert descriptor.proxy.port == 3128
        assert descriptor.proxy.authentication.username == "proxyuser"
        assert descriptor.authentication.username == "deployer"
        assert descriptor.authentication.password == "s3cr3t"
        assert descriptor.repository_manager is True
        assert [m.id for m in descriptor.mirrored] == ["central"]

    def test_mutating_original_does_not_leak(self):
        remote = _remote()
        descriptor = RepositoryDescriptor.snapshot(remote)
        remote.url = "http://changed.example.com/"
        remote.authentication.password = "changed"
        remote.proxy.host = "changed"
        remote.proxy.authentication.username = "changed"
        remote.mirrored_repositories[0].url = "http://changed/"
        remote.mirrored_repositories.append(RemoteRepository("late", url="http://late/"))
        assert descriptor.url == "https://nexus.example.com/repository/public/"
        assert descriptor.authentication.password == "s3cr3t"
        assert descriptor.proxy.host == "proxy.example.com"
        assert descriptor.proxy.authentication.username == "proxyuser"
        assert descriptor.mirrored[0].url == "https://repo1.maven.org/maven2/"
        assert len(descriptor.mirrored) == 1

    def test_descriptor_is_frozen(self):
        descriptor = RepositoryDescriptor.snapshot(_remote())
        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.url = "http://other/"

    def test_nested_mirrors_are_copied_recursively(self):
        inner = RemoteRepository("inner", url="https://inner/")
        middle = RemoteRepository("middle", url="https://middle/", mirrored_repositories=[inner])
        outer = RemoteRepository("outer", url="https://outer/", mirrored_repositories=[middle])
        descriptor = RepositoryDescriptor.snapshot(outer)
        inner.url = "https://changed/"
        assert descriptor.mirrored[0].mirrored[0].url == "https://inner/"

    def test_rejects_none(self):
        with pytest.raises(InvalidArgument):
            RepositoryDescriptor.snapshot(None)

    def test_secrets_are_not_in_repr(self):
        text = repr(RepositoryDescriptor.snapshot(_remote()))
        assert "s3cr3t" not in text
        assert "proxypass" not in text
        assert "phrase" not in text


class TestToLive:
    """Tests for RepositoryDescriptor.to_live."""

    def test_round_trip_keeps_proxy_and_auth(self):
        live = RepositoryDescriptor.snapshot(_remote()).to_live()
        assert live.proxy == Proxy(
            "https", "proxy.example.com", 3128, Authentication("proxyuser", "proxypass")
        )
        assert live.authentication.password == "s3cr3t"
        assert live.mirrored_repositories[0].id == "central"
        assert live.repository_manager is True

    def test_each_call_builds_new_objects(self):
        descriptor = RepositoryDescriptor.snapshot(_remote())
        first = descriptor.to_live()
        second = descriptor.to_live()
        assert first is not second
        assert first.proxy is not second.proxy
        assert first.authentication is not second.authentication
        first.authentication.password = "mutated"
        first.mirrored_repositories.clear()
        assert second.authentication.password == "s3cr3t"
        assert descriptor.to_live().mirrored_repositories[0].id == "central"

    def test_shared_between_threads(self):
        descriptor = RepositoryDescriptor.snapshot(_remote())
        results = []

        def worker():
            live = descriptor.to_live()
            live.url = "http://mutated-by-thread/"
            results.append(descriptor.to_live().url)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == ["https://nexus.example.com/repository/public/"] * 8


def test_remote_protocol_and_host():
    remote = RemoteRepository("x", url="S3://Bucket.Example.com/release")
    assert remote.protocol == "s3"
    assert remote.host == "bucket.example.com"
    assert RemoteRepository("y", url="no-scheme").protocol == ""
