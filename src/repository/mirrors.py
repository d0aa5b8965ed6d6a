"""Mirror and proxy selection for remote repositories.

Both selectors are pure: they return new ``RemoteRepository`` objects for the
repositories they rewrite and never mutate their inputs.
"""
from __future__ import annotations

import fnmatch
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from .models import Authentication, Proxy, RemoteRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mirror:
    """A configured mirror: ``mirror_of`` names the repositories it replaces."""

    id: str
    url: str
    mirror_of: str
    layout: str = ""
    mirror_of_layouts: str = ""
    repository_manager: bool = False


@dataclass(frozen=True)
class ProxySetting:
    """A configured network proxy."""

    id: str
    host: str
    port: int
    type: str = "http"
    active: bool = True
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    private_key_file: Optional[str] = None
    passphrase: Optional[str] = field(default=None, repr=False)
    non_proxy_hosts: str = ""

    def authentication(self) -> Optional[Authentication]:
        if self.username is None and self.private_key_file is None:
            return None
        return Authentication(self.username, self.password, self.private_key_file, self.passphrase)


def _is_external(repository: RemoteRepository) -> bool:
    local = repository.host in Constants.LOCAL_HOSTS or repository.protocol == "file"
    return not local


def match_pattern(repository: RemoteRepository, pattern: str) -> bool:
    """Return True if ``pattern`` (a ``mirrorOf`` value) selects ``repository``.

    Supports ``*``, ``external:*``, comma separated ids and ``!id`` exclusions.
    """
    if not pattern:
        return False
    if pattern == Constants.WILDCARD or pattern == repository.id:
        return True
    result = False
    for token in (t.strip() for t in pattern.split(",")):
        if len(token) > 1 and token.startswith("!"):
            if token[1:] == repository.id:
                result = False
                break
        elif token == repository.id:
            result = True
            break
        elif token == Constants.EXTERNAL_WILDCARD and _is_external(repository):
            # a later "!id" may still exclude this repository
            result = True
        elif token == Constants.WILDCARD:
            result = True
    return result


def matches_layout(repo_layout: str, mirror_layouts: str) -> bool:
    """Return True if ``mirror_layouts`` (``mirrorOfLayouts``) accepts ``repo_layout``."""
    if not mirror_layouts or mirror_layouts == Constants.WILDCARD:
        return True
    if mirror_layouts == repo_layout:
        return True
    result = False
    for token in (t.strip() for t in mirror_layouts.split(",")):
        if len(token) > 1 and token.startswith("!"):
            if token[1:] == repo_layout:
                result = False
                break
        elif token == repo_layout:
            result = True
            break
        elif token == Constants.WILDCARD:
            result = True
    return result


class MirrorSelector:
    """Finds the configured mirror, if any, for a remote repository."""

    def __init__(self, mirrors: Optional[Iterable[Mirror]] = None):
        self._mirrors: List[Mirror] = list(mirrors or [])

    def find(self, repository: RemoteRepository) -> Optional[Mirror]:
        """Exact ``mirrorOf`` matches win over pattern matches."""
        if not repository.id or not self._mirrors:
            return None
        for mirror in self._mirrors:
            if mirror.mirror_of == repository.id and matches_layout(
                repository.content_type, mirror.mirror_of_layouts
            ):
                return mirror
        for mirror in self._mirrors:
            if match_pattern(repository, mirror.mirror_of) and matches_layout(
                repository.content_type, mirror.mirror_of_layouts
            ):
                return mirror
        return None

    def get_mirror(self, repository: RemoteRepository) -> Optional[RemoteRepository]:
        """Return the substitute repository, or None when no mirror applies."""
        mirror = self.find(repository)
        if mirror is None:
            return None
        return RemoteRepository(
            id=mirror.id,
            content_type=mirror.layout or repository.content_type,
            url=mirror.url,
            release_policy=repository.get_policy(False),
            snapshot_policy=repository.get_policy(True),
            proxy=repository.proxy,
            authentication=repository.authentication,
            mirrored_repositories=[repository],
            repository_manager=mirror.repository_manager,
        )


def select_mirrors(
    mirrors: Optional[Iterable[Mirror]], repositories: Iterable[RemoteRepository]
) -> List[RemoteRepository]:
    """Replace every repository that has a configured mirror by that mirror.

    Args:
        mirrors: Configured mirrors, in priority order.
        repositories: Requested repositories.

    Returns:
        New list with mirrored repositories substituted, others unchanged.
    """
    selector = MirrorSelector(mirrors)
    selected: List[RemoteRepository] = []
    for repo in repositories:
        mirrored = selector.get_mirror(repo)
        if mirrored is None:
            selected.append(repo)
            continue
        if is_debug_enabled(logger):
            logger.debug(
                "Repository mirrored",
                extra=extra_context(
                    event="mirror_selected",
                    component="mirrors",
                    action="select_mirrors",
                    repository=repo.id,
                    target=safe_url(mirrored.url),
                ),
            )
        selected.append(mirrored)
    return selected


def _non_proxy_match(host: str, non_proxy_hosts: str) -> bool:
    if not host or not non_proxy_hosts:
        return False
    for pattern in re.split(r"[|,]", non_proxy_hosts):
        pattern = pattern.strip().lower()
        if pattern and fnmatch.fnmatchcase(host, pattern):
            return True
    return False


class ProxySelector:
    """Picks the first active configured proxy applicable to a repository."""

    def __init__(self, proxies: Optional[Iterable[ProxySetting]] = None):
        self._proxies: List[ProxySetting] = [p for p in (proxies or []) if p.active]

    def get_proxy(self, repository: RemoteRepository) -> Optional[Proxy]:
        for setting in self._proxies:
            if setting.type.lower() != repository.protocol:
                continue
            if _non_proxy_match(repository.host, setting.non_proxy_hosts):
                continue
            return Proxy(setting.type, setting.host, setting.port, setting.authentication())
        return None


def select_proxies(
    proxies: Optional[Iterable[ProxySetting]], repositories: Iterable[RemoteRepository]
) -> List[RemoteRepository]:
    """Attach configured proxies to repositories that have none yet."""
    selector = ProxySelector(proxies)
    selected: List[RemoteRepository] = []
    for repo in repositories:
        proxy = None if repo.proxy is not None else selector.get_proxy(repo)
        if proxy is None:
            selected.append(repo)
            continue
        selected.append(
            replace(repo, proxy=proxy, mirrored_repositories=list(repo.mirrored_repositories))
        )
    return selected
