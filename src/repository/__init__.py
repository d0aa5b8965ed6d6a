"""Remote repository configuration: live objects, snapshots, mirrors and settings."""

from .models import Authentication, Proxy, RemoteRepository, RepositoryPolicy
from .descriptor import RepositoryAuthentication, RepositoryDescriptor, RepositoryProxy
from .mirrors import Mirror, MirrorSelector, ProxySelector, ProxySetting, select_mirrors, select_proxies
from .settings import Settings, load_settings

__all__ = [
    "Authentication",
    "Proxy",
    "RemoteRepository",
    "RepositoryPolicy",
    "RepositoryAuthentication",
    "RepositoryDescriptor",
    "RepositoryProxy",
    "Mirror",
    "MirrorSelector",
    "ProxySelector",
    "ProxySetting",
    "select_mirrors",
    "select_proxies",
    "Settings",
    "load_settings",
]
