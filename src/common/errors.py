"""Error kinds raised by the resolver facade and classpath builders."""
from __future__ import annotations

from typing import Iterable, Optional, Tuple


class InvalidArgument(ValueError):
    """Raised when a public entry point receives a missing or malformed argument."""


class ConfigurationError(RuntimeError):
    """Raised for unusable configuration: unknown scopes, invalid settings files."""


class DependencyResolutionFailure(Exception):
    """Raised when the resolver service fails to resolve a root artifact.

    The message names the root, every repository consulted and the local
    repository directory. Repository descriptions mention the authentication
    username at most, never passwords or passphrases.
    """

    def __init__(
        self,
        root: str,
        repositories: Iterable[str],
        local_repository: str,
        message: Optional[str] = None,
    ):
        self.root = root
        self.repositories: Tuple[str, ...] = tuple(repositories)
        self.local_repository = local_repository
        if message is None:
            message = "failed to load '{}' from [{}] into {}".format(
                root, ", ".join(self.repositories), local_repository
            )
        super().__init__(message)


def require(value, name: str):
    """Return ``value`` or raise InvalidArgument when it is None."""
    if value is None:
        raise InvalidArgument(f"{name} must not be None")
    return value
