"""Mirror and proxy settings loaded from YAML files.

Settings come from a user file (``$AETHER_USER_SETTINGS`` or
``~/.aether/settings.yml``) and an optional global file
(``$AETHER_GLOBAL_SETTINGS``). Entries of the user file dominate global
entries with the same id. Example::

    mirrors:
      - id: internal
        url: https://nexus.example.com/repository/maven-public/
        mirrorOf: "external:*,!snapshots"
    proxies:
      - id: corp
        type: https
        host: proxy.example.com
        port: 3128
        nonProxyHosts: "localhost|*.example.com"
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import yaml
from jsonschema import Draft7Validator

from constants import Constants
from common.errors import ConfigurationError
from .mirrors import Mirror, ProxySetting

logger = logging.getLogger(__name__)

SETTINGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "mirrors": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "url", "mirrorOf"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "url": {"type": "string", "minLength": 1},
                    "layout": {"type": "string"},
                    "mirrorOf": {"type": "string", "minLength": 1},
                    "mirrorOfLayouts": {"type": "string"},
                    "repositoryManager": {"type": "boolean"},
                },
                "additionalProperties": False,
            },
        },
        "proxies": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "host", "port"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "active": {"type": "boolean"},
                    "type": {"type": "string", "minLength": 1},
                    "host": {"type": "string", "minLength": 1},
                    "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                    "username": {"type": "string"},
                    "password": {"type": "string"},
                    "privateKeyFile": {"type": "string"},
                    "passphrase": {"type": "string"},
                    "nonProxyHosts": {"type": "string"},
                },
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class Settings:
    """Effective mirror and proxy configuration."""

    mirrors: Tuple[Mirror, ...] = ()
    proxies: Tuple[ProxySetting, ...] = ()
    sources: Tuple[str, ...] = field(default=(), compare=False)


def validate_settings(data: Dict[str, Any], source: str = "<settings>") -> None:
    """Validate a settings document and raise on the first error.

    Args:
        data: Parsed YAML document.
        source: File name used in the error message.
    """
    validator = Draft7Validator(SETTINGS_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise ConfigurationError(f"Invalid settings in {source} at '{path}': {first.message}")


def _mirror_from(entry: Dict[str, Any]) -> Mirror:
    return Mirror(
        id=entry["id"],
        url=entry["url"],
        mirror_of=entry["mirrorOf"],
        layout=entry.get("layout", ""),
        mirror_of_layouts=entry.get("mirrorOfLayouts", ""),
        repository_manager=bool(entry.get("repositoryManager", False)),
    )


def _proxy_from(entry: Dict[str, Any]) -> ProxySetting:
    return ProxySetting(
        id=entry["id"],
        host=entry["host"],
        port=int(entry["port"]),
        type=entry.get("type", "http"),
        active=bool(entry.get("active", True)),
        username=entry.get("username"),
        password=entry.get("password"),
        private_key_file=entry.get("privateKeyFile"),
        passphrase=entry.get("passphrase"),
        non_proxy_hosts=entry.get("nonProxyHosts", ""),
    )


def parse_settings(data: Optional[Dict[str, Any]], source: str = "<settings>") -> Settings:
    """Turn a settings document into a ``Settings`` value."""
    if data is None:
        return Settings(sources=(source,))
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid settings in {source}: expected a mapping")
    validate_settings(data, source)
    return Settings(
        mirrors=tuple(_mirror_from(m) for m in data.get("mirrors") or []),
        proxies=tuple(_proxy_from(p) for p in data.get("proxies") or []),
        sources=(source,),
    )


def _load_file(path: str) -> Optional[Settings]:
    if not os.path.isfile(path):
        logger.debug("Settings file not found: %s", path)
        return None
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse settings file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Failed to read settings file {path}: {exc}") from exc
    return parse_settings(data, path)


def merge_settings(dominant: Settings, recessive: Settings) -> Settings:
    """Merge two settings; ``dominant`` entries win on id clashes and come first."""
    mirror_ids = {m.id for m in dominant.mirrors}
    proxy_ids = {p.id for p in dominant.proxies}
    return Settings(
        mirrors=dominant.mirrors + tuple(m for m in recessive.mirrors if m.id not in mirror_ids),
        proxies=dominant.proxies + tuple(p for p in recessive.proxies if p.id not in proxy_ids),
        sources=dominant.sources + recessive.sources,
    )


def load_settings(
    user_file: Optional[str] = None, global_file: Optional[str] = None
) -> Settings:
    """Load the effective settings.

    Args:
        user_file: Override for the user settings file.
        global_file: Override for the global settings file.

    Returns:
        Settings; empty when no file exists.
    """
    user_path = user_file or os.environ.get(Constants.ENV_USER_SETTINGS) or os.path.expanduser(
        Constants.DEFAULT_USER_SETTINGS
    )
    global_path = global_file or os.environ.get(Constants.ENV_GLOBAL_SETTINGS)

    effective = Settings()
    user = _load_file(user_path)
    if user is not None:
        effective = user
    if global_path:
        glob = _load_file(global_path)
        if glob is not None:
            effective = merge_settings(effective, glob)
    logger.debug(
        "Settings loaded: %d mirror(s), %d prox(ies) from %s",
        len(effective.mirrors),
        len(effective.proxies),
        list(effective.sources),
    )
    return effective
