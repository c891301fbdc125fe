"""Realm, URL and naming helpers for the platform's REST conventions.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from frodo.constants import CLOUD_DEPLOYMENT_TYPE_KEY
from frodo.exceptions import FrodoError

if TYPE_CHECKING:
    from frodo.state import State

_IMPORTED_NAME = re.compile(r"(.* - imported) \(([0-9]+)\)")


def apply_name_collision_policy(name: str) -> str:
    """Return the next free "imported" variant of a colliding name.

    ``name`` becomes ``name - imported (1)``; an already renamed
    ``name - imported (n)`` becomes ``name - imported (n+1)``.
    """
    found = _IMPORTED_NAME.match(name)
    if found:
        return f"{found.group(1)} ({int(found.group(2)) + 1})"
    return f"{name} - imported (1)"


def get_realm_path(realm: str) -> str:
    """Convert ``/alpha`` or ``alpha/sub`` into ``/realms/root/realms/alpha/...``."""
    elements = ["root"] + [e for e in realm.lstrip("/").split("/") if e]
    return "/realms/" + "/realms/".join(elements)


def get_current_realm_path(state: State) -> str:
    return get_realm_path(state.get_realm())


def get_realm_path_global(global_config: bool, state: State) -> str:
    """Return the realm path, or an empty string for global configuration."""
    return "" if global_config else get_current_realm_path(state)


def get_config_path(global_config: bool) -> str:
    return "global-config" if global_config else "realm-config"


def get_realm_name(realm: str) -> str:
    if realm == "/":
        return "/"
    return realm.split("/")[-1]


def get_current_realm_name(state: State) -> str:
    return get_realm_name(state.get_realm())


def get_realm_managed_user(state: State) -> str:
    """Return the managed user object type for the current realm."""
    if state.get_deployment_type() == CLOUD_DEPLOYMENT_TYPE_KEY:
        return f"{get_current_realm_name(state)}_user"
    return "user"


def get_host_base_url(host: str) -> str:
    """Reduce a tenant URL to ``scheme://host[:port]``."""
    parts = urlsplit(host)
    if not parts.scheme or not parts.netloc:
        msg = f"Invalid tenant URL: {host}"
        raise FrodoError(msg)
    return f"{parts.scheme}://{parts.netloc}"


def is_valid_url(host: str) -> bool:
    try:
        get_host_base_url(host)
    except FrodoError:
        return False
    return True


def get_current_host(state: State) -> str:
    host = state.get_host()
    if not host:
        msg = "No host configured"
        raise FrodoError(msg)
    return host.rstrip("/")


def get_idm_base_url(state: State) -> str:
    """Return the IDM base URL, defaulting to ``<scheme://host>/openidm``."""
    idm_host = state.get_idm_host()
    if idm_host:
        return idm_host.rstrip("/")
    return f"{get_host_base_url(get_current_host(state))}/openidm"


def get_env_base_url(state: State) -> str:
    """Return the environment API base URL, ``<scheme://host>/environment``."""
    return f"{get_host_base_url(get_current_host(state))}/environment"
