"""Session state shared by every Frodo operation.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import copy
import json
import os
from collections.abc import Callable
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .config import FrodoSettings, get_frodo_home
from .constants import (
    DEFAULT_CONNECTION_PROFILES_FILENAME,
    DEFAULT_MASTER_KEY_FILENAME,
    DEPLOYMENT_TYPE_REALM_MAP,
    FRODO_CONNECTION_PROFILES_PATH_KEY,
    FRODO_MASTER_KEY_PATH_KEY,
)

PrintHandler = Callable[[Any, str, bool], None]
MessageHandler = Callable[[Any], None]
ErrorHandler = Callable[[Exception, str | None], None]
CreateProgressHandler = Callable[[str, str, int | None, str | None], None]
UpdateProgressHandler = Callable[[str, str | None], None]
StopProgressHandler = Callable[[str, str | None, str], None]

_HOOKS = (
    "print_handler",
    "verbose_handler",
    "debug_handler",
    "error_handler",
    "curlirize_handler",
    "create_progress_handler",
    "update_progress_handler",
    "stop_progress_handler",
)


@dataclass
class State:
    """In-process session: tenant, credentials, tokens and output hooks.

    Fields left unset fall back to the matching ``FRODO_*`` environment
    variable when read through the ``get_*`` accessors.
    """

    host: str | None = None
    idm_host: str | None = None
    realm: str | None = None
    username: str | None = None
    password: str | None = None
    deployment_type: str | None = None
    authentication_service: str | None = None
    authentication_header_overrides: dict[str, str] = field(default_factory=dict)
    allow_insecure_connection: bool = False
    cookie_name: str | None = None
    cookie_value: str | None = None
    bearer_token: str | None = None
    use_bearer_token_for_am_apis: bool = False
    log_api_key: str | None = None
    log_api_secret: str | None = None
    service_account_id: str | None = None
    service_account_jwk: dict[str, Any] | None = None
    am_version: str | None = None
    connection_profiles_path: str | None = None
    master_key_path: str | None = None
    debug: bool = False
    verbose: bool = False
    curlirize: bool = False

    print_handler: PrintHandler | None = None
    verbose_handler: MessageHandler | None = None
    debug_handler: MessageHandler | None = None
    error_handler: ErrorHandler | None = None
    curlirize_handler: MessageHandler | None = None
    create_progress_handler: CreateProgressHandler | None = None
    update_progress_handler: UpdateProgressHandler | None = None
    stop_progress_handler: StopProgressHandler | None = None

    settings: FrodoSettings = field(default_factory=FrodoSettings, repr=False)

    def get_host(self) -> str | None:
        return self.host or self.settings.host

    def get_idm_host(self) -> str | None:
        return self.idm_host or self.settings.idm_host

    def get_username(self) -> str | None:
        return self.username or self.settings.username

    def get_password(self) -> str | None:
        return self.password or self.settings.password

    def get_deployment_type(self) -> str | None:
        return self.deployment_type or self.settings.deployment

    def get_realm(self) -> str:
        """Return the configured realm, else the deployment type's default realm."""
        realm = self.realm or self.settings.realm
        if realm:
            return realm
        return DEPLOYMENT_TYPE_REALM_MAP.get(self.get_deployment_type() or "", "/")

    def get_authentication_service(self) -> str | None:
        return self.authentication_service or self.settings.authentication_service

    def get_log_api_key(self) -> str | None:
        return self.log_api_key or self.settings.log_key

    def get_log_api_secret(self) -> str | None:
        return self.log_api_secret or self.settings.log_secret

    def get_service_account_id(self) -> str | None:
        return self.service_account_id or self.settings.sa_id

    def get_service_account_jwk(self) -> dict[str, Any] | None:
        """Return the service account key, parsing ``FRODO_SA_JWK`` when unset."""
        if self.service_account_jwk:
            return self.service_account_jwk
        if self.settings.sa_jwk:
            return json.loads(self.settings.sa_jwk)
        return None

    def get_debug(self) -> bool:
        return self.debug or self.settings.debug

    def get_connection_profiles_path(self) -> Path:
        """Resolve the connection profiles file location.

        Returns:
            Explicit path, else ``FRODO_CONNECTION_PROFILES_PATH``, else
            ``~/.frodo/Connections.json``.

        """
        path = (
            self.connection_profiles_path
            or os.environ.get(FRODO_CONNECTION_PROFILES_PATH_KEY)
            or self.settings.connection_profiles_path
        )
        if path:
            return Path(path)
        return get_frodo_home() / DEFAULT_CONNECTION_PROFILES_FILENAME

    def get_master_key_path(self) -> Path:
        path = (
            self.master_key_path
            or os.environ.get(FRODO_MASTER_KEY_PATH_KEY)
            or self.settings.master_key_path
        )
        if path:
            return Path(path)
        return get_frodo_home() / DEFAULT_MASTER_KEY_FILENAME

    def get_tenant(self) -> str | None:
        """Alias for the host, used in profile lookups."""
        return self.get_host()

    def get_state(self) -> dict[str, Any]:
        """Return a deep copy of the plain (non-hook) state values."""
        return {
            f.name: copy.deepcopy(getattr(self, f.name))
            for f in fields(self)
            if f.name not in _HOOKS and f.name != "settings"
        }

    def reset(self) -> None:
        """Restore every field to its initial value and re-read the environment."""
        fresh = State()
        for f in fields(self):
            setattr(self, f.name, getattr(fresh, f.name))
