"""Shared constants for the Frodo library.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

DEFAULT_REALM_KEY = "__default__realm__"
CLASSIC_DEPLOYMENT_TYPE_KEY = "classic"
CLOUD_DEPLOYMENT_TYPE_KEY = "cloud"
FORGEOPS_DEPLOYMENT_TYPE_KEY = "forgeops"
DEPLOYMENT_TYPES = [
    CLASSIC_DEPLOYMENT_TYPE_KEY,
    CLOUD_DEPLOYMENT_TYPE_KEY,
    FORGEOPS_DEPLOYMENT_TYPE_KEY,
]
DEPLOYMENT_TYPE_REALM_MAP = {
    CLASSIC_DEPLOYMENT_TYPE_KEY: "/",
    CLOUD_DEPLOYMENT_TYPE_KEY: "alpha",
    FORGEOPS_DEPLOYMENT_TYPE_KEY: "/",
}

FRODO_METADATA_ID = "frodo"
FRODO_CONNECTION_PROFILES_PATH_KEY = "FRODO_CONNECTION_PROFILES_PATH"
FRODO_MASTER_KEY_PATH_KEY = "FRODO_MASTER_KEY_PATH"
FRODO_MASTER_KEY_KEY = "FRODO_MASTER_KEY"

DEFAULT_CONNECTION_PROFILES_FILENAME = "Connections.json"
DEFAULT_MASTER_KEY_FILENAME = "masterkey.key"

USER_AGENT = "frodo-lib-python/2.0.0"
