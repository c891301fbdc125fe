"""Per-resource REST API bindings.

Each class maps one family of platform endpoints to coroutines returning the
decoded JSON response.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from ._agent import AGENT_TYPES, AgentApi
from ._circles_of_trust import CirclesOfTrustApi
from ._idm_config import IdmConfigApi
from ._managed_object import ManagedObjectApi
from ._oauth2_oidc import OAuth2OidcApi
from ._script import ScriptApi
from ._server_info import AuthenticateApi, ServerInfoApi
from ._service import ServiceApi
from ._tree import TreeApi
from .cloud._env_certificates import EnvCertificatesApi
from .cloud._env_csrs import EnvCSRsApi
from .cloud._secrets import SecretsApi
from .cloud._variables import VariablesApi

__all__ = [
    "AGENT_TYPES",
    "AgentApi",
    "AuthenticateApi",
    "CirclesOfTrustApi",
    "EnvCSRsApi",
    "EnvCertificatesApi",
    "IdmConfigApi",
    "ManagedObjectApi",
    "OAuth2OidcApi",
    "ScriptApi",
    "SecretsApi",
    "ServerInfoApi",
    "ServiceApi",
    "TreeApi",
    "VariablesApi",
]
