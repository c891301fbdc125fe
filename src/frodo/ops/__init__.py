"""Resource operations built on the REST API bindings.

Ops classes sequence API calls, shape export and import envelopes and wrap
failures in :class:`~frodo.exceptions.FrodoError`.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from ._agent import AgentOps
from ._authenticate import AuthenticateOps
from ._circles_of_trust import CirclesOfTrustOps
from ._connection_profile import ConnectionProfileOps
from ._idm_config import IdmConfigOps
from ._journey import JourneyOps
from ._managed_object import ManagedObjectOps
from ._script import ScriptOps
from ._service import ServiceOps
from ._theme import ThemeOps
from ._utils import UtilsOps
from .cloud import EnvCertificatesOps, EnvCSRsOps, SecretsOps, VariablesOps

__all__ = [
    "AgentOps",
    "AuthenticateOps",
    "CirclesOfTrustOps",
    "ConnectionProfileOps",
    "EnvCSRsOps",
    "EnvCertificatesOps",
    "IdmConfigOps",
    "JourneyOps",
    "ManagedObjectOps",
    "ScriptOps",
    "SecretsOps",
    "ServiceOps",
    "ThemeOps",
    "UtilsOps",
    "VariablesOps",
]
