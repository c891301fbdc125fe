"""Frodo Python library.

Client library for the REST administration APIs of ForgeRock and Ping
identity platforms: journeys, agents, scripts, services, themes, IDM
configuration, managed objects and cloud tenant environment settings, with
export and import of each.
"""

from ._version import __version__
from .client import FrodoLib
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    FrodoError,
    HttpError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TimeoutError,
    ValidationError,
)
from .models import *
from .state import State

__all__ = [
    "FrodoLib",
    "State",
    "__version__",
    # Exceptions
    "FrodoError",
    "HttpError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "ServerError",
    "NetworkError",
    "TimeoutError",
    # Models
    "FrodoModel",
    "CSR",
    "CSRResponse",
    "CertificateResponse",
    "ConnectionProfile",
    "SecureConnectionProfile",
    "AgentExport",
    "AgentGroupExport",
    "CirclesOfTrustExport",
    "ConfigEntityExport",
    "ExportEnvelope",
    "ExportMetaData",
    "MultiTreeExport",
    "Saml2Export",
    "ScriptExport",
    "SecretsExport",
    "ServiceExport",
    "SingleTreeExport",
    "ThemeExport",
    "VariablesExport",
]
