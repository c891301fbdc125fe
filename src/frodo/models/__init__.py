"""Frodo models package.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from .base import FrodoModel
from .certificate_models import CSR, CertificateResponse, CSRResponse
from .connection_models import ConnectionProfile, SecureConnectionProfile
from .export_models import (
    AgentExport,
    AgentGroupExport,
    CirclesOfTrustExport,
    ConfigEntityExport,
    ExportEnvelope,
    ExportMetaData,
    MultiTreeExport,
    Saml2Export,
    ScriptExport,
    SecretsExport,
    ServiceExport,
    SingleTreeExport,
    ThemeExport,
    VariablesExport,
)

__all__ = [
    "FrodoModel",
    # Certificates
    "CSR",
    "CSRResponse",
    "CertificateResponse",
    # Connection profiles
    "ConnectionProfile",
    "SecureConnectionProfile",
    # Export envelopes
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
