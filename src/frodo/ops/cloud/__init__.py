"""Environment (cloud tenant) operations.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from ._env_certificates import EnvCertificatesOps
from ._env_csrs import EnvCSRsOps
from ._secrets import SecretsOps
from ._variables import VariablesOps

__all__ = [
    "EnvCSRsOps",
    "EnvCertificatesOps",
    "SecretsOps",
    "VariablesOps",
]
