"""Certificate and CSR models for the environment API.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import FrodoModel


class CertificateResponse(FrodoModel):
    """Certificate as returned by the environment API."""

    id: str
    active: bool = False
    live: bool = False
    certificate: str | None = None
    expire_time: str | None = None
    issuer: str | None = None
    subject: str | None = None
    subject_alternative_names: list[str] | None = None
    valid_from_time: str | None = None


class CSR(FrodoModel):
    """Certificate signing request parameters.

    Only ``common_name`` is needed in practice; ``algorithm`` selects
    RSA-2048 (default) or ECDSA P-256 for the private key.
    """

    algorithm: Literal["rsa", "ecdsa"] | None = None
    business_category: str | None = None
    city: str | None = None
    common_name: str | None = None
    country: str | None = None
    email: str | None = None
    jurisdiction_city: str | None = None
    jurisdiction_country: str | None = None
    jurisdiction_state: str | None = None
    organization: str | None = None
    organizational_unit: str | None = None
    postal_code: str | None = None
    serial_number: str | None = None
    state: str | None = None
    street_address: str | None = None
    subject_alternative_names: list[str] | None = None


class CSRResponse(FrodoModel):
    id: str
    algorithm: str | None = None
    certificate_id: str | None = Field(default=None, alias="certificateID")
    created_date: str | None = None
    request: str | None = None
    subject: str | None = None
    subject_alternative_names: list[str] | None = None
