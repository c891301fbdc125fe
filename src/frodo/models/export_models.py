"""Export and import envelope models.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .base import FrodoModel


class ExportMetaData(FrodoModel):
    """Provenance attached to every export."""

    origin: str | None = None
    origin_am_version: str | None = None
    exported_by: str | None = None
    export_date: str | None = None
    export_tool: str = "frodo"
    export_tool_version: str | None = None


class ExportEnvelope(FrodoModel):
    """Base envelope; subclasses add the resource map."""

    meta: ExportMetaData | None = None


class AgentExport(ExportEnvelope):
    agent: dict[str, dict[str, Any]] = Field(default_factory=dict)


class AgentGroupExport(ExportEnvelope):
    agent_group: dict[str, dict[str, Any]] = Field(default_factory=dict)


class Saml2Export(FrodoModel):
    hosted: dict[str, Any] = Field(default_factory=dict)
    remote: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    cot: dict[str, dict[str, Any]] = Field(default_factory=dict)


class CirclesOfTrustExport(ExportEnvelope):
    script: dict[str, Any] = Field(default_factory=dict)
    saml: Saml2Export = Field(default_factory=Saml2Export)


class ScriptExport(ExportEnvelope):
    script: dict[str, dict[str, Any]] = Field(default_factory=dict)


class ServiceExport(ExportEnvelope):
    service: dict[str, dict[str, Any]] = Field(default_factory=dict)


class SingleTreeExport(ExportEnvelope):
    tree: dict[str, Any] = Field(default_factory=dict)
    nodes: dict[str, dict[str, Any]] = Field(default_factory=dict)
    inner_nodes: dict[str, dict[str, Any]] = Field(default_factory=dict)
    scripts: dict[str, dict[str, Any]] = Field(default_factory=dict)


class MultiTreeExport(ExportEnvelope):
    trees: dict[str, SingleTreeExport] = Field(default_factory=dict)


class ThemeExport(ExportEnvelope):
    theme: dict[str, dict[str, Any]] = Field(default_factory=dict)


class ConfigEntityExport(ExportEnvelope):
    idm: dict[str, dict[str, Any]] = Field(default_factory=dict)


class SecretsExport(ExportEnvelope):
    secrets: dict[str, dict[str, Any]] = Field(default_factory=dict)


class VariablesExport(ExportEnvelope):
    variables: dict[str, dict[str, Any]] = Field(default_factory=dict)
