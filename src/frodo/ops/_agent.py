"""Agent operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio
from typing import Any

from .._base import BaseClient
from ..api._agent import AGENT_TYPES, AgentApi
from ..constants import CLASSIC_DEPLOYMENT_TYPE_KEY
from ..exceptions import FrodoError, http_status_of
from ..models import AgentExport, AgentGroupExport
from ..utils.console import (
    create_progress_indicator,
    debug_message,
    stop_progress_indicator,
    update_progress_indicator,
)
from ..utils.export_import import get_metadata

NOT_IMPLEMENTED = 501


def _agent_type_of(agent: dict[str, Any]) -> str:
    agent_type = agent.get("_type")
    if isinstance(agent_type, dict):
        return agent_type["_id"]
    return agent_type


class AgentOps:
    """Read, export, import and delete AM agents and agent groups."""

    def __init__(self, client: BaseClient) -> None:
        self._api = AgentApi(client)
        self._state = client.state

    def _check_soap_sts(self, agent_type: str, what: str) -> None:
        deployment_type = self._state.get_deployment_type()
        if agent_type == "SoapSTSAgent" and deployment_type != CLASSIC_DEPLOYMENT_TYPE_KEY:
            msg = f"Can't import Soap STS {what} for '{deployment_type}' deployment type."
            raise FrodoError(msg)

    def create_agent_export_template(self) -> dict[str, Any]:
        return AgentExport(meta=get_metadata(self._state)).to_json_dict()

    def create_agent_group_export_template(self) -> dict[str, Any]:
        return AgentGroupExport(meta=get_metadata(self._state)).to_json_dict()

    async def _read_agents_of_type(self, agent_type: str) -> list[dict[str, Any]]:
        try:
            return (await self._api.get_agents_by_type(agent_type))["result"]
        except FrodoError as e:
            if http_status_of(e) != NOT_IMPLEMENTED:
                raise
        return []

    async def read_agents(self, global_config: bool = False) -> list[dict[str, Any]]:
        """Read all agents of every type.

        Agent types the server does not implement are skipped. Soap STS agents
        are only read from classic deployments.

        Args:
            global_config: Read the global agent configuration instead

        Returns:
            Agents sorted by ``_id``.

        """
        debug_message(self._state, "AgentOps.read_agents: start")
        try:
            if global_config:
                agents = (await self._api.get_agents(True))["result"]
            else:
                classic = self._state.get_deployment_type() == CLASSIC_DEPLOYMENT_TYPE_KEY
                pages = await asyncio.gather(
                    *(
                        self._read_agents_of_type(agent_type)
                        for agent_type in AGENT_TYPES
                        if classic or agent_type != "SoapSTSAgent"
                    )
                )
                agents = [agent for page in pages for agent in page]
        except FrodoError as e:
            msg = "Error reading agents"
            raise FrodoError(msg, e) from e
        agents.sort(key=lambda agent: agent["_id"])
        debug_message(self._state, "AgentOps.read_agents: end")
        return agents

    async def read_agent(self, agent_id: str, global_config: bool = False) -> dict[str, Any]:
        """Read an agent by id, whatever its type.

        Raises:
            FrodoError: If no agent or more than one agent has this id.

        """
        try:
            if global_config:
                agents = [
                    agent
                    for agent in await self.read_agents(True)
                    if agent["_id"] == agent_id
                ]
            else:
                agents = await self._api.find_agent_by_id(agent_id)
            if not agents:
                msg = f"Agent '{agent_id}' not found"
                raise FrodoError(msg)
            if len(agents) > 1:
                msg = f"{len(agents)} agents '{agent_id}' found"
                raise FrodoError(msg)
            if global_config:
                return await self._api.get_agent_by_type_and_id(agent_id, "", True)
            return await self._api.get_agent_by_type_and_id(
                _agent_type_of(agents[0]), agents[0]["_id"]
            )
        except FrodoError as e:
            msg = f"Error reading agent {agent_id}"
            raise FrodoError(msg, e) from e

    async def read_agent_by_type_and_id(
        self, agent_type: str, agent_id: str
    ) -> dict[str, Any]:
        try:
            return await self._api.get_agent_by_type_and_id(agent_type, agent_id)
        except FrodoError as e:
            msg = f"Error reading agent {agent_id} of type {agent_type}"
            raise FrodoError(msg, e) from e

    async def read_agents_by_type(self, agent_type: str) -> list[dict[str, Any]]:
        try:
            return (await self._api.get_agents_by_type(agent_type))["result"]
        except FrodoError as e:
            msg = f"Error reading agents of type {agent_type}"
            raise FrodoError(msg, e) from e

    async def create_agent_of_type(
        self, agent_type: str, agent_id: str, agent_data: dict[str, Any]
    ) -> dict[str, Any]:
        """Create an agent of a given type.

        Raises:
            FrodoError: If an agent of this type and id already exists.

        """
        debug_message(self._state, f"AgentOps.create_agent_of_type: {agent_type} {agent_id}")
        try:
            existing = await self._api.find_agent_by_type_and_id(agent_type, agent_id)
        except FrodoError as e:
            msg = f"Error creating agent {agent_id} of type {agent_type}"
            raise FrodoError(msg, e) from e
        if existing:
            msg = f"Agent {agent_id} already exists!"
            raise FrodoError(msg)
        return await self.update_agent_of_type(agent_type, agent_id, agent_data)

    async def update_agent_of_type(
        self, agent_type: str, agent_id: str, agent_data: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            return await self._api.put_agent_by_type_and_id(agent_type, agent_id, agent_data)
        except FrodoError as e:
            msg = f"Error updating agent {agent_id} of type {agent_type}"
            raise FrodoError(msg, e) from e

    async def read_identity_gateway_agents(self) -> list[dict[str, Any]]:
        return await self.read_agents_by_type("IdentityGatewayAgent")

    async def read_identity_gateway_agent(self, gateway_id: str) -> dict[str, Any]:
        return await self.read_agent_by_type_and_id("IdentityGatewayAgent", gateway_id)

    async def create_identity_gateway_agent(
        self, gateway_id: str, gateway_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.create_agent_of_type("IdentityGatewayAgent", gateway_id, gateway_data)

    async def update_identity_gateway_agent(
        self, gateway_id: str, gateway_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.update_agent_of_type("IdentityGatewayAgent", gateway_id, gateway_data)

    async def read_java_agents(self) -> list[dict[str, Any]]:
        return await self.read_agents_by_type("J2EEAgent")

    async def read_java_agent(self, agent_id: str) -> dict[str, Any]:
        return await self.read_agent_by_type_and_id("J2EEAgent", agent_id)

    async def create_java_agent(
        self, agent_id: str, agent_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.create_agent_of_type("J2EEAgent", agent_id, agent_data)

    async def update_java_agent(
        self, agent_id: str, agent_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.update_agent_of_type("J2EEAgent", agent_id, agent_data)

    async def read_web_agents(self) -> list[dict[str, Any]]:
        return await self.read_agents_by_type("WebAgent")

    async def read_web_agent(self, agent_id: str) -> dict[str, Any]:
        return await self.read_agent_by_type_and_id("WebAgent", agent_id)

    async def create_web_agent(
        self, agent_id: str, agent_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.create_agent_of_type("WebAgent", agent_id, agent_data)

    async def update_web_agent(
        self, agent_id: str, agent_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.update_agent_of_type("WebAgent", agent_id, agent_data)

    async def read_agent_groups(self) -> list[dict[str, Any]]:
        try:
            groups = (await self._api.get_agent_groups())["result"]
        except FrodoError as e:
            msg = "Error reading agent groups"
            raise FrodoError(msg, e) from e
        return sorted(groups, key=lambda group: group["_id"])

    async def read_agent_group(self, group_id: str) -> dict[str, Any]:
        for group in await self.read_agent_groups():
            if group["_id"] == group_id:
                return group
        msg = f"Agent group with id '{group_id}' does not exist."
        raise FrodoError(msg)

    async def export_agents(self, global_config: bool = False) -> dict[str, Any]:
        """Export all agents.

        Returns:
            Envelope ``{meta, agent: {id: agent}}``.

        """
        debug_message(self._state, "AgentOps.export_agents: start")
        export_data = self.create_agent_export_template()
        indicator = None
        try:
            agents = await self.read_agents(global_config)
            indicator = create_progress_indicator(
                self._state, len(agents), "Exporting agents..."
            )
            for agent in agents:
                update_progress_indicator(self._state, indicator, f"Exporting agent {agent['_id']}")
                export_data["agent"][agent["_id"]] = agent
        except FrodoError as e:
            if indicator:
                stop_progress_indicator(self._state, indicator, "Error exporting agents", "fail")
            msg = "Error exporting agents"
            raise FrodoError(msg, e) from e
        stop_progress_indicator(
            self._state, indicator, f"Exported {len(agents)} agents.", "success"
        )
        debug_message(self._state, "AgentOps.export_agents: end")
        return export_data

    async def export_agent(self, agent_id: str, global_config: bool = False) -> dict[str, Any]:
        export_data = self.create_agent_export_template()
        try:
            export_data["agent"][agent_id] = await self.read_agent(agent_id, global_config)
        except FrodoError as e:
            msg = f"Error exporting agent {agent_id}"
            raise FrodoError(msg, e) from e
        return export_data

    async def export_agent_groups(self) -> dict[str, Any]:
        """Export all agent groups.

        Returns:
            Envelope ``{meta, agentGroup: {id: group}}``.

        """
        export_data = self.create_agent_group_export_template()
        try:
            groups = await self.read_agent_groups()
        except FrodoError as e:
            msg = "Error exporting agent groups"
            raise FrodoError(msg, e) from e
        indicator = create_progress_indicator(
            self._state, len(groups), "Exporting agent groups..."
        )
        for group in groups:
            update_progress_indicator(
                self._state, indicator, f"Exporting agent group {group['_id']}"
            )
            export_data["agentGroup"][group["_id"]] = group
        stop_progress_indicator(
            self._state, indicator, f"Exported {len(groups)} agent groups.", "success"
        )
        return export_data

    async def export_agent_group(self, group_id: str) -> dict[str, Any]:
        export_data = self.create_agent_group_export_template()
        try:
            export_data["agentGroup"][group_id] = await self.read_agent_group(group_id)
        except FrodoError as e:
            msg = f"Error exporting agent group {group_id}"
            raise FrodoError(msg, e) from e
        return export_data

    async def import_agents(
        self, import_data: dict[str, Any], global_config: bool = False
    ) -> list[dict[str, Any]]:
        """Import every agent from an export envelope.

        Agents whose type the server does not implement are skipped.

        Raises:
            FrodoError: Aggregating every failed import.

        """
        debug_message(self._state, "AgentOps.import_agents: start")
        agents = AgentExport.model_validate(import_data).agent
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for agent_id, agent_data in agents.items():
            agent_type = _agent_type_of(agent_data)
            debug_message(self._state, f"AgentOps.import_agents: {agent_id} [{agent_type}]")
            try:
                self._check_soap_sts(agent_type, "agents")
                imported.append(
                    await self._api.put_agent_by_type_and_id(
                        agent_type, agent_id, agent_data, global_config
                    )
                )
            except FrodoError as e:
                if http_status_of(e) != NOT_IMPLEMENTED:
                    msg = f"Error importing agent {agent_id} of type {agent_type}"
                    errors.append(FrodoError(msg, e))
        if errors:
            msg = "Error importing agents"
            raise FrodoError(msg, errors)
        debug_message(self._state, "AgentOps.import_agents: end")
        return imported

    async def import_agent(
        self, agent_id: str, import_data: dict[str, Any], global_config: bool = False
    ) -> dict[str, Any]:
        agents = AgentExport.model_validate(import_data).agent
        try:
            if agent_id not in agents:
                msg = f"Agent {agent_id} not found in import data"
                raise FrodoError(msg)
            agent_type = _agent_type_of(agents[agent_id])
            self._check_soap_sts(agent_type, "agents")
            return await self._api.put_agent_by_type_and_id(
                agent_type, agent_id, agents[agent_id], global_config
            )
        except FrodoError as e:
            msg = f"Error importing agent {agent_id}"
            raise FrodoError(msg, e) from e

    async def import_agent_groups(self, import_data: dict[str, Any]) -> list[dict[str, Any]]:
        """Import every agent group from an export envelope.

        Raises:
            FrodoError: Aggregating every failed import.

        """
        groups = AgentGroupExport.model_validate(import_data).agent_group
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for group_id, group_data in groups.items():
            group_type = _agent_type_of(group_data)
            try:
                self._check_soap_sts(group_type, "agent groups")
                imported.append(
                    await self._api.put_agent_group_by_type_and_id(
                        group_type, group_id, group_data
                    )
                )
            except FrodoError as e:
                if http_status_of(e) != NOT_IMPLEMENTED:
                    msg = f"Error importing agent group {group_id} of type {group_type}"
                    errors.append(FrodoError(msg, e))
        if errors:
            msg = "Error importing agent groups"
            raise FrodoError(msg, errors)
        return imported

    async def import_agent_group(
        self, group_id: str, import_data: dict[str, Any]
    ) -> dict[str, Any]:
        groups = AgentGroupExport.model_validate(import_data).agent_group
        try:
            if group_id not in groups:
                msg = f"Agent group {group_id} not found in import data"
                raise FrodoError(msg)
            group_type = _agent_type_of(groups[group_id])
            self._check_soap_sts(group_type, "agent groups")
            return await self._api.put_agent_group_by_type_and_id(
                group_type, group_id, groups[group_id]
            )
        except FrodoError as e:
            msg = f"Error importing agent group {group_id}"
            raise FrodoError(msg, e) from e

    async def delete_agents(self) -> None:
        """Delete every agent in the realm.

        Raises:
            FrodoError: Aggregating every failed delete.

        """
        debug_message(self._state, "AgentOps.delete_agents: start")
        errors: list[Exception] = []
        for agent in await self.read_agents():
            agent_type = _agent_type_of(agent)
            try:
                await self._api.delete_agent_by_type_and_id(agent_type, agent["_id"])
            except FrodoError as e:
                msg = f"Error deleting agent {agent['_id']} of type {agent_type}"
                errors.append(FrodoError(msg, e))
        if errors:
            msg = "Error deleting agents"
            raise FrodoError(msg, errors)
        debug_message(self._state, "AgentOps.delete_agents: end")

    async def delete_agent(self, agent_id: str) -> None:
        """Delete every agent with this id, whatever its type."""
        try:
            agents = await self._api.find_agent_by_id(agent_id)
            if not agents:
                msg = f"Agent '{agent_id}' not found!"
                raise FrodoError(msg)
            for agent in agents:
                await self._api.delete_agent_by_type_and_id(
                    _agent_type_of(agent), agent["_id"]
                )
        except FrodoError as e:
            msg = f"Error deleting agent {agent_id}"
            raise FrodoError(msg, e) from e
