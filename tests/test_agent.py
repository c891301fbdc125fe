"""Tests for agent operations.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from frodo.api import AGENT_TYPES
from frodo.exceptions import FrodoError

from .conftest import AM_GLOBAL_URL, AM_REALM_URL

if TYPE_CHECKING:
    from frodo import FrodoLib

AGENTS_URL = f"{AM_REALM_URL}/realm-config/agents"


def _agent(agent_id: str, agent_type: str) -> dict[str, Any]:
    return {
        "_id": agent_id,
        "_rev": "1",
        "_type": {"_id": agent_type, "name": agent_type, "collection": True},
        "userpassword-encrypted": "AAAA",
        "status": "Active",
    }


def _mock_agent_types(mock_responses: Any, agents: dict[str, list[dict[str, Any]]]) -> None:
    for agent_type in AGENT_TYPES:
        response = httpx.Response(200, json={"result": agents.get(agent_type, [])})
        if agent_type == "SoftwarePublisher":
            response = httpx.Response(501, json={"message": "Not Implemented"})
        mock_responses.get(f"{AGENTS_URL}/{agent_type}").mock(return_value=response)


async def test_read_agents_skips_unimplemented_types(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Agents of all types are merged, sorted, and unsupported types ignored."""
    _mock_agent_types(
        mock_responses,
        {
            "WebAgent": [_agent("web-b", "WebAgent")],
            "J2EEAgent": [_agent("java-a", "J2EEAgent")],
        },
    )

    agents = await frodo.agent.read_agents()

    assert [a["_id"] for a in agents] == ["java-a", "web-b"]
    soap = [call for call in mock_responses.calls if "SoapSTSAgent" in str(call.request.url)]
    assert soap == []


async def test_read_agents_requests_types_concurrently(
    frodo: FrodoLib, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Every agent type is requested before any response comes back."""
    in_flight = 0
    peak = 0

    async def get_agents_by_type(agent_type: str) -> dict[str, Any]:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0)
        in_flight -= 1
        return {"result": [_agent(f"{agent_type.lower()}-a", agent_type)]}

    monkeypatch.setattr(frodo.agent._api, "get_agents_by_type", get_agents_by_type)

    agents = await frodo.agent.read_agents()

    expected = [t for t in AGENT_TYPES if t != "SoapSTSAgent"]
    assert peak == len(expected)
    assert len(agents) == len(expected)


async def test_read_global_agents(frodo: FrodoLib, mock_responses: Any) -> None:
    """Global agent configuration is read through the global-config endpoint."""
    route = mock_responses.post(
        f"{AM_GLOBAL_URL}/global-config/agents", params={"_action": "nextdescendents"}
    ).mock(return_value=httpx.Response(200, json={"result": [{"_id": "WebAgent"}]}))

    agents = await frodo.agent.read_agents(global_config=True)

    assert agents == [{"_id": "WebAgent"}]
    assert route.called


async def test_read_agent_finds_type(frodo: FrodoLib, mock_responses: Any) -> None:
    """An agent is looked up by id and then read from its type endpoint."""
    mock_responses.get(AGENTS_URL).mock(
        return_value=httpx.Response(200, json={"result": [_agent("web-a", "WebAgent")]})
    )
    route = mock_responses.get(f"{AGENTS_URL}/WebAgent/web-a").mock(
        return_value=httpx.Response(200, json=_agent("web-a", "WebAgent"))
    )

    agent = await frodo.agent.read_agent("web-a")

    assert agent["_id"] == "web-a"
    assert route.called


async def test_read_agent_not_found(frodo: FrodoLib, mock_responses: Any) -> None:
    """A missing agent raises with its id."""
    mock_responses.get(AGENTS_URL).mock(
        return_value=httpx.Response(200, json={"result": []})
    )

    with pytest.raises(FrodoError, match="Agent 'nope' not found"):
        await frodo.agent.read_agent("nope")


async def test_create_web_agent_rejects_existing(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Creating an agent that exists raises instead of overwriting it."""
    mock_responses.get(f"{AGENTS_URL}/WebAgent").mock(
        return_value=httpx.Response(200, json={"result": [_agent("web-a", "WebAgent")]})
    )
    put = mock_responses.put(f"{AGENTS_URL}/WebAgent/web-a")

    with pytest.raises(FrodoError, match="Agent web-a already exists!"):
        await frodo.agent.create_web_agent("web-a", _agent("web-a", "WebAgent"))

    assert not put.called


async def test_update_agent_strips_encrypted_attributes(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Encrypted attributes and the revision are not sent back."""
    route = mock_responses.put(f"{AGENTS_URL}/J2EEAgent/java-a").mock(
        return_value=httpx.Response(200, json={"_id": "java-a"})
    )

    await frodo.agent.update_java_agent("java-a", _agent("java-a", "J2EEAgent"))

    body = json.loads(route.calls.last.request.content)
    assert "userpassword-encrypted" not in body
    assert "_rev" not in body
    assert body["status"] == "Active"


async def test_export_agents(frodo: FrodoLib, mock_responses: Any) -> None:
    """Exports key agents by id under the agent envelope."""
    _mock_agent_types(mock_responses, {"WebAgent": [_agent("web-a", "WebAgent")]})

    export = await frodo.agent.export_agents()

    assert list(export["agent"]) == ["web-a"]
    assert "meta" in export


async def test_import_agents_aggregates_errors(frodo: FrodoLib, mock_responses: Any) -> None:
    """Failed imports are collected; unimplemented types are skipped."""
    mock_responses.put(f"{AGENTS_URL}/WebAgent/web-a").mock(
        return_value=httpx.Response(200, json={"_id": "web-a"})
    )
    mock_responses.put(f"{AGENTS_URL}/J2EEAgent/java-a").mock(
        return_value=httpx.Response(400, json={"message": "Invalid attribute"})
    )
    mock_responses.put(f"{AGENTS_URL}/SoftwarePublisher/pub").mock(
        return_value=httpx.Response(501, json={"message": "Not Implemented"})
    )
    import_data = {
        "agent": {
            "web-a": _agent("web-a", "WebAgent"),
            "java-a": _agent("java-a", "J2EEAgent"),
            "pub": _agent("pub", "SoftwarePublisher"),
        }
    }

    with pytest.raises(FrodoError) as exc_info:
        await frodo.agent.import_agents(import_data)

    assert exc_info.value.message == "Error importing agents"
    assert len(exc_info.value.original_errors) == 1
    assert "java-a" in str(exc_info.value)


async def test_import_soap_sts_agent_needs_classic(frodo: FrodoLib) -> None:
    """Soap STS agents cannot be imported into cloud tenants."""
    import_data = {"agent": {"sts": _agent("sts", "SoapSTSAgent")}}

    with pytest.raises(FrodoError, match="Can't import Soap STS agents for 'cloud'"):
        await frodo.agent.import_agent("sts", import_data)


async def test_agent_groups(frodo: FrodoLib, mock_responses: Any) -> None:
    """Groups are sorted, exported and looked up by id."""
    mock_responses.post(f"{AGENTS_URL}/groups").mock(
        return_value=httpx.Response(
            200,
            json={"result": [_agent("g2", "WebAgent"), _agent("g1", "J2EEAgent")]},
        )
    )

    export = await frodo.agent.export_agent_groups()

    assert list(export["agentGroup"]) == ["g1", "g2"]
    with pytest.raises(FrodoError, match="Agent group with id 'g3' does not exist."):
        await frodo.agent.read_agent_group("g3")


async def test_delete_agent(frodo: FrodoLib, mock_responses: Any) -> None:
    """Every agent with the id is deleted from its type endpoint."""
    mock_responses.get(AGENTS_URL).mock(
        return_value=httpx.Response(
            200,
            json={"result": [_agent("a", "WebAgent"), _agent("a", "J2EEAgent")]},
        )
    )
    web = mock_responses.delete(f"{AGENTS_URL}/WebAgent/a").mock(
        return_value=httpx.Response(200, json={})
    )
    java = mock_responses.delete(f"{AGENTS_URL}/J2EEAgent/a").mock(
        return_value=httpx.Response(200, json={})
    )

    await frodo.agent.delete_agent("a")

    assert web.called
    assert java.called


async def test_delete_missing_agent(frodo: FrodoLib, mock_responses: Any) -> None:
    """Deleting an unknown id raises."""
    mock_responses.get(AGENTS_URL).mock(
        return_value=httpx.Response(200, json={"result": []})
    )

    with pytest.raises(FrodoError, match="Agent 'a' not found!"):
        await frodo.agent.delete_agent("a")
