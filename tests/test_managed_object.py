"""Tests for IDM managed object operations.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from frodo.exceptions import FrodoError

from .conftest import IDM_URL

if TYPE_CHECKING:
    from frodo import FrodoLib

USERS_URL = f"{IDM_URL}/managed/alpha_user"


async def test_create_managed_object_with_id(frodo: FrodoLib, mock_responses: Any) -> None:
    """Client-assigned ids are put without replacing existing objects."""
    route = mock_responses.put(f"{USERS_URL}/u1").mock(
        return_value=httpx.Response(201, json={"_id": "u1", "userName": "bilbo"})
    )
    created = await frodo.managed_object.create_managed_object(
        "alpha_user", {"userName": "bilbo"}, "u1"
    )
    assert created["_id"] == "u1"
    request = route.calls[0].request
    assert request.headers["If-None-Match"] == "*"
    assert request.headers["Authorization"] == "Bearer bearer-token"


async def test_create_managed_object_server_id(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Without an id the object is posted with the create action."""
    route = mock_responses.post(USERS_URL).mock(
        return_value=httpx.Response(201, json={"_id": "generated"})
    )
    created = await frodo.managed_object.create_managed_object(
        "alpha_user", {"userName": "frodo"}
    )
    assert created["_id"] == "generated"
    assert route.calls[0].request.url.params["_action"] == "create"


async def test_create_managed_object_exists(frodo: FrodoLib, mock_responses: Any) -> None:
    """A precondition failure is wrapped with the object id."""
    mock_responses.put(f"{USERS_URL}/u1").mock(
        return_value=httpx.Response(412, json={"code": 412, "message": "Precondition Failed"})
    )
    with pytest.raises(FrodoError) as exc_info:
        await frodo.managed_object.create_managed_object("alpha_user", {}, "u1")
    assert exc_info.value.message == "Error creating alpha_user object u1"
    assert exc_info.value.http_status == 412


async def test_read_managed_object_fields(frodo: FrodoLib, mock_responses: Any) -> None:
    """Requested fields are passed through; all fields otherwise."""
    route = mock_responses.get(f"{USERS_URL}/u1").mock(
        return_value=httpx.Response(200, json={"_id": "u1"})
    )
    await frodo.managed_object.read_managed_object("alpha_user", "u1", ["mail", "sn"])
    await frodo.managed_object.read_managed_object("alpha_user", "u1")
    assert route.calls[0].request.url.params["_fields"] == "mail,sn"
    assert route.calls[1].request.url.params["_fields"] == "*"


async def test_read_managed_objects_follows_cookie(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """All pages are read until no paged results cookie is returned."""
    route = mock_responses.get(USERS_URL).mock(
        side_effect=[
            httpx.Response(
                200, json={"result": [{"_id": "a"}, {"_id": "b"}], "pagedResultsCookie": "c1"}
            ),
            httpx.Response(200, json={"result": [{"_id": "c"}], "pagedResultsCookie": None}),
        ]
    )
    objects = await frodo.managed_object.read_managed_objects("alpha_user")
    assert [o["_id"] for o in objects] == ["a", "b", "c"]
    first, second = (call.request.url.params for call in route.calls)
    assert first["_fields"] == "_id"
    assert "_pagedResultsCookie" not in first
    assert second["_pagedResultsCookie"] == "c1"


async def test_update_and_patch_managed_object(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Updates replace without a precondition; patches send the operations."""
    put_route = mock_responses.put(f"{USERS_URL}/u1").mock(
        return_value=httpx.Response(200, json={"_id": "u1"})
    )
    patch_route = mock_responses.patch(f"{USERS_URL}/u1").mock(
        return_value=httpx.Response(200, json={"_id": "u1", "sn": "Baggins"})
    )
    await frodo.managed_object.update_managed_object("alpha_user", "u1", {"sn": "B"})
    patched = await frodo.managed_object.patch_managed_object(
        "alpha_user", "u1", [{"operation": "replace", "field": "sn", "value": "Baggins"}]
    )
    assert "If-None-Match" not in put_route.calls[0].request.headers
    assert patched["sn"] == "Baggins"
    assert json.loads(patch_route.calls[0].request.content)[0]["operation"] == "replace"


async def test_query_managed_objects(frodo: FrodoLib, mock_responses: Any) -> None:
    """Queries pass the filter and return the result list."""
    route = mock_responses.get(USERS_URL).mock(
        return_value=httpx.Response(200, json={"result": [{"_id": "u1"}]})
    )
    result = await frodo.managed_object.query_managed_objects(
        "alpha_user", 'userName eq "bilbo"', ["userName"]
    )
    assert result == [{"_id": "u1"}]
    params = route.calls[0].request.url.params
    assert params["_queryFilter"] == 'userName eq "bilbo"'
    assert params["_fields"] == "userName"


async def test_delete_managed_object(frodo: FrodoLib, mock_responses: Any) -> None:
    """Delete failures are wrapped."""
    mock_responses.delete(f"{USERS_URL}/u1").mock(
        return_value=httpx.Response(200, json={"_id": "u1"})
    )
    mock_responses.delete(f"{USERS_URL}/u2").mock(
        return_value=httpx.Response(404, json={"code": 404, "message": "Not Found"})
    )
    assert (await frodo.managed_object.delete_managed_object("alpha_user", "u1"))["_id"] == "u1"
    with pytest.raises(FrodoError, match="Error deleting alpha_user object u2"):
        await frodo.managed_object.delete_managed_object("alpha_user", "u2")


async def test_resolve_names(frodo: FrodoLib, mock_responses: Any) -> None:
    """Names resolve from the object, falling back to the id."""
    mock_responses.get(f"{USERS_URL}/u1").mock(
        return_value=httpx.Response(
            200, json={"_id": "u1", "userName": "bilbo", "givenName": "Bilbo", "sn": "Baggins"}
        )
    )
    mock_responses.get(f"{USERS_URL}/gone").mock(
        return_value=httpx.Response(404, json={"code": 404, "message": "Not Found"})
    )
    assert await frodo.managed_object.resolve_user_name("alpha_user", "u1") == "bilbo"
    assert await frodo.managed_object.resolve_full_name("alpha_user", "u1") == "Bilbo Baggins"
    assert await frodo.managed_object.resolve_user_name("alpha_user", "gone") == "gone"
    assert await frodo.managed_object.resolve_full_name("alpha_user", "gone") == "gone"
