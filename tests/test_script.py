"""Tests for script operations.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import json
import uuid
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from frodo.exceptions import FrodoError
from frodo.utils.base64_utils import encode

from .conftest import AM_REALM_URL

if TYPE_CHECKING:
    from frodo import FrodoLib

SCRIPTS_URL = f"{AM_REALM_URL}/scripts"


def _script(script_id: str, name: str, default: bool = False) -> dict[str, Any]:
    return {
        "_id": script_id,
        "_rev": "3",
        "name": name,
        "language": "JAVASCRIPT",
        "context": "AUTHENTICATION_TREE_DECISION_NODE",
        "default": default,
        "script": encode('outcome = "true";\nlogger.message("done");'),
    }


async def test_read_script_by_name(frodo: FrodoLib, mock_responses: Any) -> None:
    """Scripts are queried by exact name."""
    route = mock_responses.get(
        SCRIPTS_URL, params={"_queryFilter": 'name eq "Check Age"'}
    ).mock(return_value=httpx.Response(200, json={"result": [_script("s1", "Check Age")]}))

    script = await frodo.script.read_script_by_name("Check Age")

    assert script["_id"] == "s1"
    assert route.called


async def test_read_script_by_name_duplicates(frodo: FrodoLib, mock_responses: Any) -> None:
    """More than one script with the same name is an error."""
    mock_responses.get(SCRIPTS_URL).mock(
        return_value=httpx.Response(
            200, json={"result": [_script("s1", "Dup"), _script("s2", "Dup")]}
        )
    )

    with pytest.raises(FrodoError, match="2 scripts 'Dup' found"):
        await frodo.script.read_script_by_name("Dup")


async def test_create_script_rejects_existing_id(frodo: FrodoLib, mock_responses: Any) -> None:
    """Creating a script whose id exists raises without writing."""
    mock_responses.get(f"{SCRIPTS_URL}/s1").mock(
        return_value=httpx.Response(200, json=_script("s1", "Existing"))
    )
    put = mock_responses.put(f"{SCRIPTS_URL}/s1")

    with pytest.raises(FrodoError, match="Script with id 's1' already exists."):
        await frodo.script.create_script("s1", "New", _script("s1", "New"))

    assert not put.called


async def test_put_script_renames_on_name_conflict(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """A taken name is replaced with the next imported variant and retried."""
    messages: list[tuple[Any, str]] = []
    frodo.state.print_handler = lambda message, kind, newline: messages.append((message, kind))
    route = mock_responses.put(f"{SCRIPTS_URL}/s1").mock(
        side_effect=[
            httpx.Response(409, json={"message": "Script name already used"}),
            httpx.Response(409, json={"message": "Script name already used"}),
            httpx.Response(200, json={"_id": "s1", "name": "Check Age - imported (2)"}),
        ]
    )
    data = _script("s1", "Check Age")
    data["script"] = ["var a = 1;", "outcome = 'true';"]

    result = await frodo.script.put_script("s1", data)

    assert result["name"] == "Check Age - imported (2)"
    names = [json.loads(c.request.content)["name"] for c in route.calls]
    assert names == ["Check Age", "Check Age - imported (1)", "Check Age - imported (2)"]
    assert json.loads(route.calls.last.request.content)["script"] == encode(
        "var a = 1;\noutcome = 'true';"
    )
    assert [kind for _, kind in messages] == ["warn", "warn"]
    assert data["name"] == "Check Age"


async def test_export_scripts_skips_defaults(frodo: FrodoLib, mock_responses: Any) -> None:
    """Default scripts are left out and bodies become arrays of lines."""
    mock_responses.get(SCRIPTS_URL).mock(
        return_value=httpx.Response(
            200,
            json={
                "result": [
                    _script("s2", "Zeta"),
                    _script("d1", "Default Script", default=True),
                    _script("s1", "Alpha"),
                ]
            },
        )
    )

    export = await frodo.script.export_scripts()

    assert list(export["script"]) == ["s1", "s2"]
    assert export["script"]["s1"]["script"] == ['outcome = "true";', 'logger.message("done");']
    assert "_rev" not in export["script"]["s1"]

    with_defaults = await frodo.script.export_scripts(include_default=True, use_string_arrays=False)
    assert set(with_defaults["script"]) == {"s1", "s2", "d1"}
    assert isinstance(with_defaults["script"]["s1"]["script"], str)


async def test_import_scripts_with_new_ids(frodo: FrodoLib, mock_responses: Any) -> None:
    """Re-identified imports write each script under a fresh uuid."""
    route = mock_responses.put(url__startswith=f"{SCRIPTS_URL}/").mock(
        return_value=httpx.Response(200, json={"_id": "new"})
    )
    import_data = {"script": {"s1": _script("s1", "One"), "s2": _script("s2", "Two")}}

    imported = await frodo.script.import_scripts(None, import_data, re_uuid=True)

    assert len(imported) == 2
    for call in route.calls:
        new_id = call.request.url.path.rsplit("/", 1)[-1]
        assert new_id not in ("s1", "s2")
        assert str(uuid.UUID(new_id)) == new_id
        assert json.loads(call.request.content)["_id"] == new_id


async def test_import_single_script_under_new_name(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Importing with a name saves only the first script, renamed."""
    route = mock_responses.put(f"{SCRIPTS_URL}/s1").mock(
        return_value=httpx.Response(200, json={"_id": "s1"})
    )
    import_data = {"script": {"s1": _script("s1", "One"), "s2": _script("s2", "Two")}}

    await frodo.script.import_scripts("Renamed", import_data)

    assert route.call_count == 1
    assert json.loads(route.calls.last.request.content)["name"] == "Renamed"


async def test_delete_scripts_keeps_defaults(frodo: FrodoLib, mock_responses: Any) -> None:
    """Only non-default scripts are deleted."""
    mock_responses.get(SCRIPTS_URL).mock(
        return_value=httpx.Response(
            200,
            json={"result": [_script("s1", "One"), _script("d1", "Def", default=True)]},
        )
    )
    s1 = mock_responses.delete(f"{SCRIPTS_URL}/s1").mock(
        return_value=httpx.Response(200, json={"_id": "s1"})
    )
    d1 = mock_responses.delete(f"{SCRIPTS_URL}/d1")

    deleted = await frodo.script.delete_scripts()

    assert deleted == [{"_id": "s1"}]
    assert s1.called
    assert not d1.called


async def test_delete_script_by_unknown_name(frodo: FrodoLib, mock_responses: Any) -> None:
    """Deleting an unknown name raises."""
    mock_responses.get(SCRIPTS_URL).mock(
        return_value=httpx.Response(200, json={"result": []})
    )

    with pytest.raises(FrodoError, match="Script with name Ghost does not exist."):
        await frodo.script.delete_script_by_name("Ghost")
