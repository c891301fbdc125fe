"""Tests for AM service operations.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from frodo.exceptions import FrodoError
from frodo.ops._service import NOT_AVAILABLE_MESSAGE

from .conftest import AM_GLOBAL_URL, AM_REALM_URL

if TYPE_CHECKING:
    from frodo import FrodoLib

SERVICES_URL = f"{AM_REALM_URL}/realm-config/services"
GLOBAL_SERVICES_URL = f"{AM_GLOBAL_URL}/global-config/services"
NEXT = {"_action": "nextdescendents"}


def _service(service_id: str) -> dict[str, Any]:
    return {
        "_id": "",
        "_rev": "11",
        "_type": {"_id": service_id, "name": service_id, "collection": False},
        "enabled": True,
        "setting": "value",
    }


def _descendent(service_id: str, name: str) -> dict[str, Any]:
    return {"_id": name, "_rev": "2", "_type": {"_id": f"{service_id}Child"}, "x": 1}


def _mock_full_service(mock_responses: Any, base_url: str, service_id: str) -> None:
    mock_responses.get(f"{base_url}/{service_id}").mock(
        return_value=httpx.Response(200, json=_service(service_id))
    )
    mock_responses.post(f"{base_url}/{service_id}", params=NEXT).mock(
        return_value=httpx.Response(
            200, json={"result": [_descendent(service_id, "child1")]}
        )
    )


async def test_get_full_services_skips_unavailable(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Services the tenant hides are skipped silently; other failures are reported."""
    printed: list[tuple[Any, str]] = []
    frodo.state.print_handler = lambda message, kind, newline: printed.append((message, kind))
    mock_responses.post(SERVICES_URL, params=NEXT).mock(
        return_value=httpx.Response(
            200,
            json={"result": [{"_id": "oauth-oidc"}, {"_id": "dashboard"}, {"_id": "broken"}]},
        )
    )
    _mock_full_service(mock_responses, SERVICES_URL, "oauth-oidc")
    for service_id, status, message in (
        ("dashboard", 403, NOT_AVAILABLE_MESSAGE),
        ("broken", 500, "Internal Server Error"),
    ):
        mock_responses.get(f"{SERVICES_URL}/{service_id}").mock(
            return_value=httpx.Response(status, json={"message": message})
        )
        mock_responses.post(f"{SERVICES_URL}/{service_id}", params=NEXT).mock(
            return_value=httpx.Response(200, json={"result": []})
        )

    services = await frodo.service.get_full_services()

    assert [s["_type"]["_id"] for s in services] == ["oauth-oidc"]
    assert services[0]["nextDescendents"][0]["_id"] == "child1"
    errors = [message for message, kind in printed if kind == "error"]
    assert len(errors) == 1
    assert "broken" in errors[0]


async def test_export_services_tags_location(frodo: FrodoLib, mock_responses: Any) -> None:
    """Exported services are keyed by type and carry their location."""
    mock_responses.post(GLOBAL_SERVICES_URL, params=NEXT).mock(
        return_value=httpx.Response(200, json={"result": [{"_id": "oauth-oidc"}]})
    )
    _mock_full_service(mock_responses, GLOBAL_SERVICES_URL, "oauth-oidc")

    export = await frodo.service.export_services(global_config=True)

    service = export["service"]["oauth-oidc"]
    assert service["location"] == "global"
    assert service["nextDescendents"][0]["_id"] == "child1"


async def test_import_service_follows_location(frodo: FrodoLib, mock_responses: Any) -> None:
    """Services are imported where their location says, without bookkeeping keys."""
    realm_put = mock_responses.put(f"{SERVICES_URL}/oauth-oidc").mock(
        return_value=httpx.Response(200, json={"_id": ""})
    )
    child_put = mock_responses.put(
        f"{SERVICES_URL}/oauth-oidc/oauth-oidcChild/child1"
    ).mock(return_value=httpx.Response(200, json={"_id": "child1"}))
    global_put = mock_responses.put(f"{GLOBAL_SERVICES_URL}/oauth-oidc")
    service = _service("oauth-oidc")
    service["location"] = "alpha"
    service["nextDescendents"] = [_descendent("oauth-oidc", "child1")]

    await frodo.service.import_service("oauth-oidc", {"service": {"oauth-oidc": service}})

    body = json.loads(realm_put.calls.last.request.content)
    for key in ("_rev", "enabled", "location", "nextDescendents"):
        assert key not in body
    assert "_rev" not in json.loads(child_put.calls.last.request.content)
    assert not global_put.called


async def test_import_service_clean_deletes_first(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """A clean import deletes the service and its descendents before writing."""
    mock_responses.post(f"{SERVICES_URL}/oauth-oidc", params=NEXT).mock(
        return_value=httpx.Response(200, json={"result": [_descendent("oauth-oidc", "old")]})
    )
    old = mock_responses.delete(f"{SERVICES_URL}/oauth-oidc/oauth-oidcChild/old").mock(
        return_value=httpx.Response(200, json={})
    )
    delete = mock_responses.delete(f"{SERVICES_URL}/oauth-oidc").mock(
        return_value=httpx.Response(200, json={})
    )
    put = mock_responses.put(f"{SERVICES_URL}/oauth-oidc").mock(
        return_value=httpx.Response(200, json={"_id": ""})
    )

    await frodo.service.import_service(
        "oauth-oidc", {"service": {"oauth-oidc": _service("oauth-oidc")}}, clean=True,
        realm_config=True,
    )

    assert old.called
    assert delete.called
    assert put.called


async def test_import_services_aggregates_errors(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Every failed service import is reported together."""
    mock_responses.put(f"{SERVICES_URL}/good").mock(
        return_value=httpx.Response(200, json={"_id": ""})
    )
    mock_responses.put(f"{SERVICES_URL}/bad").mock(
        return_value=httpx.Response(400, json={"message": "Invalid attribute"})
    )
    good = _service("good")
    bad = _service("bad")
    good["location"] = bad["location"] = "alpha"

    with pytest.raises(FrodoError) as exc_info:
        await frodo.service.import_services({"service": {"good": good, "bad": bad}})

    assert exc_info.value.message == "Error importing services"
    assert "Error importing service bad" in str(exc_info.value)


async def test_delete_full_services_ignores_protected(
    frodo: FrodoLib, mock_responses: Any
) -> None:
    """Services the tenant refuses to delete do not count as failures."""
    mock_responses.post(SERVICES_URL, params=NEXT).mock(
        return_value=httpx.Response(200, json={"result": [{"_id": "a"}, {"_id": "b"}]})
    )
    for service_id in ("a", "b"):
        mock_responses.post(f"{SERVICES_URL}/{service_id}", params=NEXT).mock(
            return_value=httpx.Response(200, json={"result": []})
        )
    mock_responses.delete(f"{SERVICES_URL}/a").mock(
        return_value=httpx.Response(200, json={})
    )
    mock_responses.delete(f"{SERVICES_URL}/b").mock(
        return_value=httpx.Response(403, json={"message": NOT_AVAILABLE_MESSAGE})
    )

    await frodo.service.delete_full_services()
