"""Tests for the realm, JSON, base64 and export helpers.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from frodo.exceptions import FrodoError
from frodo.utils.base64_utils import (
    decode,
    decode_base64_url,
    encode,
    encode_base64_url,
    is_base64_encoded,
)
from frodo.utils.console import (
    create_progress_indicator,
    print_error,
    stop_progress_indicator,
    update_progress_indicator,
    verbose_message,
)
from frodo.utils.export_import import (
    convert_base64_text_to_array,
    convert_text_array_to_base64,
    get_metadata,
    get_realm_string,
    get_typed_filename,
    read_json_file,
    save_json_to_file,
    title_case,
)
from frodo.utils.forgerock import (
    apply_name_collision_policy,
    get_config_path,
    get_current_realm_name,
    get_host_base_url,
    get_idm_base_url,
    get_realm_managed_user,
    get_realm_path,
    get_realm_path_global,
)
from frodo.utils.json_utils import (
    clone_deep,
    delete_deep_by_key,
    delete_keys_deep,
    merge_deep,
)

if TYPE_CHECKING:
    from pathlib import Path

    from frodo.state import State


@pytest.mark.parametrize(
    ("realm", "path"),
    [
        ("/", "/realms/root"),
        ("alpha", "/realms/root/realms/alpha"),
        ("/alpha", "/realms/root/realms/alpha"),
        ("/parent/child", "/realms/root/realms/parent/realms/child"),
    ],
)
def test_get_realm_path(realm: str, path: str) -> None:
    """Realm names expand to nested realm paths."""
    assert get_realm_path(realm) == path


def test_global_and_realm_paths(state: State) -> None:
    """Global configuration drops the realm path and uses global-config."""
    assert get_realm_path_global(True, state) == ""
    assert get_realm_path_global(False, state) == "/realms/root/realms/alpha"
    assert get_config_path(True) == "global-config"
    assert get_config_path(False) == "realm-config"
    assert get_current_realm_name(state) == "alpha"


def test_realm_managed_user(state: State) -> None:
    """Cloud tenants prefix the managed user type with the realm."""
    assert get_realm_managed_user(state) == "alpha_user"
    state.deployment_type = "classic"
    assert get_realm_managed_user(state) == "user"


def test_host_urls(state: State) -> None:
    """Base and IDM URLs derive from the tenant URL unless overridden."""
    assert get_host_base_url(state.host) == "https://openam-frodo-dev.forgeblocks.com"
    assert get_idm_base_url(state) == "https://openam-frodo-dev.forgeblocks.com/openidm"
    state.idm_host = "https://idm.example.com/openidm/"
    assert get_idm_base_url(state) == "https://idm.example.com/openidm"
    with pytest.raises(FrodoError):
        get_host_base_url("not a url")


def test_apply_name_collision_policy() -> None:
    """Colliding names get an increasing import counter."""
    assert apply_name_collision_policy("Login") == "Login - imported (1)"
    assert apply_name_collision_policy("Login - imported (1)") == "Login - imported (2)"
    assert apply_name_collision_policy("Login - imported (9)") == "Login - imported (10)"


def test_delete_deep_by_key() -> None:
    """Keys containing the substring past the first character are removed."""
    data = {
        "password-encrypted": "x",
        "-encrypted": "kept",
        "nested": [{"secret-encrypted": "y", "name": "z"}],
    }

    delete_deep_by_key(data, "-encrypted")

    assert data == {"-encrypted": "kept", "nested": [{"name": "z"}]}


def test_delete_keys_deep() -> None:
    """Exact keys are removed at every depth, including position-zero names."""
    data = {"_rev": "1", "tree": {"_rev": "2", "nodes": [{"_rev": "3", "_id": "n"}]}}

    delete_keys_deep(data, "_rev")

    assert data == {"tree": {"nodes": [{"_id": "n"}]}}


def test_merge_and_clone_deep() -> None:
    """Merging is recursive and cloning is independent of the original."""
    target = {"a": {"b": 1, "c": 2}, "d": 1}
    merge_deep(target, {"a": {"b": 3}, "e": [1]})
    assert target == {"a": {"b": 3, "c": 2}, "d": 1, "e": [1]}

    clone = clone_deep(target)
    clone["a"]["b"] = 99
    assert target["a"]["b"] == 3


def test_base64_helpers() -> None:
    """Text survives encoding and base64 detection rejects plain text."""
    assert decode(encode("var x = 1;")) == "var x = 1;"
    assert decode_base64_url(encode_base64_url("??>>")) == "??>>"
    assert "=" not in encode_base64_url("a")
    assert is_base64_encoded(encode("hello"))
    assert not is_base64_encoded("hello world")
    assert not is_base64_encoded("")


def test_script_body_conversion() -> None:
    """Base64 script bodies convert to line arrays with tabs expanded."""
    b64 = encode("function x() {\n\treturn 1;\n}")

    lines = convert_base64_text_to_array(b64)

    assert lines == ["function x() {", "    return 1;", "}"]
    assert decode(convert_text_array_to_base64(lines)) == "function x() {\n    return 1;\n}"


def test_names_and_realm_string(state: State) -> None:
    """Filenames are slugged and realm strings title-cased."""
    assert title_case("hello WORLD") == "Hello World"
    state.realm = "/parent/child"
    assert get_realm_string(state) == "ParentChild"
    assert get_typed_filename("My Journey", "journey") == "My-Journey.journey.json"
    assert get_typed_filename("https://host/x", "saml", "xml") == "hostx.saml.xml"


def test_get_metadata(state: State) -> None:
    """Export metadata records origin, version and tool."""
    meta = get_metadata(state)

    assert meta["origin"] == state.host
    assert meta["originAmVersion"] == "7.5.0"
    assert meta["exportedBy"] == "frodo-admin"
    assert meta["exportTool"] == "frodo"
    assert meta["exportDate"].endswith("Z")


def test_save_and_read_json_file(state: State, tmp_path: Path) -> None:
    """Saved exports refresh the metadata and drop revisions."""
    target = tmp_path / "export.json"
    data = {"script": {"a": {"_id": "a", "_rev": "1"}}}

    assert save_json_to_file(state, data, target)

    saved = read_json_file(target)
    assert saved["script"] == {"a": {"_id": "a"}}
    assert saved["meta"]["exportTool"] == "frodo"
    assert json.loads(target.read_text())["meta"]["origin"] == state.host


def test_print_error_uses_error_handler(state: State) -> None:
    """Errors go to the error handler when one is set, else to the print handler."""
    printed: list[tuple[object, str]] = []
    handled: list[tuple[Exception, str | None]] = []
    state.print_handler = lambda message, kind, newline: printed.append((message, kind))
    error = FrodoError("Error reading scripts")

    print_error(state, error)
    assert printed == [(error, "error")]

    state.error_handler = lambda e, message: handled.append((e, message))
    print_error(state, error, "context")
    assert handled == [(error, "context")]
    assert len(printed) == 1


def test_verbose_message_needs_verbose(state: State) -> None:
    """Verbose output reaches the handler only in verbose mode."""
    seen: list[object] = []
    state.verbose_handler = seen.append
    verbose_message(state, "quiet")
    state.verbose = True
    verbose_message(state, "loud")
    assert seen == ["loud"]


def test_progress_indicator_hooks(state: State) -> None:
    """Progress hooks receive the indicator id returned on creation."""
    events: list[tuple[object, ...]] = []
    state.create_progress_handler = lambda indicator, kind, total, message: events.append(
        ("create", indicator, kind, total, message)
    )
    state.update_progress_handler = lambda indicator, message: events.append(
        ("update", indicator, message)
    )
    state.stop_progress_handler = lambda indicator, message, status: events.append(
        ("stop", indicator, message, status)
    )
    indicator = create_progress_indicator(state, 2, "Exporting...")
    update_progress_indicator(state, indicator, "one")
    stop_progress_indicator(state, indicator, "Done", "success")
    assert events == [
        ("create", indicator, "determinate", 2, "Exporting..."),
        ("update", indicator, "one"),
        ("stop", indicator, "Done", "success"),
    ]
