"""Helpers shared by every export and import operation.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from frodo._version import __version__
from frodo.constants import FRODO_METADATA_ID
from frodo.models import ExportMetaData
from frodo.utils.base64_utils import decode, encode
from frodo.utils.console import print_message
from frodo.utils.json_utils import delete_keys_deep

if TYPE_CHECKING:
    from frodo.state import State

_SLUG_REMOVE = re.compile(r"[^\w\s$*_+~.()'\"!\-@]+")


def get_metadata(state: State) -> dict[str, Any]:
    """Build the ``meta`` block describing where and when an export was made."""
    return ExportMetaData(
        origin=state.get_host(),
        origin_am_version=state.am_version,
        exported_by=state.get_username(),
        export_date=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
            "+00:00", "Z"
        ),
        export_tool=FRODO_METADATA_ID,
        export_tool_version=__version__,
    ).to_json_dict()


def title_case(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in str(text).lower().split(" "))


def get_realm_string(state: State) -> str:
    """Concatenate the title-cased realm path elements, e.g. ``/alpha/sub`` -> ``AlphaSub``."""
    return "".join(title_case(item) for item in state.get_realm().split("/"))


def convert_base64_text_to_array(b64text: str) -> list[str]:
    """Decode a base64 script body into lines, expanding tabs to four spaces."""
    return decode(b64text).replace("\t", "    ").split("\n")


def convert_text_array_to_base64(text_array: list[str]) -> str:
    return encode("\n".join(text_array))


def validate_import(metadata: Any) -> bool:
    """Accept import data; origin and version checks hook in here."""
    return True


def get_typed_filename(name: str, type_: str, suffix: str = "json") -> str:
    """Return ``<slug>.<type>.<suffix>`` for an exported object name."""
    slug = _SLUG_REMOVE.sub("", re.sub(r"^http(s?)://", "", name))
    slug = re.sub(r"\s+", "-", slug.strip())
    return f"{slug}.{type_}.{suffix}"


def save_json_to_file(
    state: State,
    data: dict[str, Any],
    filename: str | Path,
    include_meta: bool = True,
) -> bool:
    """Write an export to disk.

    Args:
        state: Library state
        data: Export data; modified in place
        filename: Target file
        include_meta: Whether to refresh the ``meta`` block

    Returns:
        True when the file was written.

    """
    if include_meta:
        data["meta"] = get_metadata(state)
    delete_keys_deep(data, "_rev")
    try:
        Path(filename).write_text(json.dumps(data, indent=2), encoding="utf-8")
    except OSError:
        print_message(state, f"ERROR - can't save {filename}", "error")
        return False
    return True


def read_json_file(filename: str | Path) -> dict[str, Any]:
    return json.loads(Path(filename).read_text(encoding="utf-8"))
