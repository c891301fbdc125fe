"""Export and import helpers bound to a library state.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .._base import BaseClient
from ..utils import export_import, forgerock


class UtilsOps:
    """State-aware front for :mod:`frodo.utils.export_import` and realm helpers."""

    def __init__(self, client: BaseClient) -> None:
        self._state = client.state

    def get_metadata(self) -> dict[str, Any]:
        return export_import.get_metadata(self._state)

    def get_realm_string(self) -> str:
        return export_import.get_realm_string(self._state)

    def get_current_realm_path(self) -> str:
        return forgerock.get_current_realm_path(self._state)

    def get_current_realm_name(self) -> str:
        return forgerock.get_current_realm_name(self._state)

    def get_realm_managed_user(self) -> str:
        return forgerock.get_realm_managed_user(self._state)

    def save_json_to_file(
        self, data: dict[str, Any], filename: str | Path, include_meta: bool = True
    ) -> bool:
        return export_import.save_json_to_file(self._state, data, filename, include_meta)

    read_json_file = staticmethod(export_import.read_json_file)
    get_typed_filename = staticmethod(export_import.get_typed_filename)
    title_case = staticmethod(export_import.title_case)
    validate_import = staticmethod(export_import.validate_import)
    convert_base64_text_to_array = staticmethod(export_import.convert_base64_text_to_array)
    convert_text_array_to_base64 = staticmethod(export_import.convert_text_array_to_base64)
    apply_name_collision_policy = staticmethod(forgerock.apply_name_collision_policy)
    get_realm_path = staticmethod(forgerock.get_realm_path)
