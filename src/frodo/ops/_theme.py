"""Theme operations for Frodo.

Themes live in the IDM configuration entity ``ui/themerealm`` as
``{"realm": {<realm name>: [theme, ...]}}``. Every write replaces the whole
entity.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient
from ..api._idm_config import IdmConfigApi
from ..exceptions import FrodoError
from ..models import ThemeExport
from ..utils.console import debug_message
from ..utils.export_import import get_metadata
from ..utils.forgerock import get_current_realm_name

THEMEREALM_ID = "ui/themerealm"


def get_realm_themes(themes: dict[str, Any], realm: str) -> list[dict[str, Any]]:
    return list(themes.get("realm", {}).get(realm) or [])


def _single(found: list[dict[str, Any]], what: str, realm: str, verb: str) -> dict[str, Any]:
    if len(found) == 1:
        return found[0]
    if len(found) > 1:
        msg = f"Multiple themes {what} found in realm '{realm}'!"
        raise FrodoError(msg)
    msg = f"Theme {what} {verb} in realm '{realm}'!"
    raise FrodoError(msg)


class ThemeOps:
    """Manage hosted UI themes."""

    def __init__(self, client: BaseClient) -> None:
        self._api = IdmConfigApi(client)
        self._state = client.state

    def _realm(self, realm: str | None) -> str:
        return realm or get_current_realm_name(self._state)

    def create_theme_export_template(self) -> dict[str, Any]:
        return ThemeExport(meta=get_metadata(self._state)).to_json_dict()

    async def _get_themerealm(self) -> dict[str, Any]:
        try:
            return await self._api.get_config_entity(THEMEREALM_ID)
        except FrodoError as e:
            msg = "Error reading themes"
            raise FrodoError(msg, e) from e

    async def _put_themerealm(self, themes: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self._api.put_config_entity(THEMEREALM_ID, themes)
        except FrodoError as e:
            msg = "Error saving themes"
            raise FrodoError(msg, e) from e

    async def read_themes(self, realm: str | None = None) -> list[dict[str, Any]]:
        return get_realm_themes(await self._get_themerealm(), self._realm(realm))

    async def read_theme(self, theme_id: str, realm: str | None = None) -> dict[str, Any]:
        realm = self._realm(realm)
        found = [t for t in await self.read_themes(realm) if t.get("_id") == theme_id]
        return _single(found, f"with id '{theme_id}'", realm, "not found")

    async def read_theme_by_name(
        self, theme_name: str, realm: str | None = None
    ) -> dict[str, Any]:
        realm = self._realm(realm)
        found = [t for t in await self.read_themes(realm) if t.get("name") == theme_name]
        return _single(found, f"'{theme_name}'", realm, "not found")

    async def _put_matching(
        self, key: str, value: str, theme_data: dict[str, Any], realm: str
    ) -> dict[str, Any]:
        data = dict(theme_data)
        data[key] = value
        themes = await self._get_themerealm()
        realm_themes: list[dict[str, Any]] = []
        is_new = True
        for theme in get_realm_themes(themes, realm):
            if theme.get(key) == value:
                is_new = False
                realm_themes.append(data)
                continue
            if data.get("isDefault"):
                theme["isDefault"] = False
            realm_themes.append(theme)
        if is_new:
            realm_themes.append(data)
        themes.setdefault("realm", {})[realm] = realm_themes
        saved = get_realm_themes(await self._put_themerealm(themes), realm)
        return [t for t in saved if t.get(key) == value]

    async def update_theme(
        self, theme_id: str, theme_data: dict[str, Any], realm: str | None = None
    ) -> dict[str, Any]:
        """Create or replace a theme by id.

        When the theme is the default theme, every other theme in the realm
        stops being default.

        Returns:
            The saved theme.

        """
        realm = self._realm(realm)
        found = await self._put_matching("_id", theme_id, theme_data, realm)
        return _single(found, f"with id '{theme_id}'", realm, "not saved")

    async def update_theme_by_name(
        self, theme_name: str, theme_data: dict[str, Any], realm: str | None = None
    ) -> dict[str, Any]:
        realm = self._realm(realm)
        found = await self._put_matching("name", theme_name, theme_data, realm)
        return _single(found, f"'{theme_name}'", realm, "not saved")

    async def update_themes(
        self, theme_map: dict[str, dict[str, Any]], realm: str | None = None
    ) -> dict[str, dict[str, Any]]:
        """Create or replace several themes in one write.

        When more than one of the given themes is marked default, the last
        one wins and every other theme in the realm stops being default.

        Args:
            theme_map: Themes keyed by id
            realm: Realm name, defaults to the current realm

        Returns:
            Every theme of the realm after the write, keyed by id.

        """
        realm = self._realm(realm)
        debug_message(self._state, f"ThemeOps.update_themes: start, realm={realm}")
        themes = await self._get_themerealm()
        default_id = None
        realm_themes: list[dict[str, Any]] = []
        existing: set[str] = set()
        for theme in get_realm_themes(themes, realm):
            theme_id = theme.get("_id")
            if theme_id in theme_map:
                existing.add(theme_id)
                if theme_map[theme_id].get("isDefault"):
                    default_id = theme_id
                realm_themes.append(dict(theme_map[theme_id]))
            else:
                realm_themes.append(theme)
        for theme_id, theme in theme_map.items():
            if theme_id in existing:
                continue
            if theme.get("isDefault"):
                default_id = theme_id
            realm_themes.append(dict(theme))
        if default_id:
            for theme in realm_themes:
                theme["isDefault"] = theme.get("_id") == default_id
        themes.setdefault("realm", {})[realm] = realm_themes
        saved = get_realm_themes(await self._put_themerealm(themes), realm)
        debug_message(self._state, "ThemeOps.update_themes: end")
        return {theme["_id"]: theme for theme in saved}

    async def _delete_matching(self, key: str, value: str, realm: str) -> dict[str, Any]:
        themes = await self._get_themerealm()
        realm_themes = get_realm_themes(themes, realm)
        remaining = [t for t in realm_themes if t.get(key) != value]
        deleted = [t for t in realm_themes if t.get(key) == value]
        if not deleted:
            msg = f"'{value}' not found in realm '{realm}'"
            raise FrodoError(msg)
        themes["realm"][realm] = remaining
        saved = get_realm_themes(await self._put_themerealm(themes), realm)
        undeleted = [t for t in saved if t.get(key) == value]
        if undeleted:
            ids = ",".join(str(t.get("_id")) for t in undeleted)
            msg = f"Theme(s) with id(s) '{ids}' not deleted from realm '{realm}'!"
            raise FrodoError(msg)
        return deleted[0]

    async def delete_theme(self, theme_id: str, realm: str | None = None) -> dict[str, Any]:
        return await self._delete_matching("_id", theme_id, self._realm(realm))

    async def delete_theme_by_name(
        self, theme_name: str, realm: str | None = None
    ) -> dict[str, Any]:
        return await self._delete_matching("name", theme_name, self._realm(realm))

    async def delete_themes(self, realm: str | None = None) -> list[dict[str, Any]]:
        """Delete every theme of a realm.

        Returns:
            The deleted themes.

        """
        realm = self._realm(realm)
        themes = await self._get_themerealm()
        realm_themes = themes.get("realm", {}).get(realm)
        if realm_themes is None:
            msg = f"No theme configuration found for realm '{realm}'"
            raise FrodoError(msg)
        themes["realm"][realm] = []
        await self._put_themerealm(themes)
        return list(realm_themes)

    async def export_themes(self, realm: str | None = None) -> dict[str, Any]:
        export_data = self.create_theme_export_template()
        for theme in await self.read_themes(realm):
            export_data["theme"][theme["_id"]] = theme
        return export_data

    async def import_themes(
        self, import_data: dict[str, Any], realm: str | None = None
    ) -> dict[str, dict[str, Any]]:
        themes = ThemeExport.model_validate(import_data).theme
        return await self.update_themes(themes, realm)
