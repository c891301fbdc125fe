"""Journey (authentication tree) operations for Frodo.

A journey export carries the tree, every node it references, the inner
nodes of page nodes and, when dependencies are requested, the scripts used
by scripted nodes.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from .._base import BaseClient
from ..api._script import ScriptApi
from ..api._tree import TreeApi
from ..constants import CLOUD_DEPLOYMENT_TYPE_KEY, FORGEOPS_DEPLOYMENT_TYPE_KEY
from ..exceptions import FrodoError, ValidationError
from ..models import MultiTreeExport, SingleTreeExport
from ..utils.base64_utils import encode, is_base64_encoded
from ..utils.console import (
    create_progress_indicator,
    debug_message,
    print_message,
    stop_progress_indicator,
    update_progress_indicator,
)
from ..utils.export_import import (
    convert_base64_text_to_array,
    convert_text_array_to_base64,
    get_metadata,
)
from ..utils.forgerock import get_realm_managed_user
from ..utils.json_utils import clone_deep
from ..utils.polling import gather_settled

CONTAINER_NODES = ("PageNode", "CustomPageNode")
SCRIPTED_NODES = (
    "ConfigProviderNode",
    "ScriptedDecisionNode",
    "ClientScriptNode",
    "SocialProviderHandlerNode",
    "CustomScriptNode",
)
EMPTY_SCRIPT_PLACEHOLDER = "[Empty]"
INVALID_ATTRIBUTE_MESSAGE = "Invalid attribute specified."
MISSING_SCRIPT_MESSAGE = "Data validation failed for the attribute, Script"
NODE_DID_NOT_EXIST_MESSAGE = "Unable to read SMS config: Node did not exist"


def _valid_attributes(error: ValidationError) -> set[str] | None:
    if error.http_message != INVALID_ATTRIBUTE_MESSAGE or not isinstance(error.data, dict):
        return None
    detail = error.data.get("detail")
    if not isinstance(detail, dict) or "validAttributes" not in detail:
        return None
    return set(detail["validAttributes"]) | {"_id"}


def _replace_ids(obj: dict[str, Any], uuid_map: dict[str, str]) -> dict[str, Any]:
    text = json.dumps(obj)
    for old_id, new_id in uuid_map.items():
        text = text.replace(old_id, new_id)
    return json.loads(text)


def _node_missing(error: FrodoError) -> bool:
    return error.http_status == 404 or (
        error.http_status == 500 and error.http_message == NODE_DID_NOT_EXIST_MESSAGE
    )


def _uses_script(node: dict[str, Any]) -> bool:
    return (
        node["_type"]["_id"] in SCRIPTED_NODES
        and bool(node.get("script"))
        and node["script"] != EMPTY_SCRIPT_PLACEHOLDER
    )


class JourneyOps:
    """Export, import, delete and toggle journeys."""

    def __init__(self, client: BaseClient) -> None:
        self._api = TreeApi(client)
        self._script_api = ScriptApi(client)
        self._state = client.state

    def create_single_tree_export_template(self) -> dict[str, Any]:
        return SingleTreeExport(meta=get_metadata(self._state)).to_json_dict()

    def create_multi_tree_export_template(self) -> dict[str, Any]:
        return MultiTreeExport(meta=get_metadata(self._state)).to_json_dict()

    async def read_journeys(self) -> list[dict[str, Any]]:
        try:
            trees = (await self._api.get_trees())["result"]
        except FrodoError as e:
            msg = "Error reading journeys"
            raise FrodoError(msg, e) from e
        return sorted(trees, key=lambda tree: tree["_id"])

    async def read_journey(self, journey_id: str) -> dict[str, Any]:
        try:
            return await self._api.get_tree(journey_id)
        except FrodoError as e:
            msg = f"Error reading journey {journey_id}"
            raise FrodoError(msg, e) from e

    async def export_journey(
        self, journey_id: str, deps: bool = True, use_string_arrays: bool = True
    ) -> dict[str, Any]:
        """Export a journey with its nodes.

        Args:
            journey_id: Tree id
            deps: Include the scripts referenced by scripted nodes
            use_string_arrays: Export script bodies as lists of lines

        Returns:
            Envelope ``{meta, tree, nodes, innerNodes, scripts}``.

        """
        debug_message(self._state, f"JourneyOps.export_journey: start {journey_id}")
        export_data = self.create_single_tree_export_template()
        try:
            tree = await self._api.get_tree(journey_id)
            export_data["tree"] = tree
            nodes = await asyncio.gather(
                *(
                    self._api.get_node(info["nodeType"], node_id)
                    for node_id, info in tree.get("nodes", {}).items()
                )
            )
            inner_refs: list[dict[str, Any]] = []
            for node in nodes:
                export_data["nodes"][node["_id"]] = node
                if node["_type"]["_id"] in CONTAINER_NODES:
                    inner_refs.extend(node.get("nodes", []))
            inner_nodes = await asyncio.gather(
                *(self._api.get_node(ref["nodeType"], ref["_id"]) for ref in inner_refs)
            )
            for inner_node in inner_nodes:
                export_data["innerNodes"][inner_node["_id"]] = inner_node
            if deps:
                script_ids = {
                    node["script"] for node in [*nodes, *inner_nodes] if _uses_script(node)
                }
                scripts = await asyncio.gather(
                    *(self._script_api.get_script(script_id) for script_id in sorted(script_ids))
                )
                for script in scripts:
                    if use_string_arrays and isinstance(script.get("script"), str):
                        script["script"] = convert_base64_text_to_array(script["script"])
                    export_data["scripts"][script["_id"]] = script
        except FrodoError as e:
            msg = f"Error exporting journey {journey_id}"
            raise FrodoError(msg, e) from e
        debug_message(self._state, f"JourneyOps.export_journey: end {journey_id}")
        return export_data

    async def export_journeys(
        self, deps: bool = True, use_string_arrays: bool = True
    ) -> dict[str, Any]:
        """Export every journey in the realm.

        Returns:
            Envelope ``{meta, trees: {id: single tree export}}``.

        Raises:
            FrodoError: Aggregating every failed journey export.

        """
        export_data = self.create_multi_tree_export_template()
        trees = await self.read_journeys()
        errors: list[Exception] = []
        indicator = create_progress_indicator(
            self._state, len(trees), "Exporting journeys..."
        )
        for tree in trees:
            update_progress_indicator(self._state, indicator, f"Exporting journey {tree['_id']}")
            try:
                single = await self.export_journey(tree["_id"], deps, use_string_arrays)
            except FrodoError as e:
                errors.append(e)
                continue
            single.pop("meta", None)
            export_data["trees"][tree["_id"]] = single
        if errors:
            stop_progress_indicator(self._state, indicator, "Error exporting journeys", "fail")
            msg = "Error exporting journeys"
            raise FrodoError(msg, errors)
        stop_progress_indicator(
            self._state, indicator, f"Exported {len(trees)} journeys.", "success"
        )
        return export_data

    async def _put_pruning_invalid_attributes(
        self,
        put: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
        data: dict[str, Any],
    ) -> dict[str, Any]:
        try:
            return await put(data)
        except ValidationError as e:
            valid = _valid_attributes(e)
            if valid is None:
                raise
            for attribute in list(data):
                if attribute not in valid:
                    print_message(
                        self._state, f"Removing invalid attribute: {attribute}", "warn"
                    )
                    del data[attribute]
        return await put(data)

    def _managed_user_resource(self) -> str:
        return f"managed/{get_realm_managed_user(self._state)}"

    async def _import_node(
        self,
        journey_id: str,
        node_id: str,
        new_id: str,
        node_data: dict[str, Any],
        tree_identity_resource: str | None,
    ) -> dict[str, Any]:
        node_type = node_data["_type"]["_id"]
        node_data.pop("_rev", None)
        node_data["_id"] = new_id
        identity_resource = node_data.get("identityResource")
        if (
            identity_resource
            and identity_resource.endswith("user")
            and identity_resource == tree_identity_resource
        ):
            node_data["identityResource"] = self._managed_user_resource()
        label = node_id if node_id == new_id else f"{node_id} [{new_id}]"
        try:
            return await self._put_pruning_invalid_attributes(
                lambda data: self._api.put_node(node_type, new_id, data), node_data
            )
        except FrodoError as e:
            if e.http_status == 400 and e.http_message == MISSING_SCRIPT_MESSAGE:
                msg = (
                    f"Missing script {node_data.get('script')} referenced by node "
                    f"{label} ({node_type}) in journey {journey_id}."
                )
            else:
                msg = f"Error importing node {label} in journey {journey_id}"
            raise FrodoError(msg, e) from e

    async def import_journey(
        self, tree_export: dict[str, Any], re_uuid: bool = False, deps: bool = True
    ) -> dict[str, Any]:
        """Import a journey: scripts, then inner nodes, then nodes, then the tree.

        Args:
            tree_export: Single tree export
            re_uuid: Give every node a new id, rewriting references to it
            deps: Import the bundled scripts

        Returns:
            The stored tree.

        """
        data = SingleTreeExport.model_validate(clone_deep(tree_export))
        tree = data.tree
        journey_id = tree["_id"]
        debug_message(self._state, f"JourneyOps.import_journey: start {journey_id}")
        tree_identity_resource = tree.get("identityResource")

        if deps:
            for script_id, script in data.scripts.items():
                body = script.get("script")
                if isinstance(body, list):
                    script["script"] = convert_text_array_to_base64(body)
                elif isinstance(body, str) and not is_base64_encoded(body):
                    script["script"] = encode(body)
                try:
                    await self._script_api.put_script(script_id, script)
                except FrodoError as e:
                    msg = (
                        f"Error importing script {script.get('name')} ({script_id}) "
                        f"in journey {journey_id}"
                    )
                    raise FrodoError(msg, e) from e

        uuid_map: dict[str, str] = {}
        for node_id, node_data in data.inner_nodes.items():
            new_id = str(uuid.uuid4()) if re_uuid else node_id
            uuid_map[node_id] = new_id
            await self._import_node(
                journey_id, node_id, new_id, node_data, tree_identity_resource
            )

        for node_id, node_data in data.nodes.items():
            new_id = str(uuid.uuid4()) if re_uuid else node_id
            if re_uuid and node_data["_type"]["_id"] in CONTAINER_NODES:
                node_data = _replace_ids(node_data, uuid_map)
            uuid_map[node_id] = new_id
            await self._import_node(
                journey_id, node_id, new_id, node_data, tree_identity_resource
            )

        if re_uuid:
            tree = _replace_ids(tree, {k: v for k, v in uuid_map.items() if k != v})
        deployment_type = self._state.get_deployment_type()
        if (tree_identity_resource and tree_identity_resource.endswith("user")) or (
            deployment_type in (CLOUD_DEPLOYMENT_TYPE_KEY, FORGEOPS_DEPLOYMENT_TYPE_KEY)
        ):
            tree["identityResource"] = self._managed_user_resource()
        tree.pop("_rev", None)
        try:
            result = await self._put_pruning_invalid_attributes(
                lambda body: self._api.put_tree(journey_id, body), tree
            )
        except FrodoError as e:
            msg = f"Error importing journey flow {journey_id}"
            raise FrodoError(msg, e) from e
        debug_message(self._state, f"JourneyOps.import_journey: end {journey_id}")
        return result

    async def import_journeys(
        self, import_data: dict[str, Any], re_uuid: bool = False, deps: bool = True
    ) -> list[dict[str, Any]]:
        """Import every journey in a multi tree export.

        Raises:
            FrodoError: Aggregating every failed journey import.

        """
        trees = MultiTreeExport.model_validate(import_data).trees
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        indicator = create_progress_indicator(
            self._state, len(trees), "Importing journeys..."
        )
        for tree_id, tree_export in trees.items():
            update_progress_indicator(self._state, indicator, f"Importing journey {tree_id}")
            try:
                single = tree_export.model_dump(by_alias=True)
                imported.append(await self.import_journey(single, re_uuid, deps))
            except FrodoError as e:
                errors.append(e)
        if errors:
            stop_progress_indicator(self._state, indicator, "Error importing journeys", "fail")
            msg = "Error importing journeys"
            raise FrodoError(msg, errors)
        stop_progress_indicator(
            self._state, indicator, f"Imported {len(imported)} journeys.", "success"
        )
        return imported

    async def _delete_node(self, node_type: str, node_id: str) -> None:
        try:
            await self._api.delete_node(node_type, node_id)
        except FrodoError as e:
            if not _node_missing(e):
                msg = f"Error deleting node {node_id} ({node_type})"
                raise FrodoError(msg, e) from e

    async def _delete_container_node(self, node_type: str, node_id: str) -> None:
        container = await self._api.get_node(node_type, node_id)
        _, errors = await gather_settled(
            *(
                self._delete_node(inner["nodeType"], inner["_id"])
                for inner in container.get("nodes", [])
            )
        )
        await self._delete_node(node_type, node_id)
        if errors:
            msg = f"Error deleting inner nodes of {node_id} ({node_type})"
            raise FrodoError(msg, errors)

    async def delete_journey(self, journey_id: str, deep: bool = True) -> dict[str, Any]:
        """Delete a journey and, when ``deep``, every node it used.

        Nodes that no longer exist count as deleted.

        Returns:
            Status ``{status, nodes: {node id: {status[, error]}}}``.

        Raises:
            FrodoError: If the tree itself cannot be deleted.

        """
        debug_message(self._state, f"JourneyOps.delete_journey: start {journey_id}")
        try:
            deleted_tree = await self._api.delete_tree(journey_id)
        except FrodoError as e:
            msg = f"Error deleting journey {journey_id}"
            raise FrodoError(msg, e) from e
        status: dict[str, Any] = {"status": "success", "nodes": {}}
        if not deep:
            return status
        node_ids: list[str] = []
        deletes = []
        for node_id, info in (deleted_tree.get("nodes") or {}).items():
            node_type = info["nodeType"]
            node_ids.append(node_id)
            if node_type in CONTAINER_NODES:
                deletes.append(self._delete_container_node(node_type, node_id))
            else:
                deletes.append(self._delete_node(node_type, node_id))
        results = await asyncio.gather(*deletes, return_exceptions=True)
        for node_id, result in zip(node_ids, results):
            if isinstance(result, FrodoError):
                status["nodes"][node_id] = {"status": "error", "error": result}
            elif isinstance(result, BaseException):
                raise result
            else:
                status["nodes"][node_id] = {"status": "success"}
        debug_message(self._state, f"JourneyOps.delete_journey: end {journey_id}")
        return status

    async def delete_journeys(self, deep: bool = True) -> dict[str, dict[str, Any]]:
        """Delete every journey in the realm.

        Returns:
            Status per journey id, as returned by :meth:`delete_journey`.

        """
        statuses: dict[str, dict[str, Any]] = {}
        trees = await self.read_journeys()
        indicator = create_progress_indicator(
            self._state, len(trees), "Deleting journeys..."
        )
        for tree in trees:
            try:
                statuses[tree["_id"]] = await self.delete_journey(tree["_id"], deep)
            except FrodoError as e:
                statuses[tree["_id"]] = {"status": "error", "error": e, "nodes": {}}
            update_progress_indicator(self._state, indicator, tree["_id"])
        failed = sum(1 for status in statuses.values() if status["status"] == "error")
        node_count = sum(len(status["nodes"]) for status in statuses.values())
        node_errors = sum(
            1
            for status in statuses.values()
            for node in status["nodes"].values()
            if node["status"] == "error"
        )
        stop_progress_indicator(
            self._state,
            indicator,
            f"Deleted {len(statuses) - failed}/{len(statuses)} journeys and "
            f"{node_count - node_errors}/{node_count} nodes.",
            "fail" if failed or node_errors else "success",
        )
        return statuses

    async def _set_enabled(self, journey_id: str, enabled: bool) -> bool:
        try:
            tree = await self._api.get_tree(journey_id)
            tree["enabled"] = enabled
            tree.pop("_rev", None)
            result = await self._api.put_tree(journey_id, tree)
        except FrodoError as e:
            action = "enabling" if enabled else "disabling"
            msg = f"Error {action} journey {journey_id}"
            raise FrodoError(msg, e) from e
        return result.get("enabled") is enabled

    async def enable_journey(self, journey_id: str) -> bool:
        """Enable a journey.

        Returns:
            True if the stored journey is enabled.

        """
        return await self._set_enabled(journey_id, True)

    async def disable_journey(self, journey_id: str) -> bool:
        return await self._set_enabled(journey_id, False)
