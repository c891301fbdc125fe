"""Helpers for reshaping JSON-like structures.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import copy
from typing import Any


def delete_deep_by_key(obj: Any, substring: str) -> Any:
    """Remove, in place, every key containing ``substring`` past its first character."""
    if isinstance(obj, dict):
        for key in list(obj):
            if key.find(substring) > 0:
                del obj[key]
            else:
                delete_deep_by_key(obj[key], substring)
    elif isinstance(obj, list):
        for item in obj:
            delete_deep_by_key(item, substring)
    return obj


def delete_keys_deep(obj: Any, key: str) -> Any:
    """Remove, in place, every occurrence of ``key`` at any depth."""
    if isinstance(obj, dict):
        obj.pop(key, None)
        for value in obj.values():
            delete_keys_deep(value, key)
    elif isinstance(obj, list):
        for item in obj:
            delete_keys_deep(item, key)
    return obj


def merge_deep(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``source`` into ``target`` and return ``target``."""
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            merge_deep(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def clone_deep(obj: Any) -> Any:
    return copy.deepcopy(obj)


def strip_keys(obj: dict[str, Any], *keys: str) -> dict[str, Any]:
    """Return a shallow copy of ``obj`` without ``keys``."""
    return {k: v for k, v in obj.items() if k not in keys}
