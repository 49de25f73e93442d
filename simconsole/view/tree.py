"""Convert resource objects into tree-widget nodes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

TreeNode = dict[str, Any]


def object_to_tree_view_data(obj: Mapping[str, Any] | list[Any] | None) -> list[TreeNode]:
    """Return ``{"id", "name", "children"}`` nodes for every key of *obj*.

    Mappings and lists become branches (list entries are keyed by index).
    A ``None`` value becomes a branch without children. Scalars become
    leaves named ``"key: value"``.
    """
    if obj is None:
        return []

    entries = obj.items() if isinstance(obj, Mapping) else enumerate(obj)
    data: list[TreeNode] = []
    for key, value in entries:
        key_str = str(key)
        if value is None or isinstance(value, Mapping | list):
            data.append({"id": key_str, "name": key_str, "children": object_to_tree_view_data(value)})
        else:
            data.append({"id": key_str, "name": f"{key_str}: {_scalar(value)}"})
    return data


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
