"""Pods bucketed by the node they are assigned to.

The index is always rebuilt from a full pod list; there is no incremental
update path, so it can never drift from the last snapshot it was built from.
"""

from __future__ import annotations

from collections.abc import Iterable

from simconsole.models.resources import UNSCHEDULED, Resource


def build_pod_index(pods: Iterable[Resource]) -> dict[str, list[Resource]]:
    """Group *pods* by ``spec.nodeName``.

    Pods with an empty or missing ``nodeName`` go to the ``"unscheduled"``
    bucket, which is always present. Pods without a structured ``spec`` are
    left out of every bucket. Buckets appear in first-seen order and keep the
    input order of their pods.

    Example::

        >>> build_pod_index([{"spec": {"nodeName": "n1"}}, {"spec": {}}])
        {'unscheduled': [{'spec': {}}], 'n1': [{'spec': {'nodeName': 'n1'}}]}
    """
    result: dict[str, list[Resource]] = {UNSCHEDULED: []}
    for pod in pods:
        node_name = _assigned_node(pod)
        if node_name is None:
            continue
        result.setdefault(node_name or UNSCHEDULED, []).append(pod)
    return result


def _assigned_node(pod: Resource) -> str | None:
    """Return the pod's node name, ``""`` when unassigned, or None when it has no spec."""
    spec = pod.get("spec") if isinstance(pod, dict) else None
    if not isinstance(spec, dict):
        return None
    node_name = spec.get("nodeName")
    return node_name if isinstance(node_name, str) else ""
