"""Merging of group-level permission maps."""

from __future__ import annotations

import copy
from typing import Any, Iterable, Mapping

from security_groups.domain.aggregates import SecurityGroup
from security_groups.domain.value_objects import MembershipAttributes


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``overlay`` into a copy of ``base``.

    Nested mappings merge key by key. Any other conflict keeps both values:
    they are concatenated into a list, base first.
    """
    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in overlay.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
            continue
        current = merged[key]
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = _as_list(current) + _as_list(copy.deepcopy(value))
    return merged


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else [value]


def group_effective_permissions(
    group: SecurityGroup,
    ancestors: Iterable[SecurityGroup],
    membership: MembershipAttributes | None = None,
) -> dict[str, Any]:
    """Roll up the permission map one group contributes for a user.

    The group's own map wins over inherited keys. Ancestors only fill keys
    still missing, walked root first, so the root wins over intermediate
    ancestors. The member's ``permission_overrides`` win last.
    """
    permissions: dict[str, Any] = dict(group.record_level_permissions)
    if group.inherit_permissions:
        for ancestor in ancestors:
            for key, value in ancestor.record_level_permissions.items():
                permissions.setdefault(key, value)
    if membership is not None and membership.permission_overrides:
        permissions.update(membership.permission_overrides)
    return copy.deepcopy(permissions)
