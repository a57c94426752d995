"""In-memory arena of a tenant's security groups.

The hierarchy is a forest: each group points at an optional parent, and
ancestor/descendant queries are explicit iterative walks over the arena.
Levels are derived from the parent chain and recomputed whenever a group
moves.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Iterable

from security_groups.domain.aggregates import SecurityGroup
from security_groups.domain.value_objects import GroupId
from security_groups.ports.exceptions import HierarchyConsistencyError


@dataclass(frozen=True)
class HierarchyNode:
    """Read-only view of one group's position in the forest."""

    group_id: str
    name: str
    parent_id: str | None
    level: int
    inherit_permissions: bool
    sort_order: int
    child_ids: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "group_id": self.group_id,
            "name": self.name,
            "parent_id": self.parent_id,
            "level": self.level,
            "inherit_permissions": self.inherit_permissions,
            "sort_order": self.sort_order,
            "child_ids": list(self.child_ids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HierarchyNode:
        return cls(
            group_id=data["group_id"],
            name=data["name"],
            parent_id=data["parent_id"],
            level=data["level"],
            inherit_permissions=data["inherit_permissions"],
            sort_order=data["sort_order"],
            child_ids=tuple(data["child_ids"]),
        )


class GroupHierarchy:
    """Forest of security groups for a single tenant, keyed by group id."""

    def __init__(self, groups: Iterable[SecurityGroup] = ()) -> None:
        self._groups: dict[str, SecurityGroup] = {}
        for group in groups:
            self._groups[group.id.value] = group

    def __contains__(self, group_id: object) -> bool:
        if isinstance(group_id, GroupId):
            group_id = group_id.value
        return group_id in self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self):
        return iter(self._groups.values())

    def get(self, group_id: GroupId | str) -> SecurityGroup | None:
        """Return the group with ``group_id`` or None."""
        key = group_id.value if isinstance(group_id, GroupId) else group_id
        return self._groups.get(key)

    def add(self, group: SecurityGroup) -> None:
        """Insert or replace a group in the arena."""
        self._groups[group.id.value] = group

    def remove(self, group_id: GroupId) -> None:
        """Drop a group from the arena."""
        self._groups.pop(group_id.value, None)

    def children(self, group_id: GroupId) -> list[SecurityGroup]:
        """Return direct children ordered by sort order then name."""
        children = [
            g
            for g in self._groups.values()
            if g.parent_id is not None and g.parent_id.value == group_id.value
        ]
        return sorted(children, key=lambda g: (g.sort_order, g.name))

    def ancestors(self, group_id: GroupId) -> list[SecurityGroup]:
        """Return the ancestor chain ordered root first.

        Raises:
            HierarchyConsistencyError: If the chain references a missing
                group or loops back on itself
        """
        group = self._require(group_id)
        chain: list[SecurityGroup] = []
        seen = {group.id.value}
        parent_id = group.parent_id
        while parent_id is not None:
            if parent_id.value in seen:
                raise HierarchyConsistencyError(
                    f"Cycle detected in ancestors of group {group_id.value}"
                )
            parent = self._groups.get(parent_id.value)
            if parent is None:
                raise HierarchyConsistencyError(
                    f"Group {group_id.value} references missing ancestor "
                    f"{parent_id.value}"
                )
            seen.add(parent_id.value)
            chain.append(parent)
            parent_id = parent.parent_id
        chain.reverse()
        return chain

    def descendants(self, group_id: GroupId) -> list[SecurityGroup]:
        """Return every group below ``group_id``, breadth first."""
        self._require(group_id)
        result: list[SecurityGroup] = []
        seen = {group_id.value}
        queue = deque([group_id])
        while queue:
            current = queue.popleft()
            for child in self.children(current):
                if child.id.value in seen:
                    continue
                seen.add(child.id.value)
                result.append(child)
                queue.append(child.id)
        return result

    def validate_hierarchy(
        self, group_id: GroupId, candidate_parent_id: GroupId | None
    ) -> bool:
        """Check whether ``candidate_parent_id`` is an acceptable parent.

        Root (None) is always valid. A group cannot be its own parent, and
        cannot be moved under one of its own descendants. Never raises and
        never mutates.
        """
        if candidate_parent_id is None:
            return True
        if candidate_parent_id.value == group_id.value:
            return False
        if group_id.value not in self._groups:
            return True
        descendant_ids = {g.id.value for g in self.descendants(group_id)}
        return candidate_parent_id.value not in descendant_ids

    def move(
        self, group_id: GroupId, new_parent_id: GroupId | None
    ) -> list[SecurityGroup]:
        """Reparent a group and relevel its subtree.

        Callers must have validated the move first.

        Returns:
            The moved group followed by every descendant whose level changed
        """
        group = self._require(group_id)
        parent = self._require(new_parent_id) if new_parent_id else None
        old_level = group.level
        group.move_under(parent)
        changed = [group]
        if group.level != old_level:
            changed.extend(self._relevel_below(group))
        return changed

    def detach(self, group_id: GroupId) -> list[SecurityGroup]:
        """Remove a group, attaching its direct children to its parent.

        The tree stays connected: children of a root group become roots,
        children of any other group move up to the grandparent.

        Returns:
            Every group that was re-parented or relevelled
        """
        group = self._require(group_id)
        grandparent = self._groups.get(group.parent_id.value) if group.parent_id else None
        touched: list[SecurityGroup] = []
        for child in self.children(group_id):
            child.move_under(grandparent)
            touched.append(child)
            touched.extend(self._relevel_below(child))
        self.remove(group_id)
        return touched

    def forest(self, active_only: bool = True) -> list[HierarchyNode]:
        """Return the hierarchy as nodes ordered by level, then name."""
        groups = [g for g in self._groups.values() if g.active or not active_only]
        visible = {g.id.value for g in groups}
        nodes = []
        for group in sorted(groups, key=lambda g: (g.level, g.name)):
            nodes.append(
                HierarchyNode(
                    group_id=group.id.value,
                    name=group.name,
                    parent_id=group.parent_id.value if group.parent_id else None,
                    level=group.level,
                    inherit_permissions=group.inherit_permissions,
                    sort_order=group.sort_order,
                    child_ids=tuple(
                        c.id.value
                        for c in self.children(group.id)
                        if c.id.value in visible
                    ),
                )
            )
        return nodes

    def _relevel_below(self, group: SecurityGroup) -> list[SecurityGroup]:
        changed = []
        for descendant in self.descendants(group.id):
            parent = self._groups[descendant.parent_id.value]
            level = parent.level + 1
            if descendant.level != level:
                descendant.level = level
                changed.append(descendant)
        return changed

    def _require(self, group_id: GroupId) -> SecurityGroup:
        group = self._groups.get(group_id.value)
        if group is None:
            raise KeyError(group_id.value)
        return group
