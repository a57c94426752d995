"""Unit tests for the SecurityGroup aggregate."""

import pytest

from security_groups.domain.aggregates import SecurityGroup
from security_groups.domain.value_objects import (
    AccessLevel,
    MassAssignmentSettings,
    TenantId,
)

TENANT = TenantId(value="tenant-acme")


class TestCreate:
    def test_root_group_has_level_zero(self):
        group = SecurityGroup.create(name="All Staff", tenant_id=TENANT)
        assert group.level == 0
        assert group.parent_id is None
        assert group.is_root

    def test_child_level_derives_from_parent(self):
        parent = SecurityGroup.create(name="All Staff", tenant_id=TENANT)
        child = SecurityGroup.create(name="Sales", tenant_id=TENANT, parent=parent)
        assert child.parent_id == parent.id
        assert child.level == 1

    def test_accepts_mass_assignment_mapping(self):
        group = SecurityGroup.create(
            name="Sales",
            tenant_id=TENANT,
            mass_assignment_settings={
                "auto_assign": True,
                "default_access_level": "write",
            },
        )
        assert isinstance(group.mass_assignment_settings, MassAssignmentSettings)
        assert group.mass_assignment_settings.default_access_level is AccessLevel.WRITE

    @pytest.mark.parametrize("name", ["", "   ", "x" * 256])
    def test_rejects_invalid_name(self, name):
        with pytest.raises(ValueError, match="Group name"):
            SecurityGroup.create(name=name, tenant_id=TENANT)

    def test_rejects_unknown_attribute(self):
        with pytest.raises(ValueError, match="Unknown group attributes"):
            SecurityGroup.create(name="Sales", tenant_id=TENANT, level=3)


class TestApply:
    def test_returns_only_changed_fields(self):
        group = SecurityGroup.create(name="Sales", tenant_id=TENANT)
        changes = group.apply({"name": "Sales", "description": "Field sales"})
        assert changes == {"description": (None, "Field sales")}

    def test_no_change_keeps_updated_at(self):
        group = SecurityGroup.create(name="Sales", tenant_id=TENANT)
        updated_at = group.updated_at
        assert group.apply({"active": True}) == {}
        assert group.updated_at == updated_at

    def test_rejects_non_boolean_flag(self):
        group = SecurityGroup.create(name="Sales", tenant_id=TENANT)
        with pytest.raises(ValueError, match="inherit_permissions must be a boolean"):
            group.apply({"inherit_permissions": "no"})

    def test_mass_assignment_change_is_reported_as_dict(self):
        group = SecurityGroup.create(name="Sales", tenant_id=TENANT)
        changes = group.apply({"mass_assignment_settings": {"auto_assign": True}})
        old, new = changes["mass_assignment_settings"]
        assert old is None
        assert new["auto_assign"] is True


class TestSnapshot:
    def test_snapshot_is_json_compatible(self):
        parent = SecurityGroup.create(name="All Staff", tenant_id=TENANT)
        group = SecurityGroup.create(name="Sales", tenant_id=TENANT, parent=parent)
        snapshot = group.snapshot()
        assert snapshot["parent_id"] == parent.id.value
        assert snapshot["tenant_id"] == "tenant-acme"
        assert snapshot["level"] == 1
