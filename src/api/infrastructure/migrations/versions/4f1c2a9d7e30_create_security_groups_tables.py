"""create security groups tables

Create the group hierarchy, membership, record access and audit log
tables.

Revision ID: 4f1c2a9d7e30
Revises:
Create Date: 2026-10-12 09:41:17.204518

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "4f1c2a9d7e30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "security_groups",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("tenant_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("parent_id", sa.String(length=26), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("inherit_permissions", sa.Boolean(), nullable=False),
        sa.Column("mass_assignment_settings", postgresql.JSON(), nullable=True),
        sa.Column("record_level_permissions", postgresql.JSON(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["parent_id"],
            ["security_groups.id"],
            name="fk_security_groups_parent_id_security_groups",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_security_groups"),
    )
    op.create_index(
        "ix_security_groups_tenant_id", "security_groups", ["tenant_id"], unique=False
    )
    op.create_index(
        "ix_security_groups_parent_id", "security_groups", ["parent_id"], unique=False
    )
    op.create_index(
        "ix_security_groups_tenant_id_level",
        "security_groups",
        ["tenant_id", "level"],
        unique=False,
    )

    op.create_table(
        "security_group_memberships",
        sa.Column("group_id", sa.String(length=26), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("attributes", postgresql.JSON(), nullable=False),
        sa.Column("added_by", sa.String(length=255), nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["security_groups.id"],
            name="fk_security_group_memberships_group_id_security_groups",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "group_id", "user_id", name="pk_security_group_memberships"
        ),
    )
    op.create_index(
        "ix_security_group_memberships_user_id",
        "security_group_memberships",
        ["user_id"],
        unique=False,
    )

    op.create_table(
        "security_group_record_access",
        sa.Column("group_id", sa.String(length=26), nullable=False),
        sa.Column("record_type", sa.String(length=255), nullable=False),
        sa.Column("record_id", sa.String(length=255), nullable=False),
        sa.Column("access_level", sa.String(length=16), nullable=False),
        sa.Column("field_permissions", postgresql.JSON(), nullable=False),
        sa.Column("assigned_by", sa.String(length=255), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["security_groups.id"],
            name="fk_security_group_record_access_group_id_security_groups",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "group_id",
            "record_type",
            "record_id",
            name="pk_security_group_record_access",
        ),
    )
    # Access checks look grants up by record first
    op.create_index(
        "ix_security_group_record_access_record",
        "security_group_record_access",
        ["record_type", "record_id"],
        unique=False,
    )

    op.create_table(
        "security_group_audit_logs",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("tenant_id", sa.String(length=255), nullable=False),
        sa.Column("group_id", sa.String(length=26), nullable=True),
        sa.Column("actor_id", sa.String(length=255), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("target_type", sa.String(length=64), nullable=False),
        sa.Column("target_id", sa.String(length=512), nullable=True),
        sa.Column("before", postgresql.JSON(), nullable=False),
        sa.Column("after", postgresql.JSON(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_security_group_audit_logs"),
    )
    op.create_index(
        "ix_security_group_audit_logs_group_id",
        "security_group_audit_logs",
        ["group_id"],
        unique=False,
    )
    op.create_index(
        "ix_security_group_audit_logs_tenant_occurred",
        "security_group_audit_logs",
        ["tenant_id", "occurred_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(
        "ix_security_group_audit_logs_tenant_occurred",
        table_name="security_group_audit_logs",
    )
    op.drop_index(
        "ix_security_group_audit_logs_group_id",
        table_name="security_group_audit_logs",
    )
    op.drop_table("security_group_audit_logs")

    op.drop_index(
        "ix_security_group_record_access_record",
        table_name="security_group_record_access",
    )
    op.drop_table("security_group_record_access")

    op.drop_index(
        "ix_security_group_memberships_user_id",
        table_name="security_group_memberships",
    )
    op.drop_table("security_group_memberships")

    op.drop_index("ix_security_groups_tenant_id_level", table_name="security_groups")
    op.drop_index("ix_security_groups_parent_id", table_name="security_groups")
    op.drop_index("ix_security_groups_tenant_id", table_name="security_groups")
    op.drop_table("security_groups")
