"""SQLAlchemy ORM model for the security_groups table."""

from typing import Any

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class SecurityGroupModel(Base, TimestampMixin):
    """ORM model for security_groups table.

    Foreign Key Constraint:
    - parent_id references security_groups.id with RESTRICT delete
    - Children must be re-parented before their parent row is deleted, so
      the database refuses any delete that would orphan a child
    """

    __tablename__ = "security_groups"
    __table_args__ = (
        Index("ix_security_groups_tenant_id_level", "tenant_id", "level"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("security_groups.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    inherit_permissions: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    mass_assignment_settings: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )
    record_level_permissions: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<SecurityGroupModel(id={self.id}, tenant_id={self.tenant_id}, "
            f"name={self.name}, parent_id={self.parent_id})>"
        )
