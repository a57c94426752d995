"""SQLAlchemy ORM model for the security_group_audit_logs table."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class AuditLogModel(Base):
    """ORM model for security_group_audit_logs table (append-only).

    ``group_id`` carries no foreign key; entries of deleted groups are kept.
    """

    __tablename__ = "security_group_audit_logs"
    __table_args__ = (
        Index(
            "ix_security_group_audit_logs_tenant_occurred",
            "tenant_id",
            "occurred_at",
        ),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False)
    group_id: Mapped[str | None] = mapped_column(String(26), nullable=True, index=True)
    actor_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    target_type: Mapped[str] = mapped_column(String(64), nullable=False)
    target_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
    before: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    after: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<AuditLogModel(id={self.id}, action={self.action}, "
            f"target_id={self.target_id})>"
        )
