"""SQLAlchemy ORM model for the security_group_record_access table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class RecordAccessModel(Base):
    """ORM model for security_group_record_access table.

    One row per (group, record). Rows are removed with their group
    (CASCADE). ``field_permissions`` maps a field name to a list of
    allowed operations.
    """

    __tablename__ = "security_group_record_access"
    __table_args__ = (
        Index("ix_security_group_record_access_record", "record_type", "record_id"),
    )

    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("security_groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    record_type: Mapped[str] = mapped_column(String(255), primary_key=True)
    record_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    access_level: Mapped[str] = mapped_column(String(16), nullable=False)
    field_permissions: Mapped[dict[str, list[str]]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    assigned_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<RecordAccessModel(group_id={self.group_id}, "
            f"record={self.record_type}:{self.record_id}, "
            f"access_level={self.access_level})>"
        )
