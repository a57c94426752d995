"""SQLAlchemy ORM model for the security_group_memberships table."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class GroupMembershipModel(Base):
    """ORM model for security_group_memberships table.

    The (group_id, user_id) primary key guarantees at most one membership
    per pair. Rows are removed with their group (CASCADE).
    """

    __tablename__ = "security_group_memberships"

    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("security_groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), primary_key=True, index=True)
    attributes: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    added_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GroupMembershipModel(group_id={self.group_id}, user_id={self.user_id})>"
        )
