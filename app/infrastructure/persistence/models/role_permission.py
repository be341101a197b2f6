"""RolePermission ORM model: one permission-key grant on a granular role."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin


class RolePermission(CuidMixin, Base):
    """Grant of permission_key to role_id. Table: role_permission.

    Keys are stored as submitted (after ancestor closure on write); they are
    not foreign keys since the registry lives in code.
    """

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False, index=True
    )
    permission_key: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("role_id", "permission_key", name="uq_role_permission_key"),
    )
