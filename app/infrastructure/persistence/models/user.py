"""User ORM model: identity plus both role assignments (legacy enum and granular role)."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import LegacyRole
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IdentifiedModel


class User(IdentifiedModel, Base):
    """User model. Table: app_user. Unique email.

    role holds the legacy role name (LegacyRole value); role_id, when set,
    points at a granular role and takes precedence for permission resolution.
    """

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=LegacyRole.VIEWER.value,
        server_default=LegacyRole.VIEWER.value,
        index=True,
    )
    role_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("role.id", ondelete="SET NULL"), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_app_user_email"),
        CheckConstraint(
            "role IN ("
            + ",".join(f"'{value}'" for value in LegacyRole.values())
            + ")",
            name="ck_app_user_role",
        ),
    )
