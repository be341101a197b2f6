"""Role ORM model. Granular roles (system and admin-defined) with slug identity."""

from sqlalchemy import Boolean, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IdentifiedModel


class Role(IdentifiedModel, Base):
    """Role. Table: role. Unique name and unique slug."""

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("name", name="uq_role_name"),
        UniqueConstraint("slug", name="uq_role_slug"),
    )
