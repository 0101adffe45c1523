"""User model for storing authenticated users."""
from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.recommendation import Recommendation


class User(Base, TimestampMixin):
    """User model - provisioned lazily from the identity provider's claims."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        comment="'sub' claim - unique identifier from the identity provider",
    )
    # Display claims are stored as given; the provider sets no length limit on them
    name: Mapped[str] = mapped_column(Text)
    email: Mapped[str] = mapped_column(Text, default="")
    role: Mapped[str] = mapped_column(String(16), comment="'admin' or 'user', never changed")

    recommendations: Mapped[list["Recommendation"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class AdminBootstrap(Base, TimestampMixin):
    """
    Single-row marker claimed by the first user ever provisioned.

    The fixed primary key turns "is there an admin yet?" into an INSERT that only one
    transaction can win (see services/user_service.py).
    """

    __tablename__ = "admin_bootstrap"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    user_id: Mapped[str] = mapped_column(String(255))
