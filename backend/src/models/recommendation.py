"""Recommendation model."""
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.user import User


class Recommendation(Base, TimestampMixin):
    """A titled, genre-tagged recommendation posted to the shared feed."""

    __tablename__ = "recommendations"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    genre: Mapped[str] = mapped_column(String(50), index=True)
    link: Mapped[str] = mapped_column(String(2048), default="")
    blurb: Mapped[str] = mapped_column(Text, default="")
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"),
        index=True,
    )
    # Copied from User.name at creation; users are immutable so this never drifts
    author_name: Mapped[str] = mapped_column(Text)
    is_staff_pick: Mapped[bool] = mapped_column(Boolean, default=False)

    user: Mapped["User"] = relationship(back_populates="recommendations")
