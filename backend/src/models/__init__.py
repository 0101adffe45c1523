"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.recommendation import Recommendation
from models.user import AdminBootstrap, User

__all__ = ["AdminBootstrap", "Base", "Recommendation", "TimestampMixin", "User"]
