"""SQLAlchemy ORM models."""

from storefront.models.base import Base
from storefront.models.user import User

__all__ = ["Base", "User"]
