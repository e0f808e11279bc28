"""ORM model for principals (administrators and staff members)."""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, func

from storefront.models.base import Base


class User(Base):
    """
    Principal that can authenticate: an administrator or a staff member.

    role: 'admin' or 'staff'. staff_id links a staff principal to its staff
    business record and is only set for role 'staff'. username and created_at
    never change after creation.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'staff')", name="role_valid"),
        CheckConstraint("role = 'staff' OR staff_id IS NULL", name="staff_id_only_for_staff"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False)
    staff_id = Column(Integer, nullable=True, index=True)
    name = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role!r}>"
