"""Staff accounts: who logs in, what they may do, and which assets they hold."""
import enum
from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class UserRole(str, enum.Enum):
    """SUPER_ADMIN voids sales and manages accounts, ADMIN runs stock operations, EMPLOYEE reads."""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


class User(Base):
    """A staff member.

    Users approve sales, borrowings, assignments and repairs, and are the
    assignees of company assets. Inactive users cannot log in or receive
    assets, but stay on record for the transactions they took part in.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=True)
    role = Column(Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    asset_assignments = relationship(
        "AssetAssignment", foreign_keys="AssetAssignment.assignee_id", back_populates="assignee"
    )

    @property
    def display_name(self) -> str:
        return self.full_name or self.username
