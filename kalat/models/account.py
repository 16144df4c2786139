"""ORM model for archive accounts (auth and RBAC)."""

import uuid

from sqlalchemy import CheckConstraint, Column, String, Uuid

from kalat.models.base import Base


class Account(Base):
    """
    Login account for JWT sessions and role-based access control.

    role: 'admin' or 'user'. Rows are created at provisioning time and never
    updated or deleted.
    """

    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("role in ('admin', 'user')", name="role"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
