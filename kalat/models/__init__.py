"""SQLAlchemy ORM models."""

from kalat.models.account import Account
from kalat.models.base import Base
from kalat.models.fragment import Fragment
from kalat.models.location import Location

__all__ = ["Account", "Base", "Fragment", "Location"]
