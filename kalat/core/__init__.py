"""Core app configuration, database, security and access control."""

from kalat.core.config import get_settings, settings
from kalat.core.database import get_db

__all__ = ["get_settings", "get_db", "settings"]
