"""Core app configuration and database."""

from tracker.core.config import get_settings, settings
from tracker.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
