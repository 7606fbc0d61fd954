"""Core app configuration, database, security and error taxonomy."""

from gatekeeper.core.config import get_settings, settings
from gatekeeper.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
