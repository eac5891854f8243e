"""Core services exports."""

from .database.db_manage import DbManageService, StartupReport
from .database.db_session import DbSessionService

__all__ = [
    "DbManageService",
    "DbSessionService",
    "StartupReport",
]
