from dataclasses import dataclass

from src.catalog.core.services import DbSessionService, StartupReport


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    startup_report: StartupReport | None = None
