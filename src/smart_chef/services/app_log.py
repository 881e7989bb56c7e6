"""Application log collaborator."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Protocol

_logger = logging.getLogger(__name__)


class LogLevel(StrEnum):
    """Levels accepted by the application log."""

    INFORMATION = "Information"
    WARNING = "Warning"
    ERROR = "Error"


_PYTHON_LEVELS = {
    LogLevel.INFORMATION: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class AppLogRepository(Protocol):
    """Persistence interface for application log entries."""

    def create_entry(self, level: str, message: str, created_at: datetime) -> None:
        """Store a log entry."""


@dataclass
class AppLogService:
    """Fire-and-forget application log that never raises."""

    repository: AppLogRepository

    def log(self, level: LogLevel, message: str) -> None:
        """Record a log entry, swallowing persistence failures."""
        _logger.log(_PYTHON_LEVELS[level], message)
        try:
            self.repository.create_entry(
                level=level.value,
                message=message,
                created_at=datetime.now(tz=UTC),
            )
        except Exception:
            _logger.debug("Failed to persist log entry: %s", message, exc_info=True)

    def information(self, message: str) -> None:
        """Record an informational entry."""
        self.log(LogLevel.INFORMATION, message)

    def warning(self, message: str) -> None:
        """Record a warning entry."""
        self.log(LogLevel.WARNING, message)

    def error(self, message: str) -> None:
        """Record an error entry."""
        self.log(LogLevel.ERROR, message)
