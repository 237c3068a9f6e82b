"""Error taxonomy for the maintenance gate"""

from datetime import datetime, timezone
from typing import Optional


class MaintenanceError(Exception):
    """Base class for maintenance gate errors"""


class MaintenanceValidationError(MaintenanceError, ValueError):
    """Configuration rejected on write; nothing was persisted"""


class MaintenancePermissionError(MaintenanceError, PermissionError):
    """Non-admin attempted to change the maintenance configuration"""


class StoreUnavailable(MaintenanceError):
    """Durable store could not be read or written"""


class MaintenanceDenied(MaintenanceError):
    """An operation was blocked by the active maintenance gate"""

    def __init__(self, message: str, until: Optional[datetime] = None):
        self.message = message
        self.until = until
        super().__init__(self.detail)

    @property
    def detail(self) -> str:
        if self.until is None:
            return self.message
        return f"{self.message} (until {format_until(self.until)})"


def format_until(until: datetime) -> str:
    if until.tzinfo is None:
        until = until.replace(tzinfo=timezone.utc)
    return until.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
