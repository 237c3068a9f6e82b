"""Maintenance gate: decides whether an identity may log in, read or write"""

import logging
from datetime import datetime, timezone
from typing import Optional

from app.schemas import (
    MaintenanceConfig,
    MaintenanceMode,
    OperationKind,
    DEFAULT_MAINTENANCE_MESSAGE,
    READ_ONLY_MESSAGE,
)
from .admin_roster import AdminRoster, normalize_email
from .audit import AuditSink
from .exceptions import MaintenanceDenied, MaintenancePermissionError, MaintenanceValidationError
from .maintenance_state import MaintenanceStore, default_config

logger = logging.getLogger(__name__)

#server-stamped, never taken from a partial config
AUDIT_FIELDS = ("updated_at", "updated_by")


def normalize_partial(partial: Optional[dict]) -> dict:
    """Map camelCase keys to field names and drop audit fields"""
    if partial is None:
        return {}
    if not isinstance(partial, dict):
        raise MaintenanceValidationError("Maintenance configuration must be an object")

    aliases = {f.alias: name for name, f in MaintenanceConfig.model_fields.items() if f.alias}
    normalized = {}
    for key, value in partial.items():
        name = aliases.get(key, key)
        if name not in MaintenanceConfig.model_fields:
            raise MaintenanceValidationError(f"{key}: unknown maintenance setting")
        if name in AUDIT_FIELDS:
            continue
        normalized[name] = value
    return normalized


class MaintenanceGate:
    def __init__(self, store: MaintenanceStore, roster: AdminRoster, audit: Optional[AuditSink] = None):
        self.store = store
        self.roster = roster
        self.audit = audit or AuditSink()

    # ---------- queries ----------

    def get_status(self) -> MaintenanceConfig:
        """Current configuration; the default one if anything goes wrong"""
        try:
            return self.store.read()
        except Exception as e:
            logger.error(f"Error reading maintenance status: {e}")
            return default_config()

    def is_admin(self, identity: Optional[str]) -> bool:
        try:
            return self.roster.contains(identity)
        except Exception as e:
            logger.error(f"Error checking admin permissions for {identity}: {e}")
            return False

    def can_bypass(self, identity: Optional[str], status: Optional[MaintenanceConfig] = None) -> bool:
        status = status or self.get_status()
        if not status.enabled:
            return True
        return status.allow_admins and self.is_admin(identity)

    def assert_operation_allowed(self, identity: Optional[str], kind: OperationKind) -> None:
        """Raise MaintenanceDenied if ``identity`` may not perform ``kind`` right now"""
        kind = OperationKind(kind)
        status = self.get_status()

        if not status.enabled:
            return

        if self.can_bypass(identity, status):
            self.audit.record(identity, "INFO", "maintenance.bypass", f"{kind.value} allowed during {status.mode.value} maintenance")
            return

        if kind == OperationKind.LOGIN or status.mode == MaintenanceMode.FULL:
            self._deny(identity, kind, MaintenanceDenied(status.message, status.until))

        if status.mode == MaintenanceMode.READ_ONLY and kind == OperationKind.WRITE:
            self._deny(identity, kind, MaintenanceDenied(READ_ONLY_MESSAGE, status.until))

    # ---------- admin mutations ----------

    def enable(self, partial: Optional[dict], identity: str) -> MaintenanceConfig:
        self._require_admin(identity, "enable")
        values = {
            "mode": MaintenanceMode.FULL,
            "message": DEFAULT_MAINTENANCE_MESSAGE,
            "until": None,
        }
        values.update(normalize_partial(partial))
        values["enabled"] = True
        config = self._save(default_config().model_dump(), values, identity)
        logger.warning(f"Maintenance mode enabled by {identity} ({config.mode.value})")
        self.audit.record(identity, "WARNING", "maintenance.enable", config.to_json())
        return config

    def disable(self, identity: str) -> MaintenanceConfig:
        self._require_admin(identity, "disable")
        current = self.get_status().model_dump()
        config = self._save(current, {"enabled": False}, identity)
        logger.warning(f"Maintenance mode disabled by {identity}")
        self.audit.record(identity, "WARNING", "maintenance.disable", config.to_json())
        return config

    def update_status(self, partial: Optional[dict], identity: str) -> MaintenanceConfig:
        self._require_admin(identity, "update")
        current = self.get_status().model_dump()
        config = self._save(current, normalize_partial(partial), identity)
        logger.info(f"Maintenance status updated by {identity}")
        self.audit.record(identity, "INFO", "maintenance.update", config.to_json())
        return config

    # ---------- helpers ----------

    def _require_admin(self, identity: Optional[str], action: str) -> None:
        if self.is_admin(identity):
            return
        logger.warning(f"Non-admin {identity or 'anonymous'} tried to {action} maintenance mode")
        self.audit.record(identity, "ERROR", f"maintenance.{action}.denied", "Not an administrator")
        raise MaintenancePermissionError(f"You do not have permission to {action} maintenance mode.")

    def _save(self, base: dict, changes: dict, identity: str) -> MaintenanceConfig:
        values = {**base, **changes}
        values["updated_at"] = datetime.now(timezone.utc)
        values["updated_by"] = normalize_email(identity)
        return self.store.write(values)

    def _deny(self, identity: Optional[str], kind: OperationKind, denial: MaintenanceDenied) -> None:
        self.audit.record(identity, "WARNING", "maintenance.denied", f"{kind.value}: {denial.detail}")
        raise denial
