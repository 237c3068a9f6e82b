from fastapi import Depends
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from .database import get_db
from .core.admin_roster import AdminRoster
from .core.audit import AuditSink
from .core.maintenance_gate import MaintenanceGate
from .core.maintenance_state import MaintenanceStore
from .core.properties import PropertyStore
from .core.security import get_current_active_user
from .schemas import OperationKind
from . import models

#single instance: route decorators register on it and main.py installs it as app.state.limiter
limiter = Limiter(key_func=get_remote_address)


def build_maintenance_gate(db: Session) -> MaintenanceGate:
    properties = PropertyStore(db)
    return MaintenanceGate(
        store=MaintenanceStore(properties),
        roster=AdminRoster(properties),
        audit=AuditSink(db),
    )


def get_maintenance_gate(db: Session = Depends(get_db)) -> MaintenanceGate:
    return build_maintenance_gate(db)


def require_operation(kind: OperationKind):
    """Dependency that authenticates the caller and runs the maintenance gate"""

    def guard(
        current_user: models.User = Depends(get_current_active_user),
        gate: MaintenanceGate = Depends(get_maintenance_gate),
    ) -> models.User:
        gate.assert_operation_allowed(current_user.email, kind)
        return current_user

    return guard


allow_read = require_operation(OperationKind.READ)
allow_write = require_operation(OperationKind.WRITE)
