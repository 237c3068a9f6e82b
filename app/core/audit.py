"""Write-only audit trail: audit_logs table mirrored to the app.audit logger"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud

logger = logging.getLogger("app.audit")


class AuditSink:
    def __init__(self, db: Optional[Session] = None):
        self.db = db

    def record(self, actor: Optional[str], level: str, action: str, details: str = None) -> None:
        logger.log(logging.getLevelName(level), f"[{action}] {actor or 'system'}: {details or ''}")
        if self.db is None:
            return
        try:
            crud.create_audit_log(self.db, action=action, actor=actor, level=level, details=details)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Could not persist audit entry '{action}': {e}")
