"""Durable key-value properties backed by the script_properties table"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import models
from .exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


class PropertyStore:
    """String key => string value store, one row per key"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        try:
            prop = self.db.get(models.ScriptProperty, key)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read property '{key}': {e}")
            raise StoreUnavailable(f"Could not read property '{key}'") from e
        return prop.value if prop else None

    def set(self, key: str, value: str) -> None:
        try:
            prop = self.db.get(models.ScriptProperty, key)
            if prop is None:
                self.db.add(models.ScriptProperty(key=key, value=value))
            else:
                prop.value = value
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to write property '{key}': {e}")
            raise StoreUnavailable(f"Could not write property '{key}'") from e
