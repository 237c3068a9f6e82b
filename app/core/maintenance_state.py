"""Maintenance configuration persistence with a write-through read cache"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from app.schemas import MaintenanceConfig
from .cache import TTLCache, maintenance_cache
from .config import settings
from .exceptions import MaintenanceValidationError, StoreUnavailable

logger = logging.getLogger(__name__)

MAINTENANCE_PROPERTY_KEY = "MAINTENANCE_STATUS"
MAINTENANCE_CACHE_KEY = "maintenance_status_cache"


def default_config(**overrides) -> MaintenanceConfig:
    """Configuration used when nothing valid is stored"""
    values = {"allow_admins": settings.MAINTENANCE_ALLOW_ADMINS}
    values.update(overrides)
    return MaintenanceConfig(**values)


def validation_reason(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err.get("loc", ())) or "config"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid maintenance configuration"


class MaintenanceStore:
    """Reads and writes the single MaintenanceConfig record.

    Reads are served from the cache for up to ``ttl`` seconds. Writes go to
    the durable store first and then replace the cache entry, so the next
    read in this process sees the new value.
    """

    def __init__(self, properties, cache: Optional[TTLCache] = None, ttl: Optional[int] = None):
        self.properties = properties
        self.cache = maintenance_cache if cache is None else cache
        self.ttl = settings.MAINTENANCE_CACHE_TTL if ttl is None else ttl

    def read(self) -> MaintenanceConfig:
        cached = self.cache.get(MAINTENANCE_CACHE_KEY)
        if cached is not None:
            config = self._parse(cached)
            if config is not None:
                return config
            self.invalidate()

        try:
            raw = self.properties.get(MAINTENANCE_PROPERTY_KEY)
        except StoreUnavailable as e:
            logger.error(f"Maintenance status unavailable, assuming defaults: {e}")
            return default_config()

        config = self._parse(raw) if raw else None
        if config is None:
            config = default_config()
        self.cache.put(MAINTENANCE_CACHE_KEY, config.to_json(), self.ttl)
        return config

    def write(self, config) -> MaintenanceConfig:
        #re-validate models too: model_copy(update=...) skips validation
        if isinstance(config, MaintenanceConfig):
            config = config.model_dump()
        try:
            config = MaintenanceConfig.model_validate(config)
        except ValidationError as e:
            raise MaintenanceValidationError(validation_reason(e)) from e

        payload = config.to_json()
        self.properties.set(MAINTENANCE_PROPERTY_KEY, payload)
        self.cache.put(MAINTENANCE_CACHE_KEY, payload, self.ttl)
        return config

    def invalidate(self) -> None:
        self.cache.delete(MAINTENANCE_CACHE_KEY)

    def _parse(self, raw: str) -> Optional[MaintenanceConfig]:
        try:
            stored = json.loads(raw)
            if not isinstance(stored, dict):
                raise ValueError("stored maintenance status is not an object")
            values = default_config().model_dump(by_alias=True)
            values.update({k: v for k, v in stored.items() if v is not None or k in ("until", "updatedBy")})
            return MaintenanceConfig.model_validate(values)
        except ValueError as e:
            logger.error(f"Discarding unreadable maintenance status: {e}")
            return None
