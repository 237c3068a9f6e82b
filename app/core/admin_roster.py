"""E-mail rosters kept in the property store: administrators and sales agents"""

import logging
from typing import FrozenSet, Optional

from .config import settings

logger = logging.getLogger(__name__)

ADMIN_EMAILS_KEY = "ADMIN_EMAILS"
AGENT_EMAILS_KEY = "AGENT_EMAILS"


def normalize_email(identity: Optional[str]) -> str:
    return (identity or "").strip().lower()


def parse_roster(raw: Optional[str]) -> FrozenSet[str]:
    if not raw:
        return frozenset()
    return frozenset(e for e in (normalize_email(part) for part in raw.split(",")) if e)


class EmailRoster:
    """Reads a comma-separated roster from the property store.

    Falls back to a setting when no property is stored. Any failure yields
    an empty roster so nobody is a member.
    """

    key = ""

    def __init__(self, properties, fallback: Optional[str] = None):
        self.properties = properties
        self.fallback = self.default_fallback() if fallback is None else fallback

    def default_fallback(self) -> str:
        return ""

    def emails(self) -> FrozenSet[str]:
        try:
            raw = self.properties.get(self.key)
        except Exception as e:
            logger.error(f"Could not read {self.key}: {e}")
            return frozenset()

        if raw is None:
            raw = self.fallback
        roster = parse_roster(raw)
        if not roster:
            logger.error(f"{self.key} is not configured; roster is empty")
        return roster

    def contains(self, identity: Optional[str]) -> bool:
        email = normalize_email(identity)
        if not email:
            return False
        return email in self.emails()


class AdminRoster(EmailRoster):
    """Administrators allowed to change maintenance mode"""

    key = ADMIN_EMAILS_KEY

    def default_fallback(self) -> str:
        return settings.ADMIN_EMAILS


class AgentRoster(EmailRoster):
    """Sales agents allowed to register an account"""

    key = AGENT_EMAILS_KEY

    def default_fallback(self) -> str:
        return settings.AGENT_EMAILS
