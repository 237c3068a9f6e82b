"""Store the administrator roster, and optionally the sales agents allowed to register, e.g.

    python -m scripts.setup_admins "admin1@company.com,admin2@company.com" --agents "agent1@company.com"
"""
import argparse
from typing import Optional

from app.database import Base, SessionLocal, engine
from app.core.admin_roster import ADMIN_EMAILS_KEY, AGENT_EMAILS_KEY, parse_roster
from app.core.properties import PropertyStore


def setup_admins(emails: str, agents: Optional[str] = None):
    roster = parse_roster(emails)
    if not roster:
        raise SystemExit("No administrator e-mails given")
    agent_roster = parse_roster(agents)
    if agents is not None and not agent_roster:
        raise SystemExit("No sales agent e-mails given")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        properties = PropertyStore(db)
        properties.set(ADMIN_EMAILS_KEY, ",".join(sorted(roster)))
        print(f"Administrators configured: {properties.get(ADMIN_EMAILS_KEY)}")
        if agent_roster:
            properties.set(AGENT_EMAILS_KEY, ",".join(sorted(agent_roster)))
            print(f"Sales agents configured: {properties.get(AGENT_EMAILS_KEY)}")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Store the ADMIN_EMAILS and AGENT_EMAILS rosters")
    parser.add_argument("emails", help="comma-separated list, e.g. admin1@company.com,admin2@company.com")
    parser.add_argument("--agents", help="comma-separated sales agents allowed to register")
    args = parser.parse_args()
    setup_admins(args.emails, args.agents)
