"""
Sample Data Generator for SmartKollect
Populates the database with demo agents and debtor accounts for testing the
allocation screens. Everything created here is flagged is_sample=1.
"""

import logging

from smartkollect.database import SessionLocal, AccountDB, AgentDB, create_tables

logger = logging.getLogger(__name__)

SAMPLE_AGENTS = [
    {"id": "00000000-0000-0000-0000-00000000a001", "full_name": "Thandi Mokoena", "email": "thandi@example.com"},
    {"id": "00000000-0000-0000-0000-00000000a002", "full_name": "Pieter van Wyk", "email": "pieter@example.com"},
    {"id": "00000000-0000-0000-0000-00000000a003", "full_name": "Aisha Patel", "email": "aisha@example.com"},
]

# Account numbers deliberately mix padding, case and punctuation, the way
# client exports do
SAMPLE_ACCOUNTS = [
    {"acc_number": "0001045521", "name": "Sipho", "surname_company_trust": "Dlamini", "outstanding_balance": 12450.00, "acc_status": "overdue"},
    {"acc_number": "ACC-20931", "name": "Lerato", "surname_company_trust": "Nkosi", "outstanding_balance": 3120.50, "acc_status": "current"},
    {"acc_number": "77810342", "name": None, "surname_company_trust": "Acme Logistics Pty Ltd", "outstanding_balance": 56700.00, "acc_status": "overdue"},
    {"acc_number": "sk/5520-19", "name": "Johan", "surname_company_trust": "Botha", "outstanding_balance": 7800.00, "acc_status": "current"},
    {"acc_number": "000903", "name": "Naledi", "surname_company_trust": "Khumalo", "outstanding_balance": 980.75, "acc_status": "overdue"},
    {"acc_number": "Z4410087", "name": "Grace", "surname_company_trust": "Mahlangu", "outstanding_balance": 15200.00, "acc_status": "current"},
]


def add_sample_data(db=None):
    owns_session = db is None
    if owns_session:
        create_tables()
        db = SessionLocal()
    logger.info("[SAMPLE DATA] Adding sample agents and accounts")

    try:
        added_agents = 0
        for agent_data in SAMPLE_AGENTS:
            if db.query(AgentDB).filter(AgentDB.id == agent_data["id"]).first():
                logger.debug(f"  [SKIP] {agent_data['full_name']} (already exists)")
                continue
            db.add(AgentDB(**agent_data, role="agent", is_sample=1))
            added_agents += 1

        added_accounts = 0
        for account_data in SAMPLE_ACCOUNTS:
            existing = db.query(AccountDB).filter(AccountDB.acc_number == account_data["acc_number"]).first()
            if existing:
                logger.debug(f"  [SKIP] {account_data['acc_number']} (already exists)")
                continue
            db.add(AccountDB(**account_data, is_sample=1))
            added_accounts += 1

        db.commit()
        logger.info(f"[SAMPLE DATA] Added {added_agents} agents and {added_accounts} accounts")
        return {"agents": added_agents, "accounts": added_accounts}
    except Exception:
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    from smartkollect.config import settings
    from smartkollect.logging_config import setup_logging

    setup_logging(settings.LOG_LEVEL)
    add_sample_data()
