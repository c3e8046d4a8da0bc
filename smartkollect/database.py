import uuid
from sqlalchemy import create_engine, Column, Integer, String, Float, ForeignKey
from sqlalchemy.orm import declarative_base, sessionmaker

from smartkollect.config import settings
from smartkollect.errors import ConfigurationError

# 1. DATABASE SETUP
# The engine is built on first use so the app can boot (and report a
# configuration error) when DATABASE_URL is missing.
_engine = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)
Base = declarative_base()


def _new_id():
    return str(uuid.uuid4())


def get_engine():
    global _engine
    if _engine is None:
        if not settings.database_configured:
            raise ConfigurationError()

        connect_args = {}
        # SQLite needs this specific check_same_thread flag, Postgres does not
        if settings.DATABASE_URL.startswith("sqlite"):
            connect_args = {"check_same_thread": False}

        _engine = create_engine(
            settings.DATABASE_URL,
            connect_args=connect_args,
            echo=settings.SQL_ECHO,
            pool_pre_ping=True,
        )
        SessionLocal.configure(bind=_engine)
    return _engine


# 2. DEFINING THE TABLES (ORM)
class AccountDB(Base):
    __tablename__ = "debtors"
    id = Column(String(36), primary_key=True, default=_new_id)
    acc_number = Column(String, index=True)  # external-facing, format not uniform
    name = Column(String, nullable=True)
    surname_company_trust = Column(String, nullable=True)
    cell_number = Column(String, nullable=True)
    email_addr_1 = Column(String, nullable=True)
    outstanding_balance = Column(Float, default=0.0)
    acc_status = Column(String, default="current")  # current | overdue
    last_payment_date = Column(String, nullable=True)  # ISO date
    is_sample = Column(Integer, default=0)  # 0=Real, 1=Sample

    def to_dict(self):
        return {
            "id": self.id,
            "acc_number": self.acc_number,
            "name": self.name,
            "surname_company_trust": self.surname_company_trust,
            "cell_number": self.cell_number,
            "email_addr_1": self.email_addr_1,
            "outstanding_balance": self.outstanding_balance,
            "acc_status": self.acc_status,
            "last_payment_date": self.last_payment_date,
        }


class AgentDB(Base):
    __tablename__ = "profiles"
    id = Column(String(36), primary_key=True, default=_new_id)
    full_name = Column(String)
    email = Column(String, nullable=True)
    role = Column(String, default="agent")
    is_sample = Column(Integer, default=0)


class AllocationDB(Base):
    __tablename__ = "agent_allocations"
    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String(36), ForeignKey("debtors.id"), index=True)
    agent_id = Column(String(36), ForeignKey("profiles.id"), index=True)
    allocated_at = Column(String)  # ISO timestamp
    status = Column(String, default="active")  # active | inactive
    last_interaction_date = Column(String, nullable=True)  # ISO timestamp

    def to_dict(self):
        return {
            "id": self.id,
            "account_id": self.account_id,
            "agent_id": self.agent_id,
            "allocated_at": self.allocated_at,
            "status": self.status,
            "last_interaction_date": self.last_interaction_date,
        }


class InteractionDB(Base):
    __tablename__ = "account_interactions"
    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String(36), ForeignKey("debtors.id"), index=True)
    agent_id = Column(String(36), ForeignKey("profiles.id"), index=True)
    interaction_type = Column(String)  # viewed | called | emailed | ...
    interaction_details = Column(String, nullable=True)
    created_at = Column(String)  # ISO timestamp

    def to_dict(self):
        return {
            "id": self.id,
            "account_id": self.account_id,
            "agent_id": self.agent_id,
            "interaction_type": self.interaction_type,
            "interaction_details": self.interaction_details,
            "created_at": self.created_at,
        }


def create_tables():
    Base.metadata.create_all(bind=get_engine())


# 3. HELPER TO GET DB SESSION
def get_db():
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
