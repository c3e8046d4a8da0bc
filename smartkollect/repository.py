import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smartkollect.config import settings
from smartkollect.database import AccountDB, AgentDB, AllocationDB, InteractionDB
from smartkollect.errors import DataUnavailable, InteractionWriteFailure, PartialWriteFailure

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AllocationRepository:
    """Data access for accounts, agents and allocations.

    Built per request around one SQLAlchemy session and handed to the
    allocation core, so tests can swap in a double.
    """

    def __init__(self, session: Session, batch_size: Optional[int] = None):
        self.session = session
        self.batch_size = batch_size or settings.ALLOCATION_FETCH_BATCH_SIZE

    # --- reads ---

    def get_agent(self, agent_id: str) -> Optional[AgentDB]:
        return self.session.query(AgentDB).filter(AgentDB.id == agent_id).first()

    def get_account(self, account_id: str) -> Optional[AccountDB]:
        return self.session.query(AccountDB).filter(AccountDB.id == account_id).first()

    def list_account_numbers(self) -> List[tuple]:
        """All stored (id, acc_number) pairs."""
        try:
            rows = self.session.query(AccountDB.id, AccountDB.acc_number).all()
        except SQLAlchemyError as e:
            logger.error(f"[REPOSITORY] Error fetching accounts: {e}")
            raise DataUnavailable("Error fetching accounts") from e
        return [(row[0], row[1]) for row in rows]

    def find_accounts_by_numbers(self, account_numbers: Sequence[str]) -> List[tuple]:
        """(id, acc_number) pairs whose account number equals one of the inputs verbatim.

        Best effort: on a query error the caller falls back to the full scan.
        """
        pairs = []
        numbers = list(dict.fromkeys(account_numbers))
        try:
            for start in range(0, len(numbers), self.batch_size):
                batch = numbers[start:start + self.batch_size]
                rows = (
                    self.session.query(AccountDB.id, AccountDB.acc_number)
                    .filter(AccountDB.acc_number.in_(batch))
                    .all()
                )
                pairs.extend((row[0], row[1]) for row in rows)
        except SQLAlchemyError as e:
            logger.error(f"[REPOSITORY] Error with direct account matching: {e}")
            self.session.rollback()
            return []
        return pairs

    def get_accounts_by_ids(self, account_ids: Sequence[str]) -> Dict[str, AccountDB]:
        """Load account rows in batches; a failed batch is logged and skipped."""
        accounts = {}
        ids = list(dict.fromkeys(account_ids))
        total_batches = (len(ids) + self.batch_size - 1) // self.batch_size
        for batch_no, start in enumerate(range(0, len(ids), self.batch_size), start=1):
            batch = ids[start:start + self.batch_size]
            try:
                rows = self.session.query(AccountDB).filter(AccountDB.id.in_(batch)).all()
            except SQLAlchemyError as e:
                logger.error(f"[REPOSITORY] Error fetching batch {batch_no} of {total_batches}: {e}")
                self.session.rollback()
                continue
            for row in rows:
                accounts[row.id] = row
        return accounts

    def list_active_allocations(self, agent_id: str) -> List[AllocationDB]:
        return (
            self.session.query(AllocationDB)
            .filter(AllocationDB.agent_id == agent_id, AllocationDB.status == "active")
            .all()
        )

    def get_active_allocation(self, account_id: str, agent_id: str) -> Optional[AllocationDB]:
        return (
            self.session.query(AllocationDB)
            .filter(
                AllocationDB.account_id == account_id,
                AllocationDB.agent_id == agent_id,
                AllocationDB.status == "active",
            )
            .first()
        )

    # --- writes ---

    def _delete_allocations(self, account_ids: Sequence[str]) -> int:
        deleted = 0
        for start in range(0, len(account_ids), self.batch_size):
            batch = account_ids[start:start + self.batch_size]
            deleted += (
                self.session.query(AllocationDB)
                .filter(AllocationDB.account_id.in_(batch))
                .delete(synchronize_session="fetch")
            )
        return deleted

    def _insert_allocations(self, rows: List[AllocationDB]) -> List[AllocationDB]:
        self.session.add_all(rows)
        self.session.flush()
        return rows

    def replace_allocations(self, account_ids: Sequence[str], agent_id: str) -> List[AllocationDB]:
        """Give each account exactly one active allocation to ``agent_id``.

        Delete and insert share one transaction: if the insert fails the
        delete is rolled back and the previous allocations survive.
        """
        account_ids = list(dict.fromkeys(account_ids))
        now = utc_now_iso()
        try:
            deleted = self._delete_allocations(account_ids)
            inserted = self._insert_allocations([
                AllocationDB(
                    account_id=account_id,
                    agent_id=agent_id,
                    allocated_at=now,
                    status="active",
                )
                for account_id in account_ids
            ])
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"[REPOSITORY] Error creating allocations, rolled back: {e}")
            raise PartialWriteFailure(f"Failed to allocate accounts: {_db_message(e)}") from e

        logger.info(f"[REPOSITORY] Replaced {deleted} existing allocation(s) with {len(inserted)} new one(s)")
        return inserted

    def record_interaction(
        self, allocation: AllocationDB, interaction_type: str, details: Optional[str] = None
    ) -> InteractionDB:
        """Store an interaction and stamp the allocation's last_interaction_date together."""
        now = utc_now_iso()
        interaction = InteractionDB(
            account_id=allocation.account_id,
            agent_id=allocation.agent_id,
            interaction_type=interaction_type,
            interaction_details=details,
            created_at=now,
        )
        try:
            self.session.add(interaction)
            allocation.last_interaction_date = now
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"[REPOSITORY] Error recording interaction, rolled back: {e}")
            raise InteractionWriteFailure() from e
        return interaction


def _db_message(error: SQLAlchemyError) -> str:
    # DBAPIError wraps the driver exception; its message is what users can act on
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)
