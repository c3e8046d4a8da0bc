import logging
from typing import List, Sequence

from smartkollect.allocation_core.matcher import StoredAccount
from smartkollect.database import AllocationDB
from smartkollect.errors import AgentNotFound, NoAccountsMatched

logger = logging.getLogger(__name__)


class AllocationWriter:
    def __init__(self, repository):
        self.repository = repository

    def require_agent(self, agent_id: str):
        agent = self.repository.get_agent(agent_id)
        if agent is None:
            logger.error(f"[ALLOCATION WRITER] Agent not found: {agent_id}")
            raise AgentNotFound()
        return agent

    def write(self, agent_id: str, accounts: Sequence[StoredAccount], verify_agent: bool = True) -> List[AllocationDB]:
        """
        Replace the allocations of ``accounts`` with one active allocation each,
        pointing at ``agent_id``. The agent is verified before anything is written
        unless the caller already did so.
        """
        if verify_agent:
            self.require_agent(agent_id)
        if not accounts:
            raise NoAccountsMatched()

        account_ids = [account.id for account in accounts]
        inserted = self.repository.replace_allocations(account_ids, agent_id)
        logger.info(f"[ALLOCATION WRITER] Allocated {len(inserted)} accounts to agent {agent_id}")
        return inserted
