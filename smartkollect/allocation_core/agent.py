import logging

from smartkollect.allocation_core.matcher import AccountMatcher, MatchResult
from smartkollect.allocation_core.portfolio import agent_portfolio, portfolio_metrics, top_overdue_accounts
from smartkollect.allocation_core.reporter import AllocationReport, build_report
from smartkollect.allocation_core.writer import AllocationWriter
from smartkollect.errors import (
    AccountNotFound,
    AllocationNotFound,
    NoAccountsMatched,
    PartialWriteFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

INVALID_ACCOUNT_NUMBERS = "Missing or invalid accountNumbers: must be a non-empty array"

INTERACTION_TYPES = (
    "viewed",
    "called",
    "emailed",
    "messaged",
    "payment_arrangement",
    "payment_received",
    "note_added",
    "other",
)


class AllocationAgent:
    """Assigns debtor accounts to collection agents.

    All database access goes through the injected repository, one query at
    a time, in request order.
    """

    def __init__(self, repository):
        self.repository = repository
        self.writer = AllocationWriter(repository)

    # --- validation ---

    @staticmethod
    def validate_bulk_request(account_numbers, agent_id):
        if not account_numbers or not isinstance(account_numbers, list):
            raise ValidationError(INVALID_ACCOUNT_NUMBERS)
        # Spreadsheet pastes sometimes arrive as numbers
        if any(isinstance(n, bool) or not isinstance(n, (str, int)) for n in account_numbers):
            raise ValidationError(INVALID_ACCOUNT_NUMBERS)
        if not agent_id:
            raise ValidationError("Missing required field: agentId")
        return [str(n) for n in account_numbers]

    # --- matching ---

    def match_accounts(self, account_numbers) -> MatchResult:
        # Cheap path first: when every input exists verbatim there is no need
        # to pull the whole account table.
        direct = [pair for pair in self.repository.find_accounts_by_numbers(account_numbers) if pair[1]]
        found_numbers = {acc_number for _, acc_number in direct}
        if direct and found_numbers.issuperset(account_numbers):
            logger.info(f"[BULK ALLOCATION] Found all {len(direct)} accounts with direct matching")
            return AccountMatcher(direct).match(account_numbers)

        logger.info(
            f"[BULK ALLOCATION] Direct matching found {len(direct)} accounts, "
            f"falling back to normalized matching"
        )
        return AccountMatcher(self.repository.list_account_numbers()).match(account_numbers)

    # --- operations ---

    def bulk_allocate(self, account_numbers, agent_id) -> AllocationReport:
        account_numbers = self.validate_bulk_request(account_numbers, agent_id)
        logger.info(f"[BULK ALLOCATION] Allocating {len(account_numbers)} accounts to agent {agent_id}")
        logger.debug(f"[BULK ALLOCATION] First few account numbers: {account_numbers[:5]}")

        agent = self.writer.require_agent(agent_id)
        logger.info(f"[BULK ALLOCATION] Verified agent {agent.full_name}")

        match = self.match_accounts(account_numbers)
        if not match.matched:
            logger.error(
                f"[BULK ALLOCATION] No matching accounts found. "
                f"First few account numbers not found: {match.unmatched[:10]}"
            )
            raise NoAccountsMatched()

        inserted = self.writer.write(agent_id, match.matched, verify_agent=False)
        report = build_report(
            len(account_numbers), len(match.matched), len(inserted), match.unmatched, len(match.duplicates)
        )
        logger.info(
            f"[BULK ALLOCATION] Allocated {report.allocated} of {report.total} "
            f"({report.not_found} not found, {report.duplicates} duplicate)"
        )
        return report

    def allocate_account(self, account_id, agent_id):
        if not account_id or not agent_id:
            raise ValidationError("Missing required fields: accountId and agentId are required")

        logger.info(f"[ALLOCATION] Allocating account {account_id} to agent {agent_id}")
        account = self.repository.get_account(account_id)
        if account is None:
            logger.error(f"[ALLOCATION] Account not found: {account_id}")
            raise AccountNotFound()
        agent = self.writer.require_agent(agent_id)

        try:
            rows = self.repository.replace_allocations([account_id], agent_id)
        except PartialWriteFailure as e:
            raise PartialWriteFailure("Failed to allocate account") from e

        logger.info(f"[ALLOCATION] Allocated account {account.acc_number} to {agent.full_name}")
        return rows[0]

    def allocated_accounts(self, agent_id, sort_by_interaction=True):
        if not agent_id:
            raise ValidationError("Missing required parameter: agentId")
        return agent_portfolio(self.repository, agent_id, sort_by_interaction)

    def allocation_metrics(self, agent_id):
        return portfolio_metrics(self.allocated_accounts(agent_id))

    def top_overdue_accounts(self, agent_id, limit=5):
        if limit < 1:
            raise ValidationError("Invalid parameter: limit must be at least 1")
        return top_overdue_accounts(self.allocated_accounts(agent_id), limit)

    def record_interaction(self, account_id, agent_id, interaction_type, details=None):
        """Log an agent's contact with an account; it feeds the portfolio sort and contact rate."""
        if not account_id or not agent_id or not interaction_type:
            raise ValidationError(
                "Missing required fields: accountId, agentId, and interactionType are required"
            )
        if interaction_type not in INTERACTION_TYPES:
            raise ValidationError(f"Invalid interactionType: {interaction_type}")

        allocation = self.repository.get_active_allocation(account_id, agent_id)
        if allocation is None:
            logger.error(f"[INTERACTION] No active allocation of account {account_id} to agent {agent_id}")
            raise AllocationNotFound()

        interaction = self.repository.record_interaction(allocation, interaction_type, details)
        logger.info(f"[INTERACTION] Recorded {interaction_type} for account {account_id} by agent {agent_id}")
        return interaction
