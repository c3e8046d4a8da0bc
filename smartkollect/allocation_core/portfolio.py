"""
Agent portfolio views: the accounts an agent currently holds, and the
headline numbers shown on the agent workspace.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

HIGH_PRIORITY_BALANCE = 10000
MEDIUM_PRIORITY_BALANCE = 5000
# Unpaid for longer than this counts as overdue whatever the status says
OVERDUE_AFTER_DAYS = 30


def determine_priority(balance: float) -> str:
    if balance >= HIGH_PRIORITY_BALANCE:
        return "high"
    if balance >= MEDIUM_PRIORITY_BALANCE:
        return "medium"
    return "low"


def _interaction_sort_key(item):
    # Never-contacted accounts first, then oldest interaction first.
    # ISO-8601 strings in one timezone sort chronologically.
    last = item["allocation"]["last_interaction_date"]
    return (last is not None, last or "")


def agent_portfolio(repository, agent_id: str, sort_by_interaction: bool = True) -> List[Dict[str, Any]]:
    """Active allocations of an agent, each paired with its account (or None)."""
    allocations = repository.list_active_allocations(agent_id)
    if not allocations:
        logger.info(f"[PORTFOLIO] No allocations found for agent {agent_id}")
        return []

    logger.info(f"[PORTFOLIO] Found {len(allocations)} allocations for agent {agent_id}")
    accounts = repository.get_accounts_by_ids([a.account_id for a in allocations])

    items = []
    missing = []
    for allocation in allocations:
        account = accounts.get(allocation.account_id)
        if account is None:
            missing.append(allocation.account_id)
        items.append({
            "allocation": allocation.to_dict(),
            "account": account.to_dict() if account is not None else None,
        })

    if missing:
        logger.warning(f"[PORTFOLIO] Found {len(missing)} allocations with missing account data: {missing[:10]}")

    if sort_by_interaction:
        items.sort(key=_interaction_sort_key)
    return items


def portfolio_metrics(items: List[Dict[str, Any]]) -> Dict[str, Any]:
    accounts = [item["account"] for item in items if item["account"] is not None]
    if not accounts:
        return {
            "totalAccounts": 0,
            "totalValue": 0.0,
            "overdueAccounts": 0,
            "overdueValue": 0.0,
            "contactRate": 0,
            "highPriorityAccounts": 0,
        }

    balances = [float(a["outstanding_balance"] or 0) for a in accounts]
    overdue = [
        balance for a, balance in zip(accounts, balances)
        if (a["acc_status"] or "").lower() == "overdue"
    ]
    contacted = sum(
        1 for item in items
        if item["account"] is not None and item["allocation"]["last_interaction_date"]
    )

    return {
        "totalAccounts": len(accounts),
        "totalValue": round(sum(balances), 2),
        "overdueAccounts": len(overdue),
        "overdueValue": round(sum(overdue), 2),
        "contactRate": round(contacted * 100 / len(accounts)),
        "highPriorityAccounts": sum(1 for b in balances if determine_priority(b) == "high"),
    }


def days_since_payment(last_payment_date: Optional[str], today: Optional[date] = None) -> int:
    if not last_payment_date:
        return 0
    try:
        paid = date.fromisoformat(last_payment_date[:10])
    except ValueError:
        logger.warning(f"[PORTFOLIO] Ignoring unparseable last_payment_date {last_payment_date!r}")
        return 0
    return max(((today or date.today()) - paid).days, 0)


def top_overdue_accounts(items: List[Dict[str, Any]], limit: int = 5, today: Optional[date] = None):
    """
    The agent's overdue accounts with the largest balances first.
    Overdue means status `overdue` or no payment for more than OVERDUE_AFTER_DAYS.
    """
    overdue = []
    for item in items:
        account = item["account"]
        if account is None:
            continue
        days = days_since_payment(account["last_payment_date"], today)
        if (account["acc_status"] or "").lower() == "overdue" or days > OVERDUE_AFTER_DAYS:
            overdue.append({**item, "daysOverdue": days})

    overdue.sort(key=lambda item: float(item["account"]["outstanding_balance"] or 0), reverse=True)
    logger.info(f"[PORTFOLIO] {len(overdue)} overdue accounts, returning top {min(limit, len(overdue))}")
    return overdue[:limit]
