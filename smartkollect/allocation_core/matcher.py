import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from smartkollect.allocation_core.normalizer import (
    NormalizedAccountNumber,
    normalize_account_number,
    normalize_account_numbers,
)
from smartkollect.errors import DataUnavailable

logger = logging.getLogger(__name__)

# Evaluated in this order, first hit wins
TIERS = ("exact", "normalized", "without_leading_zeros", "digits_only")


class StoredAccount(NamedTuple):
    id: str
    acc_number: str


@dataclass
class MatchResult:
    matched: List[StoredAccount] = field(default_factory=list)
    unmatched: List[str] = field(default_factory=list)
    # Inputs that resolved to an account an earlier input already claimed
    duplicates: List[str] = field(default_factory=list)
    tier_counts: Counter = field(default_factory=Counter)

    @property
    def matched_ids(self) -> List[str]:
        return [account.id for account in self.matched]


class AccountMatcher:
    """
    Resolves externally supplied account numbers to stored accounts.

    One index per tier is built up front, so matching m inputs against
    n stored accounts costs O(n + m). Matching is by whole-key equality
    only; substrings and partial numbers never match.
    """

    def __init__(self, accounts: Iterable[Tuple[str, str]]):
        self._indexes: Dict[str, Dict[str, StoredAccount]] = {tier: {} for tier in TIERS}
        self.size = 0

        for account_id, acc_number in accounts:
            if not acc_number:
                continue
            stored = StoredAccount(account_id, acc_number)
            forms = normalize_account_number(acc_number)
            self._index("exact", acc_number, stored)
            self._index("normalized", forms.normalized, stored)
            self._index("without_leading_zeros", forms.without_leading_zeros, stored)
            self._index("digits_only", forms.digits_only, stored)
            self.size += 1

        if self.size == 0:
            raise DataUnavailable("No accounts found in database")

    def _index(self, tier: str, key: str, stored: StoredAccount):
        # Empty keys would let any digit-less input match anything
        if key:
            self._indexes[tier].setdefault(key, stored)

    def lookup(self, raw: str) -> Tuple[Optional[StoredAccount], Optional[str]]:
        """Return (account, tier) for one input, or (None, None)."""
        return self._lookup_forms(normalize_account_number(raw))

    def _lookup_forms(self, forms: NormalizedAccountNumber) -> Tuple[Optional[StoredAccount], Optional[str]]:
        # Account numbers always carry digits; anything else is noise
        if not forms.digits_only:
            return None, None
        keys = (forms.original, forms.normalized, forms.without_leading_zeros, forms.digits_only)
        for tier, key in zip(TIERS, keys):
            if not key:
                continue
            account = self._indexes[tier].get(key)
            if account is not None:
                return account, tier
        return None, None

    def match(self, account_numbers: Sequence[str]) -> MatchResult:
        result = MatchResult()
        seen_ids = set()

        for forms in normalize_account_numbers(account_numbers):
            raw = forms.original
            account, tier = self._lookup_forms(forms)
            if account is None:
                result.unmatched.append(raw)
                continue
            if account.id in seen_ids:
                result.duplicates.append(raw)
                continue
            seen_ids.add(account.id)
            result.matched.append(account)
            result.tier_counts[tier] += 1

        logger.info(
            f"[MATCHER] Matched {len(result.matched)} of {len(account_numbers)} account numbers "
            f"against {self.size} stored accounts ({dict(result.tier_counts)})"
        )
        if result.duplicates:
            logger.info(f"[MATCHER] {len(result.duplicates)} input(s) resolved to an already matched account")
        if result.unmatched:
            logger.info(
                f"[MATCHER] {len(result.unmatched)} account numbers not found. "
                f"First few: {result.unmatched[:10]}"
            )
        return result
