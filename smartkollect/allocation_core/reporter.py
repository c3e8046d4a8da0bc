from dataclasses import dataclass, field
from typing import List

# Keeps responses small when a whole spreadsheet fails to match
MAX_REPORTED_NOT_FOUND = 50


@dataclass
class AllocationReport:
    total: int
    matched: int
    allocated: int
    not_found: int
    duplicates: int = 0
    not_found_accounts: List[str] = field(default_factory=list)

    def to_response(self):
        return {
            "success": True,
            "allocated": self.allocated,
            "total": self.total,
            "notFound": self.not_found,
            "matched": self.matched,
            "duplicates": self.duplicates,
            "notFoundAccounts": self.not_found_accounts[:MAX_REPORTED_NOT_FOUND],
        }


def build_report(
    total: int, matched: int, inserted: int, unmatched: List[str], duplicates: int = 0
) -> AllocationReport:
    # unmatched keeps the caller's original strings so they can fix their input
    return AllocationReport(
        total=total,
        matched=matched,
        allocated=inserted,
        not_found=len(unmatched),
        duplicates=duplicates,
        not_found_accounts=list(unmatched),
    )
