import re
from typing import Iterable, List, NamedTuple

_NON_DIGITS = re.compile(r"\D")


class NormalizedAccountNumber(NamedTuple):
    original: str
    normalized: str
    without_leading_zeros: str
    digits_only: str


def normalize_account_number(raw: str) -> NormalizedAccountNumber:
    """
    Canonical forms of one account number, loosest last:
    trimmed + lower-cased, then leading zeros stripped, then digits only.
    """
    normalized = raw.strip().lower()
    return NormalizedAccountNumber(
        original=raw,
        normalized=normalized,
        without_leading_zeros=normalized.lstrip("0"),
        digits_only=_NON_DIGITS.sub("", normalized),
    )


def normalize_account_numbers(raws: Iterable[str]) -> List[NormalizedAccountNumber]:
    return [normalize_account_number(raw) for raw in raws]
