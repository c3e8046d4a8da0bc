import pytest

from smartkollect.allocation_core.matcher import AccountMatcher
from smartkollect.errors import DataUnavailable


def test_exact_matches_need_no_fallback():
    matcher = AccountMatcher([("a", "1001"), ("b", "ACC-2002"), ("c", "0003")])
    result = matcher.match(["1001", "ACC-2002", "0003"])
    assert result.matched_ids == ["a", "b", "c"]
    assert result.unmatched == []
    assert result.tier_counts == {"exact": 3}


@pytest.mark.parametrize("raw, tier", [
    ("  ACC-2002 ", "normalized"),          # surrounding whitespace
    ("acc-2002", "normalized"),             # case
    ("000903", "without_leading_zeros"),    # extra padding
    ("ACC 2002", "digits_only"),            # punctuation
    ("sk/5520-19", "digits_only"),
])
def test_formatting_drift_still_matches(raw, tier):
    matcher = AccountMatcher([("a", "ACC-2002"), ("b", "903"), ("c", "552019")])
    account, matched_tier = matcher.lookup(raw)
    assert account is not None
    assert matched_tier == tier


def test_stored_padding_is_stripped_too():
    matcher = AccountMatcher([("a", "000903")])
    account, tier = matcher.lookup("903")
    assert account.id == "a"
    assert tier == "without_leading_zeros"


def test_earlier_tier_wins():
    matcher = AccountMatcher([("padded", "00777"), ("bare", "777")])
    assert matcher.lookup("00777")[0].id == "padded"
    assert matcher.lookup("777")[0].id == "bare"


def test_inputs_without_digits_never_match():
    matcher = AccountMatcher([("a", "ABC"), ("b", "12")])
    result = matcher.match(["abc", "ABC", "", "   ", "N/A"])
    assert result.matched == []
    assert result.unmatched == ["abc", "ABC", "", "   ", "N/A"]


def test_no_partial_matches():
    matcher = AccountMatcher([("a", "123456")])
    result = matcher.match(["1234", "23456", "1234567"])
    assert result.matched == []
    assert len(result.unmatched) == 3


def test_duplicate_inputs_resolve_to_one_account():
    matcher = AccountMatcher([("a", "ABC123")])
    result = matcher.match(["00123", "123", " ABC-123 "])
    # digits-only of "00123" keeps the zeros, so it does not reach "123"
    assert result.unmatched == ["00123"]
    assert result.matched_ids == ["a"]
    assert result.duplicates == [" ABC-123 "]


def test_scenario_punctuated_input_matches_by_digits():
    matcher = AccountMatcher([("a", "ABC123")])
    result = matcher.match(["abc-123"])
    assert result.matched_ids == ["a"]
    assert result.tier_counts == {"digits_only": 1}


def test_unmatched_keeps_original_strings():
    matcher = AccountMatcher([("a", "1")])
    result = matcher.match([" 999 ", "X-42"])
    assert result.unmatched == [" 999 ", "X-42"]


def test_empty_store_is_fatal():
    with pytest.raises(DataUnavailable):
        AccountMatcher([])


def test_rows_without_account_number_are_ignored():
    with pytest.raises(DataUnavailable):
        AccountMatcher([("a", ""), ("b", None)])


def test_large_inputs():
    stored = [(f"id-{i}", f"{i:08d}") for i in range(1, 5001)]
    matcher = AccountMatcher(stored)
    requested = [str(i) for i in range(2, 5001, 2)] + ["not-a-number"]
    result = matcher.match(requested)
    assert len(result.matched) == 2500
    assert result.unmatched == ["not-a-number"]
