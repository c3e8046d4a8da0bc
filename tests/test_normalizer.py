from smartkollect.allocation_core.normalizer import normalize_account_number, normalize_account_numbers


def test_normalized_forms():
    forms = normalize_account_number("  00AbC-123 ")
    assert forms.original == "  00AbC-123 "
    assert forms.normalized == "00abc-123"
    assert forms.without_leading_zeros == "abc-123"
    assert forms.digits_only == "00123"


def test_zero_stripping_happens_after_trimming():
    assert normalize_account_number(" 000903").without_leading_zeros == "903"


def test_all_zero_and_empty_inputs():
    assert normalize_account_number("0000").without_leading_zeros == ""
    empty = normalize_account_number("")
    assert empty.normalized == ""
    assert empty.digits_only == ""


def test_no_digits_gives_empty_digits_only():
    assert normalize_account_number("N/A").digits_only == ""


def test_order_is_preserved():
    forms = normalize_account_numbers(["B2", "a1", "C3"])
    assert [f.original for f in forms] == ["B2", "a1", "C3"]
