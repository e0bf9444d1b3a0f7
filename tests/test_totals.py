from decimal import Decimal
import pytest
from invoices.totals import (
    DocumentTotals,
    amount_payable,
    clamp_discount,
    compute_document_totals,
    compute_line_totals,
    parse_amount,
    parse_quantity,
    round_money,
)


def test_line_with_discount_and_tax():
    totals = compute_line_totals(3, 100, discount=10, tax_rate=19)
    assert totals.total_excl == Decimal("270.00")
    assert totals.total_tax == Decimal("51.30")
    assert totals.total == Decimal("321.30")


def test_document_with_two_identical_lines():
    line = compute_line_totals(3, 100, discount=10, tax_rate=19)
    totals = compute_document_totals([line, line])
    assert totals == DocumentTotals(Decimal("540.00"), Decimal("102.60"), Decimal("642.60"))


def test_document_totals_accept_dicts():
    lines = [{"total_excl": "10.00", "total_tax": "1.90"}, {"total_excl": Decimal("5"), "total_tax": None}]
    totals = compute_document_totals(lines)
    assert totals.subtotal == Decimal("15.00")
    assert totals.tax_total == Decimal("1.90")
    assert totals.total == Decimal("16.90")


def test_empty_document_is_zero():
    assert compute_document_totals([]) == DocumentTotals(0, 0, 0)


@pytest.mark.parametrize("raw, expected", [("abc", 1), ("", 1), (None, 1), ("4", 4), (2.0, 2), ("Infinity", 1)])
def test_parse_quantity(raw, expected):
    assert parse_quantity(raw) == expected


@pytest.mark.parametrize("raw, expected", [("12,5", Decimal("12.5")), ("x", 0), (None, 0), ("NaN", 0), (7, 7)])
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_unparsable_inputs_give_zero_or_one():
    totals = compute_line_totals("n/a", "n/a", discount="?", tax_rate="?")
    assert totals.total == Decimal("0.00")
    assert compute_line_totals("n/a", 50).total_excl == Decimal("50.00")


@pytest.mark.parametrize("discount, expected", [(-5, 0), (150, 100), (25, 25)])
def test_discount_is_clamped(discount, expected):
    assert clamp_discount(discount) == expected


def test_full_discount_gives_zero_line():
    totals = compute_line_totals(5, 80, discount=100, tax_rate=19)
    assert totals.total_excl == Decimal("0.00")
    assert totals.total == Decimal("0.00")


def test_rounding_is_half_up():
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("2.675")) == Decimal("2.68")


@pytest.mark.parametrize("qty, price, disc, rate", [
    (1, "0.01", 0, 19),
    (7, "13.37", "12.5", 9),
    (3, "33.33", 33, 19),
    (11, "1.99", 0, 0),
    (2, "999999.99", 5, 19),
])
def test_line_invariants(qty, price, disc, rate):
    totals = compute_line_totals(qty, price, disc, rate)
    assert totals.total_excl + totals.total_tax == totals.total
    assert totals.total_excl >= 0
    assert totals.total_tax >= 0
    assert totals.total_excl == totals.total_excl.quantize(Decimal("0.01"))


def test_document_invariant_with_mixed_lines():
    lines = [compute_line_totals(q, p, d, r) for q, p, d, r in [(3, "19.99", 7, 19), (1, "0.33", 0, 9), (12, "4.5", 0, 19)]]
    totals = compute_document_totals(lines)
    assert totals.subtotal + totals.tax_total == totals.total
    assert totals.subtotal == sum(line.total_excl for line in lines)


def test_stamp_tax_only_for_cash():
    totals = DocumentTotals(Decimal("100.00"), Decimal("19.00"), Decimal("119.00"))
    assert amount_payable(totals, "cash", "1.19") == Decimal("120.19")
    assert amount_payable(totals, "bank_transfer", "1.19") == Decimal("119.00")
    assert amount_payable(totals, "cash", 0) == Decimal("119.00")
