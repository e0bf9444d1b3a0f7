"""
Line and document money arithmetic.

Every monetary value is a ``Decimal``. Rounding happens in one place,
``round_money``, and is applied to each persisted line field; document
aggregates are plain sums of the rounded line values, so

    total_excl + total_tax == total            (per line)
    subtotal + tax_total == total              (per document)

hold exactly.
"""
from collections import namedtuple
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")

LineTotals = namedtuple("LineTotals", ["total_excl", "total_tax", "total"])
DocumentTotals = namedtuple("DocumentTotals", ["subtotal", "tax_total", "total"])


def round_money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_quantity(raw):
    """Quantity as int, 1 when the input can't be parsed."""
    if isinstance(raw, bool):
        return 1
    try:
        return int(Decimal(str(raw).strip()))
    except (InvalidOperation, ValueError, OverflowError):
        return 1


def parse_amount(raw):
    """Price, discount or tax rate as Decimal, 0 when the input can't be parsed."""
    if raw is None or isinstance(raw, bool):
        return ZERO
    try:
        value = Decimal(str(raw).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        return ZERO
    if not value.is_finite():
        return ZERO
    return value


def clamp_discount(discount):
    return min(max(parse_amount(discount), ZERO), HUNDRED)


def compute_line_totals(quantity, unit_price, discount=0, tax_rate=0):
    qty = parse_quantity(quantity)
    price = parse_amount(unit_price)
    disc = clamp_discount(discount)
    rate = parse_amount(tax_rate)

    total_excl = round_money(qty * price * (1 - disc / HUNDRED))
    total_tax = round_money(total_excl * rate / HUNDRED)
    return LineTotals(total_excl, total_tax, total_excl + total_tax)


def compute_document_totals(lines):
    """Sum line totals. ``lines`` may hold LineTotals, LineItem rows or dicts."""
    subtotal = ZERO
    tax_total = ZERO
    for line in lines:
        if isinstance(line, dict):
            excl, tax = line.get("total_excl"), line.get("total_tax")
        else:
            excl, tax = line.total_excl, line.total_tax
        subtotal += round_money(excl or 0)
        tax_total += round_money(tax or 0)
    return DocumentTotals(subtotal, tax_total, subtotal + tax_total)


def stamp_tax_applies(payment_type, stamp_tax):
    return payment_type == "cash" and parse_amount(stamp_tax) != ZERO


def amount_payable(totals, payment_type=None, stamp_tax=0):
    """Grand total shown on the document: total plus stamp tax for cash payments."""
    if stamp_tax_applies(payment_type, stamp_tax):
        return totals.total + round_money(parse_amount(stamp_tax))
    return totals.total
