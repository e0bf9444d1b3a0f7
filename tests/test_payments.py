from datetime import date
from decimal import Decimal
import pytest
from src.exceptions import PaymentExceedsBalanceException, ResourceNotFoundException
from invoices.invoice_service import InvoiceService
from payments.payment import Payment
from payments.payment_service import PaymentService


@pytest.fixture
def invoice(customer, sample_items):
    return InvoiceService.create_document("invoice", customer.id, sample_items)


def test_partial_payment_keeps_invoice_unpaid(invoice):
    PaymentService.add_payment(invoice.id, "100", "bank_transfer", reference="VIR-1")
    assert invoice.status == "unpaid"
    assert invoice.amount_paid == Decimal("100.00")
    assert invoice.client_debt == Decimal("221.30")


def test_full_payment_marks_invoice_paid(invoice):
    PaymentService.add_payment(invoice.id, "121.30", "cash", payment_date=date(2024, 5, 1))
    PaymentService.add_payment(invoice.id, "200", "check", payment_date=date(2024, 5, 3))
    assert invoice.status == "paid"
    assert invoice.client_debt == Decimal("0.00")
    assert invoice.payment_date == date(2024, 5, 3)


def test_payment_above_balance_is_refused(invoice):
    PaymentService.add_payment(invoice.id, "300", "cash")
    with pytest.raises(PaymentExceedsBalanceException):
        PaymentService.add_payment(invoice.id, "21.31", "cash")
    assert Payment.query.count() == 1


@pytest.mark.parametrize("amount", ["0", "-5", "abc"])
def test_amount_must_be_positive(invoice, amount):
    with pytest.raises(ValueError):
        PaymentService.add_payment(invoice.id, amount, "cash")


def test_unknown_method_is_refused(invoice):
    with pytest.raises(ValueError):
        PaymentService.add_payment(invoice.id, "10", "bitcoin")


def test_cancelled_invoice_takes_no_payment(invoice):
    InvoiceService.update_status("invoice", invoice.id, "cancelled")
    with pytest.raises(ValueError):
        PaymentService.add_payment(invoice.id, "10", "cash")


def test_deleting_payment_reopens_invoice(invoice):
    payment = PaymentService.add_payment(invoice.id, "321.30", "cash")
    assert invoice.status == "paid"

    PaymentService.delete_payment(payment.id)
    assert invoice.status == "unpaid"
    assert invoice.amount_paid == Decimal("0.00")
    assert invoice.client_debt == Decimal("321.30")
    assert invoice.payment_date is None


def test_delete_unknown_payment(app):
    with pytest.raises(ResourceNotFoundException):
        PaymentService.delete_payment(999)


def test_list_payments(invoice):
    PaymentService.add_payment(invoice.id, "10", "card", reference="CB-9")
    payments = PaymentService.list_payments(invoice.id)
    assert len(payments) == 1
    assert payments[0]["reference"] == "CB-9"
    assert payments[0]["amount"] == Decimal("10.00")
