import logging
from datetime import date
from decimal import Decimal
from src.extensions import db, transaction
from src.exceptions import PaymentExceedsBalanceException, ResourceNotFoundException
from invoices.document_base import DocumentKind, PAYMENT_TYPES
from invoices.invoice_service import InvoiceService
from invoices.totals import parse_amount, round_money
from payments.payment import Payment

logger = logging.getLogger("PaymentService")


class PaymentService:
    @staticmethod
    def outstanding_balance(invoice):
        InvoiceService.refresh_payment_state(invoice)
        return Decimal(invoice.client_debt or 0)

    @staticmethod
    def add_payment(invoice_id, amount, method, payment_date=None, reference=None, notes=None):
        """
        Record a payment against a final invoice. The amount must be positive
        and may not exceed what is still owed on the invoice.
        """
        invoice = InvoiceService.get_document(DocumentKind.INVOICE, invoice_id)
        if invoice.status in ("cancelled", "credited"):
            raise ValueError(f"Cannot add a payment to a {invoice.status} invoice")
        if method not in PAYMENT_TYPES:
            raise ValueError(f"Unknown payment method: {method}")

        amount = round_money(parse_amount(amount))
        if amount <= 0:
            raise ValueError("Amount must be positive")

        balance = PaymentService.outstanding_balance(invoice)
        if amount > balance:
            raise PaymentExceedsBalanceException(
                f"Payment of {amount} exceeds the remaining debt of {balance}"
            )

        with transaction():
            payment = Payment(
                invoice_id=invoice.id,
                amount=amount,
                payment_date=payment_date or date.today(),
                payment_method=method,
                reference=reference,
                notes=notes,
            )
            invoice.payments.append(payment)
            InvoiceService.refresh_payment_state(invoice)

        logger.info("Payment of %s recorded on %s (remaining %s)", amount, invoice.number, invoice.client_debt)
        return payment

    @staticmethod
    def delete_payment(payment_id):
        payment = db.session.get(Payment, payment_id)
        if not payment:
            raise ResourceNotFoundException(f"Payment {payment_id} not found")

        invoice = payment.invoice
        with transaction():
            invoice.payments.remove(payment)
            db.session.delete(payment)
            InvoiceService.refresh_payment_state(invoice)

        logger.info("Payment %s deleted from %s", payment_id, invoice.number)
        return invoice

    @staticmethod
    def list_payments(invoice_id):
        invoice = InvoiceService.get_document(DocumentKind.INVOICE, invoice_id)
        return [payment.to_dict() for payment in invoice.payments]
